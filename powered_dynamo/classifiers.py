"""Error classification for DynamoDB client errors.

Classifiers are plain predicates over an exception. They read the structured
error code and, for cancelled transactions, the list of cancellation reasons
that botocore parses from the response. Message text is never inspected.
"""

from collections.abc import Callable
from enum import Enum

from botocore.exceptions import ClientError

ErrorClassifier = Callable[[BaseException], bool]


class ErrorCode(str, Enum):
    """DynamoDB error codes the classifiers know about."""

    INTERNAL_SERVER_ERROR = "InternalServerError"
    TRANSACTION_CANCELED = "TransactionCanceledException"


class CancellationReasonCode(str, Enum):
    """Per-item reason codes of a TransactionCanceledException."""

    NONE = "None"
    CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailed"
    ITEM_COLLECTION_SIZE_LIMIT_EXCEEDED = "ItemCollectionSizeLimitExceeded"
    TRANSACTION_CONFLICT = "TransactionConflict"
    PROVISIONED_THROUGHPUT_EXCEEDED = "ProvisionedThroughputExceeded"
    THROTTLING_ERROR = "ThrottlingError"
    VALIDATION_ERROR = "ValidationError"


def error_code(error: BaseException) -> str | None:
    """Return the DynamoDB error code of a ClientError, or None for anything else."""
    if not isinstance(error, ClientError):
        return None
    return error.response.get("Error", {}).get("Code")


def cancellation_reason_codes(error: BaseException) -> list[str]:
    """Return the reason codes of a cancelled transaction, in item order.

    Errors that carry no cancellation reasons yield an empty list.
    """
    if not isinstance(error, ClientError):
        return []
    reasons = error.response.get("CancellationReasons") or []
    return [reason.get("Code", CancellationReasonCode.NONE.value) for reason in reasons]


def is_transient_server_error(error: BaseException) -> bool:
    """Check if the error is a server-side fault worth retrying."""
    return error_code(error) == ErrorCode.INTERNAL_SERVER_ERROR.value


def is_retryable_transaction_conflict(error: BaseException) -> bool:
    """Check if a cancelled transaction failed on a conflict and nothing permanent.

    A conditional check failure is never retryable: the condition is supplied
    by the caller and another attempt would evaluate it the same way.
    """
    if error_code(error) != ErrorCode.TRANSACTION_CANCELED.value:
        return False
    reasons = cancellation_reason_codes(error)
    return (
        CancellationReasonCode.TRANSACTION_CONFLICT.value in reasons
        and CancellationReasonCode.CONDITIONAL_CHECK_FAILED.value not in reasons
    )


__all__ = [
    "CancellationReasonCode",
    "ErrorClassifier",
    "ErrorCode",
    "cancellation_reason_codes",
    "error_code",
    "is_retryable_transaction_conflict",
    "is_transient_server_error",
]
