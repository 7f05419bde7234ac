"""PoweredDynamo exceptions.

This module defines the exception hierarchy for the PoweredDynamo library.
All custom exceptions inherit from PoweredDynamoError, allowing users to catch
all library-specific errors with a single except clause.

Exception categories:
- PoweredDynamoError: Base exception for all PoweredDynamo errors
- MaxRetriesReachedError: The retry schedule was exhausted
- CountSelectRequiredError: A count was requested without Select="COUNT"

Note: DynamoDB API errors (e.g., ConditionalCheckFailedException,
ValidationException) are intentionally not wrapped and come directly from
botocore as ClientError. Only retryable errors that exhaust their retry
schedule are turned into MaxRetriesReachedError, with the original error
kept as the cause.
"""


class PoweredDynamoError(Exception):
    """Base exception for all PoweredDynamo errors.

    Example:
        try:
            await store.put(TableName="users", Item={"id": "1"})
        except PoweredDynamoError as e:
            pass

    """


class MaxRetriesReachedError(PoweredDynamoError):
    """Raised when a retryable error persists after every scheduled retry.

    The error that triggered the final attempt is available as `last_error`
    and is also chained as `__cause__`.

    Attributes:
        attempts: Total number of attempts made, including the first one.
        last_error: The retryable error raised by the last attempt.

    Example:
        With a schedule of three wait times, a put that keeps failing with
        InternalServerError is attempted four times and then raises
        MaxRetriesReachedError(attempts=4).

    """

    def __init__(self, *, attempts: int, last_error: BaseException) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Max retries reached after {attempts} attempts: {last_error!r}",
        )


class CountSelectRequiredError(PoweredDynamoError):
    """Raised when a count is requested without the COUNT projection.

    scan_count() and query_count() only make sense when the request asks
    DynamoDB for counts alone. This is a usage error and is never retried.

    Attributes:
        operation: The operation that was requested ("scan" or "query").
        select: The Select value that was provided, if any.

    Example:
        await store.scan_count(TableName="users")
        Raises CountSelectRequiredError.

        await store.scan_count(TableName="users", Select="COUNT")

    """

    def __init__(self, *, operation: str, select: str | None = None) -> None:
        self.operation = operation
        self.select = select
        super().__init__(
            f'For count {operation} Select must be "COUNT", got {select!r}',
        )


__all__ = [
    "CountSelectRequiredError",
    "MaxRetriesReachedError",
    "PoweredDynamoError",
]
