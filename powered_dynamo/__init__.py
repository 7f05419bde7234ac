"""PoweredDynamo: retries, batching and counting in front of an aioboto3 DynamoDB client."""

from powered_dynamo.batch_get import MAX_BATCH_GET_KEYS, BatchGetter, ItemsByKey
from powered_dynamo.batching import MAX_BATCH_WRITE_ITEMS, split_batch_write_request
from powered_dynamo.classifiers import (
    is_retryable_transaction_conflict,
    is_transient_server_error,
)
from powered_dynamo.config import PoweredDynamoConfig, RetrySettings
from powered_dynamo.exceptions import (
    CountSelectRequiredError,
    MaxRetriesReachedError,
    PoweredDynamoError,
)
from powered_dynamo.keys import DynamoDBKey, Item, KeyValue, LastEvaluatedKey
from powered_dynamo.pagination import PageSource, sum_counts
from powered_dynamo.retry import RetryExecutor, RetryObserver, log_retryable_error
from powered_dynamo.store import PoweredDynamo

__all__ = [
    "MAX_BATCH_GET_KEYS",
    "MAX_BATCH_WRITE_ITEMS",
    "BatchGetter",
    "CountSelectRequiredError",
    "DynamoDBKey",
    "Item",
    "ItemsByKey",
    "KeyValue",
    "LastEvaluatedKey",
    "MaxRetriesReachedError",
    "PageSource",
    "PoweredDynamo",
    "PoweredDynamoConfig",
    "PoweredDynamoError",
    "RetryExecutor",
    "RetryObserver",
    "RetrySettings",
    "is_retryable_transaction_conflict",
    "is_transient_server_error",
    "log_retryable_error",
    "split_batch_write_request",
    "sum_counts",
]
