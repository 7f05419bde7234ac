"""Configuration models for PoweredDynamo.

Configuration is validated with Pydantic and frozen once built. Changing the
retry schedule of a store replaces its configuration object rather than
mutating it, so calls already in flight keep the schedule they started with.
"""

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat

from powered_dynamo.batch_get import MAX_BATCH_GET_KEYS
from powered_dynamo.batching import MAX_BATCH_WRITE_ITEMS

DEFAULT_RETRY_WAIT_TIMES: tuple[float, ...] = (0.1, 0.5, 1.0)


class RetrySettings(BaseModel):
    """Retry behavior for retryable DynamoDB errors.

    Attributes:
        wait_times: Seconds to wait before each retry. Its length is the
            maximum number of retries after the first attempt. An empty
            schedule disables retries.

    """

    model_config = ConfigDict(frozen=True)

    wait_times: tuple[NonNegativeFloat, ...] = DEFAULT_RETRY_WAIT_TIMES


class PoweredDynamoConfig(BaseModel):
    """Configuration for a PoweredDynamo store.

    Attributes:
        retry: Retry schedule shared by every retried operation.
        max_batch_write_items: Write requests per batch_write_item call.
        max_batch_get_keys: Keys per batch_get_item call.

    Example:
        config = PoweredDynamoConfig(retry=RetrySettings(wait_times=(0.2, 1.0)))
        store = PoweredDynamo(client, config=config)

    """

    model_config = ConfigDict(frozen=True)

    retry: RetrySettings = Field(default_factory=RetrySettings)
    max_batch_write_items: int = Field(default=MAX_BATCH_WRITE_ITEMS, ge=1, le=MAX_BATCH_WRITE_ITEMS)
    max_batch_get_keys: int = Field(default=MAX_BATCH_GET_KEYS, ge=1, le=MAX_BATCH_GET_KEYS)


__all__ = [
    "DEFAULT_RETRY_WAIT_TIMES",
    "PoweredDynamoConfig",
    "RetrySettings",
]
