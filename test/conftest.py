"""Shared test fixtures.

This module provides:
- A fake aioboto3 DynamoDB client built on AsyncMock
- A recording sleep so retry tests never actually wait
- A PoweredDynamo store wired to both, collecting retried errors
"""

from unittest.mock import AsyncMock

from fakes import WAIT_TIMES, RecordingSleep
from pytest import fixture

from powered_dynamo.config import PoweredDynamoConfig, RetrySettings
from powered_dynamo.store import PoweredDynamo


@fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@fixture
def client() -> AsyncMock:
    return AsyncMock()


@fixture
def retried_errors() -> list[BaseException]:
    return []


@fixture
def store(
    client: AsyncMock,
    sleep: RecordingSleep,
    retried_errors: list[BaseException],
) -> PoweredDynamo:
    return PoweredDynamo(
        client,
        config=PoweredDynamoConfig(retry=RetrySettings(wait_times=WAIT_TIMES)),
        on_retryable_error=retried_errors.append,
        sleep=sleep,
    )
