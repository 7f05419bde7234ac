"""PoweredDynamo store: a retrying, batching front for a DynamoDB client.

This module provides the primary public API, `PoweredDynamo`. It wraps an
aioboto3 DynamoDB client that works with native Python values (the
`meta.client` of a DynamoDB service resource) and adds:

- retries with a wait-time schedule for InternalServerError on writes
- retries of transactions cancelled by a TransactionConflict
- batch writes of any size, sent in batches DynamoDB accepts
- batch reads of any number of keys, repeated keys included
- lazy scan and query iteration and summed counts

Requests are passed as the same keyword arguments the client takes.
"""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from functools import partial
from typing import TYPE_CHECKING, Any, TypeVar

from powered_dynamo.batch_get import BatchGetter, ItemsByKey
from powered_dynamo.batching import split_batch_write_request
from powered_dynamo.classifiers import (
    ErrorClassifier,
    is_retryable_transaction_conflict,
    is_transient_server_error,
)
from powered_dynamo.config import PoweredDynamoConfig, RetrySettings
from powered_dynamo.exceptions import CountSelectRequiredError
from powered_dynamo.keys import DynamoDBKey, Item
from powered_dynamo.pagination import SELECT_COUNT, PageOperation, PageSource, sum_counts
from powered_dynamo.retry import RetryExecutor, RetryObserver, Sleep

if TYPE_CHECKING:
    from types_aiobotocore_dynamodb.client import DynamoDBClient
else:
    DynamoDBClient = Any

T = TypeVar("T")


class PoweredDynamo:
    """Resilient access to DynamoDB on top of an aioboto3 client.

    Args:
        client: aioboto3 DynamoDB client using native Python attribute values.
        config: Retry schedule and batch sizes. Defaults to PoweredDynamoConfig().
        on_retryable_error: Called with the error every time a retryable error
            is caught, before waiting or giving up. It runs inline and must
            return quickly.
        page_source: Produces scan and query pages. Defaults to a PageSource
            over `client`.
        sleep: Coroutine function used to wait between retries.

    Example:
        import aioboto3
        from powered_dynamo import PoweredDynamo, log_retryable_error

        async def main():
            session = aioboto3.Session()
            async with session.resource("dynamodb") as dynamodb:
                store = PoweredDynamo(
                    dynamodb.meta.client,
                    on_retryable_error=log_retryable_error,
                )
                await store.put(TableName="users", Item={"id": "1", "name": "Homer"})
                users = await store.get_list("users", [{"id": "1"}, {"id": "2"}])
                total = await store.scan_count(TableName="users", Select="COUNT")

    """

    def __init__(
        self,
        client: DynamoDBClient,
        *,
        config: PoweredDynamoConfig | None = None,
        on_retryable_error: RetryObserver | None = None,
        page_source: PageSource | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._client = client
        self._config = config or PoweredDynamoConfig()
        self._on_retryable_error = on_retryable_error
        self._page_source = page_source or PageSource(client)
        self._executor = RetryExecutor(sleep=sleep)

    @property
    def config(self) -> PoweredDynamoConfig:
        return self._config

    @property
    def retry_wait_times(self) -> tuple[float, ...]:
        """Seconds to wait before each retry. Changes apply to calls started afterwards."""
        return self._config.retry.wait_times

    @retry_wait_times.setter
    def retry_wait_times(self, wait_times: Sequence[float]) -> None:
        self._config = self._config.model_copy(
            update={"retry": RetrySettings(wait_times=tuple(wait_times))},
        )

    def _retrying(
        self,
        classify: ErrorClassifier,
        wait_times: tuple[float, ...],
    ) -> Callable[[Callable[[], Awaitable[T]]], Awaitable[T]]:
        def run(operation: Callable[[], Awaitable[T]]) -> Awaitable[T]:
            return self._executor.execute(
                operation,
                classify=classify,
                wait_times=wait_times,
                on_retryable_error=self._on_retryable_error,
            )

        return run

    async def _retry_server_error(self, operation: Callable[[], Awaitable[T]]) -> T:
        return await self._retrying(is_transient_server_error, self.retry_wait_times)(operation)

    async def get(self, **request: Any) -> dict[str, Any]:
        """Get a single item. Not retried.

        Example:
            response = await store.get(TableName="users", Key={"id": "1"})
            item = response.get("Item")

        """
        return await self._client.get_item(**request)

    async def put(self, **request: Any) -> dict[str, Any]:
        """Put a single item, retrying InternalServerError.

        Raises:
            MaxRetriesReachedError: If InternalServerError outlasts the retry schedule.

        """
        return await self._retry_server_error(lambda: self._client.put_item(**request))

    async def update(self, **request: Any) -> dict[str, Any]:
        """Update a single item, retrying InternalServerError.

        Raises:
            MaxRetriesReachedError: If InternalServerError outlasts the retry schedule.

        """
        return await self._retry_server_error(lambda: self._client.update_item(**request))

    async def delete(self, **request: Any) -> dict[str, Any]:
        """Delete a single item, retrying InternalServerError.

        Raises:
            MaxRetriesReachedError: If InternalServerError outlasts the retry schedule.

        """
        return await self._retry_server_error(lambda: self._client.delete_item(**request))

    async def batch_write(self, **request: Any) -> None:
        """Write any number of put and delete requests across tables.

        RequestItems is split into batches DynamoDB accepts. Batches are sent
        one after another, each retried on InternalServerError; the first
        batch that fails stops the rest. Batches already written stay written.
        Other request parameters are sent with every batch.

        Example:
            await store.batch_write(
                RequestItems={
                    "users": [{"PutRequest": {"Item": {"id": str(i)}}} for i in range(60)],
                },
            )

        """
        run = self._retrying(is_transient_server_error, self.retry_wait_times)
        batches = split_batch_write_request(
            request["RequestItems"],
            max_items=self._config.max_batch_write_items,
        )
        for batch in batches:
            await run(partial(self._client.batch_write_item, **{**request, "RequestItems": batch}))

    async def transact_write(self, **request: Any) -> None:
        """Run a write transaction, retrying conflicts and server errors.

        Each attempt retries InternalServerError on its own schedule. A
        transaction cancelled by a TransactionConflict, and by nothing
        permanent, is attempted again from scratch. A cancellation caused by
        a ConditionalCheckFailed is raised immediately.

        Raises:
            MaxRetriesReachedError: If either kind of error outlasts its schedule.

        """
        wait_times = self.retry_wait_times
        retry_server_error = self._retrying(is_transient_server_error, wait_times)
        retry_conflict = self._retrying(is_retryable_transaction_conflict, wait_times)

        await retry_conflict(
            lambda: retry_server_error(lambda: self._client.transact_write_items(**request)),
        )

    async def get_list(
        self,
        table_name: str,
        keys: Sequence[DynamoDBKey],
        **request_options: Any,
    ) -> ItemsByKey:
        """Get many items of one table by key.

        Repeated keys are fetched once. Keys without an item map to None.

        Example:
            items = await store.get_list("users", [{"id": "1"}, {"id": "1"}, {"id": "9"}])
            items[{"id": "1"}]
            items[{"id": "9"}] is None

        """
        getter = BatchGetter(
            self._client,
            retry=self._retrying(is_transient_server_error, self.retry_wait_times),
            max_keys=self._config.max_batch_get_keys,
        )
        return await getter.get_many(table_name, keys, **request_options)

    def scan(self, **request: Any) -> AsyncIterator[Item]:
        """Iterate over every item of a scan, fetching pages as needed."""
        return self._page_source.items("scan", **request)

    def query(self, **request: Any) -> AsyncIterator[Item]:
        """Iterate over every item of a query, fetching pages as needed."""
        return self._page_source.items("query", **request)

    def scan_pages(self, **request: Any) -> AsyncIterator[dict[str, Any]]:
        """Iterate over the raw response pages of a scan."""
        return self._page_source.pages("scan", **request)

    def query_pages(self, **request: Any) -> AsyncIterator[dict[str, Any]]:
        """Iterate over the raw response pages of a query."""
        return self._page_source.pages("query", **request)

    async def _count(self, operation: PageOperation, request: dict[str, Any]) -> int:
        select = request.get("Select")
        if select != SELECT_COUNT:
            raise CountSelectRequiredError(operation=operation, select=select)
        return await sum_counts(self._page_source.pages(operation, **request))

    async def scan_count(self, **request: Any) -> int:
        """Count the items of a scan across all pages.

        Raises:
            CountSelectRequiredError: If Select is not "COUNT". No page is fetched.

        """
        return await self._count("scan", request)

    async def query_count(self, **request: Any) -> int:
        """Count the items of a query across all pages.

        Raises:
            CountSelectRequiredError: If Select is not "COUNT". No page is fetched.

        """
        return await self._count("query", request)


__all__ = [
    "PoweredDynamo",
]
