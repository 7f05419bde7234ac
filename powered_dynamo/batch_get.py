"""Batch reads of many keys with deduplication.

DynamoDB rejects a batch_get_item call that repeats a key or asks for more
than 100 keys. BatchGetter removes repeated keys, splits the rest into groups
of legal size, requests every group concurrently and answers a lookup for
each key that was asked for, repeated or not.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterator, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from powered_dynamo.batching import chunked
from powered_dynamo.keys import DynamoDBKey, Item, same_key, unique_keys

if TYPE_CHECKING:
    from types_aiobotocore_dynamodb.client import DynamoDBClient
else:
    DynamoDBClient = Any

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_BATCH_GET_KEYS = 100

RetryCall = Callable[[Callable[[], Awaitable[T]]], Awaitable[T]]


class ItemsByKey:
    """Items found by a batch read, looked up by key.

    Keys are dictionaries and cannot be hashed, so lookups compare keys with
    `same_key`. Looking up any key that was requested, including a repeated
    one, gives the item found for it or None if DynamoDB has no such item.
    Looking up a key that was never requested raises KeyError.

    Lookups scan the entries one by one, so their cost grows with the number
    of distinct keys read.

    Example:
        items = await store.get_list("users", [{"id": "1"}, {"id": "2"}, {"id": "1"}])
        items[{"id": "1"}]
        items.get({"id": "3"})

    """

    def __init__(self, entries: Sequence[tuple[DynamoDBKey, Item | None]] = ()) -> None:
        self._entries = list(entries)

    def _find(self, key: DynamoDBKey) -> tuple[DynamoDBKey, Item | None] | None:
        for entry in self._entries:
            if same_key(key, entry[0]):
                return entry
        return None

    def __getitem__(self, key: DynamoDBKey) -> Item | None:
        entry = self._find(key)
        if entry is None:
            raise KeyError(key)
        return entry[1]

    def get(self, key: DynamoDBKey, default: Item | None = None) -> Item | None:
        entry = self._find(key)
        if entry is None or entry[1] is None:
            return default
        return entry[1]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, dict) and self._find(key) is not None

    def __iter__(self) -> Iterator[DynamoDBKey]:
        return (key for key, _ in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def items(self) -> list[tuple[DynamoDBKey, Item | None]]:
        return list(self._entries)

    def found(self) -> list[Item]:
        """Return the items that exist, in request order."""
        return [item for _, item in self._entries if item is not None]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._entries!r})"


class BatchGetter:
    """Read many keys of one table with as few batch_get_item calls as allowed.

    Args:
        client: aioboto3 DynamoDB client using native Python attribute values.
        retry: Wraps each batch_get_item call in the caller's retry policy.
        max_keys: Maximum number of keys per batch_get_item call.

    """

    def __init__(
        self,
        client: DynamoDBClient,
        *,
        retry: RetryCall[Any],
        max_keys: int = MAX_BATCH_GET_KEYS,
    ) -> None:
        self._client = client
        self._retry = retry
        self._max_keys = max_keys

    async def _get_group(
        self,
        table_name: str,
        keys: list[DynamoDBKey],
        request_options: dict[str, Any],
    ) -> list[Item]:
        request = {"RequestItems": {table_name: {**request_options, "Keys": keys}}}
        response = await self._retry(lambda: self._client.batch_get_item(**request))
        return list(response.get("Responses", {}).get(table_name, []))

    async def get_many(
        self,
        table_name: str,
        keys: Sequence[DynamoDBKey],
        **request_options: Any,
    ) -> ItemsByKey:
        """Fetch every key, answering repeated and missing keys too.

        Args:
            table_name: The table to read from.
            keys: Keys to fetch. Repeated keys are requested once.
            **request_options: Extra per-table options such as ConsistentRead
                or ProjectionExpression.

        Returns:
            ItemsByKey holding one entry per distinct key.

        Any failing group fails the whole call.

        """
        distinct_keys = unique_keys(keys)
        groups = list(chunked(distinct_keys, self._max_keys))
        logger.debug(
            "Reading %d keys (%d distinct) from %s in %d batches",
            len(keys),
            len(distinct_keys),
            table_name,
            len(groups),
        )

        responses = await asyncio.gather(
            *(self._get_group(table_name, group, request_options) for group in groups),
        )
        found = [item for group_items in responses for item in group_items]

        return ItemsByKey(
            [
                (key, next((item for item in found if same_key(key, item)), None))
                for key in distinct_keys
            ],
        )


__all__ = [
    "MAX_BATCH_GET_KEYS",
    "BatchGetter",
    "ItemsByKey",
    "RetryCall",
]
