"""Partitioning of batch write requests into legal batch sizes.

DynamoDB accepts at most 25 put or delete requests per batch_write_item call,
counted across every table in the call. A request of any size is flattened
into (table, request) pairs in table order, cut into consecutive slices and
each slice is regrouped by table. Reading the batches in order gives back
each table's requests in their original order.
"""

import logging
from collections.abc import Iterator, Mapping, Sequence
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_BATCH_WRITE_ITEMS = 25

WriteRequest = dict[str, Any]
BatchWriteRequestItems = dict[str, list[WriteRequest]]


def chunked(values: Sequence[T], size: int) -> Iterator[list[T]]:
    """Yield consecutive slices of at most `size` values."""
    if size < 1:
        msg = f"Chunk size must be positive, got {size}"
        raise ValueError(msg)
    for start in range(0, len(values), size):
        yield list(values[start : start + size])


def split_batch_write_request(
    request_items: Mapping[str, Sequence[WriteRequest]],
    *,
    max_items: int = MAX_BATCH_WRITE_ITEMS,
) -> list[BatchWriteRequestItems]:
    """Split RequestItems of a batch write into batches of at most `max_items` requests.

    Args:
        request_items: Table name to list of PutRequest/DeleteRequest entries.
        max_items: Maximum number of requests in one batch, across all tables.

    Returns:
        RequestItems mappings, one per batch_write_item call, in order.

    Example:
        30 requests for "users" and 10 for "orders" give two batches:
        {"users": <25 requests>} and {"users": <5 requests>, "orders": <10 requests>}.

    """
    flat_requests = [
        (table_name, request)
        for table_name, requests in request_items.items()
        for request in requests
    ]

    batches: list[BatchWriteRequestItems] = []
    for chunk in chunked(flat_requests, max_items):
        batch: BatchWriteRequestItems = {}
        for table_name, request in chunk:
            batch.setdefault(table_name, []).append(request)
        batches.append(batch)

    logger.debug("Split %d write requests into %d batches", len(flat_requests), len(batches))
    return batches


__all__ = [
    "MAX_BATCH_WRITE_ITEMS",
    "BatchWriteRequestItems",
    "WriteRequest",
    "chunked",
    "split_batch_write_request",
]
