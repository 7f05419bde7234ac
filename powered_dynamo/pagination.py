"""Lazy page iteration over scan and query, and count aggregation.

PageSource turns a paginated scan or query into an async iterator of raw
responses, following LastEvaluatedKey until DynamoDB stops returning one.
Pages are fetched only as the iterator is consumed and cannot be replayed.
"""

from collections.abc import AsyncIterable, AsyncIterator, Mapping
from typing import TYPE_CHECKING, Any, Literal

from powered_dynamo.keys import Item, LastEvaluatedKey

if TYPE_CHECKING:
    from types_aiobotocore_dynamodb.client import DynamoDBClient
else:
    DynamoDBClient = Any

PageOperation = Literal["scan", "query"]

SELECT_COUNT = "COUNT"


class PageSource:
    """Produce the pages of a scan or query lazily.

    Args:
        client: aioboto3 DynamoDB client using native Python attribute values.

    Example:
        source = PageSource(client)
        async for page in source.pages("query", TableName="orders", **query_kwargs):
            print(page["Count"])

    """

    def __init__(self, client: DynamoDBClient) -> None:
        self._client = client

    async def pages(self, operation: PageOperation, **request: Any) -> AsyncIterator[dict[str, Any]]:
        """Yield every response page of the operation, starting at ExclusiveStartKey if given."""
        call = getattr(self._client, operation)
        start_key: LastEvaluatedKey | None = request.pop("ExclusiveStartKey", None)

        while True:
            page_request = dict(request)
            if start_key is not None:
                page_request["ExclusiveStartKey"] = start_key

            response = await call(**page_request)
            yield response

            start_key = response.get("LastEvaluatedKey")
            if start_key is None:
                break

    async def items(self, operation: PageOperation, **request: Any) -> AsyncIterator[Item]:
        """Yield the items of every page, in order."""
        async for page in self.pages(operation, **request):
            for item in page.get("Items", []):
                yield item


async def sum_counts(pages: AsyncIterable[Mapping[str, Any]]) -> int:
    """Add up the Count of every page."""
    count = 0
    async for page in pages:
        count += page["Count"]
    return count


__all__ = [
    "SELECT_COUNT",
    "PageOperation",
    "PageSource",
    "sum_counts",
]
