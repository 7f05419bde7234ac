"""Type aliases and helpers for DynamoDB keys and items.

Type aliases:
    KeyValue: The types allowed as partition key or sort key values in DynamoDB.
        Includes str, bytes, bytearray, int, and Decimal.

    DynamoDBKey: A dictionary mapping attribute names to key values. This is the
        format required by boto3 operations like get_item, batch_get_item.
        Example: {"user_id": "123", "timestamp": 1234567890}

    Item: A full record as returned by DynamoDB, key attributes included.

    LastEvaluatedKey: The pagination token returned by query() and scan() operations.
        Has the same structure as DynamoDBKey but uses TypeAliasType for better
        type inference.
"""

from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any, TypeAlias

from typing_extensions import TypeAliasType

KeyValue: TypeAlias = str | bytes | bytearray | int | Decimal
DynamoDBKey: TypeAlias = dict[str, KeyValue]
Item: TypeAlias = dict[str, Any]
LastEvaluatedKey = TypeAliasType("LastEvaluatedKey", DynamoDBKey)


def same_key(key: Mapping[str, Any], candidate: Mapping[str, Any]) -> bool:
    """Return True if every attribute of `key` has the same value in `candidate`.

    Attributes present only in `candidate` are ignored, so a key matches the
    full item it identifies.
    """
    return all(name in candidate and candidate[name] == value for name, value in key.items())


def unique_keys(keys: Iterable[DynamoDBKey]) -> list[DynamoDBKey]:
    """Drop repeated keys, keeping the first occurrence of each in order."""
    unique: list[DynamoDBKey] = []
    for key in keys:
        if not any(same_key(key, seen) for seen in unique):
            unique.append(key)
    return unique


__all__ = [
    "DynamoDBKey",
    "Item",
    "KeyValue",
    "LastEvaluatedKey",
    "same_key",
    "unique_keys",
]
