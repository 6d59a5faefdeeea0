"""Persistence gateway: the six DynamoDB primitives the repository uses.

The repository depends on PersistenceGateway only. Boto3Gateway implements it
on a low-level boto3 DynamoDB client; tests use an in-memory fake.

Every gateway reports a rejected condition as ConditionalCheckFailedError and
any other failure as StoreError, and drains all pages of query/scan results.
"""

from __future__ import annotations

from typing import Any, Iterator, Protocol, runtime_checkable

from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from ..core.exceptions import ConditionalCheckFailedError, StoreError
from ..core.types import AttributeMap
from .context import CallContext, ensure_context
from .expressions import Expression

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


# =============================================================================
# Protocol
# =============================================================================


@runtime_checkable
class PersistenceGateway(Protocol):
    """Protocol for the store primitives consumed by Repository."""

    def put_item(
        self,
        table: str,
        item: AttributeMap,
        *,
        condition: Expression | None = None,
        ctx: CallContext | None = None,
    ) -> None:
        """Write an item, subject to an optional condition."""
        ...

    def get_item(
        self, table: str, key: AttributeMap, *, ctx: CallContext | None = None
    ) -> AttributeMap | None:
        """Read one item by key; None when absent."""
        ...

    def query(
        self,
        table: str,
        index: str,
        key_condition: Expression,
        *,
        ctx: CallContext | None = None,
    ) -> list[AttributeMap]:
        """Read every item of an index matching a key condition."""
        ...

    def scan(
        self,
        table: str,
        filter_expression: Expression | None = None,
        *,
        ctx: CallContext | None = None,
    ) -> list[AttributeMap]:
        """Read every item of a table, optionally filtered."""
        ...

    def update_item(
        self,
        table: str,
        key: AttributeMap,
        update: Expression,
        *,
        condition: Expression | None = None,
        ctx: CallContext | None = None,
    ) -> None:
        """Apply an update expression, subject to an optional condition."""
        ...

    def delete_item(
        self,
        table: str,
        key: AttributeMap,
        *,
        condition: Expression | None = None,
        ctx: CallContext | None = None,
    ) -> None:
        """Delete an item, subject to an optional condition."""
        ...


# =============================================================================
# boto3 implementation
# =============================================================================


def _merge(*expressions: Expression | None) -> tuple[dict[str, str], dict[str, Any]]:
    names: dict[str, str] = {}
    values: dict[str, Any] = {}
    for expression in expressions:
        if expression is None:
            continue
        names.update(expression.names)
        values.update(expression.values)
    return names, values


def _with_bindings(request: dict[str, Any], *expressions: Expression | None) -> dict[str, Any]:
    names, values = _merge(*expressions)
    if names:
        request["ExpressionAttributeNames"] = names
    if values:
        request["ExpressionAttributeValues"] = values
    return request


class Boto3Gateway:
    """PersistenceGateway backed by a boto3 DynamoDB client."""

    def __init__(self, client: Any, consistent_reads: bool = True, page_size: int | None = None):
        """Initialize with a DynamoDB client.

        Args:
            client: Low-level client from boto3.client("dynamodb").
            consistent_reads: Use strongly consistent reads for get_item.
            page_size: Items evaluated per query/scan request (store default if None).
        """
        self.client = client
        self.consistent_reads = consistent_reads
        self.page_size = page_size

    def _call(self, operation: str, table: str, ctx: CallContext, **request: Any) -> dict[str, Any]:
        ctx.check(operation)
        try:
            return getattr(self.client, operation)(TableName=table, **request)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code == CONDITIONAL_CHECK_FAILED:
                raise ConditionalCheckFailedError(
                    f"{operation} condition failed on {table}", cause=e
                ) from e
            raise StoreError(f"{operation} failed on {table}: {code or e}", cause=e) from e
        except BotoCoreError as e:
            raise StoreError(f"{operation} failed on {table}: {e}", cause=e) from e

    def _pages(self, operation: str, table: str, ctx: CallContext, **request: Any) -> Iterator[dict[str, Any]]:
        if self.page_size:
            request["Limit"] = self.page_size
        page = 0
        while True:
            response = self._call(operation, table, ctx, **request)
            page += 1
            yield response
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            logger.debug(f"{operation} on {table}: fetching page {page + 1}")
            request["ExclusiveStartKey"] = last_key

    def put_item(
        self,
        table: str,
        item: AttributeMap,
        *,
        condition: Expression | None = None,
        ctx: CallContext | None = None,
    ) -> None:
        request: dict[str, Any] = {"Item": item}
        if condition is not None:
            request["ConditionExpression"] = condition.text
        self._call("put_item", table, ensure_context(ctx), **_with_bindings(request, condition))

    def get_item(
        self, table: str, key: AttributeMap, *, ctx: CallContext | None = None
    ) -> AttributeMap | None:
        response = self._call(
            "get_item", table, ensure_context(ctx), Key=key, ConsistentRead=self.consistent_reads
        )
        return response.get("Item") or None

    def query(
        self,
        table: str,
        index: str,
        key_condition: Expression,
        *,
        ctx: CallContext | None = None,
    ) -> list[AttributeMap]:
        request = _with_bindings(
            {"IndexName": index, "KeyConditionExpression": key_condition.text}, key_condition
        )
        items: list[AttributeMap] = []
        for response in self._pages("query", table, ensure_context(ctx), **request):
            items.extend(response.get("Items", []))
        return items

    def scan(
        self,
        table: str,
        filter_expression: Expression | None = None,
        *,
        ctx: CallContext | None = None,
    ) -> list[AttributeMap]:
        request: dict[str, Any] = {}
        if filter_expression is not None:
            request["FilterExpression"] = filter_expression.text
        request = _with_bindings(request, filter_expression)
        items: list[AttributeMap] = []
        for response in self._pages("scan", table, ensure_context(ctx), **request):
            items.extend(response.get("Items", []))
        return items

    def update_item(
        self,
        table: str,
        key: AttributeMap,
        update: Expression,
        *,
        condition: Expression | None = None,
        ctx: CallContext | None = None,
    ) -> None:
        request: dict[str, Any] = {"Key": key, "UpdateExpression": update.text}
        if condition is not None:
            request["ConditionExpression"] = condition.text
        self._call("update_item", table, ensure_context(ctx), **_with_bindings(request, update, condition))

    def delete_item(
        self,
        table: str,
        key: AttributeMap,
        *,
        condition: Expression | None = None,
        ctx: CallContext | None = None,
    ) -> None:
        request: dict[str, Any] = {"Key": key}
        if condition is not None:
            request["ConditionExpression"] = condition.text
        self._call("delete_item", table, ensure_context(ctx), **_with_bindings(request, condition))
