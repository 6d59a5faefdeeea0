"""In-memory persistence gateway fake for testing.

Implements dynamap.store.gateway.PersistenceGateway against plain dicts,
honouring the expressions the repository builds:

- attribute_exists(#k) / attribute_not_exists(#k) conditions
- "#p = :v" key conditions and scan filters
- "SET #n0 = :v0, ..." update expressions

Every call is recorded in `calls` so tests can assert query-vs-scan routing.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any

from dynamap.core.exceptions import ConditionalCheckFailedError, StoreError
from dynamap.store.context import CallContext, ensure_context
from dynamap.store.expressions import Expression

_CONDITION = re.compile(r"^(attribute_exists|attribute_not_exists)\((#\w+)\)$")
_EQUALS = re.compile(r"^(#\w+) = (:\w+)$")


def _key_repr(value: dict[str, Any]) -> str:
    return json.dumps(value, sort_keys=True)


@dataclass
class InMemoryGateway:
    """In-memory gateway for testing.

    Attributes:
        key_attributes: Hash key attribute per table (default "id").
        indexes: Index name to indexed attribute, per table.
        failures: Operation name to exception raised instead of running it.
    """

    key_attributes: dict[str, str] = field(default_factory=dict)
    indexes: dict[str, dict[str, str]] = field(default_factory=dict)
    failures: dict[str, Exception] = field(default_factory=dict)
    calls: list[tuple[str, str, str | None]] = field(default_factory=list)
    _tables: dict[str, dict[str, dict[str, Any]]] = field(default_factory=dict)

    # --- helpers ---

    def items(self, table: str) -> list[dict[str, Any]]:
        """Get stored items of a table in insertion order."""
        return list(self._tables.get(table, {}).values())

    def seed(self, table: str, item: dict[str, Any]) -> None:
        """Store an item unconditionally."""
        key_attr = self.key_attributes.get(table, "id")
        self._tables.setdefault(table, {})[_key_repr(item[key_attr])] = dict(item)

    def _enter(self, operation: str, table: str, ctx: CallContext | None, index: str | None = None) -> None:
        ensure_context(ctx).check(operation)
        self.calls.append((operation, table, index))
        if operation in self.failures:
            raise self.failures[operation]

    def _check(self, table: str, key_value: dict[str, Any], condition: Expression | None) -> None:
        if condition is None:
            return
        match = _CONDITION.match(condition.text)
        if not match:
            raise StoreError(f"Unsupported condition: {condition.text}")
        exists = _key_repr(key_value) in self._tables.get(table, {})
        wants_exists = match.group(1) == "attribute_exists"
        if exists != wants_exists:
            raise ConditionalCheckFailedError(f"condition failed on {table}")

    def _key_value(self, table: str, key: dict[str, Any]) -> dict[str, Any]:
        key_attr = self.key_attributes.get(table, "id")
        if key_attr not in key:
            raise StoreError(f"Key must contain {key_attr!r} for {table}")
        return key[key_attr]

    @staticmethod
    def _matches(item: dict[str, Any], expression: Expression) -> bool:
        match = _EQUALS.match(expression.text)
        if not match:
            raise StoreError(f"Unsupported expression: {expression.text}")
        attribute = expression.names[match.group(1)]
        return item.get(attribute) == expression.values[match.group(2)]

    # --- PersistenceGateway ---

    def put_item(
        self,
        table: str,
        item: dict[str, Any],
        *,
        condition: Expression | None = None,
        ctx: CallContext | None = None,
    ) -> None:
        self._enter("put_item", table, ctx)
        key_value = self._key_value(table, item)
        self._check(table, key_value, condition)
        self._tables.setdefault(table, {})[_key_repr(key_value)] = dict(item)

    def get_item(
        self, table: str, key: dict[str, Any], *, ctx: CallContext | None = None
    ) -> dict[str, Any] | None:
        self._enter("get_item", table, ctx)
        item = self._tables.get(table, {}).get(_key_repr(self._key_value(table, key)))
        return dict(item) if item is not None else None

    def query(
        self,
        table: str,
        index: str,
        key_condition: Expression,
        *,
        ctx: CallContext | None = None,
    ) -> list[dict[str, Any]]:
        self._enter("query", table, ctx, index)
        declared = self.indexes.get(table, {})
        if index not in declared:
            raise StoreError(f"Index {index!r} does not exist on {table}")
        match = _EQUALS.match(key_condition.text)
        if not match or key_condition.names[match.group(1)] != declared[index]:
            raise StoreError(f"Key condition does not use the key of index {index!r}")
        return [dict(item) for item in self.items(table) if self._matches(item, key_condition)]

    def scan(
        self,
        table: str,
        filter_expression: Expression | None = None,
        *,
        ctx: CallContext | None = None,
    ) -> list[dict[str, Any]]:
        self._enter("scan", table, ctx)
        return [
            dict(item)
            for item in self.items(table)
            if filter_expression is None or self._matches(item, filter_expression)
        ]

    def update_item(
        self,
        table: str,
        key: dict[str, Any],
        update: Expression,
        *,
        condition: Expression | None = None,
        ctx: CallContext | None = None,
    ) -> None:
        self._enter("update_item", table, ctx)
        key_value = self._key_value(table, key)
        self._check(table, key_value, condition)

        if not update.text.startswith("SET "):
            raise StoreError(f"Unsupported update: {update.text}")
        item = self._tables.setdefault(table, {}).setdefault(_key_repr(key_value), dict(key))
        for assignment in update.text[len("SET "):].split(", "):
            name_ph, value_ph = (part.strip() for part in assignment.split("="))
            item[update.names[name_ph]] = update.values[value_ph]

    def delete_item(
        self,
        table: str,
        key: dict[str, Any],
        *,
        condition: Expression | None = None,
        ctx: CallContext | None = None,
    ) -> None:
        self._enter("delete_item", table, ctx)
        key_value = self._key_value(table, key)
        self._check(table, key_value, condition)
        self._tables.get(table, {}).pop(_key_repr(key_value), None)
