"""Generic CRUD repository for dataclass records stored in DynamoDB."""

from __future__ import annotations

from typing import Any, TypeVar

from loguru import logger

from ..core.exceptions import (
    ConditionalCheckFailedError,
    DuplicateKeyError,
    ItemNotFoundError,
    MarshalError,
    ValidationError,
)
from ..core.types import AttributeMap
from ..schema import (
    describe,
    describe_record,
    require_hash_key,
    resolve_table_name,
    validate_required,
)
from . import expressions
from .context import CallContext
from .gateway import PersistenceGateway
from .marshal import marshal_record, marshal_value, unmarshal_record, unmarshal_records

T = TypeVar("T")


class Repository:
    """Repository mapping dataclass records onto DynamoDB items.

    The repository holds no per-call state and may be shared across threads.
    Insert-only create and exists-before-update/delete are enforced by the
    store's conditional writes, not by the client.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        table_name: str,
        key_attribute: str = "id",
    ):
        """Initialize with a gateway and defaults.

        Args:
            gateway: Store primitives to delegate to.
            table_name: Table used for records that do not name their own.
            key_attribute: Key attribute used by delete() without a record type.
        """
        self.gateway = gateway
        self.table_name = table_name
        self.key_attribute = key_attribute

    def create(self, record: Any, *, ctx: CallContext | None = None) -> None:
        """Insert a new record.

        Args:
            record: Dataclass record to store.
            ctx: Optional cancellation/deadline context.

        Raises:
            ValidationError: If a required field is empty.
            DuplicateKeyError: If an item with the same key already exists.
            StoreError: If the store operation fails.
        """
        schema = describe_record(record)
        validate_required(record, schema)

        item = marshal_record(record, schema)
        table = resolve_table_name(record, self.table_name)

        condition = None
        if schema.hash_key is not None:
            condition = expressions.attribute_not_exists(schema.hash_key.attribute_name)
        else:
            logger.warning(
                f"{schema.record_type.__name__} declares no hash key; "
                f"writing to {table!r} without a uniqueness condition"
            )

        logger.debug(f"Creating item: table={table!r}, attributes={sorted(item)!r}")

        try:
            self.gateway.put_item(table, item, condition=condition, ctx=ctx)
        except ConditionalCheckFailedError as e:
            hash_key = schema.hash_key
            raise DuplicateKeyError(
                table, {hash_key.attribute_name: getattr(record, hash_key.field_name)}
            ) from e

        logger.info(f"Item created: table={table!r}, type={schema.record_type.__name__}")

    def find_by_id(self, id: Any, record_type: type[T], *, ctx: CallContext | None = None) -> T:
        """Get a record by its hash key.

        Args:
            id: Hash key value.
            record_type: Dataclass type to build.
            ctx: Optional cancellation/deadline context.

        Returns:
            The stored record.

        Raises:
            RecordTypeError: If record_type is not a dataclass type.
            SchemaError: If record_type declares no hash key.
            ItemNotFoundError: If no item has this key.
            UnmarshalError: If the item does not fit record_type.
            StoreError: If the store operation fails.
        """
        schema = describe(record_type)
        hash_key = require_hash_key(schema)
        table = resolve_table_name(record_type, self.table_name)
        key = {hash_key.attribute_name: marshal_value(id)}

        logger.debug(f"Getting item: table={table!r}, key={hash_key.attribute_name}={id!r}")

        item = self.gateway.get_item(table, key, ctx=ctx)
        if item is None:
            raise ItemNotFoundError(table, {hash_key.attribute_name: id})

        return unmarshal_record(item, schema, record_type)

    def find_by_parameter(
        self,
        parameter: str,
        value: Any,
        record_type: type[T],
        *,
        ctx: CallContext | None = None,
    ) -> list[T]:
        """Get every record whose attribute equals a value.

        Queries the attribute's secondary index when the record type declares
        one, and scans the table with a filter otherwise.

        Args:
            parameter: Attribute name to match.
            value: Value the attribute must equal.
            record_type: Dataclass type to build.
            ctx: Optional cancellation/deadline context.

        Returns:
            Matching records in store order; empty if none match.

        Raises:
            RecordTypeError: If record_type is not a dataclass type.
            UnmarshalError: If an item does not fit record_type.
            StoreError: If the store operation fails.
        """
        schema = describe(record_type)
        table = resolve_table_name(record_type, self.table_name)
        condition = expressions.equals(parameter, marshal_value(value))

        index = schema.index_for(parameter)
        if index is not None:
            logger.debug(f"Querying index: table={table!r}, index={index!r}, {parameter}={value!r}")
            items = self.gateway.query(table, index, condition, ctx=ctx)
        else:
            logger.debug(f"Scanning with filter: table={table!r}, {parameter}={value!r}")
            items = self.gateway.scan(table, condition, ctx=ctx)

        return unmarshal_records(items, schema, record_type)

    def get_all(self, record_type: type[T], *, ctx: CallContext | None = None) -> list[T]:
        """Get every record in the record type's table.

        Raises:
            RecordTypeError: If record_type is not a dataclass type.
            UnmarshalError: If an item does not fit record_type.
            StoreError: If the store operation fails.
        """
        schema = describe(record_type)
        table = resolve_table_name(record_type, self.table_name)

        logger.debug(f"Scanning table: table={table!r}")

        items = self.gateway.scan(table, ctx=ctx)
        return unmarshal_records(items, schema, record_type)

    def update(self, record: Any, *, ctx: CallContext | None = None) -> None:
        """Update an existing record's submitted attributes.

        Every non-key declared field that is not None is written; fields left
        as None keep their stored value.

        Args:
            record: Dataclass record carrying the key and new values.
            ctx: Optional cancellation/deadline context.

        Raises:
            SchemaError: If the record type declares no hash key.
            ValidationError: If there is nothing to update.
            ItemNotFoundError: If no item has the record's key.
            StoreError: If the store operation fails.
        """
        schema = describe_record(record)
        hash_key = require_hash_key(schema)
        table = resolve_table_name(record, self.table_name)

        key_value = getattr(record, hash_key.field_name)
        key: AttributeMap = {hash_key.attribute_name: marshal_value(key_value)}

        assignments = []
        for descriptor in schema.fields:
            if descriptor.is_hash_key:
                continue
            value = getattr(record, descriptor.field_name)
            if value is None:
                continue
            try:
                assignments.append((descriptor.attribute_name, marshal_value(value)))
            except MarshalError as e:
                raise MarshalError(f"Field {descriptor.field_name}: {e}") from e

        if not assignments:
            raise ValidationError("No updatable fields found")

        update = expressions.set_clause(assignments)
        condition = expressions.attribute_exists(hash_key.attribute_name)

        logger.debug(
            f"Updating item: table={table!r}, key={hash_key.attribute_name}={key_value!r}, "
            f"attributes={[name for name, _ in assignments]!r}"
        )

        try:
            self.gateway.update_item(table, key, update, condition=condition, ctx=ctx)
        except ConditionalCheckFailedError as e:
            raise ItemNotFoundError(table, {hash_key.attribute_name: key_value}) from e

        logger.info(f"Item updated: table={table!r}, key={hash_key.attribute_name}={key_value!r}")

    def delete(
        self,
        id: Any,
        record_type: type | None = None,
        *,
        ctx: CallContext | None = None,
    ) -> None:
        """Delete an existing record by its hash key.

        Without a record type the repository's key attribute and default
        table are used.

        Args:
            id: Hash key value.
            record_type: Dataclass type giving the key attribute and table.
            ctx: Optional cancellation/deadline context.

        Raises:
            SchemaError: If record_type declares no hash key.
            ItemNotFoundError: If no item has this key.
            StoreError: If the store operation fails.
        """
        if record_type is not None:
            key_attribute = require_hash_key(describe(record_type)).attribute_name
            table = resolve_table_name(record_type, self.table_name)
        else:
            key_attribute = self.key_attribute
            table = self.table_name

        key = {key_attribute: marshal_value(id)}
        condition = expressions.attribute_exists(key_attribute)

        logger.debug(f"Deleting item: table={table!r}, key={key_attribute}={id!r}")

        try:
            self.gateway.delete_item(table, key, condition=condition, ctx=ctx)
        except ConditionalCheckFailedError as e:
            raise ItemNotFoundError(table, {key_attribute: id}) from e

        logger.info(f"Item deleted: table={table!r}, key={key_attribute}={id!r}")
