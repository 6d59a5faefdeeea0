"""Conversion between dataclass records and DynamoDB attribute maps.

Values go through boto3's TypeSerializer/TypeDeserializer. Floats are sent
as Decimal, and numbers read back are coerced to the int/float annotation of
the receiving field.
"""

from __future__ import annotations

import dataclasses
import types
import typing
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from typing import Any, TypeVar, Union

from boto3.dynamodb.types import Binary, TypeDeserializer, TypeSerializer

from ..core.exceptions import MarshalError, UnmarshalError
from ..core.types import AttributeMap, RecordSchema

T = TypeVar("T")

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


# =============================================================================
# Marshal
# =============================================================================


def _to_store_value(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        try:
            return Decimal(str(value))
        except InvalidOperation as e:
            raise MarshalError(f"Cannot store float {value!r}") from e
    if isinstance(value, (list, tuple)):
        return [_to_store_value(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return {_to_store_value(v) for v in value}
    if isinstance(value, dict):
        return {k: _to_store_value(v) for k, v in value.items()}
    return value


def marshal_value(value: Any) -> dict[str, Any]:
    """Convert a Python value to a DynamoDB attribute value.

    Raises:
        MarshalError: If the value has no DynamoDB representation.
    """
    try:
        return _serializer.serialize(_to_store_value(value))
    except (TypeError, ValueError, ArithmeticError) as e:
        raise MarshalError(f"Cannot marshal {type(value).__name__} value {value!r}: {e}") from e


def marshal_record(record: Any, schema: RecordSchema) -> AttributeMap:
    """Convert a record's declared fields to a DynamoDB item.

    Fields holding None are left out of the item.

    Raises:
        MarshalError: If a field value has no DynamoDB representation.
    """
    item: AttributeMap = {}
    for descriptor in schema.fields:
        value = getattr(record, descriptor.field_name)
        if value is None:
            continue
        try:
            item[descriptor.attribute_name] = marshal_value(value)
        except MarshalError as e:
            raise MarshalError(f"Field {descriptor.field_name}: {e}") from e
    return item


# =============================================================================
# Unmarshal
# =============================================================================


@lru_cache(maxsize=None)
def _field_types(record_type: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(record_type)
    except (NameError, TypeError):
        # Unresolvable forward references: fall back to raw annotations
        return {
            f.name: f.type
            for f in dataclasses.fields(record_type)
            if not isinstance(f.type, str)
        }


def _coerce(value: Any, annotation: Any, name: str) -> Any:
    if annotation is None or annotation is Any or value is None:
        return value

    origin = typing.get_origin(annotation)
    if origin in (Union, types.UnionType):
        # First member the value fits wins
        error: UnmarshalError | None = None
        for member in typing.get_args(annotation):
            if member is type(None):
                continue
            try:
                return _coerce(value, member, name)
            except UnmarshalError as e:
                error = error or e
        raise error or UnmarshalError(f"Attribute {name}: no type fits {value!r}")

    if isinstance(value, Binary):
        value = value.value

    if annotation is bool:
        if not isinstance(value, bool):
            raise UnmarshalError(f"Attribute {name}: expected bool, got {type(value).__name__}")
        return value
    if annotation is int:
        if not isinstance(value, Decimal) or value != value.to_integral_value():
            raise UnmarshalError(f"Attribute {name}: expected integer, got {value!r}")
        return int(value)
    if annotation is float:
        if not isinstance(value, Decimal):
            raise UnmarshalError(f"Attribute {name}: expected number, got {value!r}")
        return float(value)
    if annotation in (str, bytes) and not isinstance(value, annotation):
        raise UnmarshalError(
            f"Attribute {name}: expected {annotation.__name__}, got {type(value).__name__}"
        )

    if origin in (list, set, frozenset, tuple):
        if not isinstance(value, (list, set)):
            raise UnmarshalError(f"Attribute {name}: expected collection, got {type(value).__name__}")
        args = typing.get_args(annotation)
        if origin is tuple and args and args[-1] is not Ellipsis:
            if len(value) != len(args):
                raise UnmarshalError(
                    f"Attribute {name}: expected {len(args)} elements, got {len(value)}"
                )
            return tuple(_coerce(v, arg, name) for v, arg in zip(value, args))
        element = args[0] if args else None
        return origin(_coerce(v, element, name) for v in value)

    if origin is dict and not isinstance(value, dict):
        raise UnmarshalError(f"Attribute {name}: expected map, got {type(value).__name__}")

    return value


def unmarshal_record(item: AttributeMap, schema: RecordSchema, record_type: type[T]) -> T:
    """Build a record from a DynamoDB item.

    Attributes not declared on the record are ignored. A declared attribute
    missing from the item leaves the field at its default.

    Raises:
        UnmarshalError: If an attribute does not fit its field, or a field
            without default has no attribute.
    """
    hints = _field_types(record_type)
    init_fields = {f.name for f in dataclasses.fields(record_type) if f.init}

    init_kwargs: dict[str, Any] = {}
    late: dict[str, Any] = {}
    for descriptor in schema.fields:
        raw = item.get(descriptor.attribute_name)
        if raw is None:
            continue
        try:
            value = _deserializer.deserialize(raw)
        except (TypeError, ValueError) as e:
            raise UnmarshalError(f"Attribute {descriptor.attribute_name}: {e}") from e
        value = _coerce(value, hints.get(descriptor.field_name), descriptor.attribute_name)
        if descriptor.field_name in init_fields:
            init_kwargs[descriptor.field_name] = value
        else:
            late[descriptor.field_name] = value

    try:
        record = record_type(**init_kwargs)
    except TypeError as e:
        raise UnmarshalError(f"Cannot build {record_type.__name__} from item: {e}") from e

    for name, value in late.items():
        object.__setattr__(record, name, value)

    return record


def unmarshal_records(items: list[AttributeMap], schema: RecordSchema, record_type: type[T]) -> list[T]:
    """Build records from DynamoDB items, keeping their order."""
    return [unmarshal_record(item, schema, record_type) for item in items]
