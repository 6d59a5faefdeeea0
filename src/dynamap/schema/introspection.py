"""Schema derivation for dataclass records.

Each record type is described once, from the tags stored in its dataclass
field metadata, and the result is cached for the life of the process.
"""

from __future__ import annotations

import dataclasses
from functools import lru_cache
from typing import Any

from loguru import logger

from ..core.exceptions import RecordTypeError, SchemaError, ValidationError
from ..core.types import FieldDescriptor, RecordSchema
from .fields import TAG_METADATA_KEY
from .tags import parse_tag


def _require_record_type(record_type: Any) -> type:
    if not isinstance(record_type, type) or not dataclasses.is_dataclass(record_type):
        raise RecordTypeError(f"Record type must be a dataclass type, got {record_type!r}")
    return record_type


@lru_cache(maxsize=None)
def _describe(record_type: type) -> RecordSchema:
    descriptors: list[FieldDescriptor] = []
    hash_key: FieldDescriptor | None = None
    indexes: dict[str, str] = {}
    seen: set[str] = set()

    for f in dataclasses.fields(record_type):
        if TAG_METADATA_KEY not in f.metadata:
            continue

        parsed = parse_tag(f.metadata[TAG_METADATA_KEY])
        descriptor = dataclasses.replace(
            parsed,
            attribute_name=parsed.attribute_name or f.name,
            field_name=f.name,
        )

        if descriptor.attribute_name in seen:
            raise SchemaError(
                f"{record_type.__name__}: attribute {descriptor.attribute_name!r} declared twice"
            )
        seen.add(descriptor.attribute_name)

        if descriptor.is_hash_key:
            if hash_key is not None:
                raise SchemaError(
                    f"{record_type.__name__}: more than one hash key "
                    f"({hash_key.attribute_name!r}, {descriptor.attribute_name!r})"
                )
            hash_key = descriptor

        if descriptor.index_name:
            indexes[descriptor.attribute_name] = descriptor.index_name

        descriptors.append(descriptor)

    logger.debug(
        f"Described {record_type.__name__}: attributes={[d.attribute_name for d in descriptors]!r}, "
        f"hash_key={hash_key.attribute_name if hash_key else None!r}, indexes={indexes!r}"
    )

    return RecordSchema(
        record_type=record_type,
        fields=tuple(descriptors),
        hash_key=hash_key,
        indexes=indexes,
    )


def describe(record_type: Any) -> RecordSchema:
    """Get the schema of a record type.

    Args:
        record_type: A dataclass type whose store fields are declared with dynamo().

    Returns:
        RecordSchema for the type.

    Raises:
        RecordTypeError: If record_type is not a dataclass type.
        SchemaError: If attribute names repeat or more than one hash key is declared.
    """
    return _describe(_require_record_type(record_type))


def describe_record(record: Any) -> RecordSchema:
    """Get the schema of a record instance's type."""
    if isinstance(record, type) or not dataclasses.is_dataclass(record):
        raise RecordTypeError(f"Record must be a dataclass instance, got {record!r}")
    return _describe(type(record))


def require_hash_key(schema: RecordSchema) -> FieldDescriptor:
    """Get the hash key of a schema.

    Raises:
        SchemaError: If the record type declares no hash key.
    """
    if schema.hash_key is None:
        raise SchemaError(f"No hash key defined on {schema.record_type.__name__}")
    return schema.hash_key


def is_zero(value: Any) -> bool:
    """Check if a value is unset or empty (None, "", 0, False, empty collection)."""
    return value is None or not value


def validate_required(record: Any, schema: RecordSchema) -> None:
    """Check that every required field of a record holds a value.

    Raises:
        ValidationError: Naming the first required field that is zero or empty.
    """
    for descriptor in schema.fields:
        if descriptor.required and is_zero(getattr(record, descriptor.field_name)):
            raise ValidationError(f"Field {descriptor.field_name} is required")
