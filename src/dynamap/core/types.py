"""Type definitions for dynamap."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Protocol, runtime_checkable


class KeyRole(Enum):
    """Role a field plays in the table's primary key."""

    NONE = ""
    HASH = "hash"


@dataclass(frozen=True)
class FieldDescriptor:
    """Parsed declaration of a single record field.

    Attributes:
        attribute_name: Attribute name in the store.
        key_role: Primary key role of the attribute.
        index_name: Secondary index keyed on this attribute ("" for none).
        required: Whether create must reject a zero value.
        field_name: Python attribute on the record ("" until bound to a field).
    """

    attribute_name: str = ""
    key_role: KeyRole = KeyRole.NONE
    index_name: str = ""
    required: bool = False
    field_name: str = ""

    @property
    def is_hash_key(self) -> bool:
        """Check if this field is the partition key."""
        return self.key_role is KeyRole.HASH


@dataclass(frozen=True)
class RecordSchema:
    """Declared schema of one record type.

    Attributes:
        record_type: The dataclass the schema was derived from.
        fields: Descriptors of tagged fields, in declaration order.
        hash_key: Descriptor of the partition key field, if declared.
        indexes: Attribute name to index name, for indexed attributes.
    """

    record_type: type
    fields: tuple[FieldDescriptor, ...]
    hash_key: Optional[FieldDescriptor] = None
    indexes: dict[str, str] = field(default_factory=dict)

    def index_for(self, attribute_name: str) -> Optional[str]:
        """Get the index declared on an attribute, or None."""
        return self.indexes.get(attribute_name) or None

    @property
    def attribute_names(self) -> list[str]:
        """Attribute names in declaration order."""
        return [f.attribute_name for f in self.fields]


@runtime_checkable
class TableNamed(Protocol):
    """Record that names the table it is stored in."""

    def table_name(self) -> str:
        """Return the table name for this record."""
        ...


# Low-level DynamoDB attribute map, e.g. {"id": {"S": "u1"}}
AttributeMap = dict[str, dict[str, Any]]
