"""Core types, configuration and errors for dynamap."""

from .config import AWSConfig, Config
from .exceptions import (
    ConditionalCheckFailedError,
    DuplicateKeyError,
    DynamapError,
    ItemNotFoundError,
    MarshalError,
    OperationCancelledError,
    RecordTypeError,
    SchemaError,
    StoreError,
    UnmarshalError,
    ValidationError,
)
from .types import AttributeMap, FieldDescriptor, KeyRole, RecordSchema, TableNamed

__all__ = [
    "Config",
    "AWSConfig",
    "DynamapError",
    "ValidationError",
    "RecordTypeError",
    "SchemaError",
    "DuplicateKeyError",
    "ItemNotFoundError",
    "StoreError",
    "ConditionalCheckFailedError",
    "MarshalError",
    "UnmarshalError",
    "OperationCancelledError",
    "KeyRole",
    "FieldDescriptor",
    "RecordSchema",
    "TableNamed",
    "AttributeMap",
]
