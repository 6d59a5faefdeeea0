"""Custom exceptions for dynamap."""


class DynamapError(Exception):
    """Base exception for all dynamap errors."""

    pass


class ValidationError(DynamapError):
    """Caller supplied a record or argument the repository cannot accept."""

    pass


class RecordTypeError(ValidationError, TypeError):
    """Record type is not a declared record (dataclass) type."""

    pass


class SchemaError(DynamapError):
    """Record type declaration is unusable for the requested operation."""

    pass


class DuplicateKeyError(DynamapError):
    """An item with this key already exists."""

    def __init__(self, table: str, key: dict | None = None):
        """Initialize exception with table and key.

        Args:
            table: Table the write targeted.
            key: Key attributes of the conflicting item, if known.
        """
        self.table = table
        self.key = key or {}
        super().__init__(f"Item with this key already exists in {table}: {self.key}")


class ItemNotFoundError(DynamapError):
    """Item does not exist."""

    def __init__(self, table: str, key: dict | None = None):
        """Initialize exception with table and key.

        Args:
            table: Table the operation targeted.
            key: Key attributes of the missing item, if known.
        """
        self.table = table
        self.key = key or {}
        super().__init__(f"Item not found in {table}: {self.key}")


class StoreError(DynamapError):
    """Store operation failed."""

    def __init__(self, message: str, cause: BaseException | None = None):
        self.cause = cause
        super().__init__(message)


class ConditionalCheckFailedError(StoreError):
    """Conditional write was rejected by the store."""

    pass


class MarshalError(DynamapError):
    """Record value could not be converted to a store attribute."""

    pass


class UnmarshalError(DynamapError):
    """Stored attributes could not be converted back to a record."""

    pass


class OperationCancelledError(DynamapError):
    """Operation was cancelled or ran past its deadline."""

    pass
