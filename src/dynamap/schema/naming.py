"""Table name resolution for records."""

import dataclasses
import inspect
from typing import Any, Optional

from loguru import logger

TABLE_NAME_ACCESSOR = "table_name"


def _default_instance(record_type: type) -> Optional[Any]:
    """Build a record type with every field at its default, or None if it cannot."""
    if not dataclasses.is_dataclass(record_type):
        return None
    for f in dataclasses.fields(record_type):
        if (
            f.init
            and f.default is dataclasses.MISSING
            and f.default_factory is dataclasses.MISSING
        ):
            return None
    return record_type()


def resolve_table_name(target: Any, default: str) -> str:
    """Resolve the table a record (or record type) is stored in.

    A record that provides a zero-argument table_name() accessor names its own
    table; otherwise the default is used. For a record type, a classmethod or
    staticmethod accessor is called directly. An instance-method accessor is
    called on a record built from field defaults; a type with fields lacking
    defaults falls back to the default table.

    Args:
        target: Record instance or record type.
        default: Repository default table name.

    Returns:
        Table name to use for this call.
    """
    if not isinstance(target, type):
        accessor = getattr(target, TABLE_NAME_ACCESSOR, None)
        return accessor() if callable(accessor) else default

    try:
        static = inspect.getattr_static(target, TABLE_NAME_ACCESSOR)
    except AttributeError:
        return default

    if isinstance(static, (classmethod, staticmethod)):
        return getattr(target, TABLE_NAME_ACCESSOR)()

    if not callable(static):
        return default

    instance = _default_instance(target)
    if instance is None:
        logger.warning(
            f"{target.__name__}.table_name() needs an instance and {target.__name__} "
            f"has fields without defaults; using default table {default!r}"
        )
        return default
    return getattr(instance, TABLE_NAME_ACCESSOR)()
