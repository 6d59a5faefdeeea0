"""Record schema declaration and introspection.

Record types are dataclasses whose stored fields are declared with dynamo():

    from dataclasses import dataclass
    from dynamap.schema import dynamo

    @dataclass
    class User:
        id: str = dynamo("id,key=hash")
        email: str | None = dynamo("email,required,index=email-index", default=None)

        @classmethod
        def table_name(cls) -> str:
            return "Users"
"""

from .fields import TAG_METADATA_KEY, dynamo
from .introspection import (
    describe,
    describe_record,
    is_zero,
    require_hash_key,
    validate_required,
)
from .naming import resolve_table_name
from .tags import parse_tag

__all__ = [
    "dynamo",
    "TAG_METADATA_KEY",
    "parse_tag",
    "describe",
    "describe_record",
    "require_hash_key",
    "validate_required",
    "is_zero",
    "resolve_table_name",
]
