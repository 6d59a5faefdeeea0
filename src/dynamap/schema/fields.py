"""Declaring store attributes on dataclass records."""

import dataclasses
from typing import Any

TAG_METADATA_KEY = "dynamo"


def dynamo(tag: str = "", **kwargs: Any) -> Any:
    """Declare a dataclass field as a store attribute.

    Wraps dataclasses.field(), recording the tag in the field metadata.
    Fields declared without it are not stored.

    Example:
        @dataclass
        class User:
            id: str = dynamo("id,key=hash")
            email: str | None = dynamo("email,required,index=email-index", default=None)

    Args:
        tag: Field tag, see dynamap.schema.tags.
        **kwargs: Passed through to dataclasses.field().

    Returns:
        A dataclasses.Field carrying the tag.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[TAG_METADATA_KEY] = tag
    return dataclasses.field(metadata=metadata, **kwargs)
