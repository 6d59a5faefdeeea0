"""Parser for `dynamo` field tags.

A tag is a comma-separated string. The first token names the store
attribute; the remaining tokens are unordered options:

    "email,required,index=email-index"
    "id,key=hash"

Unknown options are ignored and parsing never fails.
"""

from ..core.types import FieldDescriptor, KeyRole

KEY_OPTION = "key="
INDEX_OPTION = "index="
REQUIRED_OPTION = "required"


def _parse_key_role(value: str) -> KeyRole:
    for role in KeyRole:
        if role.value == value:
            return role
    return KeyRole.NONE


def parse_tag(tag: str) -> FieldDescriptor:
    """Parse a field tag into a descriptor.

    Args:
        tag: Raw tag string, possibly empty.

    Returns:
        FieldDescriptor with attribute name, key role, index and required flag.
    """
    if not tag:
        return FieldDescriptor()

    tokens = [token.strip() for token in tag.split(",")]

    attribute_name = tokens[0]
    key_role = KeyRole.NONE
    index_name = ""
    required = False

    for token in tokens[1:]:
        if token.startswith(KEY_OPTION):
            key_role = _parse_key_role(token[len(KEY_OPTION):])
        elif token.startswith(INDEX_OPTION):
            index_name = token[len(INDEX_OPTION):]
        elif token == REQUIRED_OPTION:
            required = True

    return FieldDescriptor(
        attribute_name=attribute_name,
        key_role=key_role,
        index_name=index_name,
        required=required,
    )
