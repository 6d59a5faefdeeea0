"""Condition, key-condition and update expression builders.

Attribute names are always referenced through `#` placeholders and values
through `:` placeholders, so reserved words (name, status, ...) and names
with punctuation never reach the expression text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

KEY_NAME = "#k"
PARAM_NAME = "#p"
PARAM_VALUE = ":v"


@dataclass
class Expression:
    """Expression text with its placeholder bindings.

    Attributes:
        text: Expression string, e.g. "attribute_exists(#k)".
        names: Placeholder to attribute name.
        values: Placeholder to marshaled attribute value.
    """

    text: str
    names: dict[str, str] = field(default_factory=dict)
    values: dict[str, dict[str, Any]] = field(default_factory=dict)


def attribute_not_exists(attribute_name: str) -> Expression:
    """Condition that holds only when no item has this key yet."""
    return Expression(f"attribute_not_exists({KEY_NAME})", {KEY_NAME: attribute_name})


def attribute_exists(attribute_name: str) -> Expression:
    """Condition that holds only when the item already exists."""
    return Expression(f"attribute_exists({KEY_NAME})", {KEY_NAME: attribute_name})


def equals(attribute_name: str, value: dict[str, Any]) -> Expression:
    """Equality test usable as a key condition or a scan filter."""
    return Expression(
        f"{PARAM_NAME} = {PARAM_VALUE}",
        {PARAM_NAME: attribute_name},
        {PARAM_VALUE: value},
    )


def set_clause(assignments: list[tuple[str, dict[str, Any]]]) -> Expression:
    """SET update expression assigning each attribute its marshaled value.

    Args:
        assignments: (attribute name, marshaled value) pairs, at least one.
    """
    if not assignments:
        raise ValueError("set_clause requires at least one assignment")

    parts: list[str] = []
    names: dict[str, str] = {}
    values: dict[str, dict[str, Any]] = {}
    for i, (attribute_name, value) in enumerate(assignments):
        name_ph, value_ph = f"#n{i}", f":v{i}"
        parts.append(f"{name_ph} = {value_ph}")
        names[name_ph] = attribute_name
        values[value_ph] = value

    return Expression("SET " + ", ".join(parts), names, values)
