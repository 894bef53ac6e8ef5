"""
Name normalization for generated Python code.

Baserow display names are free text ("Order Id", "order-id", "2024 Sales",
"Größe"). Everything here turns them into Python identifiers:

- class names: upper camel (`to_pascal`)
- attribute and module names: snake case (`to_snake`, `safe_identifier`)
- enum members: upper snake (`to_upper_snake`)

All functions are pure so the same schema always yields the same names.
"""

from __future__ import annotations

import keyword
import re
from typing import AbstractSet, List

_SEPARATORS = re.compile(r"[\W_]+")
_LOWER_TO_UPPER = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_ACRONYM_TO_WORD = re.compile(r"(?<=[A-Z])(?=[A-Z][a-z])")


def split_words(name: str) -> List[str]:
    """
    Split a display name into words on separators and case boundaries.

    >>> split_words("Order Id")
    ['Order', 'Id']
    >>> split_words("HTTPStatus-code")
    ['HTTP', 'Status', 'code']
    """
    spaced = _ACRONYM_TO_WORD.sub(" ", _LOWER_TO_UPPER.sub(" ", name))
    return [word for word in _SEPARATORS.split(spaced) if word]


def to_snake(name: str) -> str:
    return "_".join(word.lower() for word in split_words(name))


def to_upper_snake(name: str) -> str:
    return "_".join(word.upper() for word in split_words(name))


def to_pascal(name: str, fallback: str, digit_prefix: str = "") -> str:
    """
    Upper camel form of `name`.

    Returns `fallback` when nothing identifier-safe remains, and prepends
    `digit_prefix` when the result would start with a digit.
    """
    result = "".join(word.capitalize() for word in split_words(name))
    if result[:1].isdigit():
        result = f"{digit_prefix}{result}"
    if not result.isidentifier():
        return fallback
    return result


def safe_identifier(
    name: str,
    fallback: str,
    digit_prefix: str = "field_",
    reserved: AbstractSet[str] = frozenset(),
) -> str:
    """
    Snake case identifier for `name` that is safe to use as an attribute.

    Keywords and `reserved` names get a trailing underscore; names starting
    with a digit get `digit_prefix`; an empty result becomes `fallback`.
    """
    result = to_snake(name)
    if not result:
        return fallback
    if result[0].isdigit():
        result = f"{digit_prefix}{result}"
    if not result.isidentifier():
        return fallback
    if keyword.iskeyword(result) or keyword.issoftkeyword(result) or result in reserved:
        result = f"{result}_"
    return result


def enum_member_name(label: str, option_id: int) -> str:
    """Member name for a select option label."""
    result = to_upper_snake(label)
    if not result:
        return f"OPTION_{option_id}"
    if result[0].isdigit():
        result = f"OPTION_{result}"
    if not result.isidentifier():
        return f"OPTION_{option_id}"
    return result


def module_name(database_name: str, database_id: int) -> str:
    """Output module name for a configured database."""
    return safe_identifier(
        database_name, fallback=f"database_{database_id}", digit_prefix="database_"
    )


__all__ = [
    "enum_member_name",
    "module_name",
    "safe_identifier",
    "split_words",
    "to_pascal",
    "to_snake",
    "to_upper_snake",
]
