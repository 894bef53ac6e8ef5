"""
Identifier: how a record is addressed by its primary field's value.

Generated bindings build one per lookup from the record's primary value; the
record client turns it into the value of a `filter__<field>__equal` query.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Union

IdentifierValue = Union[int, float, str]


class IdentifierKind(str, enum.Enum):
    UNSIGNED = "unsigned"
    SIGNED = "signed"
    FLOAT = "float"
    TEXT = "text"


@dataclass(frozen=True)
class Identifier:
    """
    Closed tagged value over the four identifier shapes.

    Use the constructors rather than instantiating directly so the value
    always matches its kind.
    """

    kind: IdentifierKind
    value: Optional[IdentifierValue] = None

    @classmethod
    def unsigned(cls, value: Optional[int]) -> "Identifier":
        return cls(IdentifierKind.UNSIGNED, value)

    @classmethod
    def signed(cls, value: Optional[int]) -> "Identifier":
        return cls(IdentifierKind.SIGNED, value)

    @classmethod
    def floating(cls, value: Optional[float]) -> "Identifier":
        return cls(IdentifierKind.FLOAT, value)

    @classmethod
    def text(cls, value: Optional[str]) -> "Identifier":
        return cls(IdentifierKind.TEXT, value)

    @property
    def is_empty(self) -> bool:
        return self.value is None

    def as_filter_value(self) -> Optional[str]:
        """String form used in a lookup filter, None when there is no value."""
        if self.value is None:
            return None
        if self.kind is IdentifierKind.TEXT:
            return str(self.value)
        if self.kind is IdentifierKind.FLOAT:
            return repr(float(self.value))
        return str(int(self.value))


__all__ = ["Identifier", "IdentifierKind", "IdentifierValue"]
