"""
Decode hooks used by generated bindings.

Baserow reports numeric cells inconsistently: as a JSON number, as a number
encoded in a string ("12", "3.50") or as null. Every numeric kind has one
decode function here that folds the three encodings into `Optional[number]`
and rejects anything else. Generated modules only reference the annotated
aliases below, so a new encoding can be handled here without regenerating
bindings.

Select fields decode from either a label or an option object
(`{"id": 1, "value": "Open", "color": "blue"}`) into the generated enum.
Labels the enum does not know are errors, never dropped.
"""

from __future__ import annotations

import enum
import math
import re
from decimal import Decimal
from typing import Annotated, Any, Callable, List, Optional, Type, TypeVar

from pydantic import BeforeValidator

from baserow_bindings.errors import DecodeError

E = TypeVar("E", bound=enum.Enum)

# Plain decimal notation with an optional exponent; no digit separators.
_NUMERIC_STRING = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def _to_decimal(value: Any, kind: str) -> Decimal:
    """Parse a present numeric cell (number or numeric string)."""
    if isinstance(value, bool):
        raise DecodeError(f"expected {kind} number or null, got boolean {value!r}")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise DecodeError(f"expected finite {kind} number, got {value!r}")
        return Decimal(repr(value))
    if isinstance(value, str):
        text = value.strip()
        if not _NUMERIC_STRING.fullmatch(text):
            raise DecodeError(f"expected {kind} number or null, got non-numeric string {value!r}")
        return Decimal(text)
    raise DecodeError(f"expected {kind} number or null, got {type(value).__name__}")


def _to_integer(value: Any, kind: str) -> int:
    number = _to_decimal(value, kind)
    if number != number.to_integral_value():
        raise DecodeError(f"expected {kind} integer, got fractional value {value!r}")
    return int(number)


def decode_unsigned(value: Any) -> Optional[int]:
    if value is None:
        return None
    number = _to_integer(value, "unsigned")
    if number < 0:
        raise DecodeError(f"expected unsigned integer, got negative value {value!r}")
    return number


def decode_signed(value: Any) -> Optional[int]:
    if value is None:
        return None
    return _to_integer(value, "signed")


def decode_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    number = float(_to_decimal(value, "floating point"))
    if not math.isfinite(number):
        raise DecodeError(f"floating point value {value!r} is out of range")
    return number


def _option_label(value: Any) -> str:
    if isinstance(value, enum.Enum):
        return str(value.value)
    if isinstance(value, dict):
        label = value.get("value")
        if not isinstance(label, str):
            raise DecodeError(f"select option object without a text value: {value!r}")
        return label
    if isinstance(value, str):
        return value
    raise DecodeError(f"expected select option label or object, got {type(value).__name__}")


def _lookup_option(enum_type: Type[E], value: Any) -> E:
    if isinstance(value, enum_type):
        return value
    label = _option_label(value)
    try:
        return enum_type(label)
    except ValueError:
        raise DecodeError(f"unknown option {label!r} for {enum_type.__name__}") from None


def single_select(enum_type: Type[E]) -> Callable[[Any], Optional[E]]:
    """Build the decode hook of a single select field backed by `enum_type`."""

    def decode(value: Any) -> Optional[E]:
        if value is None:
            return None
        return _lookup_option(enum_type, value)

    decode.__name__ = f"decode_{enum_type.__name__}"
    return decode


def multiple_select(enum_type: Type[E]) -> Callable[[Any], Optional[List[E]]]:
    """Build the decode hook of a multiple select field backed by `enum_type`."""

    def decode(value: Any) -> Optional[List[E]]:
        if value is None:
            return None
        if not isinstance(value, (list, tuple)):
            raise DecodeError(f"expected a list of options, got {type(value).__name__}")
        return [_lookup_option(enum_type, item) for item in value]

    decode.__name__ = f"decode_{enum_type.__name__}_list"
    return decode


UnsignedOrNull = Annotated[Optional[int], BeforeValidator(decode_unsigned)]
SignedOrNull = Annotated[Optional[int], BeforeValidator(decode_signed)]
FloatOrNull = Annotated[Optional[float], BeforeValidator(decode_float)]


__all__ = [
    "FloatOrNull",
    "SignedOrNull",
    "UnsignedOrNull",
    "decode_float",
    "decode_signed",
    "decode_unsigned",
    "multiple_select",
    "single_select",
]
