"""
Runtime support imported by generated binding modules.

Generated code depends only on what this package exports: the record base
class, the auxiliary structure bases and the decode hooks. Keep it free of
generator and transport logic.
"""

from baserow_bindings.runtime.decoders import (
    FloatOrNull,
    SignedOrNull,
    UnsignedOrNull,
    decode_float,
    decode_signed,
    decode_unsigned,
    multiple_select,
    single_select,
)
from baserow_bindings.runtime.record import (
    BaserowObject,
    BaserowRecord,
    BaserowStruct,
    FileItem,
    LinkItem,
    SelectItem,
    UserItem,
)

__all__ = [
    # Record contract
    "BaserowObject",
    "BaserowRecord",
    "BaserowStruct",
    # Auxiliary structures
    "FileItem",
    "LinkItem",
    "SelectItem",
    "UserItem",
    # Decode hooks
    "FloatOrNull",
    "SignedOrNull",
    "UnsignedOrNull",
    "decode_float",
    "decode_signed",
    "decode_unsigned",
    "multiple_select",
    "single_select",
]
