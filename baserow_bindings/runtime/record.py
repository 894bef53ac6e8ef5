"""
Capability contract shared by generated bindings and the record client.

Every generated record class subclasses BaserowRecord and implements the
abstract accessors; the record client only ever talks to records through the
BaserowObject protocol plus ordinary (de)serialization, it never looks at the
remote schema at call time.
"""

from __future__ import annotations

import abc
from typing import Any, ClassVar, Dict, FrozenSet, Mapping, Optional, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, ConfigDict

from baserow_bindings.domain.identifier import Identifier

R = TypeVar("R", bound="BaserowRecord")


@runtime_checkable
class BaserowObject(Protocol):
    """
    Operations the record client needs from a record type.

    Methods
    -------
    get_static_table_id()
        Remote table id, available on the class.
    get_table_id()
        Remote table id of an instance (the static id unless overridden).
    get_id()
        The record's primary value as an Identifier.
    get_table_id_field()
        Wire tag (`field_<id>`) of the primary field.
    """

    @classmethod
    def get_static_table_id(cls) -> int:
        ...

    def get_table_id(self) -> int:
        ...

    def get_id(self) -> Identifier:
        ...

    def get_table_id_field(self) -> str:
        ...


class BaserowRecord(BaseModel, abc.ABC):
    """
    Base class of generated record types.

    Attributes are declared with `alias="field_<id>"`, so wire payloads use the
    numeric tags while Python code uses the normalized names.
    """

    READ_ONLY_FIELDS: ClassVar[FrozenSet[str]] = frozenset()

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        protected_namespaces=(),
    )

    @classmethod
    @abc.abstractmethod
    def get_static_table_id(cls) -> int:  # pragma: no cover - interface only
        raise NotImplementedError

    def get_table_id(self) -> int:
        return type(self).get_static_table_id()

    @abc.abstractmethod
    def get_id(self) -> Identifier:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def get_table_id_field(self) -> str:  # pragma: no cover - interface only
        raise NotImplementedError

    @classmethod
    def from_wire(cls: type[R], payload: Mapping[str, Any]) -> R:
        """Decode a row payload keyed by wire tags."""
        return cls.model_validate(payload)

    def to_wire(self) -> Dict[str, Any]:
        """Encode every field under its wire tag."""
        return self.model_dump(mode="json", by_alias=True)

    def to_payload(self, exclude_unset: bool = False) -> Dict[str, Any]:
        """
        Wire form without the fields Baserow computes itself.

        Attributes never assigned are encoded as null unless `exclude_unset` is
        set, in which case only attributes given at construction, assigned
        afterwards or read from a row are kept.
        """
        wire = self.model_dump(mode="json", by_alias=True, exclude_unset=exclude_unset)
        return {key: value for key, value in wire.items() if key not in self.READ_ONLY_FIELDS}


class BaserowStruct(BaseModel):
    """Base class of auxiliary structures nested inside record fields."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", protected_namespaces=())


class LinkItem(BaserowStruct):
    """Entry of a link-to-table, lookup or array formula cell."""

    id: Optional[int] = None
    value: Any = None


class SelectItem(BaserowStruct):
    """Option object produced by a single select formula."""

    id: Optional[int] = None
    value: Optional[str] = None
    color: Optional[str] = None


class UserItem(BaserowStruct):
    """Collaborator reference (created by, last modified by, collaborators)."""

    id: Optional[int] = None
    name: Optional[str] = None


class FileItem(BaserowStruct):
    """Entry of a file cell."""

    url: Optional[str] = None
    thumbnails: Optional[Dict[str, Any]] = None
    visible_name: Optional[str] = None
    name: Optional[str] = None
    size: Optional[int] = None
    mime_type: Optional[str] = None
    is_image: Optional[bool] = None
    image_width: Optional[int] = None
    image_height: Optional[int] = None
    uploaded_at: Optional[str] = None


__all__ = [
    "BaserowObject",
    "BaserowRecord",
    "BaserowStruct",
    "FileItem",
    "LinkItem",
    "SelectItem",
    "UserItem",
]
