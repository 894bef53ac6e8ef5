"""
Domain models for Baserow Bindings.

Mirrors the payloads returned by the Baserow schema endpoints
(`/api/database/tables/all-tables/` and `/api/database/fields/table/<id>/`)
plus the configured database scope. Only the keys the generator consumes are
declared; everything else in the payloads is ignored.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from baserow_bindings.utils.naming import to_pascal


class DatabaseConfig(BaseModel):
    """
    One database the caller asked bindings for.
    """

    name: str = Field(..., description="Display name, used for the output module name.")
    id: int = Field(..., description="Remote numeric database id.")

    model_config = ConfigDict(frozen=True)


class SelectOption(BaseModel):
    """
    One declared option of a single/multiple select field.
    """

    id: int
    value: str = ""
    color: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="ignore")


class TableField(BaseModel):
    """
    Field descriptor as returned by the fields endpoint.
    """

    id: int = Field(..., description="Remote numeric field id.")
    name: str = Field(..., description="Display name.")
    type: str = Field(..., description="Baserow field type tag.")
    primary: bool = Field(False, description="Whether this is the table's primary field.")
    read_only: bool = Field(False, description="Set by Baserow for computed fields.")
    order: int = 0
    table_id: Optional[int] = None

    # Type specific options
    number_decimal_places: Optional[int] = None
    number_negative: Optional[bool] = None
    select_options: List[SelectOption] = Field(default_factory=list)
    formula_type: Optional[str] = None
    array_formula_type: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def wire_tag(self) -> str:
        """Serialization key of this field in row payloads."""
        return f"field_{self.id}"


class Table(BaseModel):
    """
    One table visible to the token. `fields` stays None until attached.
    """

    id: int
    name: str
    order: int = 0
    database_id: int
    fields: Optional[List[TableField]] = None

    model_config = ConfigDict(extra="ignore")

    def attach_fields(self, fields: List[TableField]) -> None:
        self.fields = list(fields)

    @property
    def type_name(self) -> str:
        """Upper-camel class name derived from the display name."""
        return to_pascal(self.name, fallback=f"Table{self.id}", digit_prefix="Table")


__all__ = ["DatabaseConfig", "SelectOption", "Table", "TableField"]
