"""Pydantic schemas for facts read from the relational catalog."""
from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict


class CatalogColumn(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    data_type: str                          # information_schema data_type
    is_nullable: bool = True
    column_default: Optional[str] = None    # raw default expression
    character_maximum_length: Optional[int] = None
    numeric_precision: Optional[int] = None
    numeric_scale: Optional[int] = None
    udt_name: Optional[str] = None          # underlying type for USER-DEFINED columns
    ordinal_position: int = 0


class ForeignKeyConstraint(BaseModel):
    model_config = ConfigDict(frozen=True)

    column: str
    referenced_table: str
    referenced_column: str
    constraint_name: str


class ReverseForeignKey(BaseModel):
    """Another table's foreign key pointing at this one."""
    model_config = ConfigDict(frozen=True)

    source_table: str
    source_column: str
    target_column: str


class UniqueConstraint(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    columns: tuple[str, ...]
    origin: Literal["constraint", "index"] = "constraint"

    @property
    def column_set(self) -> frozenset[str]:
        return frozenset(self.columns)


class EnumColumn(BaseModel):
    model_config = ConfigDict(frozen=True)

    column_name: str
    type_name: str
    labels: tuple[str, ...]                 # catalog sort order, never re-sorted


class CatalogModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    table_name: str
    schema_name: str = "public"
    columns: tuple[CatalogColumn, ...] = ()
    primary_key: tuple[str, ...] = ()
    foreign_keys: tuple[ForeignKeyConstraint, ...] = ()
    unique_constraints: tuple[UniqueConstraint, ...] = ()
    enum_columns: tuple[EnumColumn, ...] = ()
    reverse_foreign_keys: tuple[ReverseForeignKey, ...] = ()

    def column(self, name: str) -> Optional[CatalogColumn]:
        return next((c for c in self.columns if c.name == name), None)

    def enum_labels(self, column_name: str) -> Optional[tuple[str, ...]]:
        for enum in self.enum_columns:
            if enum.column_name == column_name:
                return enum.labels
        return None
