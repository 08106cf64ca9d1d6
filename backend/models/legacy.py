"""Pydantic schemas for facts mined from a legacy (Ecto) schema module."""
from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict

AssociationKind = Literal["belongs_to", "has_many", "has_one", "many_to_many"]
ValidationKind = Literal["required", "length", "format", "inclusion", "number"]


class Association(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: AssociationKind
    name: str
    module: str                             # e.g. "MyApp.Blog.Post"
    join_through: Optional[str] = None      # many_to_many only


class ValidationDirective(BaseModel):
    """Carried through for reporting only; never translated."""
    model_config = ConfigDict(frozen=True)

    kind: ValidationKind
    field: str
    options: Optional[str] = None           # raw option text, None for required


class MutationFunction(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    body: str


class LegacyModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_path: Optional[str] = None
    declared_table: Optional[str] = None
    virtual_fields: tuple[str, ...] = ()
    associations: tuple[Association, ...] = ()
    validations: tuple[ValidationDirective, ...] = ()
    mutation_functions: tuple[MutationFunction, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.virtual_fields or self.associations
                    or self.validations or self.mutation_functions)

    def associations_of(self, kind: AssociationKind) -> list[Association]:
        return [a for a in self.associations if a.kind == kind]
