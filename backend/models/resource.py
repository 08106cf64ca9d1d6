"""Pydantic schemas for reconciled relationships and generation results."""
from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict, Field

from models.legacy import AssociationKind

DiagnosticKind = Literal[
    "unmapped_type",
    "composite_primary_key",
    "missing_primary_key",
    "unsupported_primary_key_type",
    "multi_column_unique",
    "unresolved_relationship",
    "duplicate_relationship_name",
    "enum_default_not_in_labels",
    "legacy_schema_unavailable",
    "legacy_schema_unparseable",
    "table_name_mismatch",
]


class Diagnostic(BaseModel):
    """A non-blocking finding the operator has to review."""
    model_config = ConfigDict(frozen=True)

    kind: DiagnosticKind
    subject: str
    message: str

    def __str__(self) -> str:
        return f"[{self.kind}] {self.subject}: {self.message}"


class MergedRelationship(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: AssociationKind
    name: str
    destination: str                        # target resource module
    source_field: Optional[str] = None
    destination_field: Optional[str] = None
    through: Optional[str] = None           # many_to_many join resource
    resolved: bool = True
    origin: Literal["catalog", "legacy"] = "catalog"
    reason: Optional[str] = None            # set only on unresolved directives


class GenerationSummary(BaseModel):
    columns: int
    primary_keys: int
    foreign_keys: int
    unique_constraints: int
    enum_types: int
    # Legacy counts stay None when no legacy schema was supplied
    virtual_fields: Optional[int] = None
    validations: Optional[int] = None
    associations: Optional[int] = None
    mutation_functions: Optional[int] = None


class GenerationResult(BaseModel):
    table_name: str
    module_name: str
    output_path: Optional[str] = None       # None when the artifact was not written
    content: str
    summary: GenerationSummary
    diagnostics: list[Diagnostic] = Field(default_factory=list)
