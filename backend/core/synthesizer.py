"""
Synthesizer — render a reconciled table model as an Ash resource module.

Section order is fixed: module header → attributes → identities (if any) →
relationships (if any) → default actions → closing `end`.
"""
import logging
from typing import Optional

from pydantic import BaseModel

from core.attribute_renderer import build_constraints, elixir_atom, elixir_atom_list, enum_default_rejected, \
    format_default
from core.naming import moduleize
from core.type_mapper import DEFAULT_TYPE_MAP, TypeMap, map_type
from models.catalog import CatalogColumn, CatalogModel
from models.resource import Diagnostic, MergedRelationship

logger = logging.getLogger(__name__)

UUID_PK_TYPES = {"uuid"}
INTEGER_PK_TYPES = {"integer", "bigint", "smallint", "serial", "bigserial"}
TIMESTAMP_TYPES = {"naive_datetime", "utc_datetime"}
DEFAULT_ACTIONS = ("read", "create", "update", "destroy")


class ResourceOptions(BaseModel):
    namespace: str = "GMiner.Resources"
    repo: str = "GMiner.Repo"
    data_layer: str = "AshPostgres.DataLayer"
    timestamp_columns: tuple[str, str] = ("inserted_at", "updated_at")

    @classmethod
    def from_settings(cls, settings) -> "ResourceOptions":
        return cls(
            namespace=settings.RESOURCE_NAMESPACE,
            repo=settings.REPO_MODULE,
            data_layer=settings.DATA_LAYER,
            timestamp_columns=settings.timestamp_column_pair,
        )


# ── Sections ──────────────────────────────────────────────────────────────────

def _module_header(table_name: str, module_name: str, options: ResourceOptions) -> list[str]:
    return [
        f"defmodule {module_name} do",
        "  use Ash.Resource,",
        f"    data_layer: {options.data_layer}",
        "",
        "  postgres do",
        f'    table "{table_name}"',
        f"    repo {options.repo}",
        "  end",
        "",
    ]


def _primary_key(catalog: CatalogModel, diagnostics: list[Diagnostic]) -> tuple[list[str], Optional[str]]:
    """Returns (declaration lines, primary-key column consumed by them)."""
    pk = catalog.primary_key
    if not pk:
        logger.warning("No primary key on %s", catalog.table_name)
        diagnostics.append(Diagnostic(
            kind="missing_primary_key", subject=catalog.table_name,
            message="table has no primary key; no primary-key declaration emitted",
        ))
        return [], None

    if len(pk) > 1:
        logger.warning("Composite primary key detected on %s. Treating as regular attributes.", catalog.table_name)
        diagnostics.append(Diagnostic(
            kind="composite_primary_key", subject=catalog.table_name,
            message=f"composite primary key {list(pk)} rendered as plain attributes",
        ))
        return [], None

    column = catalog.column(pk[0])
    if column is None:
        return [], None
    if column.data_type in UUID_PK_TYPES:
        return [f"    uuid_primary_key {elixir_atom(column.name)}"], column.name
    if column.data_type in INTEGER_PK_TYPES:
        return [f"    integer_primary_key {elixir_atom(column.name)}"], column.name

    diagnostics.append(Diagnostic(
        kind="unsupported_primary_key_type", subject=column.name,
        message=f"primary key of type {column.data_type} rendered as a plain attribute",
    ))
    return [], None


def _attribute_line(
    column: CatalogColumn,
    ash_type: str,
    enum_labels,
    diagnostics: list[Diagnostic],
) -> str:
    if enum_default_rejected(column.column_default, enum_labels):
        diagnostics.append(Diagnostic(
            kind="enum_default_not_in_labels", subject=column.name,
            message=f"default {column.column_default} is not one of {list(enum_labels)}; dropped",
        ))

    line = f"    attribute {elixir_atom(column.name)}, :{ash_type}, allow_nil?: {str(column.is_nullable).lower()}"
    line += build_constraints(
        ash_type,
        column.character_maximum_length,
        column.numeric_precision,
        column.numeric_scale,
        enum_labels,
    )
    line += format_default(column.column_default, ash_type, enum_labels)
    return line


def _attributes_section(
    catalog: CatalogModel,
    options: ResourceOptions,
    type_map: TypeMap,
    diagnostics: list[Diagnostic],
) -> list[str]:
    lines = ["  attributes do"]
    pk_lines, pk_column = _primary_key(catalog, diagnostics)
    lines += pk_lines

    typed = []
    for column in catalog.columns:
        if column.name == pk_column:
            continue
        enum_labels = catalog.enum_labels(column.name)
        ash_type, diagnostic = map_type(column.data_type, column.udt_name, enum_labels, type_map, column.name)
        if diagnostic:
            diagnostics.append(diagnostic)
        typed.append((column, ash_type, enum_labels))

    # The timestamp pair collapses into timestamps() only when both halves exist
    stamp_types = {c.name: t for c, t, _ in typed if c.name in options.timestamp_columns}
    use_timestamps = (
        set(stamp_types) == set(options.timestamp_columns)
        and all(t in TIMESTAMP_TYPES for t in stamp_types.values())
    )

    for column, ash_type, enum_labels in typed:
        if use_timestamps and column.name in options.timestamp_columns:
            continue
        lines.append(_attribute_line(column, ash_type, enum_labels, diagnostics))

    if use_timestamps:
        lines += ["", "    timestamps()"]

    return lines + ["  end", ""]


def _identities_section(catalog: CatalogModel, diagnostics: list[Diagnostic]) -> list[str]:
    if not catalog.unique_constraints:
        return []

    lines = ["  identities do"]
    for uc in catalog.unique_constraints:
        if len(uc.columns) > 1:
            logger.warning("Multi-column unique %s %s: %s", uc.origin, uc.name, list(uc.columns))
            diagnostics.append(Diagnostic(
                kind="multi_column_unique", subject=uc.name,
                message=f"unique {uc.origin} over {list(uc.columns)}; verify the identity",
            ))
        identity = "unique_" + "_".join(uc.columns)
        lines.append(f"    identity {elixir_atom(identity)}, {elixir_atom_list(uc.columns)}")
    return lines + ["  end", ""]


def _relationship_lines(rel: MergedRelationship) -> list[str]:
    if not rel.resolved:
        lines = [f"    # TODO: {rel.kind} :{rel.name}, {rel.destination} - {rel.reason}"]
        if rel.kind == "belongs_to":
            lines.append("    # Add foreign key constraint or define manually")
        elif rel.kind == "has_many":
            lines.append(f"    # Verify the foreign key exists in {rel.destination} table")
        else:
            lines += [
                f"    # {rel.kind} :{rel.name}, {rel.destination} do",
                "    #   source_field :id",
                "    #   destination_field :source_table_id",
                "    # end",
            ]
        return lines

    if rel.kind == "many_to_many":
        return [
            f"    many_to_many {elixir_atom(rel.name)}, {rel.destination} do",
            f"      through {rel.through}",
            "    end",
        ]

    return [
        f"    {rel.kind} {elixir_atom(rel.name)}, {rel.destination} do",
        f"      source_field {elixir_atom(rel.source_field)}",
        f"      destination_field {elixir_atom(rel.destination_field)}",
        "    end",
    ]


def _relationships_section(relationships: list[MergedRelationship]) -> list[str]:
    if not relationships:
        return []

    lines = ["  relationships do"]
    resolved = [r for r in relationships if r.resolved]
    unresolved = [r for r in relationships if not r.resolved]
    for rel in resolved:
        lines += _relationship_lines(rel)
    if unresolved:
        lines.append("")
        for rel in unresolved:
            lines += _relationship_lines(rel)
    return lines + ["  end", ""]


def _actions_section() -> list[str]:
    return [
        "  actions do",
        f"    defaults {elixir_atom_list(DEFAULT_ACTIONS)}",
        "  end",
        "",
    ]


# ── Main entry point ──────────────────────────────────────────────────────────

def synthesize(
    catalog: CatalogModel,
    relationships: list[MergedRelationship],
    options: Optional[ResourceOptions] = None,
    type_map: TypeMap = DEFAULT_TYPE_MAP,
) -> tuple[str, list[Diagnostic]]:
    """Returns (resource source text, diagnostics raised while rendering)."""
    options = options or ResourceOptions()
    diagnostics: list[Diagnostic] = []
    module_name = moduleize(catalog.table_name, options.namespace)

    lines = _module_header(catalog.table_name, module_name, options)
    lines += _attributes_section(catalog, options, type_map, diagnostics)
    lines += _identities_section(catalog, diagnostics)
    lines += _relationships_section(relationships)
    lines += _actions_section()
    lines.append("end")

    return "\n".join(lines) + "\n", diagnostics
