"""
Reconciler — merge catalog relationship edges with legacy associations.

Catalog facts are authoritative: every foreign key becomes a belongs_to and
every reverse foreign key a has_many. Legacy associations only contribute
names, and each legacy association can name at most one catalog edge
(first unconsumed match wins). Anything the catalog cannot confirm is kept
as an unresolved directive instead of being dropped.
"""
import logging
from typing import Optional

from core.naming import infer_relationship_name, module_to_table_name, moduleize, pluralize
from models.catalog import CatalogModel
from models.legacy import Association, LegacyModel
from models.resource import Diagnostic, MergedRelationship

logger = logging.getLogger(__name__)

NO_REFERENCING_COLUMN = "no referencing column found"
NO_REVERSE_FOREIGN_KEY = "no reverse foreign key found"
DEFINE_MANUALLY = "must be defined manually"


def through_resource(join_through: str, namespace: str) -> str:
    """join_through may be a table name ("posts_tags") or a module (MyApp.PostTag)."""
    if join_through[:1].isupper():
        return f"{namespace}.{join_through.split('.')[-1]}" if namespace else join_through.split(".")[-1]
    return moduleize(join_through, namespace)


def _claim(candidates: list[Association], consumed: set[int], matches) -> Optional[Association]:
    for assoc in candidates:
        if id(assoc) not in consumed and matches(assoc):
            consumed.add(id(assoc))
            return assoc
    return None


def reconcile(
    catalog: CatalogModel,
    legacy: LegacyModel,
    namespace: str = "",
) -> tuple[list[MergedRelationship], list[Diagnostic]]:
    """Returns (relationships, diagnostics) in rendering order."""
    belongs_to = legacy.associations_of("belongs_to")
    has_many = legacy.associations_of("has_many")
    consumed: set[int] = set()
    relationships: list[MergedRelationship] = []

    # ── belongs_to from foreign keys ─────────────────────────────────────────
    for fk in catalog.foreign_keys:
        match = _claim(belongs_to, consumed, lambda a: f"{a.name}_id" == fk.column)
        name = match.name if match else infer_relationship_name(fk.column, fk.referenced_table)
        relationships.append(MergedRelationship(
            kind="belongs_to",
            name=name,
            destination=moduleize(fk.referenced_table, namespace),
            source_field=fk.column,
            destination_field=fk.referenced_column,
        ))

    # ── has_many from reverse foreign keys ───────────────────────────────────
    for rfk in catalog.reverse_foreign_keys:
        match = _claim(has_many, consumed, lambda a: module_to_table_name(a.module) == rfk.source_table)
        name = match.name if match else pluralize(rfk.source_table)
        relationships.append(MergedRelationship(
            kind="has_many",
            name=name,
            destination=moduleize(rfk.source_table, namespace),
            source_field=rfk.target_column,
            destination_field=rfk.source_column,
        ))

    # ── many_to_many, verbatim from the legacy schema ────────────────────────
    for assoc in legacy.associations_of("many_to_many"):
        relationships.append(MergedRelationship(
            kind="many_to_many",
            name=assoc.name,
            destination=assoc.module,
            through=through_resource(assoc.join_through or assoc.name, namespace),
            origin="legacy",
        ))

    diagnostics = _duplicate_names(relationships)

    # ── unresolved legacy directives, in extraction order ────────────────────
    for assoc in legacy.associations:
        if assoc.kind == "many_to_many" or id(assoc) in consumed:
            continue
        reason = {
            "belongs_to": NO_REFERENCING_COLUMN,
            "has_many": NO_REVERSE_FOREIGN_KEY,
            "has_one": DEFINE_MANUALLY,
        }[assoc.kind]
        relationships.append(MergedRelationship(
            kind=assoc.kind,
            name=assoc.name,
            destination=assoc.module,
            resolved=False,
            origin="legacy",
            reason=reason,
        ))
        diagnostics.append(Diagnostic(
            kind="unresolved_relationship",
            subject=assoc.name,
            message=f"{assoc.kind} :{assoc.name}, {assoc.module} - {reason}",
        ))
        logger.warning("Unresolved %s :%s (%s)", assoc.kind, assoc.name, reason)

    return relationships, diagnostics


def _duplicate_names(relationships: list[MergedRelationship]) -> list[Diagnostic]:
    seen: set[str] = set()
    diagnostics = []
    for rel in relationships:
        if rel.name in seen:
            diagnostics.append(Diagnostic(
                kind="duplicate_relationship_name",
                subject=rel.name,
                message=f"more than one relationship is named :{rel.name}; rename one of them",
            ))
        seen.add(rel.name)
    return diagnostics
