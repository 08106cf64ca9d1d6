"""
Resource generator — one end-to-end run for a single table.

Catalog introspection and legacy mining run as two independent tasks; their
results are reconciled, synthesized and written to <output_dir>/<table>.ex.
A catalog failure aborts the run before anything is written.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

from config import settings
from core.catalog_reader import read_catalog_from_engine
from core.db_connector import create_engine_from_request
from core.legacy_miner import load_legacy_schema
from core.naming import moduleize
from core.reconciler import reconcile
from core.synthesizer import ResourceOptions, synthesize
from core.type_mapper import DEFAULT_TYPE_MAP, TypeMap
from models.catalog import CatalogModel
from models.connection import ConnectionRequest
from models.legacy import LegacyModel
from models.resource import Diagnostic, GenerationResult, GenerationSummary

logger = logging.getLogger(__name__)


def output_path_for(table_name: str, output_dir: str) -> Path:
    return Path(output_dir).expanduser() / f"{table_name}.ex"


def summarize(catalog: CatalogModel, legacy: Optional[LegacyModel]) -> GenerationSummary:
    summary = GenerationSummary(
        columns=len(catalog.columns),
        primary_keys=len(catalog.primary_key),
        foreign_keys=len(catalog.foreign_keys),
        unique_constraints=len(catalog.unique_constraints),
        enum_types=len(catalog.enum_columns),
    )
    if legacy is not None:
        summary.virtual_fields = len(legacy.virtual_fields)
        summary.validations = len(legacy.validations)
        summary.associations = len(legacy.associations)
        summary.mutation_functions = len(legacy.mutation_functions)
    return summary


def build_resource(
    catalog: CatalogModel,
    legacy: LegacyModel,
    options: Optional[ResourceOptions] = None,
    type_map: TypeMap = DEFAULT_TYPE_MAP,
) -> tuple[str, list[Diagnostic]]:
    """Pure part of a run: reconcile and synthesize. Returns (content, diagnostics)."""
    options = options or ResourceOptions()
    diagnostics: list[Diagnostic] = []

    if legacy.declared_table and legacy.declared_table != catalog.table_name:
        diagnostics.append(Diagnostic(
            kind="table_name_mismatch",
            subject=legacy.source_path or catalog.table_name,
            message=f'legacy schema declares table "{legacy.declared_table}", generating "{catalog.table_name}"',
        ))

    relationships, rel_diagnostics = reconcile(catalog, legacy, options.namespace)
    content, render_diagnostics = synthesize(catalog, relationships, options, type_map)
    return content, diagnostics + rel_diagnostics + render_diagnostics


def generate_resource(
    table_name: str,
    output_dir: Optional[str] = None,
    legacy_schema_path: Optional[str] = None,
    conn_req: Optional[ConnectionRequest] = None,
    schema: Optional[str] = None,
    options: Optional[ResourceOptions] = None,
    type_map: TypeMap = DEFAULT_TYPE_MAP,
    write: bool = True,
) -> GenerationResult:
    """
    Run one generation for `table_name`.
    Raises CatalogUnavailable (or TableNotFound) if the catalog cannot be read.
    """
    conn_req = conn_req or ConnectionRequest.from_settings(settings)
    schema = schema or settings.CATALOG_SCHEMA
    options = options or ResourceOptions.from_settings(settings)
    output_dir = output_dir or settings.OUTPUT_DIR
    path = output_path_for(table_name, output_dir)

    logger.info("Introspecting `%s` → %s", table_name, path)
    engine = create_engine_from_request(conn_req)
    try:
        with ThreadPoolExecutor(max_workers=2) as pool:
            catalog_task = pool.submit(read_catalog_from_engine, engine, table_name, schema)
            legacy_task = pool.submit(load_legacy_schema, legacy_schema_path)
            legacy, legacy_diagnostics = legacy_task.result()
            catalog = catalog_task.result()
    finally:
        engine.dispose()

    content, diagnostics = build_resource(catalog, legacy, options, type_map)
    diagnostics = legacy_diagnostics + diagnostics

    written: Optional[str] = None
    if write:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        written = str(path)
        logger.info("File written: %s", written)

    return GenerationResult(
        table_name=table_name,
        module_name=moduleize(table_name, options.namespace),
        output_path=written,
        content=content,
        summary=summarize(catalog, legacy if legacy_schema_path else None),
        diagnostics=diagnostics,
    )
