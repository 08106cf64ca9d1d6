"""
Catalog reader — read-only introspection of one PostgreSQL table.

Issues the six catalog query shapes (columns, primary key, foreign keys,
unique constraints/indexes, enum labels, reverse foreign keys) over a single
SQLAlchemy connection and folds the rows into a CatalogModel.
"""
import logging
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from core.errors import CatalogUnavailable, TableNotFound
from models.catalog import (
    CatalogColumn, CatalogModel, EnumColumn, ForeignKeyConstraint, ReverseForeignKey, UniqueConstraint,
)

logger = logging.getLogger(__name__)


# ── Catalog queries ───────────────────────────────────────────────────────────

COLUMNS_SQL = text("""
    SELECT
      column_name,
      data_type,
      is_nullable,
      column_default,
      character_maximum_length,
      numeric_precision,
      numeric_scale,
      udt_name,
      ordinal_position
    FROM information_schema.columns
    WHERE table_schema = :schema AND table_name = :table
    ORDER BY ordinal_position
""")

PRIMARY_KEY_SQL = text("""
    SELECT kcu.column_name
    FROM information_schema.table_constraints tc
    JOIN information_schema.key_column_usage kcu
      ON tc.constraint_name = kcu.constraint_name
     AND tc.table_schema = kcu.table_schema
    WHERE tc.table_schema = :schema
      AND tc.table_name = :table
      AND tc.constraint_type = 'PRIMARY KEY'
    ORDER BY kcu.ordinal_position
""")

# Composite keys pair each local column with the referenced column at the
# same position of the referenced unique constraint.
FOREIGN_KEYS_SQL = text("""
    SELECT
      kcu.column_name,
      rkcu.table_name AS foreign_table,
      rkcu.column_name AS foreign_column,
      tc.constraint_name
    FROM information_schema.table_constraints AS tc
    JOIN information_schema.key_column_usage AS kcu
      ON tc.constraint_name = kcu.constraint_name
     AND tc.table_schema = kcu.table_schema
    JOIN information_schema.referential_constraints AS rc
      ON rc.constraint_name = tc.constraint_name
     AND rc.constraint_schema = tc.table_schema
    JOIN information_schema.key_column_usage AS rkcu
      ON rkcu.constraint_name = rc.unique_constraint_name
     AND rkcu.constraint_schema = rc.unique_constraint_schema
     AND rkcu.ordinal_position = kcu.position_in_unique_constraint
    JOIN information_schema.columns AS c
      ON c.table_schema = kcu.table_schema
     AND c.table_name = kcu.table_name
     AND c.column_name = kcu.column_name
    WHERE tc.table_schema = :schema
      AND tc.table_name = :table
      AND tc.constraint_type = 'FOREIGN KEY'
    ORDER BY c.ordinal_position, kcu.ordinal_position
""")

UNIQUE_CONSTRAINTS_SQL = text("""
    SELECT
      tc.constraint_name AS name,
      array_agg(kcu.column_name::text ORDER BY kcu.ordinal_position) AS columns
    FROM information_schema.table_constraints tc
    JOIN information_schema.key_column_usage kcu
      ON tc.constraint_name = kcu.constraint_name
     AND tc.table_schema = kcu.table_schema
    WHERE tc.table_schema = :schema
      AND tc.table_name = :table
      AND tc.constraint_type = 'UNIQUE'
    GROUP BY tc.constraint_name
    ORDER BY tc.constraint_name
""")

UNIQUE_INDEXES_SQL = text("""
    SELECT
      i.relname AS name,
      array_agg(a.attname::text ORDER BY array_position(ix.indkey, a.attnum)) AS columns
    FROM pg_class t
    JOIN pg_namespace n ON n.oid = t.relnamespace
    JOIN pg_index ix ON t.oid = ix.indrelid
    JOIN pg_class i ON i.oid = ix.indexrelid
    JOIN pg_attribute a ON a.attrelid = t.oid AND a.attnum = ANY(ix.indkey)
    WHERE n.nspname = :schema
      AND t.relname = :table
      AND ix.indisunique = true
      AND ix.indisprimary = false
    GROUP BY i.relname
    ORDER BY i.relname
""")

ENUMS_SQL = text("""
    SELECT
      c.column_name,
      t.typname,
      array_agg(e.enumlabel::text ORDER BY e.enumsortorder) AS enum_values
    FROM information_schema.columns c
    JOIN pg_type t ON c.udt_name = t.typname
    JOIN pg_namespace tn ON tn.oid = t.typnamespace AND tn.nspname = c.udt_schema
    JOIN pg_enum e ON t.oid = e.enumtypid
    WHERE c.table_schema = :schema AND c.table_name = :table
    GROUP BY c.column_name, t.typname, c.ordinal_position
    ORDER BY c.ordinal_position
""")

REVERSE_FOREIGN_KEYS_SQL = text("""
    SELECT
      kcu.table_name AS source_table,
      kcu.column_name AS source_column,
      rkcu.column_name AS target_column
    FROM information_schema.referential_constraints AS rc
    JOIN information_schema.key_column_usage AS kcu
      ON kcu.constraint_name = rc.constraint_name
     AND kcu.constraint_schema = rc.constraint_schema
    JOIN information_schema.key_column_usage AS rkcu
      ON rkcu.constraint_name = rc.unique_constraint_name
     AND rkcu.constraint_schema = rc.unique_constraint_schema
     AND rkcu.ordinal_position = kcu.position_in_unique_constraint
    WHERE rkcu.table_schema = :schema
      AND rkcu.table_name = :table
    ORDER BY kcu.table_name, rc.constraint_name, kcu.ordinal_position
""")


def _fetch(conn, query, table_name: str, schema: str) -> list:
    """Run one catalog query; any driver/SQL failure is fatal for the run."""
    try:
        rows = conn.execute(query, {"schema": schema, "table": table_name}).mappings().all()
    except SQLAlchemyError as e:
        raise CatalogUnavailable(f"Catalog query failed for {schema}.{table_name}: {e}") from e
    logger.debug("Catalog query returned %d rows for %s.%s", len(rows), schema, table_name)
    return rows


# ── Per-shape readers ─────────────────────────────────────────────────────────

def read_columns(conn, table_name: str, schema: str = "public") -> list[CatalogColumn]:
    rows = _fetch(conn, COLUMNS_SQL, table_name, schema)
    columns = [
        CatalogColumn(
            name=r["column_name"],
            data_type=r["data_type"],
            is_nullable=r["is_nullable"] == "YES",
            column_default=r["column_default"],
            character_maximum_length=r["character_maximum_length"],
            numeric_precision=r["numeric_precision"],
            numeric_scale=r["numeric_scale"],
            udt_name=r["udt_name"],
            ordinal_position=r["ordinal_position"],
        )
        for r in rows
    ]
    return sorted(columns, key=lambda c: c.ordinal_position)


def read_primary_key(conn, table_name: str, schema: str = "public") -> list[str]:
    return [r["column_name"] for r in _fetch(conn, PRIMARY_KEY_SQL, table_name, schema)]


def read_foreign_keys(conn, table_name: str, schema: str = "public") -> list[ForeignKeyConstraint]:
    return [
        ForeignKeyConstraint(
            column=r["column_name"],
            referenced_table=r["foreign_table"],
            referenced_column=r["foreign_column"],
            constraint_name=r["constraint_name"],
        )
        for r in _fetch(conn, FOREIGN_KEYS_SQL, table_name, schema)
    ]


def read_unique_constraints(conn, table_name: str, schema: str = "public") -> list[UniqueConstraint]:
    """Union named UNIQUE constraints with unique indexes, de-duplicated by column set.

    A UNIQUE constraint is backed by an index of the same name, so the index
    scan usually restates every constraint; the constraint entry is kept.
    """
    found = [
        UniqueConstraint(name=r["name"], columns=tuple(r["columns"]), origin="constraint")
        for r in _fetch(conn, UNIQUE_CONSTRAINTS_SQL, table_name, schema)
    ] + [
        UniqueConstraint(name=r["name"], columns=tuple(r["columns"]), origin="index")
        for r in _fetch(conn, UNIQUE_INDEXES_SQL, table_name, schema)
    ]

    unique: list[UniqueConstraint] = []
    seen: set[frozenset[str]] = set()
    for uc in found:
        if uc.column_set in seen:
            logger.debug("Skipping %s %s: duplicate column set %s", uc.origin, uc.name, list(uc.columns))
            continue
        seen.add(uc.column_set)
        unique.append(uc)

    if unique:
        logger.info("Found unique constraints/indexes on %s:", table_name)
        for uc in unique:
            logger.info("  • %s: %s on %s", uc.origin, uc.name, list(uc.columns))
    else:
        logger.info("No unique constraints or indexes found on %s", table_name)
    return unique


def read_enum_columns(conn, table_name: str, schema: str = "public") -> list[EnumColumn]:
    return [
        EnumColumn(column_name=r["column_name"], type_name=r["typname"], labels=tuple(r["enum_values"]))
        for r in _fetch(conn, ENUMS_SQL, table_name, schema)
    ]


def read_reverse_foreign_keys(conn, table_name: str, schema: str = "public") -> list[ReverseForeignKey]:
    return [
        ReverseForeignKey(
            source_table=r["source_table"],
            source_column=r["source_column"],
            target_column=r["target_column"],
        )
        for r in _fetch(conn, REVERSE_FOREIGN_KEYS_SQL, table_name, schema)
    ]


# ── Main entry point ──────────────────────────────────────────────────────────

def read_catalog(conn, table_name: str, schema: str = "public") -> CatalogModel:
    """
    Introspect a single table.
    Raises CatalogUnavailable on any query failure, TableNotFound if the
    table has no columns.
    """
    logger.info("Introspecting %s.%s", schema, table_name)
    columns = read_columns(conn, table_name, schema)
    if not columns:
        raise TableNotFound(table_name, schema)

    logger.info("Found %d columns:", len(columns))
    for c in columns:
        logger.info("  • %s: %s (nullable: %s, default: %r)", c.name, c.data_type, c.is_nullable, c.column_default)

    # belongs_to edges follow the local columns' order
    position = {c.name: c.ordinal_position for c in columns}
    foreign_keys = sorted(
        read_foreign_keys(conn, table_name, schema),
        key=lambda fk: position.get(fk.column, len(position) + 1),
    )

    return CatalogModel(
        table_name=table_name,
        schema_name=schema,
        columns=columns,
        primary_key=read_primary_key(conn, table_name, schema),
        foreign_keys=foreign_keys,
        unique_constraints=read_unique_constraints(conn, table_name, schema),
        enum_columns=read_enum_columns(conn, table_name, schema),
        reverse_foreign_keys=read_reverse_foreign_keys(conn, table_name, schema),
    )


def read_catalog_from_engine(engine, table_name: str, schema: str = "public") -> CatalogModel:
    """Open one connection for the whole introspection and release it afterwards."""
    try:
        with engine.connect() as conn:
            return read_catalog(conn, table_name, schema)
    except SQLAlchemyError as e:
        raise CatalogUnavailable(f"Could not connect to database: {e}") from e
