"""CLI entrypoint: generate an Ash resource from an existing table.

    resourcegen users
    resourcegen users lib/my_app/ash_resources
    resourcegen users lib/my_app/ash_resources --legacy-schema lib/my_app/accounts/user.ex
"""
import argparse
import logging
import sys
from typing import Optional

from config import settings
from core.errors import CatalogUnavailable, TableNotFound
from core.resource_generator import generate_resource
from models.resource import GenerationResult

logger = logging.getLogger(__name__)

USAGE = "Usage: resourcegen <table_name> [output_directory] [--legacy-schema path/to/schema.ex]"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resourcegen",
        description="Generate an Ash resource by introspecting a table and, optionally, its Ecto schema.",
    )
    parser.add_argument("table_name", nargs="?", help="Table to introspect")
    parser.add_argument("output_dir", nargs="?", default=None,
                        help=f"Output directory (default: {settings.OUTPUT_DIR})")
    parser.add_argument("-e", "--legacy-schema", "--ecto-schema", dest="legacy_schema",
                        help="Existing Ecto schema to mine for associations and validations")
    parser.add_argument("--schema", default=None,
                        help=f"Catalog schema (default: {settings.CATALOG_SCHEMA})")
    parser.add_argument("--stdout", action="store_true", help="Print the resource instead of writing it")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="Logging level")
    return parser


def print_summary(result: GenerationResult, legacy_supplied: bool) -> None:
    s = result.summary
    print("\n📊 Summary:")
    print(f"   • {s.columns} columns")
    print(f"   • {s.primary_keys} primary key(s)")
    print(f"   • {s.foreign_keys} foreign key(s)")
    print(f"   • {s.unique_constraints} unique constraint(s)")
    print(f"   • {s.enum_types} enum type(s)")
    if legacy_supplied:
        print(f"   • {s.virtual_fields} virtual field(s) from Ecto")
        print(f"   • {s.validations} validation(s) from Ecto")
        print(f"   • {s.associations} association(s) from Ecto")
    if result.diagnostics:
        print(f"\n⚠️  {len(result.diagnostics)} item(s) need review:")
        for d in result.diagnostics:
            print(f"   • {d}")


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    if not args.table_name:
        print(USAGE, file=sys.stderr)
        return 1

    try:
        result = generate_resource(
            args.table_name,
            output_dir=args.output_dir,
            legacy_schema_path=args.legacy_schema,
            schema=args.schema,
            write=not args.stdout,
        )
    except TableNotFound as e:
        print(f"❌ {e}", file=sys.stderr)
        return 2
    except CatalogUnavailable as e:
        logger.error("Catalog unavailable: %s", e)
        print(f"❌ Catalog unavailable: {e}", file=sys.stderr)
        return 2

    if args.stdout:
        print(result.content)
    else:
        print(f"✅ File written: {result.output_path}")
    print_summary(result, legacy_supplied=bool(args.legacy_schema))
    return 0


if __name__ == "__main__":
    sys.exit(main())
