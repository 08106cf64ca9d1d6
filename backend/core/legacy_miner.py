"""
Legacy schema miner — pattern scans over an Ecto schema module.

Each directive kind has its own independent scan over the same immutable
text, so no scan can change what another one finds. Mining never raises:
a missing, unreadable or unparseable file yields an empty LegacyModel plus
a diagnostic.
"""
import logging
import re
from pathlib import Path
from typing import Optional

from models.legacy import Association, LegacyModel, MutationFunction, ValidationDirective
from models.resource import Diagnostic

logger = logging.getLogger(__name__)

# Module aliases start with an upper-case letter, which keeps option keywords
# such as `has_many :tags, through: [...]` out of the association scans.
_MODULE = r"([A-Z][\w.]*)"

VIRTUAL_FIELD_RE = re.compile(r"field\s+:(\w+),\s*:\w+,\s*virtual:\s*true")
DECLARED_TABLE_RE = re.compile(r"\bschema\s+\"([^\"]+)\"")

ASSOCIATION_RES = {
    "belongs_to": re.compile(rf"\bbelongs_to\s+:(\w+),\s*{_MODULE}"),
    "has_many": re.compile(rf"\bhas_many\s+:(\w+),\s*{_MODULE}"),
    "has_one": re.compile(rf"\bhas_one\s+:(\w+),\s*{_MODULE}"),
}
MANY_TO_MANY_RE = re.compile(rf"\bmany_to_many\s+:(\w+),\s*{_MODULE},\s*join_through:\s*\"?([\w.]+)\"?")

# Both `validate_required(changeset, [...])` and the piped `|> validate_required([...])`
REQUIRED_RE = re.compile(r"validate_required\((?:\w+,\s*)?\[([^\]]+)\]")
FIELD_VALIDATION_RES = {
    "length": re.compile(r"validate_length\((?:\w+,\s*)?:(\w+),\s*(.+?)\)"),
    "format": re.compile(r"validate_format\((?:\w+,\s*)?:(\w+),\s*(.+?)\)"),
    "inclusion": re.compile(r"validate_inclusion\((?:\w+,\s*)?:(\w+),\s*(.+?)\)"),
    "number": re.compile(r"validate_number\((?:\w+,\s*)?:(\w+),\s*(.+?)\)"),
}
# The body runs up to the `end` aligned with its `def`
CHANGESET_RE = re.compile(
    r"^([ \t]*)def\s+(\w*changeset)\([^)]*\)\s+do[ \t]*\n(.*?)^\1end\b",
    re.DOTALL | re.MULTILINE,
)


# ── Individual scans ──────────────────────────────────────────────────────────

def extract_virtual_fields(content: str) -> list[str]:
    return VIRTUAL_FIELD_RE.findall(content)


def extract_declared_table(content: str) -> Optional[str]:
    m = DECLARED_TABLE_RE.search(content)
    return m.group(1) if m else None


def extract_associations(content: str) -> list[Association]:
    """All belongs_to, then has_many, has_one and many_to_many, each in source order."""
    associations = [
        Association(kind=kind, name=name, module=module)
        for kind, pattern in ASSOCIATION_RES.items()
        for name, module in pattern.findall(content)
    ]
    associations += [
        Association(kind="many_to_many", name=name, module=module, join_through=join_table)
        for name, module, join_table in MANY_TO_MANY_RE.findall(content)
    ]
    return associations


def extract_validations(content: str) -> list[ValidationDirective]:
    validations = []
    for field_list in REQUIRED_RE.findall(content):
        for field in field_list.split(","):
            field = field.strip().strip(":")
            if field:
                validations.append(ValidationDirective(kind="required", field=field))

    for kind, pattern in FIELD_VALIDATION_RES.items():
        validations += [
            ValidationDirective(kind=kind, field=field, options=opts.strip())
            for field, opts in pattern.findall(content)
        ]
    return validations


def extract_changesets(content: str) -> list[MutationFunction]:
    changesets = [
        MutationFunction(name=name, body=body.strip())
        for _indent, name, body in CHANGESET_RE.findall(content)
    ]
    logger.info("Found changesets: %s", [c.name for c in changesets])
    return changesets


# ── Main entry points ─────────────────────────────────────────────────────────

def mine_legacy_schema(
    content: Optional[str],
    source_path: Optional[str] = None,
) -> tuple[LegacyModel, list[Diagnostic]]:
    """Mine raw schema text. Returns (model, diagnostics); never raises."""
    if content is None:
        return LegacyModel(source_path=source_path), []

    try:
        model = LegacyModel(
            source_path=source_path,
            declared_table=extract_declared_table(content),
            virtual_fields=extract_virtual_fields(content),
            associations=extract_associations(content),
            validations=extract_validations(content),
            mutation_functions=extract_changesets(content),
        )
    except Exception as e:
        logger.warning("Could not parse legacy schema at %s: %s", source_path or "<text>", e)
        return LegacyModel(source_path=source_path), [Diagnostic(
            kind="legacy_schema_unparseable",
            subject=source_path or "<text>",
            message=f"mining failed ({e}); continuing without legacy facts",
        )]
    return model, []


def load_legacy_schema(path: Optional[str]) -> tuple[LegacyModel, list[Diagnostic]]:
    """Read and mine a schema file. Absent path → empty model, no diagnostics."""
    if not path:
        return LegacyModel(), []

    file_path = Path(path)
    try:
        content = file_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.warning("Legacy schema file not found: %s", path)
        return LegacyModel(source_path=path), [Diagnostic(
            kind="legacy_schema_unavailable",
            subject=path,
            message="file not found; continuing without legacy facts",
        )]
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read legacy schema at %s: %s", path, e)
        return LegacyModel(source_path=path), [Diagnostic(
            kind="legacy_schema_unavailable",
            subject=path,
            message=f"unreadable ({e}); continuing without legacy facts",
        )]

    logger.info("Using legacy schema: %s", path)
    return mine_legacy_schema(content, source_path=path)
