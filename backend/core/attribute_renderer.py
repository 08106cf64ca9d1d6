"""
Attribute rendering — default-value translation and constraint assembly
for a single attribute declaration.
"""
import logging
import re
from typing import Optional, Sequence

logger = logging.getLogger(__name__)

DATETIME_DEFAULTS = {
    "utc_datetime": "&DateTime.utc_now/0",
    "naive_datetime": "&NaiveDateTime.utc_now/0",
}
NUMERIC_TYPES = {"integer", "float", "decimal"}

_CURRENT_TIMESTAMP = re.compile(r"\bnow\(\)|\bcurrent_timestamp\b", re.IGNORECASE)
_QUOTED_CAST = re.compile(r"^('(?:[^']|'')*')::.+$", re.DOTALL)
_BARE_CAST = re.compile(r"^([^:']+)::.+$")
_INTEGER = re.compile(r"^[-+]?\d+$")
_FLOAT = re.compile(r"^[-+]?(\d+\.\d*|\.\d+|\d+)([eE][-+]?\d+)?$")
_PLAIN_ATOM = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*[?!]?$")


# ── Elixir literals ───────────────────────────────────────────────────────────

def elixir_atom(value: str) -> str:
    """pending → :pending, "in progress" → :"in progress" """
    if _PLAIN_ATOM.match(value):
        return f":{value}"
    return ":" + elixir_string(value)


def elixir_string(value: str) -> str:
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("#{", "\\#{")
        .replace("\n", "\\n")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


def elixir_atom_list(values: Sequence[str]) -> str:
    return "[" + ", ".join(elixir_atom(v) for v in values) + "]"


def elixir_float(value: float) -> str:
    """1.5 → 1.5, 1e-05 → 1.0e-5, 1e+20 → 1.0e20

    Elixir float literals need digits on both sides of the point.
    """
    literal = repr(value)
    if "e" not in literal:
        return literal
    mantissa, exponent = literal.split("e")
    if "." not in mantissa:
        mantissa += ".0"
    return f"{mantissa}e{int(exponent)}"


# ── Defaults ──────────────────────────────────────────────────────────────────

def strip_cast(default: str) -> str:
    """'pending'::order_status → 'pending', 0::numeric → 0, (-1) → -1"""
    value = default.strip()
    for pattern in (_QUOTED_CAST, _BARE_CAST):
        m = pattern.match(value)
        if m:
            value = m.group(1).strip()
            break
    while value.startswith("(") and value.endswith(")"):
        value = value[1:-1].strip()
    return value


def unquote_sql_string(value: str) -> str:
    if len(value) >= 2 and value.startswith("'") and value.endswith("'"):
        value = value[1:-1]
    return value.replace("''", "'")


def is_sequence_default(default: Optional[str]) -> bool:
    return bool(default) and "nextval(" in default.lower()


def is_null_default(value: str) -> bool:
    """NULL::order_status is how the catalog spells DEFAULT NULL."""
    return value.upper() == "NULL"


def format_default(
    default: Optional[str],
    ash_type: str,
    enum_labels: Optional[Sequence[str]] = None,
) -> str:
    """Render the `, default: ...` suffix, or "" when the default cannot be carried over."""
    if default is None:
        return ""

    # Sequence-backed defaults are auto-increment artifacts, not literals
    if is_sequence_default(default):
        return ""

    if _CURRENT_TIMESTAMP.search(default):
        fn = DATETIME_DEFAULTS.get(ash_type)
        return f", default: {fn}" if fn else ""

    value = strip_cast(default)
    if is_null_default(value):
        return ""

    if enum_labels is not None:
        label = unquote_sql_string(value)
        if label in enum_labels:
            return f", default: {elixir_atom(label)}"
        logger.warning("Enum default %r is not one of %s, dropping it", label, list(enum_labels))
        return ""

    if ash_type == "string":
        if not (len(value) >= 2 and value.startswith("'") and value.endswith("'")):
            logger.debug("Non-literal string default %r omitted", default)
            return ""
        return f", default: {elixir_string(unquote_sql_string(value))}"

    if ash_type == "boolean":
        lowered = value.lower()
        if lowered in ("true", "false"):
            return f", default: {lowered}"
        return ""

    if ash_type in NUMERIC_TYPES:
        literal = unquote_sql_string(value)
        if _INTEGER.match(literal):
            return f", default: {int(literal)}"
        if _FLOAT.match(literal):
            return f", default: {elixir_float(float(literal))}"
        logger.debug("Non-literal numeric default %r omitted", default)
        return ""

    return ""


def enum_default_rejected(default: Optional[str], enum_labels: Optional[Sequence[str]]) -> bool:
    """True when an enum column has a literal default outside its label set."""
    if default is None or enum_labels is None:
        return False
    if is_sequence_default(default) or _CURRENT_TIMESTAMP.search(default):
        return False
    value = strip_cast(default)
    if is_null_default(value):
        return False
    return unquote_sql_string(value) not in enum_labels


# ── Constraints ───────────────────────────────────────────────────────────────

def build_constraints(
    ash_type: str,
    max_length: Optional[int] = None,
    precision: Optional[int] = None,
    scale: Optional[int] = None,
    enum_labels: Optional[Sequence[str]] = None,
) -> str:
    constraints = []

    if enum_labels is not None:
        constraints.append(f"one_of: {elixir_atom_list(enum_labels)}")

    if ash_type == "string" and max_length:
        constraints.append(f"max_length: {max_length}")

    if ash_type == "decimal" and precision:
        scale_part = f", scale: {scale}" if scale is not None else ""
        constraints.append(f"precision: {precision}{scale_part}")

    if not constraints:
        return ""
    return ", constraints: [" + ", ".join(constraints) + "]"
