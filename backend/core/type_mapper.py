"""
Type mapper — native PostgreSQL type names → Ash attribute type tags.

The lookup table is an explicit immutable TypeMap value so a caller can swap
or extend the vocabulary without touching module state.
"""
import logging
from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from models.resource import Diagnostic

logger = logging.getLogger(__name__)

ENUM_TYPE = "atom"
FALLBACK_TYPE = "string"


class TypeMap:
    """Read-only, case-insensitive native-type → target-type lookup."""

    def __init__(self, entries: Mapping[str, str]):
        self._entries = MappingProxyType({k.lower(): v for k, v in entries.items()})

    def lookup(self, type_name: Optional[str]) -> Optional[str]:
        if not type_name:
            return None
        return self._entries.get(type_name.lower())

    def with_entries(self, **overrides: str) -> "TypeMap":
        return TypeMap({**self._entries, **overrides})

    def __contains__(self, type_name: str) -> bool:
        return self.lookup(type_name) is not None

    def __len__(self) -> int:
        return len(self._entries)


DEFAULT_TYPE_MAP = TypeMap({
    "character varying": "string",
    "varchar": "string",
    "character": "string",
    "text": "string",
    "citext": "string",                     # case-insensitive text
    "uuid": "uuid",
    "integer": "integer",
    "bigint": "integer",
    "smallint": "integer",
    "int4": "integer",
    "int8": "integer",
    "int2": "integer",
    "serial": "integer",
    "bigserial": "integer",
    "smallserial": "integer",
    "boolean": "boolean",
    "bool": "boolean",
    "timestamp with time zone": "utc_datetime",
    "timestamptz": "utc_datetime",
    "timestamp without time zone": "naive_datetime",
    "timestamp": "naive_datetime",
    "date": "date",
    "time": "time",
    "time without time zone": "time",
    "jsonb": "map",
    "json": "map",
    "double precision": "float",
    "float8": "float",
    "real": "float",
    "float4": "float",
    "numeric": "decimal",
    "decimal": "decimal",
    "money": "decimal",
    "bytea": "binary",
    "inet": "string",
    "cidr": "string",
    "macaddr": "string",
    "point": "string",
    "box": "string",
    "path": "string",
    "polygon": "string",
    "circle": "string",
    "interval": "string",
    "bit": "string",
    "bit varying": "string",
    "varbit": "string",
})


def map_type(
    data_type: str,
    udt_name: Optional[str] = None,
    enum_labels: Optional[Sequence[str]] = None,
    type_map: TypeMap = DEFAULT_TYPE_MAP,
    column_name: str = "",
) -> tuple[str, Optional[Diagnostic]]:
    """Returns (type_tag, diagnostic). The diagnostic is set only for unmapped types."""
    if enum_labels is not None:
        return ENUM_TYPE, None

    tag = type_map.lookup(data_type) or type_map.lookup(udt_name)
    if tag:
        return tag, None

    logger.warning("Unknown type: %s (%s), defaulting to :%s", data_type, udt_name, FALLBACK_TYPE)
    return FALLBACK_TYPE, Diagnostic(
        kind="unmapped_type",
        subject=column_name or data_type,
        message=f"unknown type {data_type} ({udt_name}), defaulted to :{FALLBACK_TYPE}",
    )
