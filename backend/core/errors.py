"""Errors that abort a generation run."""


class CatalogUnavailable(Exception):
    """The catalog could not be reached or a catalog query failed."""


class TableNotFound(CatalogUnavailable):
    """The catalog holds no columns for the requested table."""

    def __init__(self, table_name: str, schema_name: str):
        self.table_name = table_name
        self.schema_name = schema_name
        super().__init__(f"Table '{schema_name}.{table_name}' not found in catalog")
