from models.connection import ConnectionRequest  # noqa: F401
from models.catalog import (  # noqa: F401
    CatalogColumn, CatalogModel, EnumColumn, ForeignKeyConstraint, ReverseForeignKey, UniqueConstraint,
)
from models.legacy import Association, LegacyModel, MutationFunction, ValidationDirective  # noqa: F401
from models.resource import (  # noqa: F401
    Diagnostic, GenerationResult, GenerationSummary, MergedRelationship,
)
