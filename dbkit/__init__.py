"""
dbkit schema

Normalizes declarative YAML schema documents (collections with typed
fields, plus connections between them) into a cross-referenced model for
code generation and data-access layers.

Example usage:

    from dbkit import SchemaKit

    kit = SchemaKit()
    schema = kit.load("./schema.yml")

    user = schema.get_collection("User")
    user.fields["email"].length          # 255
    user.fields["schedule"].reference    # FieldReference(collection='Schedule', field='id')
    user.options.accessors["projects"]   # Accessor(child='Project', ...)

    # Referenced collections first
    from dbkit.schema import dependency_order
    dependency_order(schema)             # ['Schedule', 'User', 'Project']
"""

__version__ = "0.1.0"

from dbkit.api.client import SchemaKit
from dbkit.core.config import DbKitConfig, NormalizationConfig
from dbkit.core.exceptions import (
    ConfigurationError,
    DbKitError,
    DocumentError,
    DocumentNotFoundError,
    DocumentParseError,
    DuplicatePrimaryKeyError,
    FieldNameCollisionError,
    InvalidFieldDeclarationError,
    InvalidSigilError,
    MissingConnectionFieldError,
    SchemaError,
    UnknownCollectionError,
    UnknownTypeError,
)
from dbkit.core.models import (
    CURRENT_TIMESTAMP,
    Accessor,
    Collection,
    CollectionOptions,
    Connection,
    DataType,
    FieldReference,
    NormalizedSchema,
    SchemaField,
)
from dbkit.schema.pipeline import aload_schema, load_schema, normalize_document

__all__ = [
    # Version
    "__version__",
    # Main client
    "SchemaKit",
    # Entry points
    "normalize_document",
    "load_schema",
    "aload_schema",
    # Models
    "Collection",
    "CollectionOptions",
    "SchemaField",
    "FieldReference",
    "Connection",
    "Accessor",
    "DataType",
    "NormalizedSchema",
    "CURRENT_TIMESTAMP",
    # Config
    "DbKitConfig",
    "NormalizationConfig",
    # Exceptions
    "DbKitError",
    "ConfigurationError",
    "DocumentError",
    "DocumentNotFoundError",
    "DocumentParseError",
    "SchemaError",
    "UnknownTypeError",
    "UnknownCollectionError",
    "MissingConnectionFieldError",
    "InvalidSigilError",
    "FieldNameCollisionError",
    "DuplicatePrimaryKeyError",
    "InvalidFieldDeclarationError",
]
