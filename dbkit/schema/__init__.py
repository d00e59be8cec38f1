"""Schema loading and normalization."""

from dbkit.schema.collections import normalize_collection, normalize_options
from dbkit.schema.connections import normalize_connection, wire_connections
from dbkit.schema.fields import is_reference, normalize_field
from dbkit.schema.loader import (
    aload_document,
    load_document,
    parse_document,
    save_schema_to_yaml,
)
from dbkit.schema.partition import PartitionedDocument, partition_document
from dbkit.schema.pipeline import (
    aload_schema,
    dependency_graph,
    dependency_order,
    load_schema,
    normalize_document,
)
from dbkit.schema.references import resolve_references
from dbkit.schema.types import DEFAULT_TYPE_REGISTRY, TypeRegistry

__all__ = [
    # Loading
    "load_document",
    "aload_document",
    "parse_document",
    "save_schema_to_yaml",
    # Pipeline stages
    "partition_document",
    "PartitionedDocument",
    "normalize_field",
    "is_reference",
    "normalize_collection",
    "normalize_options",
    "resolve_references",
    "normalize_connection",
    "wire_connections",
    # Entry points
    "normalize_document",
    "load_schema",
    "aload_schema",
    "dependency_graph",
    "dependency_order",
    # Types
    "TypeRegistry",
    "DEFAULT_TYPE_REGISTRY",
]
