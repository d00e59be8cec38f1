"""Collection normalization: options, primary keys and service fields."""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from pydantic import ValidationError

from dbkit.core.config import NormalizationConfig
from dbkit.core.exceptions import (
    DuplicatePrimaryKeyError,
    FieldNameCollisionError,
    SchemaError,
    UnknownTypeError,
)
from dbkit.core.models import CURRENT_TIMESTAMP, Collection, CollectionOptions, SchemaField
from dbkit.schema.fields import FLAG, is_reference, normalize_field, strip_sigil
from dbkit.schema.types import DEFAULT_TYPE_REGISTRY, INT, TIMESTAMP, TypeRegistry

logger = logging.getLogger(__name__)


def primary_key_field() -> SchemaField:
    """Service field synthesized when a collection declares no primary key."""
    return SchemaField(
        type=INT,
        primary=True,
        auto_increment=True,
        optional=False,
        read_only=True,
        hidden=False,
        service=True,
    )


def created_at_field() -> SchemaField:
    return SchemaField(type=TIMESTAMP, read_only=True, service=True, optional=False)


def updated_at_field() -> SchemaField:
    return SchemaField(
        type=TIMESTAMP,
        read_only=True,
        service=True,
        optional=False,
        default=CURRENT_TIMESTAMP,
        on_update=CURRENT_TIMESTAMP,
    )


def _add_service_field(
    collection: Collection,
    name: str,
    field: SchemaField,
    registry: TypeRegistry,
) -> None:
    if field.type not in registry:
        raise UnknownTypeError(field.type, collection=collection.name, field=name)
    collection.add_field(name, field)


def normalize_options(
    name: str,
    raw_options: Mapping[str, Any],
    config: NormalizationConfig,
) -> CollectionOptions:
    """
    Fill collection option defaults.

    `createdAt`/`updatedAt` are only set when `timestamps` is true.
    """
    collection_name = raw_options.get("collectionName") or name

    try:
        timestamps = FLAG.validate_python(raw_options.get("timestamps") or False)
        return CollectionOptions(
            collection_name=collection_name,
            table_name=raw_options.get("tableName") or collection_name,
            timestamps=timestamps,
            created_at=(raw_options.get("createdAt") or config.created_at) if timestamps else None,
            updated_at=(raw_options.get("updatedAt") or config.updated_at) if timestamps else None,
            is_tree=raw_options.get("isTree") or False,
        )
    except ValidationError as e:
        raise SchemaError(
            f"Invalid options for collection '{name}'",
            {"collection": name, "errors": str(e)},
        ) from e


def normalize_collection(
    name: str,
    raw: Mapping[str, Any],
    registry: TypeRegistry = DEFAULT_TYPE_REGISTRY,
    config: Optional[NormalizationConfig] = None,
) -> Collection:
    """
    Normalize one raw collection declaration.

    Declared fields keep their order; a missing primary key and the
    timestamp fields are appended after them. Reference shorthands are
    held in place for the reference resolver.

    Args:
        name: Declared collection name
        raw: Raw declaration with `fields` and `options`
        registry: Type registry
        config: Normalization defaults

    Returns:
        Collection with pending references still unresolved

    Raises:
        UnknownTypeError: If any field declares an unregistered type
        DuplicatePrimaryKeyError: If more than one field is primary
        FieldNameCollisionError: If a service field name is already declared
        SchemaError: If options are malformed or `primaryKey` names a field
            other than the one declared primary
    """
    config = config or NormalizationConfig()

    raw_fields = raw.get("fields") or {}
    raw_options = raw.get("options") or {}
    if not isinstance(raw_fields, Mapping) or not isinstance(raw_options, Mapping):
        raise SchemaError(
            f"Collection '{name}' must declare fields and options as mappings",
            {"collection": name},
        )

    options = normalize_options(name, raw_options, config)
    try:
        collection = Collection(
            name=name,
            options=options,
            primary_key=raw_options.get("primaryKey") or config.primary_key,
        )
    except ValidationError as e:
        raise SchemaError(
            f"Invalid declaration for collection '{name}'",
            {"collection": name, "errors": str(e)},
        ) from e

    primaries: List[str] = []
    for field_name, declaration in raw_fields.items():
        if is_reference(declaration):
            collection.defer_reference(field_name, strip_sigil(declaration))
            continue

        field = normalize_field(
            name,
            field_name,
            declaration,
            registry=registry,
            optional_by_default=config.optional_by_default,
        )
        collection.add_field(field_name, field)
        if field.primary:
            primaries.append(field_name)

    if len(primaries) > 1:
        raise DuplicatePrimaryKeyError(name, primaries)

    declared_key = raw_options.get("primaryKey")
    if primaries and declared_key and declared_key != primaries[0]:
        raise SchemaError(
            f"Collection '{name}' names primary key '{declared_key}' "
            f"but declares '{primaries[0]}' as primary",
            {"collection": name, "primary_key": declared_key, "field": primaries[0]},
        )

    if primaries:
        collection.primary_key = primaries[0]
    elif collection.primary_key in raw_fields:
        # Declared under the key's name without being primary
        raise FieldNameCollisionError(name, collection.primary_key)
    else:
        _add_service_field(collection, collection.primary_key, primary_key_field(), registry)

    if options.timestamps:
        for field_name, build in (
            (options.created_at, created_at_field),
            (options.updated_at, updated_at_field),
        ):
            if field_name in raw_fields or field_name in collection.fields:
                raise FieldNameCollisionError(name, field_name)
            _add_service_field(collection, field_name, build(), registry)

    logger.debug(
        f"Normalized collection {name}: {len(collection.fields)} fields, "
        f"{len(collection.pending_references())} pending references"
    )
    return collection
