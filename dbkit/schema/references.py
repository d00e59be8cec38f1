"""Second pass: expand `$Collection` shorthands into foreign key fields."""

from __future__ import annotations

import logging
from typing import Dict, Mapping

from dbkit.core.exceptions import SchemaError, UnknownCollectionError
from dbkit.core.models import Collection, FieldReference, SchemaField

logger = logging.getLogger(__name__)


def build_reference_field(target: Collection, optional: bool = True) -> SchemaField:
    """
    Build a foreign key field pointing at the target's primary key.

    The type (and length) come from the target's finalized primary key field.
    """
    key_field = target.fields.get(target.primary_key)
    if key_field is None:
        raise SchemaError(
            f"Collection '{target.name}' has no primary key field '{target.primary_key}'",
            {"collection": target.name},
        )
    if key_field.is_reference:
        raise SchemaError(
            f"Primary key of '{target.name}' is itself a reference",
            {"collection": target.name, "field": target.primary_key},
        )

    return SchemaField(
        type=key_field.type,
        length=key_field.length,
        optional=optional,
        reference=FieldReference(collection=target.name, field=target.primary_key),
    )


def resolve_references(
    collections: Mapping[str, Collection],
    optional_by_default: bool = True,
) -> None:
    """
    Resolve every pending reference shorthand, in place.

    Must run after all collections are normalized. Each collection is
    visited once; references are resolved against the target's primary
    key only, never against the target's own references.

    Args:
        collections: All normalized collections, by declared name
        optional_by_default: Value of `optional` for reference fields

    Raises:
        UnknownCollectionError: If a shorthand names a missing collection
    """
    resolved_count = 0

    for name, collection in collections.items():
        pending = collection.pending_references()
        if not pending:
            continue

        resolved: Dict[str, SchemaField] = {}
        for field_name, target_name in pending.items():
            target = collections.get(target_name)
            if target is None:
                raise UnknownCollectionError(target_name, referenced_by=f"{name}.{field_name}")

            resolved[field_name] = build_reference_field(target, optional=optional_by_default)
            collection.add_dependency(target_name)
            logger.debug(f"Resolved {name}.{field_name} -> {target_name}.{target.primary_key}")

        collection.complete_references(resolved)
        resolved_count += len(resolved)

    logger.info(f"Resolved {resolved_count} references across {len(collections)} collections")
