"""Field declaration normalization."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping

from pydantic import TypeAdapter, ValidationError

from dbkit.core.exceptions import InvalidFieldDeclarationError, UnknownTypeError
from dbkit.core.models import SchemaField
from dbkit.schema.types import DEFAULT_TYPE_REGISTRY, TypeRegistry

logger = logging.getLogger(__name__)

REFERENCE_SIGIL = "$"

# Keys a field declaration may set explicitly, as written in documents
DECLARABLE_KEYS = (
    "primary",
    "autoIncrement",
    "readOnly",
    "hidden",
    "service",
    "multilang",
    "default",
    "length",
)

# Same bool parsing as model fields ("false", "no", 0 ...)
FLAG = TypeAdapter(bool)


def is_reference(declaration: Any) -> bool:
    """Check if a declaration is a `$CollectionName` shorthand."""
    return isinstance(declaration, str) and declaration.startswith(REFERENCE_SIGIL)


def strip_sigil(value: str) -> str:
    """Drop the leading `$` from a reference."""
    return value[len(REFERENCE_SIGIL):]


def resolve_optional(declaration: Mapping[str, Any], optional_by_default: bool) -> bool:
    """
    Decide whether a field is optional.

    An explicit `optional` wins over `required`; with neither, the
    configured default applies.

    Raises:
        pydantic.ValidationError: If a flag is not a boolean value
    """
    if declaration.get("optional") is not None:
        return FLAG.validate_python(declaration["optional"])
    if declaration.get("required") is not None:
        return not FLAG.validate_python(declaration["required"])
    return optional_by_default


def normalize_field(
    collection: str,
    name: str,
    declaration: Any,
    registry: TypeRegistry = DEFAULT_TYPE_REGISTRY,
    optional_by_default: bool = True,
) -> SchemaField:
    """
    Expand a field declaration into a SchemaField.

    Accepts a plain type name ("string") or a mapping with at least `type`.
    Reference shorthands are not handled here.

    Args:
        collection: Owning collection name, used in errors
        name: Field name
        declaration: Raw declaration from the document
        registry: Type registry used to validate the type and default length
        optional_by_default: Value of `optional` when the declaration is silent

    Returns:
        Normalized SchemaField

    Raises:
        UnknownTypeError: If the type is not registered
        InvalidFieldDeclarationError: If the declaration has the wrong shape
    """
    if is_reference(declaration):
        raise InvalidFieldDeclarationError(collection, name, declaration)

    if isinstance(declaration, str):
        declaration = {"type": declaration}
    elif not isinstance(declaration, Mapping):
        raise InvalidFieldDeclarationError(collection, name, declaration)

    type_name = declaration.get("type")
    if not isinstance(type_name, str) or not type_name:
        raise InvalidFieldDeclarationError(collection, name, declaration)

    data_type = registry.get(type_name)
    if data_type is None:
        raise UnknownTypeError(type_name, collection=collection, field=name)

    values: Dict[str, Any] = {
        key: declaration[key] for key in DECLARABLE_KEYS if declaration.get(key) is not None
    }
    values.setdefault("length", data_type.length)

    try:
        field = SchemaField(
            type=type_name.upper(),
            optional=resolve_optional(declaration, optional_by_default),
            **values,
        )
    except ValidationError as e:
        raise InvalidFieldDeclarationError(collection, name, declaration) from e

    logger.debug(f"Normalized field {collection}.{name}: {field.type}")
    return field
