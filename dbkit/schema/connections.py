"""Connection validation and wiring into collection options."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Tuple

from pydantic import ValidationError

from dbkit.core.exceptions import (
    InvalidSigilError,
    MissingConnectionFieldError,
    SchemaError,
    UnknownCollectionError,
)
from dbkit.core.models import Accessor, Collection, Connection
from dbkit.schema.fields import REFERENCE_SIGIL, strip_sigil

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("parent", "child", "accessor")


def normalize_connection(
    name: str,
    raw: Mapping[str, Any],
    collections: Mapping[str, Collection],
) -> Connection:
    """
    Validate a raw connection declaration and resolve its endpoints.

    Args:
        name: Declared connection name
        raw: Declaration with `parent`, `child`, `accessor` and optional `tableName`
        collections: Normalized collections by declared name

    Returns:
        Connection holding endpoint names

    Raises:
        MissingConnectionFieldError: If parent, child or accessor is absent
        InvalidSigilError: If an endpoint does not start with `$`
        UnknownCollectionError: If an endpoint names a missing collection
        SchemaError: If an attribute such as `tableName` has the wrong type
    """
    for key in REQUIRED_KEYS:
        if raw.get(key) in (None, ""):
            raise MissingConnectionFieldError(name, key)

    endpoints: Dict[str, str] = {}
    for key in ("parent", "child"):
        value = raw[key]
        if not isinstance(value, str) or not value.startswith(REFERENCE_SIGIL):
            raise InvalidSigilError(name, key, value)

        collection_name = strip_sigil(value)
        if collection_name not in collections:
            raise UnknownCollectionError(collection_name, referenced_by=name)
        endpoints[key] = collection_name

    try:
        return Connection(
            name=name,
            parent=endpoints["parent"],
            child=endpoints["child"],
            accessor=str(raw["accessor"]),
            table_name=raw.get("tableName") or name,
        )
    except ValidationError as e:
        raise SchemaError(
            f"Invalid declaration for connection '{name}'",
            {"connection": name, "errors": str(e)},
        ) from e


def wire_connection(connection: Connection, collections: Mapping[str, Collection]) -> None:
    """
    Push link and accessor metadata into both endpoint collections.

    Links are keyed by the other endpoint's collectionName and share the
    same Connection instance.
    """
    parent = collections[connection.parent]
    child = collections[connection.child]

    if connection.accessor in parent.options.accessors:
        raise SchemaError(
            f"Accessor '{connection.accessor}' is already defined on '{parent.name}'",
            {"collection": parent.name, "connection": connection.name},
        )

    parent.options.links[child.options.collection_name] = connection
    child.options.links[parent.options.collection_name] = connection
    parent.options.accessors[connection.accessor] = Accessor(
        child=connection.child,
        connection=connection,
    )
    logger.debug(
        f"Wired {connection.name}: {connection.parent}.{connection.accessor} -> {connection.child}"
    )


def wire_connections(
    raw_connections: Mapping[str, Mapping[str, Any]],
    collections: Mapping[str, Collection],
) -> Dict[str, Connection]:
    """
    Normalize all connections, then wire them into their collections.

    Every declaration is validated before any collection is touched.

    Returns:
        Connections by declared name
    """
    connections = {
        name: normalize_connection(name, raw, collections)
        for name, raw in raw_connections.items()
    }

    seen: Dict[Tuple[str, str], str] = {}
    for connection in connections.values():
        key = (connection.parent, connection.accessor)
        if key in seen:
            raise SchemaError(
                f"Accessor '{connection.accessor}' on '{connection.parent}' is declared by "
                f"both '{seen[key]}' and '{connection.name}'",
                {"collection": connection.parent, "connection": connection.name},
            )
        seen[key] = connection.name

    for connection in connections.values():
        wire_connection(connection, collections)

    logger.info(f"Wired {len(connections)} connections")
    return connections
