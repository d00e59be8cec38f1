"""Split a raw document into collection and connection declarations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

logger = logging.getLogger(__name__)

COLLECTION = "collection"
CONNECTION = "connection"
TYPE_KEY = "type"


@dataclass
class PartitionedDocument:
    """Raw declarations grouped by kind, discriminator removed."""

    collections: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    connections: Dict[str, Dict[str, Any]] = field(default_factory=dict)


def partition_document(document: Mapping[str, Any]) -> PartitionedDocument:
    """
    Split top-level entries by their `type` discriminator.

    Entries that are not mappings, or whose discriminator is neither
    "collection" nor "connection", are dropped. The input is left untouched.

    Args:
        document: Mapping from entry name to raw declaration

    Returns:
        PartitionedDocument with shallow copies of each declaration
    """
    result = PartitionedDocument()

    for name, entry in document.items():
        if not isinstance(entry, Mapping):
            logger.warning(f"Skipping entry '{name}': not a mapping")
            continue

        kind = entry.get(TYPE_KEY)
        body = {key: value for key, value in entry.items() if key != TYPE_KEY}

        if kind == COLLECTION:
            result.collections[name] = body
        elif kind == CONNECTION:
            result.connections[name] = body
        else:
            logger.debug(f"Skipping entry '{name}' with type {kind!r}")

    logger.debug(
        f"Partitioned document: {len(result.collections)} collections, "
        f"{len(result.connections)} connections"
    )
    return result
