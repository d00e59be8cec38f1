"""Normalization pipeline entry points."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import networkx as nx

from dbkit.core.config import NormalizationConfig
from dbkit.core.exceptions import SchemaError
from dbkit.core.models import Collection, NormalizedSchema
from dbkit.schema.collections import normalize_collection
from dbkit.schema.connections import wire_connections
from dbkit.schema.loader import aload_document, load_document
from dbkit.schema.partition import partition_document
from dbkit.schema.references import resolve_references
from dbkit.schema.types import DEFAULT_TYPE_REGISTRY, TypeRegistry

logger = logging.getLogger(__name__)


def normalize_document(
    document: Mapping[str, Any],
    registry: TypeRegistry = DEFAULT_TYPE_REGISTRY,
    config: Optional[NormalizationConfig] = None,
) -> NormalizedSchema:
    """
    Normalize a loaded schema document.

    Stages run strictly in order: partition, normalize every collection,
    resolve references, wire connections. Any error aborts the whole run.

    Args:
        document: Raw document, entry name -> declaration
        registry: Type registry for field types
        config: Normalization defaults

    Returns:
        NormalizedSchema with collections and the connections wired into them
    """
    config = config or NormalizationConfig()
    parts = partition_document(document)

    collections: Dict[str, Collection] = {
        name: normalize_collection(name, raw, registry=registry, config=config)
        for name, raw in parts.collections.items()
    }
    logger.info(f"Normalized {len(collections)} collections")

    resolve_references(collections, optional_by_default=config.optional_by_default)
    connections = wire_connections(parts.connections, collections)

    return NormalizedSchema(collections=collections, connections=connections)


def load_schema(
    path: Union[str, Path],
    registry: TypeRegistry = DEFAULT_TYPE_REGISTRY,
    config: Optional[NormalizationConfig] = None,
) -> NormalizedSchema:
    """Load a YAML schema document and normalize it."""
    return normalize_document(load_document(path), registry=registry, config=config)


async def aload_schema(
    path: Union[str, Path],
    registry: TypeRegistry = DEFAULT_TYPE_REGISTRY,
    config: Optional[NormalizationConfig] = None,
) -> NormalizedSchema:
    """Async version of load_schema; only the document read is awaited."""
    document = await aload_document(path)
    return normalize_document(document, registry=registry, config=config)


def dependency_graph(schema: NormalizedSchema) -> nx.DiGraph:
    """
    Build the reference graph of a schema.

    There is an edge A -> B when collection A holds a reference to B.
    Self references are left out.
    """
    graph = nx.DiGraph()
    for name, collection in schema.collections.items():
        graph.add_node(name)
        for dependency in collection.dependencies:
            if dependency != name:
                graph.add_edge(name, dependency)
    return graph


def dependency_order(schema: NormalizedSchema) -> List[str]:
    """
    Order collections so that referenced collections come first.

    Ties keep declaration order.

    Raises:
        SchemaError: If distinct collections reference each other in a cycle
    """
    graph = dependency_graph(schema)
    position = {name: index for index, name in enumerate(schema.collections)}

    try:
        return list(
            nx.lexicographical_topological_sort(graph.reverse(copy=True), key=position.__getitem__)
        )
    except nx.NetworkXUnfeasible:
        cycle = [source for source, _ in nx.find_cycle(graph)]
        raise SchemaError(
            f"Circular references between collections: {' -> '.join(cycle)}",
            {"cycle": cycle},
        ) from None
