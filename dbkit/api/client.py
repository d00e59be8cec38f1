"""Main dbkit client for programmatic usage."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from dbkit.core.config import DbKitConfig, load_config
from dbkit.core.models import NormalizedSchema
from dbkit.schema.pipeline import aload_schema, load_schema, normalize_document
from dbkit.schema.types import DEFAULT_TYPE_REGISTRY, TypeRegistry

logger = logging.getLogger(__name__)


class SchemaKit:
    """
    Main client for loading and normalizing schema documents.

    Example usage:

    ```python
    from dbkit import SchemaKit

    kit = SchemaKit()
    schema = kit.load("./schema.yml")

    user = schema.get_collection("User")
    print(user.primary_field.type)
    print(user.options.accessors["projects"].child)

    # Or from an already-parsed document
    schema = kit.normalize({"Tag": {"type": "collection", "fields": {"label": "string"}}})
    ```
    """

    def __init__(
        self,
        config: Optional[DbKitConfig] = None,
        config_path: Optional[Union[str, Path]] = None,
        registry: Optional[TypeRegistry] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Configuration object (optional)
            config_path: Path to YAML config file (optional)
            registry: Type registry (defaults to the built-in types)
        """
        if config:
            self._config = config
        elif config_path:
            self._config = load_config(config_path)
        else:
            self._config = DbKitConfig()

        self._registry = registry or DEFAULT_TYPE_REGISTRY

    @classmethod
    def from_config(cls, path: Union[str, Path]) -> "SchemaKit":
        """Create a client from a YAML config file."""
        return cls(config_path=path)

    @property
    def config(self) -> DbKitConfig:
        """Get the current configuration."""
        return self._config

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    def normalize(self, document: Mapping[str, Any]) -> NormalizedSchema:
        """Normalize an already-loaded document."""
        return normalize_document(
            document,
            registry=self._registry,
            config=self._config.normalization,
        )

    def load(self, path: Union[str, Path]) -> NormalizedSchema:
        """Load and normalize a YAML schema document."""
        schema = load_schema(path, registry=self._registry, config=self._config.normalization)
        logger.info(f"Loaded schema from {path}: {len(schema.collections)} collections")
        return schema

    async def aload(self, path: Union[str, Path]) -> NormalizedSchema:
        """Async version of load."""
        schema = await aload_schema(
            path,
            registry=self._registry,
            config=self._config.normalization,
        )
        logger.info(f"Loaded schema from {path}: {len(schema.collections)} collections")
        return schema
