"""Schema document loading utilities."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from dbkit.core.exceptions import DocumentNotFoundError, DocumentParseError
from dbkit.core.models import NormalizedSchema

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


def load_document(path: Union[str, Path]) -> Document:
    """
    Load a raw schema document from a YAML file.

    Args:
        path: Path to YAML schema file

    Returns:
        Mapping from top-level entry name to its raw declaration

    Raises:
        DocumentNotFoundError: If the path is not a readable file
        DocumentParseError: If the file is not valid YAML or not a mapping
    """
    path = Path(path)

    if not path.is_file():
        raise DocumentNotFoundError(str(path))

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentNotFoundError(str(path), f"Cannot read schema document {path}: {e}") from e

    document = parse_document(text, source=str(path))
    logger.info(f"Loaded schema document {path} ({len(document)} entries)")
    return document


async def aload_document(path: Union[str, Path]) -> Document:
    """
    Async version of load_document.

    The read happens in the default executor; normalization must not start
    before this resolves.
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, load_document, path)


def parse_document(text: str, source: str = "<string>") -> Document:
    """
    Parse YAML text into a raw schema document.

    Args:
        text: YAML content
        source: Name used in error messages

    Returns:
        Mapping from entry name to raw declaration (empty for an empty document)
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DocumentParseError(source, str(e)) from e

    if data is None:
        logger.warning(f"Schema document {source} is empty")
        return {}

    if not isinstance(data, dict):
        raise DocumentParseError(
            source, f"top level must be a mapping, got {type(data).__name__}"
        )

    return data


def save_schema_to_yaml(schema: NormalizedSchema, path: Union[str, Path]) -> None:
    """
    Save a normalized schema to a YAML file.

    Args:
        schema: NormalizedSchema object
        path: Path to save YAML file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.safe_dump(schema.to_dict(), f, default_flow_style=False, sort_keys=False)

    logger.info(f"Saved normalized schema to {path}")
