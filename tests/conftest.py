"""Shared test fixtures for dbkit."""

from pathlib import Path

import pytest

from dbkit import DbKitConfig, NormalizationConfig, SchemaKit
from dbkit.schema.types import DEFAULT_TYPE_REGISTRY, TypeRegistry

SCHEMAS_DIR = Path(__file__).parent / "schemas"


@pytest.fixture
def schemas_dir() -> Path:
    """Directory holding the YAML schema fixtures."""
    return SCHEMAS_DIR


@pytest.fixture
def registry() -> TypeRegistry:
    return DEFAULT_TYPE_REGISTRY


@pytest.fixture
def normalization_config() -> NormalizationConfig:
    return NormalizationConfig()


@pytest.fixture
def kit() -> SchemaKit:
    """Create a client with default settings."""
    return SchemaKit(config=DbKitConfig())


@pytest.fixture
def user_document() -> dict:
    """Single collection with timestamps."""
    return {
        "User": {
            "type": "collection",
            "fields": {"email": "string"},
            "options": {"timestamps": True},
        }
    }


@pytest.fixture
def relations_document() -> dict:
    """Two collections linked by a reference and a connection."""
    return {
        "User": {
            "type": "collection",
            "fields": {"email": "string", "schedule": "$Schedule"},
            "options": {"timestamps": True},
        },
        "Schedule": {
            "type": "collection",
            "fields": {"startDate": "date"},
        },
        "Project": {
            "type": "collection",
            "fields": {"name": "string"},
        },
        "UserProject": {
            "type": "connection",
            "parent": "$User",
            "child": "$Project",
            "accessor": "projects",
        },
    }
