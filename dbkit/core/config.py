"""Configuration management for dbkit."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


# =============================================================================
# Normalization Configuration
# =============================================================================


class NormalizationConfig(BaseModel):
    """Defaults applied while normalizing collections and fields."""

    optional_by_default: bool = True  # Fields not marked required/optional
    primary_key: str = "id"  # Name of the synthesized primary key
    created_at: str = "createdAt"
    updated_at: str = "updatedAt"


# =============================================================================
# Main Configuration
# =============================================================================


class DbKitConfig(BaseSettings):
    """Main dbkit configuration."""

    log_level: LogLevel = LogLevel.INFO
    normalization: NormalizationConfig = Field(default_factory=NormalizationConfig)

    model_config = {
        "env_prefix": "DBKIT_",
        "env_file": ".env",
        "env_nested_delimiter": "__",
        "extra": "ignore",
    }

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "DbKitConfig":
        """Load configuration from a YAML file."""
        import yaml

        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls(**data) if data else cls()

    def to_yaml(self, path: Union[str, Path]) -> None:
        """Save configuration to a YAML file."""
        import yaml

        with open(path, "w") as f:
            yaml.dump(self.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False)


def load_config(path: Optional[Union[str, Path]] = None) -> DbKitConfig:
    """
    Load configuration from file or create default.

    Args:
        path: Optional path to YAML config file

    Returns:
        DbKitConfig instance
    """
    if path:
        return DbKitConfig.from_yaml(path)
    return DbKitConfig()
