"""Configuration types with environment variable support.

All settings can be configured via environment variables with the IPBLOCKER_ prefix.
Example: IPBLOCKER_HTACCESS_PATH=/var/www/html/.htaccess sets htaccess_path.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


_SECTION = "ipblocker"


def _parse(path: Path, content: str) -> Any:
    if path.suffix in (".yaml", ".yml"):
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if path.suffix == ".toml":
        try:
            return tomllib.loads(content)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {path}: {e}") from e
    raise ValueError(f"Unsupported config format: {path.suffix}")


def load_config_from_file(path: str | Path) -> dict[str, Any]:
    """Read blocker settings from a YAML or TOML file.

    Settings may sit at the top level or under an ``ipblocker`` table, so
    the blocker can share a config file with its host application.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file is not UTF-8, is malformed, has an unsupported
            suffix, or its settings are not a mapping.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        data = _parse(path, path.read_text(encoding="utf-8")) or {}
    except UnicodeDecodeError as e:
        raise ValueError(f"Config file encoding error in {path}: {e}") from e

    settings = data.get(_SECTION, data) if isinstance(data, dict) else data
    if not isinstance(settings, dict):
        raise ValueError(f"Expected a mapping of settings in {path}")
    return settings


class BlockerConfig(BaseSettings):
    """IP blocker configuration.

    All settings can be overridden via environment variables:
    - IPBLOCKER_ENABLED: Enable/disable request checks
    - IPBLOCKER_OPTIONS_PATH: JSON file holding the stored block lists
    - IPBLOCKER_HTACCESS_PATH: Rules file that mirrors the htaccess block list
    - IPBLOCKER_LOG_LEVEL: debug, info, warning or error
    - etc.
    """

    model_config = SettingsConfigDict(
        env_prefix="IPBLOCKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = Field(
        default=True,
        description="Check incoming requests against the block lists.",
    )
    options_path: str = Field(
        default="ipblocker.json",
        description="Path to the JSON file storing the block lists.",
    )
    htaccess_enabled: bool = Field(
        default=False,
        description="Mirror the htaccess block list into the rules file.",
    )
    htaccess_path: str = Field(
        default=".htaccess",
        description="Path to the Apache rules file.",
    )
    htaccess_lock: bool = Field(
        default=True,
        description="Hold an exclusive advisory lock while patching the rules file.",
    )
    log_level: str = Field(
        default="warning",
        pattern="^(debug|info|warning|error)$",
        description="Log level: debug, info, warning or error.",
    )

    @classmethod
    def from_file(cls, path: str | Path) -> BlockerConfig:
        """Build a config from a YAML or TOML file.

        Environment variables are not consulted for keys present in the file.
        """
        return cls(**load_config_from_file(path))


_config: BlockerConfig | None = None


def get_config() -> BlockerConfig:
    """Get the global configuration instance.

    The instance is created once from environment variables and cached.
    To reload config (e.g., in tests), call clear_config() first.
    """
    global _config
    if _config is None:
        _config = BlockerConfig()
    return _config


def clear_config() -> None:
    """Clear the cached configuration."""
    global _config
    _config = None
