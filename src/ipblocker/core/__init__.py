"""Core."""

from .config import BlockerConfig, clear_config, get_config, load_config_from_file
from .logging import configure_logging

__all__ = [
    "BlockerConfig",
    "clear_config",
    "configure_logging",
    "get_config",
    "load_config_from_file",
]
