"""Configuration management"""

from .config_loader import ConfigError, ConfigLoader
from .archive_config import (
    AppConfig,
    ArchiveDefaults,
    DisplayTemplates,
    ProgramOptions,
    StorageConfig,
)

__all__ = [
    "ConfigError",
    "ConfigLoader",
    "AppConfig",
    "ArchiveDefaults",
    "DisplayTemplates",
    "ProgramOptions",
    "StorageConfig",
]
