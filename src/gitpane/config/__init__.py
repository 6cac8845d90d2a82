"""Configuration loading, schema, and defaults."""

from gitpane.config.loader import ConfigError, load_config
from gitpane.config.schema import GitPaneConfig, GitSettings, OutputFormat

__all__ = [
    "ConfigError",
    "GitPaneConfig",
    "GitSettings",
    "OutputFormat",
    "load_config",
]
