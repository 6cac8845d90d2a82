"""Load and merge configuration from .gitpane.toml and env vars."""

from __future__ import annotations

import dataclasses
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from gitpane.config.schema import (
    OUTPUT_FORMATS,
    GitPaneConfig,
    GitSettings,
    LogConfig,
    OutputConfig,
)

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".gitpane.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(repo_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = repo_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _parse_timeout(value: str) -> Optional[float]:
    seconds = float(value)
    return seconds if seconds > 0 else None


def _merge_env_overrides(cfg: GitPaneConfig) -> None:
    """Apply GITPANE_* environment variable overrides."""
    if val := os.environ.get("GITPANE_GIT"):
        cfg.git.executable = val
    if val := os.environ.get("GITPANE_TIMEOUT"):
        try:
            cfg.git.timeout = _parse_timeout(val)
        except ValueError:
            logger.debug(f"Ignoring invalid GITPANE_TIMEOUT={val!r}")
    if val := os.environ.get("GITPANE_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("GITPANE_LOG_COUNT"):
        try:
            count = int(val)
        except ValueError:
            logger.debug(f"Ignoring invalid GITPANE_LOG_COUNT={val!r}")
        else:
            if count > 0:
                cfg.log.recent_count = count


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    try:
        return cls(**filtered)
    except TypeError as exc:
        raise ConfigError(f"Invalid [{section}] section: {exc}") from exc


def _validate(cfg: GitPaneConfig) -> None:
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(
            f"Invalid output format {cfg.output.format!r}; expected one of {', '.join(OUTPUT_FORMATS)}"
        )
    count = cfg.log.recent_count
    if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
        raise ConfigError(f"log.recent_count must be a positive integer, got {count!r}")
    if not cfg.git.executable:
        raise ConfigError("git.executable must not be empty")
    timeout = cfg.git.timeout
    if timeout is not None and (isinstance(timeout, bool) or not isinstance(timeout, (int, float))):
        raise ConfigError(f"git.timeout must be a number of seconds, got {timeout!r}")


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> GitPaneConfig:
    """Load, validate, and return a GitPaneConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = GitPaneConfig()
    else:
        logger.debug(f"Loading config from {config_path}")
        raw = _parse_toml(config_path)
        cfg = GitPaneConfig(
            version=raw.get("version", "1.0"),
            git=_build_section(raw, GitSettings, "git"),
            log=_build_section(raw, LogConfig, "log"),
            output=_build_section(raw, OutputConfig, "output"),
        )

    _validate(cfg)
    _merge_env_overrides(cfg)
    return cfg
