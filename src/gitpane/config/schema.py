"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

OutputFormat = Literal["terminal", "json", "yaml"]

OUTPUT_FORMATS: tuple[str, ...] = ("terminal", "json", "yaml")


@dataclass
class GitSettings:
    executable: str = "git"
    timeout: Optional[float] = 30.0  # seconds; None disables the watchdog

    def __post_init__(self) -> None:
        # 0 in TOML means "no timeout"; booleans are left for validation to reject
        if self.timeout is not None and not isinstance(self.timeout, bool) and self.timeout <= 0:
            self.timeout = None


@dataclass
class LogConfig:
    recent_count: int = 5


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"


@dataclass
class GitPaneConfig:
    version: str = "1.0"
    git: GitSettings = field(default_factory=GitSettings)
    log: LogConfig = field(default_factory=LogConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
