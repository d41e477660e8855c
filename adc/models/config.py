"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ServerConfig:
    """APISIX admin API connection settings."""

    url: str = "http://127.0.0.1:9180"
    token: str = ""
    timeout_seconds: int = 10


@dataclass
class DiffConfig:
    """Diff rendering settings."""

    context_lines: int = 3


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"


@dataclass
class ADCConfig:
    """Top-level adc configuration."""

    server: ServerConfig = field(default_factory=ServerConfig)
    diff: DiffConfig = field(default_factory=DiffConfig)
    log: LogConfig = field(default_factory=LogConfig)
