"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from adc.models.config import ADCConfig, DiffConfig, LogConfig, ServerConfig


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"ADC_{key}", default)


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    val = int(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def _validate_server(value: str) -> str:
    if not value.startswith(("http://", "https://")):
        raise ValueError(f"Invalid admin server URL: {value}. Must start with http:// or https://")
    return value.rstrip("/")


def load_config() -> ADCConfig:
    """Load configuration from ADC_* environment variables."""
    return ADCConfig(
        server=ServerConfig(
            url=_validate_server(_env("SERVER", "http://127.0.0.1:9180")),
            token=_env("TOKEN", ""),
            timeout_seconds=_env_int("TIMEOUT", 10, min_val=1, max_val=120),
        ),
        diff=DiffConfig(
            context_lines=_env_int("DIFF_CONTEXT", 3, min_val=0, max_val=20),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
        ),
    )
