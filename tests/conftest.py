"""Shared fixtures for the adc test suite."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """CLI tests point structlog at CliRunner's stderr; restore defaults afterwards."""
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def _clean_adc_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("SERVER", "TOKEN", "TIMEOUT", "DIFF_CONTEXT", "LOG_LEVEL"):
        monkeypatch.delenv(f"ADC_{key}", raising=False)
