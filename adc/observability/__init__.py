"""Observability helpers (structured logging)."""

from adc.observability.logging import setup_logging

__all__ = ["setup_logging"]
