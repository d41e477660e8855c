"""Entry point for `python -m adc`.

Usage:
    python -m adc diff -f adc.yaml
    python -m adc sync -f adc.yaml
"""

from __future__ import annotations

from adc.cli import cli

cli()
