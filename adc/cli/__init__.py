"""adc command-line interface.

Exposes:
    cli -- Click group entry point (registered as ``adc`` script).
"""

from adc.cli.main import cli

__all__ = ["cli"]
