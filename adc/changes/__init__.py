"""Change events: discovery, rendering and application.

Submodules:
    discovery -- Match local and remote resources by name into ChangeEvents.
    render    -- describe(): one-line or unified-diff text for an event.
    apply     -- apply(): one remote call per event, errors wrapped as ApplyError.
"""

from adc.changes.apply import ApplyError, ChangeApplier, apply
from adc.changes.discovery import Configuration, compute_changes, diff_resources
from adc.changes.render import describe, unified_diff

__all__ = [
    "ApplyError",
    "ChangeApplier",
    "Configuration",
    "apply",
    "compute_changes",
    "describe",
    "diff_resources",
    "unified_diff",
]
