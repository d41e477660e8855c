"""Human-readable rendering of change events.

Create and delete events render as a single line. Update events render the
remote and local values as tab-indented JSON and append a unified diff
labelled ``remote`` (old) and ``local`` (new).
"""

from __future__ import annotations

import difflib
import json

from adc.models.events import ChangeEvent, ChangeKind
from adc.models.resources import Resource

DEFAULT_CONTEXT_LINES = 3

_REMOTE_LABEL = "remote"
_LOCAL_LABEL = "local"


# Escapes Go's encoding/json applies, so diffs match what the gateway tooling prints.
_GO_HTML_ESCAPES = str.maketrans(
    {"<": "\\u003c", ">": "\\u003e", "&": "\\u0026", "\u2028": "\\u2028", "\u2029": "\\u2029"}
)


def serialize(value: Resource) -> str:
    """Return the canonical text form of *value* used for diffing.

    ``<``, ``>``, ``&`` and the U+2028/U+2029 separators are written as
    ``\\uXXXX`` escapes; they can only occur inside JSON strings.

    Raises:
        TypeError, ValueError: if a field holds something JSON cannot encode.
    """
    text = json.dumps(value.to_dict(), indent="\t", ensure_ascii=False)
    return text.translate(_GO_HTML_ESCAPES) + "\n"


def _lines(text: str) -> list[str]:
    # Only "\n" ends a line; str.splitlines would also split on characters like U+0085.
    lines = text.split("\n")
    out = [line + "\n" for line in lines[:-1]]
    if lines[-1]:
        out.append(lines[-1])
    return out


def unified_diff(remote: str, local: str, context_lines: int = DEFAULT_CONTEXT_LINES) -> str:
    """Return a unified diff from *remote* to *local*, or "" if they are equal."""
    lines = difflib.unified_diff(
        _lines(remote),
        _lines(local),
        fromfile=_REMOTE_LABEL,
        tofile=_LOCAL_LABEL,
        n=context_lines,
    )
    return "".join(line if line.endswith("\n") else line + "\n" for line in lines)


def describe(event: ChangeEvent, context_lines: int = DEFAULT_CONTEXT_LINES) -> str:
    """Render *event* for display.

    Serialization errors raised while rendering an update propagate unchanged.
    """
    if event.change is ChangeKind.CREATE:
        return f'creating {event.resource_kind}: "{event.name}"'
    if event.change is ChangeKind.DELETE:
        return f'deleting {event.resource_kind}: "{event.name}"'

    assert event.old_value is not None and event.new_value is not None
    diff = unified_diff(serialize(event.old_value), serialize(event.new_value), context_lines)
    return f'updating {event.resource_kind}: "{event.name}"\n{diff}'
