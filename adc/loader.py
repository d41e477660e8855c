"""Declarative configuration files.

A configuration file is YAML with two optional top-level lists::

    services:
      - name: svc-a
        upstream:
          nodes: [{host: httpbin.org, port: 80, weight: 1}]
    routes:
      - name: r1
        uris: [/get]
        service_id: svc-a
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from adc.changes.discovery import Configuration
from adc.models.resources import Route, Service

_TOP_LEVEL_KEYS = frozenset({"services", "routes"})


class ConfigFileError(Exception):
    """Raised when a configuration file cannot be read or parsed."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = Path(path)
        self.reason = reason


def parse_configuration(data: Any, source: Path | str = "<memory>") -> Configuration:
    """Build a Configuration from already-decoded YAML/JSON *data*."""
    if data is None:
        return Configuration()
    if not isinstance(data, dict):
        raise ConfigFileError(source, "top level must be a mapping")
    unknown = sorted(set(data) - _TOP_LEVEL_KEYS)
    if unknown:
        raise ConfigFileError(source, f"unknown top-level keys: {', '.join(unknown)}")

    try:
        services = [Service.from_dict(item) for item in data.get("services") or []]
        routes = [Route.from_dict(item) for item in data.get("routes") or []]
    except (TypeError, ValueError) as exc:
        raise ConfigFileError(source, str(exc)) from exc
    return Configuration(services=services, routes=routes)


def load_configuration(path: Path | str) -> Configuration:
    """Read and parse the configuration file at *path*.

    Raises:
        ConfigFileError: if the file is missing, is not valid YAML, or
            describes resources adc cannot build.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigFileError(path, exc.strerror or str(exc)) from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigFileError(path, f"invalid YAML: {exc}") from exc
    return parse_configuration(data, source=path)


def dump_configuration(config: Configuration) -> str:
    """Render *config* as YAML, omitting unset fields."""
    data: dict[str, list[dict[str, Any]]] = {}
    if config.services:
        data["services"] = [s.to_dict() for s in config.services]
    if config.routes:
        data["routes"] = [r.to_dict() for r in config.routes]
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
