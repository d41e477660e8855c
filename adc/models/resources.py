"""Gateway resource data structures.

Every top-level resource (Service, Route) is a frozen dataclass that carries a
``name`` used for display and for delete-by-name, and that serializes to the
APISIX admin API JSON object via ``to_dict()``.
"""

from __future__ import annotations

import dataclasses
import hashlib
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, ClassVar, Protocol, Self, runtime_checkable

_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_.-]{1,64}$")


class ResourceKind(StrEnum):
    """Kind of gateway resource managed by adc."""

    SERVICE = "service"
    ROUTE = "route"


@runtime_checkable
class NamedResource(Protocol):
    """Anything that exposes a ``name`` usable as its display identifier."""

    @property
    def name(self) -> str: ...


def resource_id(name: str) -> str:
    """Return the admin API id adc uses for a resource called *name*.

    Names that are already valid APISIX ids are used verbatim; anything else
    is hashed so the id stays stable across runs.
    """
    if _ID_PATTERN.match(name):
        return name
    return hashlib.sha1(name.encode("utf-8")).hexdigest()


def _is_unset(value: object) -> bool:
    return value is None or (isinstance(value, (str, list, dict, tuple)) and not value)


class _Serializable:
    """Admin API (de)serialization shared by all resource dataclasses."""

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-ready dict in field order, omitting unset fields."""
        out: dict[str, Any] = {}
        for f in dataclasses.fields(self):  # type: ignore[arg-type]
            value = getattr(self, f.name)
            if _is_unset(value):
                continue
            if isinstance(value, _Serializable):
                value = value.to_dict()
            out[f.name] = value
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], strict: bool = True) -> Self:
        """Build an instance from an admin API object.

        With ``strict`` unknown keys are an error; otherwise they are dropped,
        which is how objects read back from the gateway are decoded.

        Raises:
            ValueError: on unknown (strict only) or missing keys, or a
                non-mapping input.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"{cls.__name__} must be a mapping, got {type(data).__name__}")
        known = {f.name for f in dataclasses.fields(cls)}  # type: ignore[arg-type]
        unknown = sorted(set(data) - known)
        if unknown and strict:
            raise ValueError(f"{cls.__name__} has unknown fields: {', '.join(unknown)}")
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                continue
            nested = _NESTED.get((cls.__name__, key))
            if nested is not None and isinstance(value, Mapping):
                value = nested.from_dict(value, strict=strict)
            kwargs[key] = value
        try:
            return cls(**kwargs)
        except TypeError as exc:
            raise ValueError(f"{cls.__name__}: {exc}") from exc


@dataclass(frozen=True)
class Upstream(_Serializable):
    """Load-balancing target embedded in a Service or Route."""

    type: str = "roundrobin"
    nodes: list[dict[str, Any]] = field(default_factory=list)
    hash_on: str | None = None
    key: str | None = None
    scheme: str | None = None
    retries: int | None = None
    timeout: dict[str, float] | None = None
    pass_host: str | None = None
    upstream_host: str | None = None


@dataclass(frozen=True)
class _Resource(_Serializable):
    kind: ClassVar[ResourceKind]

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:  # type: ignore[attr-defined]
            raise ValueError(f"{type(self).__name__} requires a non-empty name")

    def with_id(self, new_id: str) -> Self:
        """Return a copy of this resource carrying *new_id*."""
        return dataclasses.replace(self, id=new_id)  # type: ignore[type-var]


@dataclass(frozen=True)
class Service(_Resource):
    """An APISIX service: shared upstream and plugins for a group of routes."""

    kind: ClassVar[ResourceKind] = ResourceKind.SERVICE

    name: str
    id: str | None = None
    description: str | None = None
    labels: dict[str, str] = field(default_factory=dict)
    hosts: list[str] = field(default_factory=list)
    upstream: Upstream | None = None
    plugins: dict[str, Any] = field(default_factory=dict)
    enable_websocket: bool | None = None


@dataclass(frozen=True)
class Route(_Resource):
    """An APISIX route: request matching rules bound to a service or upstream."""

    kind: ClassVar[ResourceKind] = ResourceKind.ROUTE

    name: str
    id: str | None = None
    description: str | None = None
    labels: dict[str, str] = field(default_factory=dict)
    methods: list[str] = field(default_factory=list)
    uris: list[str] = field(default_factory=list)
    hosts: list[str] = field(default_factory=list)
    priority: int | None = None
    vars: list[Any] = field(default_factory=list)
    plugins: dict[str, Any] = field(default_factory=dict)
    service_id: str | None = None
    upstream_id: str | None = None
    upstream: Upstream | None = None
    enable_websocket: bool | None = None
    status: int | None = None


Resource = Service | Route

_NESTED: dict[tuple[str, str], type[_Serializable]] = {
    ("Service", "upstream"): Upstream,
    ("Route", "upstream"): Upstream,
}

RESOURCE_TYPES: Mapping[ResourceKind, type[Service] | type[Route]] = {
    ResourceKind.SERVICE: Service,
    ResourceKind.ROUTE: Route,
}


def kind_of(value: object) -> ResourceKind:
    """Return the ResourceKind of *value*.

    Raises:
        TypeError: if *value* is not a gateway resource.
    """
    for kind, cls in RESOURCE_TYPES.items():
        if isinstance(value, cls):
            return kind
    raise TypeError(f"not a gateway resource: {type(value).__name__}")
