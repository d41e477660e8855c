"""Interfaces adc expects from a remote gateway.

The core only depends on these protocols; ``ApisixCluster`` is the shipped
implementation and tests substitute in-memory or mock clients.
"""

from __future__ import annotations

from typing import Protocol, TypeVar

from adc.models.resources import Route, Service

R = TypeVar("R", Service, Route)


class ClusterError(Exception):
    """Raised when the remote gateway rejects a request or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ResourceClient(Protocol[R]):
    """Operations on one kind of resource. Each call is one synchronous request."""

    def list(self) -> list[R]: ...

    def create(self, value: R) -> R: ...

    def update(self, value: R) -> R: ...

    def delete(self, name: str) -> None: ...


class Cluster(Protocol):
    """Handle on a remote gateway, exposing one ResourceClient per kind."""

    @property
    def services(self) -> ResourceClient[Service]: ...

    @property
    def routes(self) -> ResourceClient[Route]: ...

    def ping(self) -> None: ...
