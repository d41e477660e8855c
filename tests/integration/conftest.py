"""Shared fixtures for adc integration tests.

Provides an in-memory gateway that satisfies the Cluster protocol, so sync
pipelines can run end to end without a real APISIX instance.
"""

from __future__ import annotations

from pathlib import Path
from typing import Generic

import pytest

from adc.cluster.base import ClusterError, R
from adc.models.resources import Route, Service, resource_id


class InMemoryResourceClient(Generic[R]):
    """Stores resources by id and records every call made to it."""

    def __init__(self) -> None:
        self.store: dict[str, R] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_on: set[str] = set()

    def _check(self, op: str, name: str) -> None:
        self.calls.append((op, name))
        if name in self.fail_on:
            raise ClusterError(f"{op} {name} rejected", status_code=400)

    def list(self) -> list[R]:
        return sorted(self.store.values(), key=lambda v: v.name)

    def create(self, value: R) -> R:
        self._check("create", value.name)
        stored = value if value.id else value.with_id(resource_id(value.name))
        self.store[stored.id] = stored
        return stored

    def update(self, value: R) -> R:
        self._check("update", value.name)
        assert value.id in self.store, f"update of unknown id {value.id}"
        self.store[value.id] = value
        return value

    def delete(self, name: str) -> None:
        self._check("delete", name)
        for rid, value in list(self.store.items()):
            if value.name == name:
                del self.store[rid]
                return
        raise ClusterError(f"{name} not found", status_code=404)


class InMemoryCluster:
    def __init__(self) -> None:
        self.services: InMemoryResourceClient[Service] = InMemoryResourceClient()
        self.routes: InMemoryResourceClient[Route] = InMemoryResourceClient()
        self.pings = 0

    def ping(self) -> None:
        self.pings += 1


@pytest.fixture()
def cluster() -> InMemoryCluster:
    """An empty in-memory gateway."""
    return InMemoryCluster()


@pytest.fixture()
def seeded_cluster() -> InMemoryCluster:
    """A gateway already holding one service and one route that the sample file changes."""
    gw = InMemoryCluster()
    gw.services.store["svc-a"] = Service(name="svc-a", id="svc-a", hosts=["old.example.com"])
    gw.services.store["svc-legacy"] = Service(name="svc-legacy", id="svc-legacy")
    # Created outside adc: its id is not derived from its name.
    gw.routes.store["1"] = Route(name="r-legacy", id="1", service_id="svc-legacy")
    return gw


SAMPLE_CONFIG = """\
services:
  - name: svc-a
    hosts: [example.com]
    upstream:
      nodes:
        - host: httpbin.org
          port: 80
          weight: 1
routes:
  - name: r1
    uris: [/get]
    methods: [GET]
    service_id: svc-a
  - name: r2
    uris: [/post]
    methods: [POST]
    service_id: svc-a
"""


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "adc.yaml"
    path.write_text(SAMPLE_CONFIG, encoding="utf-8")
    return path
