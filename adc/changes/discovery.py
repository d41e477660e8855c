"""Difference discovery between a local configuration and the remote gateway.

Resources are matched by name. The resulting events are ordered so that
routes are removed before the services they may reference, and services
exist before the routes that point at them.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from adc.models.events import ChangeEvent, ChangeKind
from adc.models.resources import Resource, Route, Service, resource_id


@dataclass
class Configuration:
    """A full set of gateway resources, local or remote."""

    services: list[Service] = field(default_factory=list)
    routes: list[Route] = field(default_factory=list)


def _index_by_name(values: Sequence[Resource], side: str) -> dict[str, Resource]:
    index: dict[str, Resource] = {}
    for value in values:
        if value.name in index:
            raise ValueError(f"duplicate {value.kind} name in {side} configuration: {value.name!r}")
        index[value.name] = value
    return index


def diff_resources(local: Sequence[Resource], remote: Sequence[Resource]) -> list[ChangeEvent]:
    """Return the events that turn *remote* into *local*, sorted by name.

    A local resource without an id inherits the remote id (or the id derived
    from its name when it is new) so that ids alone never cause an update.

    Raises:
        ValueError: if either side holds two resources with the same name.
    """
    local_by_name = _index_by_name(local, "local")
    remote_by_name = _index_by_name(remote, "remote")

    events: list[ChangeEvent] = []
    for name in sorted(local_by_name.keys() | remote_by_name.keys()):
        want = local_by_name.get(name)
        have = remote_by_name.get(name)
        if want is None:
            assert have is not None
            events.append(ChangeEvent.delete(have))
            continue
        if have is None:
            events.append(ChangeEvent.create(want if want.id else want.with_id(resource_id(name))))
            continue
        if not want.id and have.id:
            want = want.with_id(have.id)
        if want.to_dict() != have.to_dict():
            events.append(ChangeEvent.update(have, want))
    return events


def compute_changes(local: Configuration, remote: Configuration) -> list[ChangeEvent]:
    """Return every event needed to converge *remote* on *local*, in safe order."""
    service_events = diff_resources(local.services, remote.services)
    route_events = diff_resources(local.routes, remote.routes)

    def deletes(events: list[ChangeEvent]) -> list[ChangeEvent]:
        return [e for e in events if e.change is ChangeKind.DELETE]

    def upserts(events: list[ChangeEvent]) -> list[ChangeEvent]:
        return [e for e in events if e.change is not ChangeKind.DELETE]

    return deletes(route_events) + deletes(service_events) + upserts(service_events) + upserts(route_events)
