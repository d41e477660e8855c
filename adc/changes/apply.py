"""Application of change events to a remote gateway.

The applier looks up the sub-client for the event's resource kind, then
performs exactly one call on it: create, delete-by-name or update. Errors
from the sub-client are re-raised as ApplyError with the original exception
chained as ``__cause__``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import structlog

from adc.cluster.base import Cluster, ResourceClient
from adc.models.events import ChangeEvent, ChangeKind
from adc.models.resources import ResourceKind

_log = structlog.get_logger(component="changes.apply")

SubClientAccessor = Callable[[Cluster], ResourceClient[Any]]


class ApplyError(Exception):
    """Raised when the remote call for a change event fails."""

    def __init__(self, resource_kind: ResourceKind, change: ChangeKind) -> None:
        super().__init__(f"failed to apply {resource_kind}")
        self.resource_kind = resource_kind
        self.change = change


DEFAULT_HANDLERS: Mapping[ResourceKind, SubClientAccessor] = {
    ResourceKind.SERVICE: lambda cluster: cluster.services,
    ResourceKind.ROUTE: lambda cluster: cluster.routes,
}


class ChangeApplier:
    """Dispatches change events to the sub-client registered for their kind.

    Events whose kind has no registered handler are skipped without error.
    The applier keeps no state between calls and does not guard against
    applying the same event twice.
    """

    def __init__(self, handlers: Mapping[ResourceKind, SubClientAccessor] | None = None) -> None:
        self._handlers = dict(DEFAULT_HANDLERS if handlers is None else handlers)

    def apply(self, event: ChangeEvent, cluster: Cluster) -> None:
        """Perform the remote operation *event* describes.

        Raises:
            ApplyError: if the sub-client call fails.
        """
        accessor = self._handlers.get(event.resource_kind)
        if accessor is None:
            _log.warning(
                "change_skipped_unhandled_kind",
                resource_kind=str(event.resource_kind),
                change=str(event.change),
                name=event.name,
            )
            return

        client = accessor(cluster)
        try:
            if event.change is ChangeKind.CREATE:
                client.create(event.new_value)
            elif event.change is ChangeKind.DELETE:
                assert event.old_value is not None
                client.delete(event.old_value.name)
            else:
                client.update(event.new_value)
        except Exception as exc:
            raise ApplyError(event.resource_kind, event.change) from exc

        _log.debug(
            "change_applied",
            resource_kind=str(event.resource_kind),
            change=str(event.change),
            name=event.name,
        )


_default_applier = ChangeApplier()


def apply(event: ChangeEvent, cluster: Cluster) -> None:
    """Apply *event* to *cluster* using the handlers for every ResourceKind."""
    _default_applier.apply(event, cluster)
