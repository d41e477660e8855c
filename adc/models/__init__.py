"""Core data structures for adc."""

from adc.models.config import ADCConfig
from adc.models.events import ChangeEvent, ChangeKind, InvalidChangeEventError
from adc.models.resources import (
    RESOURCE_TYPES,
    NamedResource,
    Resource,
    ResourceKind,
    Route,
    Service,
    Upstream,
    kind_of,
    resource_id,
)

__all__ = [
    "ADCConfig",
    "ChangeEvent",
    "ChangeKind",
    "InvalidChangeEventError",
    "NamedResource",
    "RESOURCE_TYPES",
    "Resource",
    "ResourceKind",
    "Route",
    "Service",
    "Upstream",
    "kind_of",
    "resource_id",
]
