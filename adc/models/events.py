"""Change event data structures.

A ChangeEvent describes one difference between the local configuration and
the remote gateway. It is produced by change discovery, consumed by the
renderer and the applier, and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from adc.models.resources import RESOURCE_TYPES, Resource, ResourceKind, kind_of


class ChangeKind(StrEnum):
    """Operation a ChangeEvent asks for."""

    CREATE = "create"
    DELETE = "delete"
    UPDATE = "update"


class InvalidChangeEventError(ValueError):
    """Raised when a ChangeEvent's values do not fit its kinds."""


# change kind -> (needs old_value, needs new_value)
_REQUIRED_VALUES: dict[ChangeKind, tuple[bool, bool]] = {
    ChangeKind.CREATE: (False, True),
    ChangeKind.DELETE: (True, False),
    ChangeKind.UPDATE: (True, True),
}


@dataclass(frozen=True)
class ChangeEvent:
    """One create, delete or update of a single gateway resource.

    ``old_value`` is the remote representation (delete, update) and
    ``new_value`` the desired one (create, update). The value that is
    irrelevant to ``change`` must be None. Both values must be instances of
    the type registered for ``resource_kind``; this is checked here rather
    than when the event is applied.
    """

    resource_kind: ResourceKind
    change: ChangeKind
    old_value: Resource | None = None
    new_value: Resource | None = None

    def __post_init__(self) -> None:
        try:
            kind = ResourceKind(self.resource_kind)
            change = ChangeKind(self.change)
        except ValueError as exc:
            raise InvalidChangeEventError(str(exc)) from exc
        object.__setattr__(self, "resource_kind", kind)
        object.__setattr__(self, "change", change)

        needs_old, needs_new = _REQUIRED_VALUES[change]
        expected = RESOURCE_TYPES[kind]
        for label, value, needed in (
            ("old_value", self.old_value, needs_old),
            ("new_value", self.new_value, needs_new),
        ):
            if not needed:
                if value is not None:
                    raise InvalidChangeEventError(f"{change} event must not carry {label}")
                continue
            if value is None:
                raise InvalidChangeEventError(f"{change} event requires {label}")
            if not isinstance(value, expected):
                raise InvalidChangeEventError(
                    f"{label} of a {kind} event must be {expected.__name__}, got {type(value).__name__}"
                )

    @classmethod
    def create(cls, new_value: Resource) -> ChangeEvent:
        return cls(kind_of(new_value), ChangeKind.CREATE, new_value=new_value)

    @classmethod
    def delete(cls, old_value: Resource) -> ChangeEvent:
        return cls(kind_of(old_value), ChangeKind.DELETE, old_value=old_value)

    @classmethod
    def update(cls, old_value: Resource, new_value: Resource) -> ChangeEvent:
        return cls(kind_of(new_value), ChangeKind.UPDATE, old_value=old_value, new_value=new_value)

    @property
    def name(self) -> str:
        """Name of the affected resource, taken from the value relevant to ``change``."""
        value = self.old_value if self.change is ChangeKind.DELETE else self.new_value
        assert value is not None
        return value.name
