"""Permission catalog: the declared set of grantable permissions.

Provides:
- ``PermissionDescriptor`` — one catalog entry (kind + optional restriction).
- ``PermissionCatalog`` — read-only, validated name → descriptor mapping.
- ``DEFAULT_CATALOG`` — the Volunteer Manager's permissions.

A catalog is built once and never mutated afterwards, so it can be shared
between concurrent resolutions without locking.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Union

from ..exceptions import ConfigurationError
from .constants import AccessOperation, AccessRestriction, PermissionKind, Permissions

# Restriction on a descriptor: one rule for every operation, or a rule per operation.
RestrictionRule = Union[AccessRestriction, Mapping[str, AccessRestriction]]

_NAME_PATTERN = re.compile(r"^[a-zA-Z]+(?:\.[a-zA-Z]+)*$")


@dataclass(frozen=True)
class PermissionDescriptor:
    """A single permission declared in the catalog.

    ``restrict`` limits who may grant the permission. A single
    :class:`AccessRestriction` applies to every operation; a mapping of
    operation → restriction (CRUD permissions only) restricts just those
    operations. Plain strings are accepted for both ``kind`` and rules.

    Example::

        PermissionDescriptor("system.logs", "crud", restrict={"delete": "root"})
    """

    name: str
    kind: PermissionKind = PermissionKind.BOOLEAN
    # Excluded from hashing: per-operation rules are held in a read-only mapping.
    restrict: RestrictionRule | None = field(default=None, hash=False)
    description: str = ""

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "kind", PermissionKind(self.kind))
        except ValueError:
            raise ConfigurationError(f"Invalid kind for {self.name!r}: {self.kind!r}", permission=self.name)

        restrict = self.restrict
        if restrict is None:
            return

        if isinstance(restrict, Mapping):
            rules = {operation: _to_restriction(self.name, rule) for operation, rule in restrict.items()}
            object.__setattr__(self, "restrict", MappingProxyType(rules))
        else:
            object.__setattr__(self, "restrict", _to_restriction(self.name, restrict))

    @property
    def is_crud(self) -> bool:
        return self.kind is PermissionKind.CRUD

    def restrictions(self) -> tuple[tuple[str | None, AccessRestriction], ...]:
        """Flatten ``restrict`` into ``(operation, rule)`` pairs.

        A single rule yields one pair with operation ``None``. A mapping
        yields its operations in canonical CRUD order.
        """
        if self.restrict is None:
            return ()
        if isinstance(self.restrict, AccessRestriction):
            return ((None, self.restrict),)
        return tuple(
            (operation, self.restrict[operation]) for operation in AccessOperation.ALL if operation in self.restrict
        )


def _to_restriction(name: str, rule: object) -> AccessRestriction:
    try:
        return AccessRestriction(rule)
    except ValueError:
        raise ConfigurationError(f"Unknown restriction for {name!r}: {rule!r}", permission=name)


class PermissionCatalog(Mapping[str, PermissionDescriptor]):
    """Immutable mapping of permission name → descriptor.

    Entries are validated on construction; a malformed entry raises
    :class:`ConfigurationError` so mistakes surface at startup rather than
    during a permission update.
    """

    __slots__ = ("_entries",)

    def __init__(self, descriptors: Iterable[PermissionDescriptor]) -> None:
        entries: dict[str, PermissionDescriptor] = {}
        for descriptor in descriptors:
            _validate_descriptor(descriptor)
            if descriptor.name in entries:
                raise ConfigurationError(f"Duplicate permission in catalog: {descriptor.name!r}")

            entries[descriptor.name] = descriptor

        self._entries = MappingProxyType(entries)

    def __getitem__(self, name: str) -> PermissionDescriptor:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def is_crud(self, name: str) -> bool:
        """Whether ``name`` is declared as a CRUD permission."""
        descriptor = self._entries.get(name)
        return descriptor is not None and descriptor.is_crud

    def restricted(self) -> tuple[PermissionDescriptor, ...]:
        """All descriptors that carry a restriction, in declaration order."""
        return tuple(descriptor for descriptor in self._entries.values() if descriptor.restrict is not None)

    def __repr__(self) -> str:
        return f"PermissionCatalog({list(self._entries)!r})"


def _validate_descriptor(descriptor: PermissionDescriptor) -> None:
    if not _NAME_PATTERN.match(descriptor.name):
        raise ConfigurationError(f"Invalid permission name: {descriptor.name!r}", permission=descriptor.name)

    restrict = descriptor.restrict
    if restrict is None or isinstance(restrict, AccessRestriction):
        return

    if not descriptor.is_crud:
        raise ConfigurationError(
            f"Per-operation restrictions require a CRUD permission: {descriptor.name!r}",
            permission=descriptor.name,
        )

    for operation in restrict:
        if operation not in AccessOperation.ALL:
            raise ConfigurationError(
                f"Unknown operation {operation!r} restricted on {descriptor.name!r}", permission=descriptor.name
            )


# ── Default Catalog ─────────────────────────────────────

_ROOT = AccessRestriction.ROOT
_CRUD = PermissionKind.CRUD

DEFAULT_CATALOG = PermissionCatalog(
    (
        PermissionDescriptor(Permissions.ROOT, restrict=_ROOT, description="Unrestricted access to everything"),
        # Events
        PermissionDescriptor(Permissions.EVENT_APPLICATIONS, _CRUD, description="Volunteer applications"),
        PermissionDescriptor(Permissions.EVENT_HOTELS, description="Hotel room bookings"),
        PermissionDescriptor(Permissions.EVENT_REFUNDS, description="Ticket refund requests"),
        PermissionDescriptor(Permissions.EVENT_REQUESTS, description="Schedule requests"),
        PermissionDescriptor(Permissions.EVENT_SCHEDULES, description="Volunteer schedules"),
        PermissionDescriptor(Permissions.EVENT_SETTINGS, description="Event settings"),
        PermissionDescriptor(Permissions.EVENT_TRAININGS, description="Training sessions"),
        PermissionDescriptor(Permissions.EVENT_VISIBLE, description="Visibility of the event"),
        # Organisation
        PermissionDescriptor(
            Permissions.ORGANISATION_ACCOUNTS,
            _CRUD,
            restrict={AccessOperation.DELETE: _ROOT},
            description="Volunteer accounts",
        ),
        PermissionDescriptor(Permissions.ORGANISATION_AVATARS, description="Avatar management"),
        PermissionDescriptor(
            Permissions.ORGANISATION_PERMISSIONS,
            _CRUD,
            restrict={AccessOperation.UPDATE: _ROOT},
            description="Account permissions",
        ),
        # Statistics
        PermissionDescriptor(Permissions.STATISTICS_BASIC, description="Basic statistics"),
        PermissionDescriptor(Permissions.STATISTICS_FINANCES, description="Financial statistics"),
        # System
        PermissionDescriptor(Permissions.SYSTEM_INTERNALS_AI, restrict=_ROOT, description="Generative AI settings"),
        PermissionDescriptor(Permissions.SYSTEM_INTERNALS_OUTBOX, restrict=_ROOT, description="Outgoing messages"),
        PermissionDescriptor(
            Permissions.SYSTEM_LOGS,
            _CRUD,
            restrict={AccessOperation.DELETE: _ROOT},
            description="Audit logs",
        ),
        # Volunteers
        PermissionDescriptor(Permissions.VOLUNTEER_ACCOUNT_INFORMATION, _CRUD, description="Account information"),
        PermissionDescriptor(Permissions.VOLUNTEER_AVATARS, description="Volunteer avatars"),
    )
)


__all__ = [
    "DEFAULT_CATALOG",
    "PermissionCatalog",
    "PermissionDescriptor",
    "RestrictionRule",
]
