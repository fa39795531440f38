"""Enforcement of restricted permissions.

Some catalog entries may only be granted by a sufficiently privileged
actor. A restricted permission can still be *kept*: re-submitting a grant
the target account already held is always allowed, so that a non-root
administrator can edit other permissions of a root-granted account.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Optional, Protocol

from ..exceptions import ConfigurationError, PermissionRestrictionError
from .catalog import DEFAULT_CATALOG, PermissionCatalog, PermissionDescriptor
from .constants import (
    OPERATION_SEPARATOR,
    PATH_SEPARATOR,
    AccessRestriction,
    Permissions,
    RestrictionMatch,
)

logger = logging.getLogger(__name__)


class AccessSnapshot(Protocol):
    """Anything that can answer whether a permission is held."""

    def can(self, permission: str, operation: Optional[str] = None) -> bool: ...


def split_permission(token: str) -> tuple[str, str | None]:
    """Split ``"a.b:read"`` into ``("a.b", "read")``; ``"a.b"`` into ``("a.b", None)``."""
    permission, _, operation = token.partition(OPERATION_SEPARATOR)
    return permission, operation or None


def is_restricted(restriction: AccessRestriction, access: AccessSnapshot) -> bool:
    """Whether ``restriction`` is in effect for the actor described by ``access``."""
    if restriction is AccessRestriction.ROOT:
        return not access.can(Permissions.ROOT)

    raise ConfigurationError(f"Unhandled permission restriction: {restriction!r}")


def matching_descriptors(
    permission: str,
    catalog: PermissionCatalog,
    match: RestrictionMatch = RestrictionMatch.BOUNDARY,
) -> tuple[PermissionDescriptor, ...]:
    """Catalog entries whose restrictions bind tokens for ``permission``.

    A parent's token is bound by the restrictions of its children, so that
    granting ``system`` cannot sneak in a restricted ``system.logs``.

    PREFIX compares raw strings, which also selects unrelated siblings that
    happen to share a prefix (``event.settings`` → ``event.settingsAdvanced``).
    BOUNDARY only accepts the exact name or a ``.``/``:`` continuation.
    Decisions differ between the modes only for such siblings; verify against
    historical authorization logs before switching a deployment to BOUNDARY.
    """
    if match is RestrictionMatch.PREFIX:
        return tuple(
            descriptor for name, descriptor in catalog.items() if name.startswith(permission)
        )

    boundaries = (permission + PATH_SEPARATOR, permission + OPERATION_SEPARATOR)
    return tuple(
        descriptor
        for name, descriptor in catalog.items()
        if name == permission or name.startswith(boundaries)
    )


def validate_restriction(
    permission: str,
    restriction: AccessRestriction,
    user_access: AccessSnapshot,
    existing_access: AccessSnapshot,
) -> None:
    """Raise unless ``user_access`` may assign ``permission`` under ``restriction``.

    Assigning is allowed when the restriction is not in effect for the
    acting user, or when the target already held the exact permission (or
    operation) before this change.
    """
    if not is_restricted(restriction, user_access):
        return  # there are no applied restrictions

    name, operation = split_permission(permission)
    if operation is None:
        if existing_access.can(name):
            return  # this permission has already been granted
    elif existing_access.can(name, operation):
        return  # this permission has already been granted

    logger.warning("Refused assignment of restricted permission %s (%s)", permission, restriction.value)
    raise PermissionRestrictionError(permission, restriction=restriction.value)


def validate_restrictions(
    tokens: Iterable[str],
    user_access: AccessSnapshot,
    existing_access: AccessSnapshot,
    *,
    catalog: PermissionCatalog = DEFAULT_CATALOG,
    match: RestrictionMatch = RestrictionMatch.BOUNDARY,
) -> None:
    """Verify every emitted token against the restrictions in ``catalog``.

    O(tokens × catalog); both are small and this runs once per update.
    Raises :class:`PermissionRestrictionError` on the first violation.
    """
    for token in tokens:
        permission, operation = split_permission(token)

        for descriptor in matching_descriptors(permission, catalog, match):
            for restricted_operation, restriction in descriptor.restrictions():
                if restricted_operation is None:
                    validate_restriction(token, restriction, user_access, existing_access)
                    continue

                if operation is not None and operation != restricted_operation:
                    continue  # restriction covers another operation

                validate_restriction(
                    f"{descriptor.name}{OPERATION_SEPARATOR}{restricted_operation}",
                    restriction,
                    user_access,
                    existing_access,
                )


__all__ = [
    "AccessSnapshot",
    "is_restricted",
    "matching_descriptors",
    "split_permission",
    "validate_restriction",
    "validate_restrictions",
]
