"""Access control for a single account.

Provides the access snapshot consumed by permission resolution: an
:class:`AccessControl` built from the grants and revokes stored on an
account, answering whether a permission (or one of its CRUD operations)
is held.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Literal, Optional, Union

from ..exceptions import AccessDeniedError, MalformedPermissionsError
from .constants import OPERATION_SEPARATOR, PATH_SEPARATOR
from .groups import PERMISSION_GROUPS, expand_permission_groups

logger = logging.getLogger(__name__)

# Syntax of a stored permission: dotted name with an optional CRUD operation.
PERMISSION_PATTERN = re.compile(r"^[a-zA-Z]+(?:\.[a-zA-Z]+)*(?::(?:create|read|update|delete))?$")

PermissionInput = Union[str, Iterable[str], None]


@dataclass(frozen=True)
class AccessResult:
    """Outcome of an access query.

    Attributes:
        result: ``"granted"`` or ``"revoked"``.
        crud: The answer came from an explicit ``name:operation`` entry.
        expanded: The answer was implied rather than stated, i.e. it came
            from an ancestor, from a bare CRUD grant answering an operation
            query, or from a permission group.
    """

    result: Literal["granted", "revoked"]
    crud: bool = False
    expanded: bool = False

    @property
    def granted(self) -> bool:
        return self.result == "granted"


def parse_permissions(permissions: PermissionInput) -> tuple[str, ...]:
    """Normalise stored permissions into a tuple of tokens.

    Accepts the comma-separated form written by ``to_permission_list()``,
    an iterable of tokens, or None. Every token must match
    :data:`PERMISSION_PATTERN`.

    Raises:
        MalformedPermissionsError: A token is syntactically invalid.
    """
    if permissions is None:
        return ()
    if isinstance(permissions, str):
        permissions = permissions.split(",") if permissions else ()

    tokens = tuple(permissions)
    for token in tokens:
        if not isinstance(token, str) or not PERMISSION_PATTERN.match(token):
            raise MalformedPermissionsError(f"Invalid permission: {token!r}", permission=token)
    return tokens


def _ancestors(permission: str) -> Iterable[str]:
    """``a.b.c`` → ``a.b.c``, ``a.b``, ``a``."""
    segments = permission.split(PATH_SEPARATOR)
    for length in range(len(segments), 0, -1):
        yield PATH_SEPARATOR.join(segments[:length])


def _expand(tokens: tuple[str, ...], groups: Mapping[str, tuple[str, ...]]) -> dict[str, bool]:
    """Map each permission to whether it was stated explicitly (vs. via a group)."""
    entries = {token: True for token in tokens}
    for permission in expand_permission_groups(tokens, groups):
        entries.setdefault(permission, False)
    return entries


class AccessControl:
    """Resolves the access of one account from its grants and revokes.

    Resolution rules:
    1. An explicit ``name:operation`` entry answers operation queries
       (revokes before grants).
    2. Otherwise the permission and then each ancestor is consulted, most
       specific first. At every level a revoke beats a grant.
    3. Groups in grants or revokes stand for all of their members.

    Example::

        access = AccessControl(grants="event,system.logs:read", revokes="event.settings")
        access.can("event.visible")            # True (via "event")
        access.can("event.settings")           # False (revoked)
        access.can("system.logs", "read")      # True
        access.can("system.logs", "delete")    # False
    """

    __slots__ = ("_grants", "_revokes")

    def __init__(
        self,
        grants: PermissionInput = None,
        revokes: PermissionInput = None,
        *,
        groups: Mapping[str, tuple[str, ...]] = PERMISSION_GROUPS,
    ) -> None:
        self._grants = _expand(parse_permissions(grants), groups)
        self._revokes = _expand(parse_permissions(revokes), groups)

    @property
    def grants(self) -> tuple[str, ...]:
        """All granted permissions, including those implied by groups."""
        return tuple(self._grants)

    @property
    def revokes(self) -> tuple[str, ...]:
        """All revoked permissions, including those implied by groups."""
        return tuple(self._revokes)

    def query(self, permission: str, operation: Optional[str] = None) -> AccessResult | None:
        """Resolve ``permission`` (optionally one CRUD ``operation`` of it).

        Returns None when neither a grant nor a revoke applies.
        """
        if operation:
            token = f"{permission}{OPERATION_SEPARATOR}{operation}"
            for entries, result in ((self._revokes, "revoked"), (self._grants, "granted")):
                if token in entries:
                    return AccessResult(result, crud=True, expanded=not entries[token])

        for candidate in _ancestors(permission):
            exact = candidate == permission and not operation
            for entries, result in ((self._revokes, "revoked"), (self._grants, "granted")):
                if candidate in entries:
                    return AccessResult(result, crud=False, expanded=not (exact and entries[candidate]))

        return None

    def can(self, permission: str, operation: Optional[str] = None) -> bool:
        """Whether ``permission`` (or the given ``operation`` of it) is granted."""
        result = self.query(permission, operation)
        return result is not None and result.granted

    def require(self, permission: str, operation: Optional[str] = None) -> None:
        """Raise :class:`AccessDeniedError` unless :meth:`can` would return True."""
        if self.can(permission, operation):
            return

        token = f"{permission}{OPERATION_SEPARATOR}{operation}" if operation else permission
        logger.debug("Access requirement failed for %s", token)
        raise AccessDeniedError(f'Access to "{token}" is required', permission=token)

    def __repr__(self) -> str:
        return f"AccessControl(grants={list(self._grants)!r}, revokes={list(self._revokes)!r})"


__all__ = [
    "PERMISSION_PATTERN",
    "AccessControl",
    "AccessResult",
    "parse_permissions",
]
