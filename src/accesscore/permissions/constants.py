"""Permission name constants, operations, and restriction kinds.

Provides:
- ``Permissions`` — well-known permission names (dotted ``a.b.c`` format).
- ``AccessOperation`` — the four CRUD operations, in canonical order.
- ``PermissionKind`` — descriptor kinds (boolean / crud).
- ``AccessRestriction`` — restriction rules a catalog entry can carry.
- ``RestrictionMatch`` — how the restriction validator finds catalog entries.
"""

from __future__ import annotations

from enum import Enum

# Suffix to distinguish the root of nested permissions from its children.
# Forms are submitted in declaration order, so "foo:self" is normalised to
# "foo" before the catalog is consulted.
SELF_SUFFIX = ":self"

# Separator between a permission name and a CRUD operation.
OPERATION_SEPARATOR = ":"

# Separator between the segments of a permission path.
PATH_SEPARATOR = "."


class Permissions:
    """Well-known permission names for the Volunteer Manager.

    Format: ``{area}.{feature}[.{detail}]``, optionally followed by
    ``:{operation}`` for CRUD permissions granted per operation.

    Builders::

        Permissions.operation("system.logs", "delete")  → "system.logs:delete"
        Permissions.self_scoped("event.visible")        → "event.visible:self"
    """

    ROOT = "root"

    # ── Events ──────────────────────────────────────────
    EVENT_APPLICATIONS = "event.applications"
    EVENT_HOTELS = "event.hotels"
    EVENT_REFUNDS = "event.refunds"
    EVENT_REQUESTS = "event.requests"
    EVENT_SCHEDULES = "event.schedules"
    EVENT_SETTINGS = "event.settings"
    EVENT_TRAININGS = "event.trainings"
    EVENT_VISIBLE = "event.visible"

    # ── Organisation ────────────────────────────────────
    ORGANISATION_ACCOUNTS = "organisation.accounts"
    ORGANISATION_AVATARS = "organisation.avatars"
    ORGANISATION_PERMISSIONS = "organisation.permissions"

    # ── Statistics ──────────────────────────────────────
    STATISTICS_BASIC = "statistics.basic"
    STATISTICS_FINANCES = "statistics.finances"

    # ── System ──────────────────────────────────────────
    SYSTEM_INTERNALS_AI = "system.internals.ai"
    SYSTEM_INTERNALS_OUTBOX = "system.internals.outbox"
    SYSTEM_LOGS = "system.logs"

    # ── Volunteers ──────────────────────────────────────
    VOLUNTEER_ACCOUNT_INFORMATION = "volunteer.account.information"
    VOLUNTEER_AVATARS = "volunteer.avatars"

    @staticmethod
    def operation(name: str, operation: str) -> str:
        """Build a token granting a single CRUD operation on ``name``."""
        return f"{name}{OPERATION_SEPARATOR}{operation}"

    @staticmethod
    def self_scoped(name: str) -> str:
        """Build the self-scoped form key for ``name`` as submitted by forms."""
        return f"{name}{SELF_SUFFIX}"


class AccessOperation:
    """Operations of a CRUD permission.

    ``ALL`` holds them in the canonical order used whenever tokens are
    emitted or restrictions are checked.
    """

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"

    ALL = ("create", "read", "update", "delete")


class PermissionKind(str, Enum):
    """Kind of a catalog entry."""

    BOOLEAN = "boolean"
    CRUD = "crud"


class AccessRestriction(str, Enum):
    """Restriction rules that limit who may grant a permission."""

    ROOT = "root"  # Only holders of the root permission may grant


class RestrictionMatch(str, Enum):
    """How a token's base name selects catalog entries during validation.

    - PREFIX: any entry whose name starts with the base name, so
      ``event.settings`` also selects ``event.settingsAdvanced``.
    - BOUNDARY: the exact name, or names continuing with ``.`` or ``:``.
    """

    PREFIX = "prefix"
    BOUNDARY = "boundary"


__all__ = [
    "OPERATION_SEPARATOR",
    "PATH_SEPARATOR",
    "SELF_SUFFIX",
    "AccessOperation",
    "AccessRestriction",
    "PermissionKind",
    "Permissions",
    "RestrictionMatch",
]
