"""Permission groups and their expansion.

Provides:
- ``PERMISSION_GROUPS`` — group name → member permissions.
- ``expand_permission_groups()`` — resolve group membership into permissions.

Groups are granted like any other permission (``grants="senior"``) and
stand for every permission they list. Members may themselves be groups.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .constants import Permissions

# ── Permission Groups ───────────────────────────────────
# A group implies all of its members.

PERMISSION_GROUPS: dict[str, tuple[str, ...]] = {
    "staff": (Permissions.EVENT_VISIBLE,),
    "senior": (
        "staff",
        Permissions.EVENT_APPLICATIONS,
        Permissions.EVENT_SCHEDULES,
        Permissions.VOLUNTEER_ACCOUNT_INFORMATION,
    ),
    "head": (
        "senior",
        Permissions.EVENT_HOTELS,
        Permissions.EVENT_REFUNDS,
        Permissions.EVENT_REQUESTS,
        Permissions.EVENT_TRAININGS,
        Permissions.STATISTICS_BASIC,
    ),
}


def expand_permission_groups(
    permissions: Iterable[str],
    groups: Mapping[str, tuple[str, ...]] = PERMISSION_GROUPS,
) -> tuple[str, ...]:
    """Expand permissions by resolving group membership.

    Group names stay in the result; their members (transitively) are added.

    Args:
        permissions: Raw permission strings, possibly including group names.
        groups: Group table to resolve against.

    Returns:
        Deduplicated, sorted tuple with all implied permissions.

    Example::

        >>> expand_permission_groups(("senior",))
        ('event.applications', 'event.schedules', 'event.visible', 'senior',
         'staff', 'volunteer.account.information')
    """
    permissions = tuple(permissions)
    expanded: set[str] = set(permissions)
    queue = list(permissions)

    while queue:
        perm = queue.pop()
        for member in groups.get(perm, ()):
            if member not in expanded:
                expanded.add(member)
                queue.append(member)

    return tuple(sorted(expanded))


__all__ = [
    "PERMISSION_GROUPS",
    "expand_permission_groups",
]
