"""Conversion of submitted permission forms into permission lists.

The account permission form submits a nested mapping whose keys follow the
permission hierarchy and whose leaves are booleans::

    {"event": {"applications": {"read": True}, "visible": True}, "root": False}

:func:`to_permission_list` turns that into the comma-separated list stored
on the account (``"event.applications:read,event.visible"``), after
checking that the acting user may assign every restricted permission in it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..exceptions import MalformedPermissionsError
from .catalog import DEFAULT_CATALOG, PermissionCatalog
from .constants import (
    OPERATION_SEPARATOR,
    PATH_SEPARATOR,
    SELF_SUFFIX,
    AccessOperation,
    RestrictionMatch,
)
from .restrictions import AccessSnapshot, validate_restrictions

logger = logging.getLogger(__name__)


def expand_crud_operations(permission: str, operations: Iterable[str]) -> list[str]:
    """Tokens for a CRUD permission with the given granted ``operations``.

    All four operations collapse into the bare ``permission`` so that a fully
    granted CRUD permission reads the same as a boolean one. Otherwise each
    granted operation becomes ``permission:operation``, in canonical order.
    """
    granted = set(operations)
    if granted.issuperset(AccessOperation.ALL):
        return [permission]

    return [
        f"{permission}{OPERATION_SEPARATOR}{operation}" for operation in AccessOperation.ALL if operation in granted
    ]


def _ensure_mapping(node: Any) -> Mapping[str, Any]:
    if not isinstance(node, Mapping):
        raise MalformedPermissionsError(
            f'Unexpected input type: "{type(node).__name__}"',
            input_type=type(node).__name__,
        )
    return node


def _collect(node: Any, catalog: PermissionCatalog, path: str, tokens: list[str]) -> None:
    for entry, value in _ensure_mapping(node).items():
        if not isinstance(entry, str):
            raise MalformedPermissionsError(
                f'Unexpected key type: "{type(entry).__name__}"',
                key_type=type(entry).__name__,
            )

        name = entry[: -len(SELF_SUFFIX)] if entry.endswith(SELF_SUFFIX) else entry
        permission = f"{path}{name}"

        if isinstance(value, bool):
            if value:
                tokens.append(permission)
            continue

        if isinstance(value, (int, float, str)):
            logger.debug("Ignoring non-boolean value for %s", permission)
            continue

        if catalog.is_crud(permission):
            operations = _ensure_mapping(value)
            tokens.extend(
                expand_crud_operations(permission, (op for op in AccessOperation.ALL if operations.get(op)))
            )
            continue

        _collect(value, catalog, f"{permission}{PATH_SEPARATOR}", tokens)


def collect_permission_tokens(tree: Any, catalog: PermissionCatalog = DEFAULT_CATALOG) -> list[str]:
    """Walk ``tree`` depth-first and return the granted permission tokens.

    Keys are visited in insertion order and tokens are not deduplicated.
    No restriction checks are made; see :func:`to_permission_list`.

    Raises:
        MalformedPermissionsError: ``tree``, or any nested level, is not a
            mapping with string keys, or it is nested too deeply to walk.
    """
    tokens: list[str] = []
    try:
        _collect(tree, catalog, "", tokens)
    except RecursionError as exc:
        raise MalformedPermissionsError("The submitted permissions are nested too deeply") from exc
    return tokens


def to_permission_list(
    tree: Any,
    user_access: AccessSnapshot,
    existing_access: AccessSnapshot,
    *,
    catalog: PermissionCatalog = DEFAULT_CATALOG,
    match: RestrictionMatch = RestrictionMatch.BOUNDARY,
) -> str | None:
    """Convert a submitted permission form into a comma-separated permission list.

    Args:
        tree: Nested mapping as submitted by the permission form.
        user_access: Access of the signed in user making the change.
        existing_access: Access the target account held before the change.
        catalog: Catalog deciding which nodes are CRUD permissions and which
            permissions are restricted.
        match: How restricted catalog entries are selected for a token.

    Returns:
        The tokens joined by commas in the order they were found, or None
        when nothing is granted.

    Raises:
        MalformedPermissionsError: The tree is not a nested mapping.
        PermissionRestrictionError: A restricted permission may not be
            assigned by ``user_access``.

    Example::

        >>> to_permission_list(
        ...     {"event": {"applications": {"read": True, "update": True}, "visible": True}},
        ...     user_access, existing_access)
        'event.applications:read,event.applications:update,event.visible'
    """
    tokens = collect_permission_tokens(tree, catalog)
    if not tokens:
        return None

    validate_restrictions(tokens, user_access, existing_access, catalog=catalog, match=match)
    return ",".join(tokens)


__all__ = [
    "collect_permission_tokens",
    "expand_crud_operations",
    "to_permission_list",
]
