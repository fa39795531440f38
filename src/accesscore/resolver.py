"""Permission resolution bound to a catalog and configuration.

Route handlers that update account permissions create one resolver at
startup and call :meth:`PermissionResolver.resolve` per submission::

    resolver = PermissionResolver(config=load_config_from_env())

    try:
        grants = resolver.resolve(form["grants"], user_access, existing_access,
                                  actor_id=user.id, target_id=account.id)
    except AccessCoreError as e:
        return error_response(get_http_status_code(e), e.message)
"""

from __future__ import annotations

from typing import Any, Optional

from .config import AccessConfig
from .exceptions import AccessCoreError
from .logging import get_access_logger, safe_preview
from .permissions.catalog import DEFAULT_CATALOG, PermissionCatalog
from .permissions.flatten import to_permission_list
from .permissions.restrictions import AccessSnapshot


class PermissionResolver:
    """Converts permission forms using a fixed catalog and match mode."""

    __slots__ = ("catalog", "config")

    def __init__(
        self,
        catalog: PermissionCatalog = DEFAULT_CATALOG,
        config: Optional[AccessConfig] = None,
    ) -> None:
        self.catalog = catalog
        self.config = config or AccessConfig()

    def resolve(
        self,
        tree: Any,
        user_access: AccessSnapshot,
        existing_access: AccessSnapshot,
        *,
        actor_id: Optional[int | str] = None,
        target_id: Optional[int | str] = None,
    ) -> str | None:
        """Run :func:`to_permission_list` with this resolver's catalog and settings.

        Errors are logged against the acting and target accounts and then
        re-raised unchanged.
        """
        logger = get_access_logger(__name__, actor_id=actor_id, target_id=target_id)
        try:
            permissions = to_permission_list(
                tree,
                user_access,
                existing_access,
                catalog=self.catalog,
                match=self.config.restriction_match,
            )
        except AccessCoreError as e:
            logger.info("Permission update rejected: [%s] %s", e.code, e.message)
            raise

        logger.debug("Resolved %s to %s", safe_preview(tree), permissions)
        return permissions

    def __repr__(self) -> str:
        return f"PermissionResolver(catalog={self.catalog!r}, match={self.config.restriction_match.value!r})"


__all__ = [
    "PermissionResolver",
]
