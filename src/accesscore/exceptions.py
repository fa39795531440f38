"""Exception hierarchy for accesscore.

All errors inherit from AccessCoreError and carry a stable ``code`` that
callers map onto their transport:

    from accesscore.exceptions import (
        AccessCoreError,
        MalformedPermissionsError,
        PermissionRestrictionError,
        get_http_status_code,
    )

    try:
        grants = to_permission_list(tree, user_access, existing_access)
    except AccessCoreError as e:
        return error_response(get_http_status_code(e), e.message)
"""

from __future__ import annotations

import logging
from typing import Any

__all__ = [
    "AccessCoreError",
    "ConfigurationError",
    "MalformedPermissionsError",
    "PermissionRestrictionError",
    "AccessDeniedError",
    "get_http_status_code",
    "get_grpc_status_code",
]

logger = logging.getLogger(__name__)


# ---- Exception Hierarchy ----------------------------------------------------


class AccessCoreError(Exception):
    """Base exception for all accesscore errors.

    Attributes:
        code: Stable error code string for protocol mapping (e.g. "PERMISSION_DENIED").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(AccessCoreError):
    """Invalid permission catalog, group table or settings."""

    code: str = "CONFIGURATION_ERROR"


class MalformedPermissionsError(AccessCoreError):
    """Submitted permission data has the wrong shape or syntax."""

    code: str = "MALFORMED_PERMISSIONS"
    message: str = "The submitted permissions are malformed"


class PermissionRestrictionError(AccessCoreError):
    """A restricted permission was assigned by an actor not allowed to do so."""

    code: str = "PERMISSION_DENIED"

    def __init__(self, permission: str, **kwargs: Any) -> None:
        super().__init__(f'You are not able to assign the "{permission}" permission', permission=permission, **kwargs)
        self.permission = permission


class AccessDeniedError(AccessCoreError):
    """An access check required through AccessControl.require() failed."""

    code: str = "PERMISSION_DENIED"


# ---- Status Mapping ---------------------------------------------------------

_HTTP_STATUS_CODES = {
    "MALFORMED_PERMISSIONS": 400,
    "PERMISSION_DENIED": 403,
    "CONFIGURATION_ERROR": 500,
    "INTERNAL_ERROR": 500,
}


def get_http_status_code(error: AccessCoreError) -> int:
    """Map an AccessCoreError to the HTTP status a route handler should return."""
    return _HTTP_STATUS_CODES.get(error.code, 500)


def get_grpc_status_code(error: AccessCoreError) -> Any:
    """Map an AccessCoreError to a grpc.StatusCode.

    Import grpc locally to avoid hard dependency at module level.
    """
    import grpc

    error_to_status = {
        "MALFORMED_PERMISSIONS": grpc.StatusCode.INVALID_ARGUMENT,
        "PERMISSION_DENIED": grpc.StatusCode.PERMISSION_DENIED,
        "CONFIGURATION_ERROR": grpc.StatusCode.FAILED_PRECONDITION,
    }
    status = error_to_status.get(error.code)
    if status is None:
        logger.debug("No gRPC status for error code %s, using INTERNAL", error.code)
        return grpc.StatusCode.INTERNAL
    return status
