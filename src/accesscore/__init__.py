from .config import AccessConfig, LogLevel, load_config_from_env
from .availability import AvailabilityStatus, AvailabilityWindow, determine_availability_status
from .exceptions import (
    AccessCoreError,
    AccessDeniedError,
    ConfigurationError,
    MalformedPermissionsError,
    PermissionRestrictionError,
    get_grpc_status_code,
    get_http_status_code,
)
from .logging import (
    safe_preview,
    AccessLogFormatter,
    AccessLoggerAdapter,
    setup_logging,
    get_access_logger,
)
from .permissions import (
    DEFAULT_CATALOG,
    PERMISSION_GROUPS,
    PERMISSION_PATTERN,
    SELF_SUFFIX,
    AccessControl,
    AccessOperation,
    AccessRestriction,
    AccessResult,
    PermissionCatalog,
    PermissionDescriptor,
    PermissionKind,
    Permissions,
    RestrictionMatch,
    collect_permission_tokens,
    expand_crud_operations,
    expand_permission_groups,
    to_permission_list,
    validate_restrictions,
)
from .resolver import PermissionResolver

__all__ = [
    'AccessConfig',
    'LogLevel',
    'load_config_from_env',
    'AvailabilityStatus',
    'AvailabilityWindow',
    'determine_availability_status',
    'AccessCoreError',
    'AccessDeniedError',
    'ConfigurationError',
    'MalformedPermissionsError',
    'PermissionRestrictionError',
    'get_grpc_status_code',
    'get_http_status_code',
    'safe_preview',
    'AccessLogFormatter',
    'AccessLoggerAdapter',
    'setup_logging',
    'get_access_logger',
    'DEFAULT_CATALOG',
    'PERMISSION_GROUPS',
    'PERMISSION_PATTERN',
    'SELF_SUFFIX',
    'AccessControl',
    'AccessOperation',
    'AccessRestriction',
    'AccessResult',
    'PermissionCatalog',
    'PermissionDescriptor',
    'PermissionKind',
    'Permissions',
    'RestrictionMatch',
    'collect_permission_tokens',
    'expand_crud_operations',
    'expand_permission_groups',
    'to_permission_list',
    'validate_restrictions',
    'PermissionResolver',
]
