"""Permission catalog, resolution and access control for the Volunteer Manager.

Defines:
- Permissions: Well-known permission names (dotted ``a.b.c`` format)
- PermissionCatalog / DEFAULT_CATALOG: Declared permissions and their restrictions
- PERMISSION_GROUPS: Group → member permissions
- to_permission_list(): Convert a submitted permission form into a stored list
- validate_restrictions(): Enforce root-only permissions
- AccessControl: Resolve an account's grants and revokes
"""

from .access import PERMISSION_PATTERN, AccessControl, AccessResult, parse_permissions
from .catalog import DEFAULT_CATALOG, PermissionCatalog, PermissionDescriptor
from .constants import (
    SELF_SUFFIX,
    AccessOperation,
    AccessRestriction,
    PermissionKind,
    Permissions,
    RestrictionMatch,
)
from .flatten import collect_permission_tokens, expand_crud_operations, to_permission_list
from .groups import PERMISSION_GROUPS, expand_permission_groups
from .restrictions import (
    AccessSnapshot,
    is_restricted,
    matching_descriptors,
    split_permission,
    validate_restriction,
    validate_restrictions,
)

__all__ = [
    "DEFAULT_CATALOG",
    "PERMISSION_GROUPS",
    "PERMISSION_PATTERN",
    "SELF_SUFFIX",
    "AccessControl",
    "AccessOperation",
    "AccessRestriction",
    "AccessResult",
    "AccessSnapshot",
    "PermissionCatalog",
    "PermissionDescriptor",
    "PermissionKind",
    "Permissions",
    "RestrictionMatch",
    "collect_permission_tokens",
    "expand_crud_operations",
    "expand_permission_groups",
    "is_restricted",
    "matching_descriptors",
    "parse_permissions",
    "split_permission",
    "to_permission_list",
    "validate_restriction",
    "validate_restrictions",
]
