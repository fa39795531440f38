"""Tests for converting permission forms into permission lists."""

from __future__ import annotations

import sys

import pytest

from accesscore import (
    AccessControl,
    MalformedPermissionsError,
    PermissionCatalog,
    PermissionDescriptor,
    PermissionRestrictionError,
    Permissions,
    RestrictionMatch,
    collect_permission_tokens,
    expand_crud_operations,
    get_http_status_code,
    to_permission_list,
)

CATALOG = PermissionCatalog(
    (
        PermissionDescriptor("root", restrict="root"),
        PermissionDescriptor("test.boolean"),
        PermissionDescriptor("test.crud", "crud"),
        PermissionDescriptor("test.restricted", restrict="root"),
        PermissionDescriptor("test.restrictedCrud", "crud", restrict={"delete": "root"}),
    )
)

ROOT = AccessControl(grants="root")
NOBODY = AccessControl()


def resolve(tree, user_access=ROOT, existing_access=NOBODY, **kwargs):
    kwargs.setdefault("catalog", CATALOG)
    return to_permission_list(tree, user_access, existing_access, **kwargs)


class TestFlattening:
    """Tests for walking the submitted tree."""

    def test_empty_tree(self) -> None:
        """An empty form grants nothing."""
        assert resolve({}) is None

    def test_false_leaf(self) -> None:
        """False leaves are not emitted."""
        assert resolve({"foo": False}) is None

    def test_true_leaf(self) -> None:
        """A true leaf is emitted under its own name."""
        assert resolve({"foo": True}) == "foo"

    def test_nested_paths_are_dotted(self) -> None:
        """Nested keys are joined with dots, in submission order."""
        tree = {"test": {"boolean": True, "nested": {"deeper": True, "skipped": False}}, "other": True}
        assert resolve(tree) == "test.boolean,test.nested.deeper,other"

    def test_unknown_mapping_is_not_crud(self) -> None:
        """Operation keys only expand for CRUD permissions in the catalog."""
        assert resolve({"unknown": {"read": True}}) == "unknown.read"

    def test_boolean_catalog_entry_with_children(self) -> None:
        """Boolean catalog entries recurse like any other path."""
        assert resolve({"test": {"boolean": {"child": True}}}) == "test.boolean.child"

    def test_non_boolean_scalars_are_ignored(self) -> None:
        """Values that are neither booleans nor mappings grant nothing."""
        assert resolve({"a": 1, "b": "on", "c": True}) == "c"

    def test_duplicates_are_kept(self) -> None:
        """Tokens are not deduplicated."""
        assert resolve({"p": True, "p:self": True}) == "p,p"

    def test_collect_without_validation(self) -> None:
        """collect_permission_tokens() walks without checking restrictions."""
        tokens = collect_permission_tokens({"test": {"restricted": True, "crud": {"read": True}}}, CATALOG)
        assert tokens == ["test.restricted", "test.crud:read"]

    def test_key_order_does_not_change_content(self) -> None:
        """Reordered keys give the same set of tokens."""
        first = resolve({"test": {"boolean": True, "crud": {"read": True, "delete": True}}, "x": True})
        second = resolve({"x": True, "test": {"crud": {"delete": True, "read": True}, "boolean": True}})
        assert set(first.split(",")) == set(second.split(","))


class TestSelfSuffix:
    """Tests for the ``:self`` key normalisation."""

    def test_self_before_plain_key(self) -> None:
        """A later plain key still grants the permission."""
        assert resolve({"p:self": False, "p": True}) == "p"

    def test_plain_before_self_key(self) -> None:
        """A later false self key does not revoke an earlier grant."""
        assert resolve({"p": True, "p:self": False}) == "p"

    def test_self_key_with_children(self) -> None:
        """The self key grants the root while the plain key carries the children."""
        assert resolve({"event:self": True, "event": {"visible": True}}) == "event,event.visible"

    def test_self_key_is_normalised_before_lookup(self) -> None:
        """A self-suffixed CRUD key is recognised as the CRUD permission."""
        assert resolve({"test": {"crud:self": {"read": True}}}) == "test.crud:read"


class TestCrudExpansion:
    """Tests for CRUD permissions."""

    def test_all_operations_collapse(self) -> None:
        """All four operations emit the bare name."""
        tree = {"test": {"crud": {"create": True, "read": True, "update": True, "delete": True}}}
        assert resolve(tree) == "test.crud"

    def test_subset_emits_operations(self) -> None:
        """A subset emits one token per operation."""
        tree = {"test": {"crud": {"read": True, "update": True}}}
        assert resolve(tree) == "test.crud:read,test.crud:update"

    def test_operations_in_canonical_order(self) -> None:
        """Operations are emitted as create, read, update, delete."""
        tree = {"test": {"crud": {"delete": True, "create": True}}}
        assert resolve(tree) == "test.crud:create,test.crud:delete"

    def test_no_operations(self) -> None:
        """No truthy operation emits nothing."""
        tree = {"test": {"crud": {"create": False, "read": False}}}
        assert resolve(tree) is None

    def test_unknown_operation_keys_are_ignored(self) -> None:
        """Only the four operations are read from a CRUD node."""
        tree = {"test": {"crud": {"read": True, "unicorn": True}}}
        assert resolve(tree) == "test.crud:read"

    def test_expand_crud_operations(self) -> None:
        """The expansion policy can be used on its own."""
        assert expand_crud_operations("p", ("delete", "create", "read", "update")) == ["p"]
        assert expand_crud_operations("p", ("update",)) == ["p:update"]
        assert expand_crud_operations("p", ()) == []


class TestMalformedInput:
    """Tests for input that is not a nested mapping."""

    @pytest.mark.parametrize("tree", [None, [1, 2], "x", 42, True])
    def test_root_must_be_mapping(self, tree) -> None:
        """Anything but a mapping at the root is rejected."""
        with pytest.raises(MalformedPermissionsError):
            resolve(tree)

    @pytest.mark.parametrize("value", [None, [1, 2], ()])
    def test_nested_levels_must_be_mappings(self, value) -> None:
        """Nested None or sequences are rejected."""
        with pytest.raises(MalformedPermissionsError):
            resolve({"test": {"nested": value}})

    def test_crud_node_must_be_mapping(self) -> None:
        """A CRUD node without operations mapping is rejected."""
        with pytest.raises(MalformedPermissionsError):
            resolve({"test": {"crud": None}})

    @pytest.mark.parametrize(
        "tree",
        [{1: True}, {None: True}, {"test": {("a", "b"): True}}, {"test": {"boolean": True, 3: False}}],
    )
    def test_keys_must_be_strings(self, tree) -> None:
        """Non-string keys at any level are rejected."""
        with pytest.raises(MalformedPermissionsError, match="Unexpected key type"):
            resolve(tree)

    def test_too_deeply_nested(self) -> None:
        """A tree deeper than the interpreter can walk is rejected."""
        tree: dict = {"a": True}
        for _ in range(sys.getrecursionlimit() + 10):
            tree = {"a": tree}

        with pytest.raises(MalformedPermissionsError, match="nested too deeply"):
            resolve(tree)

    def test_malformed_is_client_error(self) -> None:
        """Malformed input maps to HTTP 400."""
        with pytest.raises(MalformedPermissionsError) as exc_info:
            resolve(None)
        assert get_http_status_code(exc_info.value) == 400
        assert "NoneType" in exc_info.value.message


class TestRestrictions:
    """Tests for root-restricted permissions."""

    def test_root_may_grant_restricted(self) -> None:
        """Root actors may grant anything."""
        assert resolve({"test": {"restricted": True}}, user_access=ROOT) == "test.restricted"

    def test_non_root_may_not_grant_restricted(self) -> None:
        """Non-root actors cannot newly grant a restricted permission."""
        with pytest.raises(PermissionRestrictionError, match="test.restricted") as exc_info:
            resolve({"test": {"restricted": True}}, user_access=NOBODY)
        assert exc_info.value.permission == "test.restricted"
        assert get_http_status_code(exc_info.value) == 403

    def test_non_root_may_keep_existing_grant(self) -> None:
        """Re-granting what the target already holds is allowed."""
        existing = AccessControl(grants="test.restricted")
        assert resolve({"test": {"restricted": True}}, NOBODY, existing) == "test.restricted"

    def test_unrestricted_permissions_pass(self) -> None:
        """Non-root actors may grant unrestricted permissions."""
        tree = {"test": {"boolean": True, "crud": {"read": True}}}
        assert resolve(tree, user_access=NOBODY) == "test.boolean,test.crud:read"

    def test_revoked_restricted_permission_is_not_checked(self) -> None:
        """Only emitted tokens are validated."""
        assert resolve({"test": {"restricted": False}}, user_access=NOBODY) is None

    def test_unrestricted_crud_operation(self) -> None:
        """Operations without a restriction may be granted."""
        tree = {"test": {"restrictedCrud": {"read": True, "update": True}}}
        assert resolve(tree, user_access=NOBODY) == "test.restrictedCrud:read,test.restrictedCrud:update"

    def test_restricted_crud_operation(self) -> None:
        """A restricted operation cannot be granted by non-root actors."""
        tree = {"test": {"restrictedCrud": {"delete": True}}}
        with pytest.raises(PermissionRestrictionError, match="test.restrictedCrud:delete"):
            resolve(tree, user_access=NOBODY)

    def test_full_crud_checks_restricted_operation(self) -> None:
        """A bare CRUD token is checked against every restricted operation."""
        tree = {"test": {"restrictedCrud": {"create": True, "read": True, "update": True, "delete": True}}}
        with pytest.raises(PermissionRestrictionError, match="test.restrictedCrud:delete"):
            resolve(tree, user_access=NOBODY)

        existing = AccessControl(grants="test.restrictedCrud:delete")
        assert resolve(tree, NOBODY, existing) == "test.restrictedCrud"

    def test_parent_is_bound_by_child_restrictions(self) -> None:
        """Granting a parent cannot bypass a restricted child."""
        with pytest.raises(PermissionRestrictionError, match='"test"'):
            resolve({"test": True}, user_access=NOBODY)

    def test_parent_already_held(self) -> None:
        """A parent the target already held may be kept."""
        existing = AccessControl(grants="test")
        assert resolve({"test": True}, NOBODY, existing) == "test"

    def test_root_itself_is_restricted(self) -> None:
        """Only root can hand out root."""
        with pytest.raises(PermissionRestrictionError, match="root"):
            resolve({"root": True}, user_access=NOBODY)
        assert resolve({"root": True}, user_access=ROOT) == "root"


class TestRestrictionMatching:
    """Tests for prefix vs. boundary matching of restricted entries."""

    EXISTING = AccessControl(grants="test.restricted")

    def test_boundary_ignores_sibling_with_shared_prefix(self) -> None:
        """Boundary matching does not select ``test.restrictedCrud`` for ``test.restricted``."""
        result = resolve({"test": {"restricted": True}}, NOBODY, self.EXISTING, match=RestrictionMatch.BOUNDARY)
        assert result == "test.restricted"

    def test_prefix_selects_sibling_with_shared_prefix(self) -> None:
        """Prefix matching also applies ``test.restrictedCrud``'s restrictions."""
        with pytest.raises(PermissionRestrictionError, match="test.restrictedCrud:delete"):
            resolve({"test": {"restricted": True}}, NOBODY, self.EXISTING, match=RestrictionMatch.PREFIX)

    def test_root_is_unaffected_by_mode(self) -> None:
        """Root actors pass in either mode."""
        for match in RestrictionMatch:
            assert resolve({"test": {"restricted": True}}, ROOT, NOBODY, match=match) == "test.restricted"


class TestDefaultCatalog:
    """Tests against the Volunteer Manager catalog."""

    def test_event_permissions(self) -> None:
        """Event permissions can be assigned by non-root administrators."""
        tree = {"event": {"visible": True, "applications": {"read": True, "update": True}}}
        result = to_permission_list(tree, NOBODY, NOBODY)
        assert result == "event.visible,event.applications:read,event.applications:update"

    def test_ai_settings_are_root_only(self) -> None:
        """system.internals.ai is restricted to root."""
        tree = {"system": {"internals": {"ai": True}}}
        with pytest.raises(PermissionRestrictionError, match=Permissions.SYSTEM_INTERNALS_AI):
            to_permission_list(tree, NOBODY, NOBODY)
        assert to_permission_list(tree, ROOT, NOBODY) == Permissions.SYSTEM_INTERNALS_AI

    def test_account_deletion_is_root_only(self) -> None:
        """Deleting accounts is root-only; other operations are not."""
        tree = {"organisation": {"accounts": {"read": True, "update": True}}}
        assert to_permission_list(tree, NOBODY, NOBODY) == "organisation.accounts:read,organisation.accounts:update"

        tree = {"organisation": {"accounts": {"delete": True}}}
        with pytest.raises(PermissionRestrictionError, match="organisation.accounts:delete"):
            to_permission_list(tree, NOBODY, NOBODY)

    def test_round_trip_through_access_control(self) -> None:
        """The stored list can be loaded back into an AccessControl."""
        tree = {"event": {"visible": True, "applications": {"read": True}}}
        access = AccessControl(grants=to_permission_list(tree, NOBODY, NOBODY))
        assert access.can("event.visible")
        assert access.can("event.applications", "read")
        assert not access.can("event.applications", "update")
