# =============================================================================
# tests/test_permission_registry.py - Permission Registry Tests
# =============================================================================
# Tests for PermissionRegistry queries:
# - scopes allowed for an action, in document order
# - CRUD scopes per resource and per operation
# - unknown resources yield empty results
# =============================================================================

import pytest

from core.models import CrudOperation, ResourceKind
from core.registry import PermissionRegistry, load_permissions


class TestGetPermission:

    def test_scopes_in_document_order(self, permission_registry):
        assert permission_registry.get_permission("Catalogue", "view") == ["admin", "auditor", "reader"]

    def test_single_scope(self, permission_registry):
        assert permission_registry.get_permission("Catalogue", "delete") == ["admin"]

    def test_service_action(self, permission_registry):
        assert permission_registry.get_permission("reports", "monthly") == ["analyst"]

    def test_unknown_action(self, permission_registry):
        assert permission_registry.get_permission("Catalogue", "balance") == []

    def test_unknown_resource(self, permission_registry):
        assert permission_registry.get_permission("Wallet", "view") == []


class TestHasPermission:

    def test_any_scope(self, permission_registry):
        assert permission_registry.has_permission("Catalogue", "delete")
        assert not permission_registry.has_permission("reports", "delete")

    def test_held_scopes(self, permission_registry):
        assert permission_registry.has_permission("Catalogue", "delete", scopes=["admin"])
        assert not permission_registry.has_permission("Catalogue", "delete", scopes=["auditor"])
        assert permission_registry.has_permission("Catalogue", "list", scopes=["auditor", "reader"])

    def test_no_scopes_held(self, permission_registry):
        assert not permission_registry.has_permission("Catalogue", "view", scopes=[])

    def test_unknown_resource(self, permission_registry):
        assert not permission_registry.has_permission("Wallet", "view", scopes=["admin"])


class TestCrudPermissions:

    def test_crud_scopes(self, permission_registry):
        assert permission_registry.crud_permissions("Catalogue") == ["admin", "auditor", "reader"]

    def test_service_without_crud_actions(self, permission_registry):
        assert permission_registry.crud_permissions("reports") == []

    def test_unknown_resource(self, permission_registry):
        assert permission_registry.crud_permissions("Wallet") == []

    @pytest.mark.parametrize("operation, scopes", [
        (CrudOperation.CREATE, ["admin"]),
        (CrudOperation.RETRIEVE, ["admin", "auditor", "reader"]),
        (CrudOperation.UPDATE, ["admin"]),
        (CrudOperation.DESTROY, ["admin"]),
        ("list", ["admin", "reader"]),
    ])
    def test_scopes_for(self, permission_registry, operation, scopes):
        assert permission_registry.scopes_for("Catalogue", operation) == scopes

    def test_synonyms_count(self):
        registry = load_permissions({"models": [{
            "name": "Wallet",
            "permissions": [
                {"name": "writer", "action": ["create", "change", "remove"]},
                {"name": "reader", "action": ["read"]},
            ],
        }]})

        assert registry.scopes_for("Wallet", "create") == ["writer"]
        assert registry.scopes_for("Wallet", "update") == ["writer"]
        assert registry.scopes_for("Wallet", "destroy") == ["writer"]
        assert registry.scopes_for("Wallet", "retrieve") == ["reader"]
        assert registry.scopes_for("Wallet", "list") == []


class TestViews:

    def test_resources_and_kind(self, permission_registry):
        assert permission_registry.resources == ["Catalogue", "reports"]
        assert permission_registry.kind("Catalogue") == ResourceKind.MODEL
        assert permission_registry.kind("reports") == ResourceKind.SERVICE
        assert permission_registry.kind("Wallet") is None

    def test_contains_and_len(self, permission_registry):
        assert "Catalogue" in permission_registry
        assert "Wallet" not in permission_registry
        assert len(permission_registry) == 2

    def test_meta(self, permission_registry):
        assert permission_registry.meta == {
            "Catalogue": "Supported currencies",
            "reports": "Report endpoints",
        }

    def test_actions(self, permission_registry):
        assert permission_registry.actions == frozenset(
            {"delete", "edit", "view", "add", "list", "monthly", "yearly"}
        )

    def test_permissions_view(self, permission_registry):
        rules = permission_registry.permissions["Catalogue"]
        assert [r.scope for r in rules] == ["admin", "auditor", "reader"]
        assert rules[2].actions == ("view", "list")

    def test_list_permissions_unknown(self, permission_registry):
        assert permission_registry.list_permissions("Wallet") == []

    def test_empty_registry(self):
        registry = PermissionRegistry([])
        assert len(registry) == 0
        assert registry.actions == frozenset()


class TestSerialization:

    def test_round_trip(self, permission_registry):
        reloaded = load_permissions(permission_registry.to_document())

        assert reloaded.resources == permission_registry.resources
        assert reloaded.permissions == permission_registry.permissions
        assert reloaded.kind("reports") == ResourceKind.SERVICE

    def test_bundles_are_expanded(self, permission_registry):
        document = permission_registry.to_document()
        reader = document["models"][0]["permissions"][2]
        assert reader == {"name": "reader", "action": ["view", "list"]}
