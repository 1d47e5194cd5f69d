# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for route and permission models to ensure:
# - Valid data is accepted and paths are resolved correctly
# - Invalid status codes are nullified instead of rejected
# - Invalid methods, params and scopes raise ValidationError
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

import pytest
from pydantic import ValidationError

from core.models import (
    CRUD_VOCABULARY,
    CrudOperation,
    HTTPMethod,
    PayloadField,
    PermissionRule,
    ResourcePermissions,
    RouteEntry,
)


def make_entry(**overrides) -> RouteEntry:
    data = {
        "name": "wallets",
        "key": "retrieve",
        "endpoint": "retrieve@wallets",
        "base": "/wallets",
        "methods": ["GET"],
    }
    data.update(overrides)
    return RouteEntry(**data)


# =============================================================================
# RouteEntry Tests
# =============================================================================

class TestRouteEntryPath:
    """Tests for path resolution."""

    def test_base_only(self):
        entry = make_entry()
        assert entry.path == "/wallets"

    def test_base_and_url(self):
        entry = make_entry(url="/mine")
        assert entry.path == "/wallets/mine"

    def test_declared_param_is_typed_in_place(self):
        entry = make_entry(url="/{wallet_id}", params={"wallet_id": "int"})
        assert entry.path == "/wallets/{wallet_id:int}"
        assert entry.path_param_names == ["wallet_id"]

    def test_undeclared_placeholder_kept(self):
        entry = make_entry(url="/{slug}/detail")
        assert entry.path == "/wallets/{slug}/detail"
        assert entry.path_param_names == ["slug"]

    def test_slashes_are_joined_once(self):
        entry = make_entry(base="/wallets/", url="/{id}/", params={"id": "uuid"})
        assert entry.path == "/wallets/{id:uuid}"

    def test_missing_leading_slash_added(self):
        entry = make_entry(base="wallets")
        assert entry.path == "/wallets"

    def test_unknown_param_type_rejected(self):
        with pytest.raises(ValidationError):
            make_entry(url="/{id}", params={"id": "decimal"})

    def test_param_not_in_url_rejected(self):
        with pytest.raises(ValidationError):
            make_entry(url="/list", params={"id": "int"})

    def test_root_route(self):
        assert make_entry(base="/", url="/").path == "/"
        assert make_entry(base="/").path == "/"

    def test_empty_path_rejected(self):
        with pytest.raises(ValidationError):
            make_entry(base="")


class TestRouteEntryStatus:
    """Status codes outside 100-599 or non-numeric are dropped, not errors."""

    @pytest.mark.parametrize("status", [100, 201, "204", 599])
    def test_valid_status_kept(self, status):
        assert make_entry(status=status).status == int(status)

    @pytest.mark.parametrize("status", [
        99, 600, -1, "abc", "", 201.5, True, [200],
        float("inf"), float("-inf"), float("nan"),
    ])
    def test_invalid_status_nullified(self, status):
        assert make_entry(status=status).status is None


class TestRouteEntryMethods:
    """Tests for method validation."""

    def test_methods_are_upper_cased(self):
        entry = make_entry(methods=["get", "Head"])
        assert entry.methods == (HTTPMethod.GET, HTTPMethod.HEAD)
        assert entry.method_names == ["GET", "HEAD"]

    def test_single_method_string(self):
        assert make_entry(methods="post").methods == (HTTPMethod.POST,)

    def test_unknown_method_rejected(self):
        with pytest.raises(ValidationError):
            make_entry(methods=["FETCH"])

    def test_empty_methods_rejected(self):
        with pytest.raises(ValidationError):
            make_entry(methods=[])


class TestRouteEntryImmutability:

    def test_frozen(self):
        entry = make_entry()
        with pytest.raises(ValidationError):
            entry.status = 500

    def test_to_document_shape(self):
        entry = make_entry(
            url="/{wallet_id}",
            params={"wallet_id": "int"},
            status=200,
            crud="retrieve",
            payload=[PayloadField(name="label")],
        )
        document = entry.to_document()

        assert list(document) == ["retrieve"]
        body = document["retrieve"]
        assert body["methods"] == ["GET"]
        assert body["path"] == {"url": "/{wallet_id}", "params": {"wallet_id": "int"}}
        assert body["crud"] == "retrieve"
        assert body["payload"]["label"]["type"] == "str"


# =============================================================================
# CrudOperation / PayloadField Tests
# =============================================================================

class TestCrudOperation:

    def test_default_methods(self):
        assert CrudOperation.CREATE.default_method == HTTPMethod.POST
        assert CrudOperation.LIST.default_method == HTTPMethod.GET
        assert CrudOperation.UPDATE.default_method == HTTPMethod.PUT
        assert CrudOperation.DESTROY.default_method == HTTPMethod.DELETE

    def test_item_operations(self):
        assert CrudOperation.RETRIEVE.targets_item
        assert not CrudOperation.LIST.targets_item
        assert not CrudOperation.CREATE.targets_item


class TestPayloadField:

    def test_python_type(self):
        assert PayloadField(name="amount", type="float").python_type is float

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            PayloadField(name="amount", type="money")


# =============================================================================
# Permission Model Tests
# =============================================================================

class TestPermissionRule:

    def test_single_action_string(self):
        rule = PermissionRule(scope="auditor", actions="view")
        assert rule.actions == ("view",)
        assert rule.allows("view")
        assert not rule.allows("delete")

    def test_empty_actions_rejected(self):
        with pytest.raises(ValidationError):
            PermissionRule(scope="auditor", actions=[])

    def test_allows_any(self):
        rule = PermissionRule(scope="admin", actions=["balance", "edit"])
        assert rule.allows_any(CRUD_VOCABULARY)
        assert not PermissionRule(scope="x", actions=["balance"]).allows_any(CRUD_VOCABULARY)


class TestResourcePermissions:

    def test_duplicate_scope_rejected(self):
        with pytest.raises(ValidationError):
            ResourcePermissions(
                name="Catalogue",
                rules=[
                    PermissionRule(scope="admin", actions=["view"]),
                    PermissionRule(scope="admin", actions=["edit"]),
                ],
            )

    def test_same_scope_on_two_resources_is_fine(self):
        first = ResourcePermissions(name="A", rules=[PermissionRule(scope="admin", actions=["view"])])
        second = ResourcePermissions(name="B", rules=[PermissionRule(scope="admin", actions=["view"])])
        assert first.rules[0].scope == second.rules[0].scope
