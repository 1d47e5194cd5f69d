# =============================================================================
# tests/test_services.py - Record Store and User Service Tests
# =============================================================================
# Tests for:
# - MemoryResourceStore CRUD and not-found handling
# - SupabaseResourceStore delegation and error wrapping (client mocked)
# - UserService registration, authentication and admin seeding
# =============================================================================

from unittest.mock import patch

import pytest

from app.exceptions import RecordNotFoundError, StorageError, UserExistsError
from core.services.resource_service import (
    MemoryResourceStore,
    SupabaseResourceStore,
    create_store,
)
from core.services.user_service import USER_RESOURCE, UserService
from lib.supabase_client import SupabaseClient, SupabaseClientError


# =============================================================================
# MemoryResourceStore
# =============================================================================

class TestMemoryResourceStore:

    @pytest.fixture
    def store(self):
        return MemoryResourceStore()

    def test_create_assigns_sequential_ids_per_resource(self, store):
        assert store.create("Wallet", {"label": "a"})["id"] == 1
        assert store.create("Wallet", {"label": "b"})["id"] == 2
        assert store.create("Catalogue", {"symbol": "BTC"})["id"] == 1

    def test_get_accepts_int_or_str_id(self, store):
        store.create("Wallet", {"label": "a"})
        assert store.get("Wallet", 1)["label"] == "a"
        assert store.get("Wallet", "1")["label"] == "a"

    def test_records_are_copies(self, store):
        created = store.create("Wallet", {"label": "a"})
        created["label"] = "changed"
        store.get("Wallet", 1)["label"] = "changed again"

        assert store.get("Wallet", 1)["label"] == "a"

    def test_update_keeps_id(self, store):
        store.create("Wallet", {"label": "a", "currency": "BTC"})

        updated = store.update("Wallet", 1, {"label": "b", "id": 42})

        assert updated == {"label": "b", "currency": "BTC", "id": 1}

    def test_delete(self, store):
        store.create("Wallet", {"label": "a"})
        store.delete("Wallet", 1)

        with pytest.raises(RecordNotFoundError):
            store.get("Wallet", 1)

    @pytest.mark.parametrize("operation", [
        lambda s: s.get("Wallet", 7),
        lambda s: s.update("Wallet", 7, {}),
        lambda s: s.delete("Wallet", 7),
    ])
    def test_missing_record(self, store, operation):
        with pytest.raises(RecordNotFoundError) as exc_info:
            operation(store)
        assert exc_info.value.status_code == 404
        assert exc_info.value.details == {"resource": "Wallet", "id": "7"}

    def test_list_paging(self, store):
        for i in range(5):
            store.create("Wallet", {"n": i})

        assert [r["n"] for r in store.list("Wallet")] == [0, 1, 2, 3, 4]
        assert [r["n"] for r in store.list("Wallet", skip=3, limit=10)] == [3, 4]
        assert store.list("Catalogue") == []

    def test_find_by(self, store):
        store.create("User", {"username": "olive"})
        assert store.find_by("User", "username", "olive")["id"] == 1
        assert store.find_by("User", "username", "nobody") is None


class TestCreateStore:

    def test_backends(self):
        assert isinstance(create_store("memory"), MemoryResourceStore)
        assert isinstance(create_store("supabase"), SupabaseResourceStore)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_store("redis")


# =============================================================================
# SupabaseResourceStore
# =============================================================================

class TestSupabaseResourceStore:

    @pytest.fixture
    def store(self):
        return SupabaseResourceStore()

    def test_table_name(self):
        assert SupabaseResourceStore.table_name("Wallet") == "wallet"
        assert SupabaseResourceStore.table_name("Ledger Entry") == "ledger_entry"

    def test_list_delegates(self, store):
        with patch.object(SupabaseClient, "fetch_records", return_value=[{"id": 1}]) as fetch:
            assert store.list("Wallet", skip=5, limit=10) == [{"id": 1}]
        fetch.assert_called_once_with("wallet", 5, 10)

    def test_get_missing(self, store):
        with patch.object(SupabaseClient, "fetch_record", return_value=None):
            with pytest.raises(RecordNotFoundError):
                store.get("Wallet", 3)

    def test_update_missing(self, store):
        with patch.object(SupabaseClient, "update_record", return_value=None):
            with pytest.raises(RecordNotFoundError):
                store.update("Wallet", 3, {"label": "x"})

    def test_delete_missing(self, store):
        with patch.object(SupabaseClient, "delete_record", return_value=False):
            with pytest.raises(RecordNotFoundError):
                store.delete("Wallet", 3)

    def test_create_delegates(self, store):
        with patch.object(SupabaseClient, "insert_record", return_value={"id": 9, "label": "x"}) as insert:
            assert store.create("Wallet", {"label": "x"})["id"] == 9
        insert.assert_called_once_with("wallet", {"label": "x"})

    def test_client_errors_become_storage_errors(self, store):
        error = SupabaseClientError("boom", code="FETCH_RECORDS_FAILED")
        with patch.object(SupabaseClient, "fetch_records", side_effect=error):
            with pytest.raises(StorageError) as exc_info:
                store.list("Wallet")

        assert exc_info.value.status_code == 500
        assert exc_info.value.details == {"resource": "Wallet", "error": "boom"}

    def test_unconfigured_client(self):
        SupabaseClient.reset()
        with patch("lib.supabase_client.settings") as settings:
            settings.SUPABASE_URL = None
            settings.SUPABASE_SERVICE_KEY = None
            with pytest.raises(SupabaseClientError) as exc_info:
                SupabaseClient.get_client()
        assert exc_info.value.code == "CLIENT_NOT_CONFIGURED"


# =============================================================================
# UserService
# =============================================================================

class TestUserService:

    @pytest.fixture
    def users(self):
        return UserService(MemoryResourceStore())

    def test_create_and_authenticate(self, users):
        created = users.create_user("olive", "owner-password", ["owner"])

        assert created["password_hash"] != "owner-password"
        assert users.authenticate("olive", "owner-password")["id"] == created["id"]
        assert users.authenticate("olive", "wrong") is None
        assert users.authenticate("nobody", "owner-password") is None

    def test_duplicate_username(self, users):
        users.create_user("olive", "pw", ["owner"])
        with pytest.raises(UserExistsError) as exc_info:
            users.create_user("olive", "other", [])
        assert exc_info.value.status_code == 409

    def test_disabled_user_cannot_log_in(self, users):
        user = users.create_user("olive", "pw", ["owner"])
        users.store.update(USER_RESOURCE, user["id"], {"disabled": True})
        assert users.authenticate("olive", "pw") is None

    def test_seed_admin_once(self, users):
        first = users.seed_admin("admin", "pw", ["admin"])
        second = users.seed_admin("admin", "other", ["admin"])

        assert first["id"] == second["id"]
        assert len(users.store.list(USER_RESOURCE)) == 1

    def test_seed_admin_unset(self, users):
        assert users.seed_admin(None, "pw", ["admin"]) is None
        assert users.seed_admin("admin", None, ["admin"]) is None
        assert users.store.list(USER_RESOURCE) == []

    def test_public_view(self, users):
        user = users.create_user("olive", "pw", ["owner"])
        assert UserService.public_view(user) == {"id": user["id"], "username": "olive", "scopes": ["owner"]}
