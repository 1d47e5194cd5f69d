# =============================================================================
# core/services/resource_service.py - Resource Record Storage
# =============================================================================
# Record stores behind the generated CRUD handlers.
# - MemoryResourceStore: process-local dicts (default, used by tests)
# - SupabaseResourceStore: one Supabase table per resource
#
# Every record is a dict with an "id" key. Missing records raise
# RecordNotFoundError, which the API turns into a 404.
# =============================================================================

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any

from app.exceptions import RecordNotFoundError, StorageError
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import normalize_identifier

logger = logging.getLogger(__name__)


class ResourceStore(ABC):
    """Record storage keyed by resource name."""

    @abstractmethod
    def list(self, resource: str, skip: int = 0, limit: int = 100) -> list[dict[str, Any]]:
        ...

    @abstractmethod
    def get(self, resource: str, record_id: Any) -> dict[str, Any]:
        ...

    @abstractmethod
    def create(self, resource: str, data: dict[str, Any]) -> dict[str, Any]:
        ...

    @abstractmethod
    def update(self, resource: str, record_id: Any, changes: dict[str, Any]) -> dict[str, Any]:
        ...

    @abstractmethod
    def delete(self, resource: str, record_id: Any) -> None:
        ...

    @abstractmethod
    def find_by(self, resource: str, field: str, value: Any) -> dict[str, Any] | None:
        ...


class MemoryResourceStore(ResourceStore):
    """
    In-process record store.

    Ids are sequential integers per resource. Records are copied on the way
    in and out, so callers never hold a reference to stored state.
    """

    def __init__(self):
        self._tables: dict[str, dict[str, dict[str, Any]]] = {}
        self._counters: dict[str, int] = {}
        self._lock = threading.Lock()

    def _table(self, resource: str) -> dict[str, dict[str, Any]]:
        return self._tables.setdefault(resource, {})

    def list(self, resource: str, skip: int = 0, limit: int = 100) -> list[dict[str, Any]]:
        with self._lock:
            records = list(self._table(resource).values())
        return [dict(r) for r in records[skip:skip + limit]]

    def get(self, resource: str, record_id: Any) -> dict[str, Any]:
        with self._lock:
            record = self._table(resource).get(str(record_id))
        if record is None:
            raise RecordNotFoundError(resource, record_id)
        return dict(record)

    def create(self, resource: str, data: dict[str, Any]) -> dict[str, Any]:
        with self._lock:
            next_id = self._counters.get(resource, 0) + 1
            self._counters[resource] = next_id
            record = {**data, "id": next_id}
            self._table(resource)[str(next_id)] = record
        logger.debug(f"Created {resource} {next_id}")
        return dict(record)

    def update(self, resource: str, record_id: Any, changes: dict[str, Any]) -> dict[str, Any]:
        with self._lock:
            table = self._table(resource)
            record = table.get(str(record_id))
            if record is None:
                raise RecordNotFoundError(resource, record_id)
            updated = {**record, **changes, "id": record["id"]}
            table[str(record_id)] = updated
        return dict(updated)

    def delete(self, resource: str, record_id: Any) -> None:
        with self._lock:
            removed = self._table(resource).pop(str(record_id), None)
        if removed is None:
            raise RecordNotFoundError(resource, record_id)
        logger.debug(f"Deleted {resource} {record_id}")

    def find_by(self, resource: str, field: str, value: Any) -> dict[str, Any] | None:
        with self._lock:
            for record in self._table(resource).values():
                if record.get(field) == value:
                    return dict(record)
        return None


class SupabaseResourceStore(ResourceStore):
    """
    Record store backed by Supabase tables.

    The table name is the normalized resource name ("Wallet" -> "wallet").
    """

    @staticmethod
    def table_name(resource: str) -> str:
        return normalize_identifier(resource)

    def _call(self, resource: str, func, *args):
        try:
            return func(self.table_name(resource), *args)
        except SupabaseClientError as e:
            logger.error(f"Supabase operation failed for {resource}: {e}")
            raise StorageError(resource, e.message) from e

    def list(self, resource: str, skip: int = 0, limit: int = 100) -> list[dict[str, Any]]:
        return self._call(resource, SupabaseClient.fetch_records, skip, limit)

    def get(self, resource: str, record_id: Any) -> dict[str, Any]:
        record = self._call(resource, SupabaseClient.fetch_record, record_id)
        if record is None:
            raise RecordNotFoundError(resource, record_id)
        return record

    def create(self, resource: str, data: dict[str, Any]) -> dict[str, Any]:
        return self._call(resource, SupabaseClient.insert_record, data)

    def update(self, resource: str, record_id: Any, changes: dict[str, Any]) -> dict[str, Any]:
        record = self._call(resource, SupabaseClient.update_record, record_id, changes)
        if record is None:
            raise RecordNotFoundError(resource, record_id)
        return record

    def delete(self, resource: str, record_id: Any) -> None:
        if not self._call(resource, SupabaseClient.delete_record, record_id):
            raise RecordNotFoundError(resource, record_id)

    def find_by(self, resource: str, field: str, value: Any) -> dict[str, Any] | None:
        return self._call(resource, SupabaseClient.fetch_by, field, value)


def create_store(backend: str) -> ResourceStore:
    """
    Build the record store named by STORAGE_BACKEND.

    Raises:
        ValueError: For an unknown backend name
    """
    if backend == "memory":
        return MemoryResourceStore()
    if backend == "supabase":
        return SupabaseResourceStore()
    raise ValueError(f"Unknown storage backend: {backend}")
