# =============================================================================
# core/registry/routes.py - Route Registry
# =============================================================================
# Read-only index over the RouteEntry values loaded from the routes document.
#
# Lookups never raise: a miss returns None (or an empty list) and callers
# must check before use.
#
# Usage:
#   entry = registry.find(endpoint="access_token@authentication")
#   if entry is not None:
#       router.add_api_route(entry.path, handler, methods=entry.method_names)
# =============================================================================

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from core.models.route import ENDPOINT_SEPARATOR, CrudOperation, RouteEntry


@dataclass(frozen=True)
class RouteGroup:
    """Metadata of one resource block in the routes document."""
    name: str
    description: str = ""
    base: str = ""
    resource: str | None = None


class RouteRegistry:
    """
    Ordered, immutable collection of route entries.

    Entries keep document order. When several entries could answer a
    lookup, the first one in that order wins.
    """

    def __init__(
        self,
        entries: Iterable[RouteEntry],
        groups: Iterable[RouteGroup] | None = None,
    ):
        self._entries: tuple[RouteEntry, ...] = tuple(entries)

        known = {group.name: group for group in groups or ()}
        # Groups named only by entries still get a (bare) record
        for entry in self._entries:
            if entry.name not in known:
                known[entry.name] = RouteGroup(name=entry.name, base=entry.base)
        self._groups: dict[str, RouteGroup] = known

        self._by_endpoint: dict[str, RouteEntry] = {}
        for entry in self._entries:
            self._by_endpoint.setdefault(entry.endpoint, entry)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"RouteRegistry(routes={len(self._entries)}, groups={len(self._groups)})"

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    @property
    def routes(self) -> tuple[RouteEntry, ...]:
        """All entries in document order."""
        return self._entries

    @property
    def keys(self) -> list[str]:
        """Distinct route group names in document order."""
        return list(self._groups)

    @property
    def resources(self) -> frozenset[str]:
        """Distinct resource tags referenced by entries."""
        return frozenset(e.resource for e in self._entries if e.resource)

    @property
    def groups(self) -> dict[str, RouteGroup]:
        return dict(self._groups)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def _find_by_name(self, name: str) -> RouteEntry | None:
        for entry in self._entries:
            if entry.name == name:
                return entry
        return None

    def _find_by_endpoint(self, endpoint: str) -> RouteEntry | None:
        exact = self._by_endpoint.get(endpoint)
        if exact is not None:
            return exact

        # A qualified id ("login@auth") only ever matches inside its own group
        group = None
        if ENDPOINT_SEPARATOR in endpoint:
            group = endpoint.rsplit(ENDPOINT_SEPARATOR, 1)[1]

        # Unqualified ids ("login") still reach qualified ones ("login@auth")
        for entry in self._entries:
            if group is not None and entry.name != group:
                continue
            if endpoint in entry.endpoint:
                return entry
        return None

    def find(self, name: str | None = None, endpoint: str | None = None) -> RouteEntry | None:
        """
        Find one entry by route group name, endpoint id, or both.

        - name only: first entry of that group
        - endpoint only: exact endpoint match first, then the first entry
          whose endpoint contains the given text
        - both: the endpoint match, but only if it belongs to the named
          group; when the two criteria disagree the result is None

        Returns:
            The matching RouteEntry, or None
        """
        if not name and not endpoint:
            return None
        if name and not endpoint:
            return self._find_by_name(name)
        if endpoint and not name:
            return self._find_by_endpoint(endpoint)

        candidate = self._find_by_endpoint(endpoint)
        if candidate is None or candidate.name != name:
            return None
        return candidate

    def find_operation(self, resource: str, operation: CrudOperation | str) -> RouteEntry | None:
        """First entry tagged with the resource and the CRUD operation."""
        operation = CrudOperation(operation)
        for entry in self._entries:
            if entry.resource == resource and entry.crud == operation:
                return entry
        return None

    def filter(
        self,
        name: str | None = None,
        resource: str | None = None,
        crud: CrudOperation | str | None = None,
    ) -> list[RouteEntry]:
        """Every entry matching all given criteria, in document order."""
        operation = CrudOperation(crud) if crud is not None else None
        return [
            entry for entry in self._entries
            if (name is None or entry.name == name)
            and (resource is None or entry.resource == resource)
            and (operation is None or entry.crud == operation)
        ]

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_document(self) -> dict[str, Any]:
        """
        Serialize back to the routes document shape.

        Loading the result yields the same entries in the same order.
        """
        blocks: dict[str, dict[str, Any]] = {}
        for name, group in self._groups.items():
            block: dict[str, Any] = {
                "name": name,
                "description": group.description,
                "base": group.base,
                "endpoints": [],
            }
            if group.resource:
                block["resource"] = group.resource
            blocks[name] = block

        for entry in self._entries:
            blocks[entry.name]["endpoints"].append(entry.to_document())

        return {"resources": list(blocks.values())}
