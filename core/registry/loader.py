# =============================================================================
# core/registry/loader.py - Config Loader
# =============================================================================
# Parses the routes and permissions YAML documents into registries.
#
# Routes document:
#   resources:
#     - name: authentication
#       description: Token endpoints
#       base: /auth
#       endpoints:
#         - access_token:
#             methods: [POST]
#             status: 201
#             path: {url: /token}
#
# Permissions document:
#   bundles: {readonly: [view, list]}
#   models:
#     - name: Catalogue
#       permissions:
#         - {name: admin, action: crud}
#         - {name: auditor, action: [view]}
#   services:
#     - name: registry
#       permissions:
#         - {name: admin, action: [registry]}
#
# Both loaders are called once at startup. Any failure is fatal and no
# partial registry is returned.
#
# Usage:
#   from core.registry.loader import load_routes, load_permissions
#   routes = load_routes("config/routes.yaml")
#   permissions = load_permissions("config/permissions.yaml")
# =============================================================================

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from core.models.permission import (
    DEFAULT_BUNDLES,
    PermissionRule,
    ResourceKind,
    ResourcePermissions,
)
from core.models.route import ENDPOINT_SEPARATOR, CrudOperation, PayloadField, RouteEntry
from core.registry.errors import ConfigParseError, ConfigValidationError
from core.registry.permissions import PermissionRegistry
from core.registry.routes import RouteGroup, RouteRegistry
from lib.utils import normalize_identifier

logger = logging.getLogger(__name__)


PERMISSION_SECTIONS = {
    "models": ResourceKind.MODEL,
    "services": ResourceKind.SERVICE,
}

Source = str | Path | Mapping[str, Any]


# =============================================================================
# Document Reading
# =============================================================================

def read_document(source: Source) -> tuple[dict[str, Any], str]:
    """
    Read a YAML document from a path, or accept an already-parsed mapping.

    Returns:
        Tuple of (document, label) where label names the source in errors

    Raises:
        ConfigParseError: If the file cannot be read, is not valid YAML,
            or its top level is not a mapping
    """
    if isinstance(source, Mapping):
        return dict(source), "<mapping>"

    path = Path(source)
    label = str(path)

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigParseError(label, str(e)) from e

    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigParseError(label, str(e)) from e

    if document is None:
        return {}, label
    if not isinstance(document, dict):
        raise ConfigParseError(label, f"expected a mapping at top level, got {type(document).__name__}")

    return document, label


def endpoint_identifier(key: str, group: str) -> str:
    """Build the group-qualified endpoint id, e.g. 'access_token@authentication'."""
    return f"{normalize_identifier(key)}{ENDPOINT_SEPARATOR}{group}"


# =============================================================================
# Routes
# =============================================================================

def _parse_payload(raw: Any, location: str) -> list[PayloadField]:
    """
    Accept either a mapping of field name -> type/descriptor, or a list of
    descriptors that each carry a name.
    """
    if raw is None:
        return []

    if isinstance(raw, Mapping):
        items = []
        for name, descriptor in raw.items():
            if isinstance(descriptor, Mapping):
                items.append({"name": name, **descriptor})
            else:
                items.append({"name": name, "type": descriptor or "str"})
    elif isinstance(raw, list):
        items = list(raw)
    else:
        raise ConfigValidationError(
            "payload must be a mapping or a list of fields", location=location
        )

    try:
        return [PayloadField(**item) for item in items]
    except (TypeError, ValidationError) as e:
        raise ConfigValidationError(
            "invalid payload field", location=location, error=str(e)
        ) from e


def _parse_params(raw: Any, location: str) -> dict[str, str]:
    """Declared path params: a mapping of name -> type, or a list of names (typed str)."""
    if raw is None:
        return {}
    if isinstance(raw, Mapping):
        return {str(k): str(v or "str") for k, v in raw.items()}
    if isinstance(raw, list):
        return {str(name): "str" for name in raw}
    raise ConfigValidationError("path params must be a mapping or a list", location=location)


def _parse_endpoint(
    item: Any,
    group: Mapping[str, Any],
    location: str,
) -> RouteEntry:
    if not isinstance(item, Mapping) or len(item) != 1:
        raise ConfigValidationError(
            "each endpoint must be a mapping with exactly one key", location=location
        )

    key, body = next(iter(item.items()))
    body = body or {}
    location = f"{location} ({key})"
    if not isinstance(body, Mapping):
        raise ConfigValidationError("endpoint definition must be a mapping", location=location)

    crud = body.get("crud")
    methods = body.get("methods")
    if methods is None and crud is not None:
        try:
            methods = [CrudOperation(crud).default_method.value]
        except ValueError as e:
            raise ConfigValidationError(
                f"unknown crud operation '{crud}'", location=location
            ) from e
    if methods is None:
        raise ConfigValidationError("endpoint declares no methods", location=location)

    path = body.get("path") or {}
    if isinstance(path, str):
        path = {"url": path}
    if not isinstance(path, Mapping):
        raise ConfigValidationError("path must be a mapping or a string", location=location)

    try:
        return RouteEntry(
            name=str(group["name"]),
            key=str(key),
            endpoint=endpoint_identifier(str(key), str(group["name"])),
            base=str(group["base"]),
            url=path.get("url") or "",
            params=_parse_params(path.get("params"), location),
            methods=methods,
            success=body.get("success") or "",
            error=body.get("error") or "",
            status=body.get("status"),
            payload=_parse_payload(body.get("payload"), location),
            resource=body.get("resource") or group.get("resource") or group["name"],
            crud=crud,
            tags=body.get("tags") or (),
        )
    except ValidationError as e:
        raise ConfigValidationError(
            f"invalid endpoint '{key}'", location=location, error=str(e)
        ) from e


def parse_routes(
    document: Mapping[str, Any],
    strict: bool = False,
) -> tuple[list[RouteEntry], list[RouteGroup]]:
    """
    Turn a routes document into entries, preserving document order.

    Args:
        document: Parsed routes document
        strict: If True, a document without a 'resources' collection is an
            error instead of an empty result

    Returns:
        Tuple of (entries, groups)

    Raises:
        ConfigValidationError: On a missing base path or an invalid endpoint
    """
    resources = document.get("resources")
    if resources is None:
        if strict:
            raise ConfigValidationError("routes document has no 'resources' collection")
        logger.warning("Routes document has no 'resources' collection; no routes loaded")
        return [], []

    if not isinstance(resources, list):
        raise ConfigValidationError("'resources' must be a list", location="resources")

    entries: list[RouteEntry] = []
    groups: list[RouteGroup] = []

    for index, block in enumerate(resources):
        location = f"resources[{index}]"
        if not isinstance(block, Mapping) or not block.get("name"):
            raise ConfigValidationError("resource block must have a name", location=location)

        name = str(block["name"])
        location = f"{location} ({name})"
        if not block.get("base"):
            raise ConfigValidationError(
                f"resource '{name}' has no base path", location=location
            )

        groups.append(RouteGroup(
            name=name,
            description=block.get("description") or "",
            base=str(block["base"]),
            resource=block.get("resource"),
        ))

        for position, item in enumerate(block.get("endpoints") or []):
            entries.append(_parse_endpoint(item, block, f"{location}.endpoints[{position}]"))

    return entries, groups


def load_routes(source: Source, strict: bool = False) -> RouteRegistry:
    """
    Load the routes document and build a RouteRegistry.

    Raises:
        ConfigParseError: If the document is unreadable
        ConfigValidationError: If an entry is invalid
    """
    document, label = read_document(source)
    entries, groups = parse_routes(document, strict=strict)

    registry = RouteRegistry(entries, groups)
    logger.info(f"Loaded {len(entries)} routes in {len(groups)} groups from {label}")
    return registry


# =============================================================================
# Permissions
# =============================================================================

def _parse_bundles(raw: Any) -> dict[str, tuple[str, ...]]:
    bundles = dict(DEFAULT_BUNDLES)
    if raw is None:
        return bundles
    if not isinstance(raw, Mapping):
        raise ConfigValidationError("'bundles' must be a mapping", location="bundles")

    for name, actions in raw.items():
        if not isinstance(actions, list) or not actions:
            raise ConfigValidationError(
                f"bundle '{name}' must be a non-empty list of actions",
                location=f"bundles.{name}",
            )
        bundles[str(name)] = tuple(str(a) for a in actions)
    return bundles


def _expand_actions(
    raw: Any,
    bundles: Mapping[str, tuple[str, ...]],
    location: str,
) -> tuple[str, ...]:
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list) or not raw:
        raise ConfigValidationError("action must be a non-empty list", location=location)

    actions: list[str] = []
    for token in raw:
        for action in bundles.get(str(token), (str(token),)):
            if action not in actions:
                actions.append(action)
    return tuple(actions)


def parse_permissions(
    document: Mapping[str, Any],
    strict: bool = False,
) -> list[ResourcePermissions]:
    """
    Turn a permissions document into per-resource rule sets.

    Args:
        document: Parsed permissions document
        strict: If True, a document with neither 'models' nor 'services' is
            an error instead of an empty result

    Raises:
        ConfigValidationError: On duplicate scopes, empty action lists or
            a resource declared twice
    """
    if not any(section in document for section in PERMISSION_SECTIONS):
        if strict:
            raise ConfigValidationError("permissions document has no 'models' or 'services'")
        logger.warning("Permissions document has no 'models' or 'services'; no permissions loaded")
        return []

    bundles = _parse_bundles(document.get("bundles"))
    result: list[ResourcePermissions] = []
    seen: set[str] = set()

    for section, kind in PERMISSION_SECTIONS.items():
        blocks = document.get(section) or []
        if not isinstance(blocks, list):
            raise ConfigValidationError(f"'{section}' must be a list", location=section)

        for index, block in enumerate(blocks):
            location = f"{section}[{index}]"
            if not isinstance(block, Mapping) or not block.get("name"):
                raise ConfigValidationError("permission block must have a name", location=location)

            name = str(block["name"])
            location = f"{location} ({name})"
            if name in seen:
                raise ConfigValidationError(f"'{name}' is declared twice", location=location)
            seen.add(name)

            rules = []
            for position, scope in enumerate(block.get("permissions") or []):
                scope_location = f"{location}.permissions[{position}]"
                if not isinstance(scope, Mapping) or not scope.get("name"):
                    raise ConfigValidationError("scope must have a name", location=scope_location)
                rules.append(PermissionRule(
                    scope=str(scope["name"]),
                    actions=_expand_actions(scope.get("action"), bundles, scope_location),
                ))

            try:
                result.append(ResourcePermissions(
                    name=name,
                    kind=kind,
                    description=block.get("description") or "",
                    rules=tuple(rules),
                ))
            except ValidationError as e:
                raise ConfigValidationError(
                    f"invalid permissions for '{name}'", location=location, error=str(e)
                ) from e

    return result


def load_permissions(source: Source, strict: bool = False) -> PermissionRegistry:
    """
    Load the permissions document and build a PermissionRegistry.

    Raises:
        ConfigParseError: If the document is unreadable
        ConfigValidationError: If a block is invalid
    """
    document, label = read_document(source)
    resources = parse_permissions(document, strict=strict)

    registry = PermissionRegistry(resources)
    logger.info(f"Loaded permissions for {len(resources)} resources from {label}")
    return registry
