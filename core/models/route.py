# =============================================================================
# core/models/route.py - Route Entry Schemas
# =============================================================================
# These models describe one API operation loaded from the routes document:
# - HTTPMethod: the fixed verb set a route may declare
# - CrudOperation: the kind of standard operation a route implements
# - PayloadField: one declared request body field
# - RouteEntry: the immutable record the registry indexes
#
# Entries are built once at startup and never mutated afterwards.
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class HTTPMethod(str, Enum):
    """HTTP verbs a route may declare."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


class CrudOperation(str, Enum):
    """
    Standard resource operations.

    - create: add a record
    - retrieve: read one record
    - update: replace fields of one record
    - destroy: delete one record
    - list: read every record
    """
    CREATE = "create"
    RETRIEVE = "retrieve"
    UPDATE = "update"
    DESTROY = "destroy"
    LIST = "list"

    @property
    def default_method(self) -> HTTPMethod:
        """HTTP verb used when the document declares none."""
        return _DEFAULT_METHODS[self]

    @property
    def targets_item(self) -> bool:
        """True when the operation addresses a single record by id."""
        return self in (CrudOperation.RETRIEVE, CrudOperation.UPDATE, CrudOperation.DESTROY)


_DEFAULT_METHODS = {
    CrudOperation.CREATE: HTTPMethod.POST,
    CrudOperation.RETRIEVE: HTTPMethod.GET,
    CrudOperation.UPDATE: HTTPMethod.PUT,
    CrudOperation.DESTROY: HTTPMethod.DELETE,
    CrudOperation.LIST: HTTPMethod.GET,
}

# Joins an endpoint's normalized key with its route group name
ENDPOINT_SEPARATOR = "@"

# Starlette path convertors
PATH_PARAM_TYPES = ("str", "int", "float", "uuid", "path")

# Field types a payload may declare, mapped to Python types
PAYLOAD_TYPES: dict[str, type] = {
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
    "dict": dict,
    "list": list,
}


class PayloadField(BaseModel):
    """
    One request body field declared by a route.

    Example:
        {"name": "label", "type": "str", "required": True}
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    type: str = Field(default="str")
    required: bool = Field(default=True)
    description: str = Field(default="")

    @field_validator("type")
    @classmethod
    def _known_type(cls, value: str) -> str:
        if value not in PAYLOAD_TYPES:
            raise ValueError(
                f"unknown payload type '{value}', expected one of {sorted(PAYLOAD_TYPES)}"
            )
        return value

    @property
    def python_type(self) -> type:
        return PAYLOAD_TYPES[self.type]

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "required": self.required,
            "description": self.description,
        }


class RouteEntry(BaseModel):
    """
    One API operation.

    `path` is resolved from `base` + `url`; every declared parameter is
    rewritten in place with its convertor, so `/{id}` with `{"id": "int"}`
    under base `/wallets` becomes `/wallets/{id:int}`.

    Example:
        RouteEntry(
            name="authentication",
            key="access_token",
            endpoint="access_token@authentication",
            base="/auth",
            url="/token",
            methods=["POST"],
            status=201,
        )
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Route group identifier")
    key: str = Field(..., min_length=1, description="Endpoint key as written in the document")
    endpoint: str = Field(..., min_length=1, description="Group-qualified handler identifier")
    base: str = Field(..., description="Base path of the route group")
    url: str = Field(default="", description="Path fragment of this endpoint")
    params: dict[str, str] = Field(default_factory=dict)
    path: str = Field(default="")
    methods: tuple[HTTPMethod, ...] = Field(..., min_length=1)
    success: str = Field(default="")
    error: str = Field(default="")
    status: int | None = Field(default=None)
    payload: tuple[PayloadField, ...] = Field(default=())
    resource: str | None = None
    crud: CrudOperation | None = None
    tags: tuple[str, ...] = Field(default=())

    @field_validator("methods", mode="before")
    @classmethod
    def _upper_methods(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = [value]
        if isinstance(value, (list, tuple)):
            return tuple(str(m).upper() for m in value)
        return value

    @field_validator("status", mode="before")
    @classmethod
    def _nullify_bad_status(cls, value: Any) -> int | None:
        # Out-of-range or non-numeric codes are dropped instead of rejected
        if value is None or isinstance(value, bool):
            return None
        try:
            code = int(value)
        except (TypeError, ValueError, OverflowError):
            return None
        if isinstance(value, float) and value != code:
            return None
        return code if 100 <= code <= 599 else None

    @field_validator("params")
    @classmethod
    def _known_param_types(cls, value: dict[str, str]) -> dict[str, str]:
        for name, kind in value.items():
            if kind not in PATH_PARAM_TYPES:
                raise ValueError(
                    f"path parameter '{name}' has unknown type '{kind}', "
                    f"expected one of {list(PATH_PARAM_TYPES)}"
                )
        return value

    @model_validator(mode="after")
    def _resolve_path(self) -> "RouteEntry":
        url = self.url
        for name, kind in self.params.items():
            placeholder = "{" + name + "}"
            if placeholder not in url:
                raise ValueError(f"path parameter '{name}' is not used in url '{url}'")
            url = url.replace(placeholder, "{" + f"{name}:{kind}" + "}")

        path = (self.base.rstrip("/") + "/" + url.lstrip("/")).rstrip("/") if url else self.base
        if not path and (self.base or url):
            # Only slashes were given: the root route
            path = "/"
        if not path:
            raise ValueError("route path resolves to an empty string")
        if not path.startswith("/"):
            path = "/" + path
        object.__setattr__(self, "path", path)
        return self

    @property
    def path_param_names(self) -> list[str]:
        """Placeholder names in path order, declared or not."""
        names = []
        for chunk in self.path.split("{")[1:]:
            names.append(chunk.split("}", 1)[0].split(":", 1)[0])
        return names

    @property
    def method_names(self) -> list[str]:
        return [m.value for m in self.methods]

    def to_document(self) -> dict[str, Any]:
        """Serialize back to the endpoint shape of the routes document."""
        body: dict[str, Any] = {
            "methods": self.method_names,
            "success": self.success,
            "error": self.error,
            "status": self.status,
            "path": {"url": self.url},
        }
        if self.params:
            body["path"]["params"] = dict(self.params)
        if self.payload:
            body["payload"] = {f.name: f.to_dict() for f in self.payload}
        if self.crud:
            body["crud"] = self.crud.value
        if self.resource:
            body["resource"] = self.resource
        if self.tags:
            body["tags"] = list(self.tags)
        return {self.key: body}
