"""
Route change models.

These models describe the API endpoints the oracle infers from a diff.
They are produced from the oracle's tool output, which is untrusted: list
fields may come back as null and enumerated fields may hold values we do not
recognise, so validation here is lenient and never drops a route for a
cosmetic problem.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from prdocumentator.models.base import BASE_URL_PLACEHOLDER


def _none_to_list(v: Any) -> Any:
    return [] if v is None else v


class RouteParameter(BaseModel):
    """A single parameter of an inferred route.

    Attributes:
        name: Parameter name
        location: Where the parameter is sent (query, path, header, body).
            Serialized as ``in``.
        type: Parameter type (string, number, boolean, ...)
        required: Whether the parameter is required
        description: Parameter description
        default: Default value, if any
        example: Example value, if any
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Parameter name")
    location: str = Field(
        default="query",
        alias="in",
        description="Parameter location",
        examples=["query", "path", "header", "body"],
    )
    type: str = Field(default="string", description="Parameter type")
    required: bool = Field(default=False, description="Whether parameter is required")
    description: str = Field(default="", description="Parameter description")
    default: Optional[Any] = Field(default=None, description="Default value")
    example: Optional[Any] = Field(default=None, description="Example value")

    @field_validator("location", mode="before")
    @classmethod
    def normalize_location(cls, v: Any) -> Any:
        """Lower-case the location so ``Query`` and ``query`` match."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


class RouteHeader(BaseModel):
    """An HTTP header declared by an inferred route."""

    name: str = Field(..., description="Header name")
    required: bool = Field(default=False)
    description: str = Field(default="")
    example: Optional[Any] = Field(default=None)


class RouteChange(BaseModel):
    """One API endpoint inferred by the oracle.

    Attributes:
        method: HTTP verb, upper-cased
        path: Slash-rooted endpoint path (e.g. /api/v1/users/{id})
        description: What the endpoint does
        parameters: Ordered parameters
        request_body: Opaque request body schema (``request_body`` on the wire)
        response: Opaque response body schema
        headers: Ordered declared headers
        tags: Free-form tags
        deprecated: Whether the oracle flagged the route as deprecated
    """

    model_config = ConfigDict(populate_by_name=True)

    method: str = Field(..., description="HTTP method", examples=["GET", "POST"])
    path: str = Field(default="", description="Endpoint path", examples=["/api/v1/users"])
    description: str = Field(default="")
    parameters: list[RouteParameter] = Field(default_factory=list)
    request_body: Optional[dict[str, Any]] = Field(default=None)
    response: Optional[dict[str, Any]] = Field(default=None)
    headers: list[RouteHeader] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    deprecated: bool = Field(default=False)

    @field_validator("method", mode="before")
    @classmethod
    def uppercase_method(cls, v: Any) -> Any:
        """Canonicalize the HTTP verb."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("path", mode="before")
    @classmethod
    def none_path_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("parameters", "headers", "tags", mode="before")
    @classmethod
    def none_lists(cls, v: Any) -> Any:
        return _none_to_list(v)

    @property
    def display_name(self) -> str:
        """Item name this route is stored under: ``"{METHOD} {PATH}"``."""
        return f"{self.method} {self.path}"

    @property
    def raw_url(self) -> str:
        """Templated URL this route is stored under."""
        return f"{BASE_URL_PLACEHOLDER}{self.path}"


class RouteChangeSet(BaseModel):
    """A batch of route changes returned by one oracle call.

    The batch is frozen once received. ``confidence`` is passed through
    exactly as the oracle reported it, even when outside [0, 1].
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    new_routes: list[RouteChange] = Field(default_factory=list)
    modified_routes: list[RouteChange] = Field(default_factory=list)
    deleted_routes: list[RouteChange] = Field(default_factory=list)
    summary: str = Field(default="")
    confidence: float = Field(default=0.0)

    @field_validator("new_routes", "modified_routes", "deleted_routes", mode="before")
    @classmethod
    def none_lists(cls, v: Any) -> Any:
        return _none_to_list(v)

    @field_validator("summary", mode="before")
    @classmethod
    def none_summary(cls, v: Any) -> Any:
        return "" if v is None else v

    @property
    def has_changes(self) -> bool:
        """Whether any route was added, modified or deleted."""
        return bool(self.new_routes or self.modified_routes or self.deleted_routes)

    @property
    def total_routes(self) -> int:
        return len(self.new_routes) + len(self.modified_routes) + len(self.deleted_routes)


class ExistingRoute(BaseModel):
    """A request already documented in the collection.

    Flattened from the collection tree and sent back to the oracle as
    context so repeat analyses stay consistent with what is documented.

    Attributes:
        method: HTTP method of the stored request
        path: Normalized path (``/`` when nothing remains)
        name: Item display name
        description: Item description
        folder_path: Names of the enclosing folders, outermost first
    """

    method: str
    path: str
    name: str = ""
    description: str = ""
    folder_path: list[str] = Field(default_factory=list)

    @property
    def folder_label(self) -> str:
        return " / ".join(self.folder_path)
