"""
Collection tree models.

Pydantic models mirroring a Postman Collection v2.1 document. Field names on
the wire follow the Postman schema (``item``, ``header``, ``response``,
``_postman_id``...), while the Python attributes use descriptive names.

Every model allows extra keys so that anything the store returns which we do
not model explicitly survives a fetch/modify/persist cycle untouched.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from prdocumentator.models.base import POSTMAN_SCHEMA_URL


def _flatten_description(v: Any) -> Any:
    # Postman allows {"content": ..., "type": "text/markdown"} descriptions.
    if isinstance(v, dict):
        return v.get("content") or ""
    return v


class _PostmanModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class RequestHeader(_PostmanModel):
    """A request or response header."""

    key: str
    value: str = ""
    type: Optional[str] = None
    disabled: Optional[bool] = None
    description: Optional[str] = None

    @field_validator("value", mode="before")
    @classmethod
    def stringify_value(cls, v: Any) -> Any:
        return "" if v is None else str(v)

    @field_validator("description", mode="before")
    @classmethod
    def flatten_description(cls, v: Any) -> Any:
        return _flatten_description(v)


class QueryParam(_PostmanModel):
    """A URL query parameter."""

    key: Optional[str] = None
    value: Optional[str] = None
    disabled: Optional[bool] = None
    description: Optional[str] = None

    @field_validator("description", mode="before")
    @classmethod
    def flatten_description(cls, v: Any) -> Any:
        return _flatten_description(v)


class CollectionVariable(_PostmanModel):
    """A collection or URL variable."""

    key: Optional[str] = None
    value: Optional[Any] = None
    type: Optional[str] = None
    description: Optional[str] = None

    @field_validator("description", mode="before")
    @classmethod
    def flatten_description(cls, v: Any) -> Any:
        return _flatten_description(v)


class RequestBody(_PostmanModel):
    """A request body. Only ``raw`` mode is produced by this package."""

    mode: str = "raw"
    raw: Optional[str] = None
    options: Optional[dict[str, Any]] = None


class RequestURL(_PostmanModel):
    """A templated request URL.

    Attributes:
        raw: Full templated URL, e.g. ``{{baseUrl}}/api/v1/users``
        protocol: URL scheme, if any
        host_segments: Host pieces (``host`` on the wire)
        path_segments: Path pieces (``path`` on the wire); the first element
            is conventionally a host placeholder
        query: Ordered query parameters
        variables: Path variables (``variable`` on the wire)
    """

    raw: str = ""
    protocol: Optional[str] = None
    host_segments: Optional[list[str]] = Field(default=None, alias="host")
    path_segments: Optional[list[str]] = Field(default=None, alias="path")
    query: Optional[list[QueryParam]] = None
    variables: Optional[list[CollectionVariable]] = Field(default=None, alias="variable")

    @field_validator("host_segments", "path_segments", mode="before")
    @classmethod
    def split_segment_string(cls, v: Any) -> Any:
        """Postman accepts ``"host": "example.com"`` as well as a list."""
        if isinstance(v, str):
            return [v]
        if isinstance(v, list):
            # Path segments may also be {"type": "string", "value": ...} objects.
            return [s.get("value", "") if isinstance(s, dict) else s for s in v]
        return v


class ItemRequest(_PostmanModel):
    """The request attached to a collection item."""

    method: str = "GET"
    headers: list[RequestHeader] = Field(default_factory=list, alias="header")
    body: Optional[RequestBody] = None
    url: RequestURL = Field(default_factory=RequestURL)
    auth: Optional[dict[str, Any]] = None
    description: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def coerce_string_url(cls, data: Any) -> Any:
        """Accept the short form ``"url": "https://..."``."""
        if isinstance(data, dict) and isinstance(data.get("url"), str):
            data = {**data, "url": {"raw": data["url"]}}
        return data

    @field_validator("headers", mode="before")
    @classmethod
    def none_headers(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("description", mode="before")
    @classmethod
    def flatten_description(cls, v: Any) -> Any:
        return _flatten_description(v)


class ExampleResponse(_PostmanModel):
    """A saved example response."""

    name: str = ""
    original_request: Optional[ItemRequest] = Field(default=None, alias="originalRequest")
    status: str = ""
    code: int = 0
    headers: list[RequestHeader] = Field(default_factory=list, alias="header")
    body: str = ""

    @field_validator("headers", mode="before")
    @classmethod
    def none_headers(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("body", mode="before")
    @classmethod
    def none_body(cls, v: Any) -> Any:
        return "" if v is None else v


class CollectionItem(_PostmanModel):
    """A node in the collection tree: a folder or a request.

    A folder has children and no request; a request has a request and no
    children. Items with both or neither are tolerated and round-trip
    unchanged.

    Attributes:
        id: Opaque item id assigned by the store
        name: Display name; also part of the matching key
        description: Item description
        request: Request definition (requests only)
        responses: Example responses (``response`` on the wire)
        children: Child items (``item`` on the wire, folders only)
        events: Pre-request/test scripts (``event`` on the wire)
    """

    id: Optional[str] = None
    name: str = ""
    description: Optional[str] = None
    request: Optional[ItemRequest] = None
    responses: list[ExampleResponse] = Field(default_factory=list, alias="response")
    children: Optional[list["CollectionItem"]] = Field(default=None, alias="item")
    events: Optional[list[dict[str, Any]]] = Field(default=None, alias="event")

    @field_validator("description", mode="before")
    @classmethod
    def flatten_description(cls, v: Any) -> Any:
        return _flatten_description(v)

    @field_validator("responses", mode="before")
    @classmethod
    def none_responses(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("name", mode="before")
    @classmethod
    def none_name(cls, v: Any) -> Any:
        return "" if v is None else v

    @property
    def is_folder(self) -> bool:
        """An item with a non-empty children list is a folder."""
        return bool(self.children)


class CollectionInfo(_PostmanModel):
    """Collection-level metadata (``info`` on the wire)."""

    postman_id: Optional[str] = Field(default=None, alias="_postman_id")
    name: str = ""
    description: Optional[str] = None
    schema_url: str = Field(default=POSTMAN_SCHEMA_URL, alias="schema")

    @field_validator("description", mode="before")
    @classmethod
    def flatten_description(cls, v: Any) -> Any:
        return _flatten_description(v)


class CollectionTree(_PostmanModel):
    """A whole documentation collection.

    Owned by the documentation store: the reconciler only ever works on
    a deep copy and hands it back for the caller to persist.
    """

    info: CollectionInfo = Field(default_factory=CollectionInfo)
    items: list[CollectionItem] = Field(default_factory=list, alias="item")
    variables: Optional[list[CollectionVariable]] = Field(default=None, alias="variable")
    auth: Optional[dict[str, Any]] = None
    events: Optional[list[dict[str, Any]]] = Field(default=None, alias="event")

    @field_validator("items", mode="before")
    @classmethod
    def none_items(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def id(self) -> Optional[str]:
        return self.info.postman_id

    @property
    def name(self) -> str:
        return self.info.name

    def to_wire(self) -> dict[str, Any]:
        """Serialize in Postman's JSON shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> "CollectionTree":
        """Parse a collection, unwrapping a ``{"collection": ...}`` envelope."""
        if "collection" in data and isinstance(data["collection"], dict):
            data = data["collection"]
        return cls.model_validate(data)


class CollectionMeta(_PostmanModel):
    """Acknowledgement returned by the store after a collection write."""

    id: str = ""
    name: str = ""
    uid: str = ""
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


CollectionItem.model_rebuild()
