"""
Conversion of an inferred route into a collection request item.

The conversion is pure and deterministic: the same route always produces
an identical item, which is what lets a modification replace an existing
item wholesale.
"""

import json
from typing import Any

from prdocumentator.models.base import BASE_URL_PLACEHOLDER, ParameterLocation
from prdocumentator.models.collection import (
    CollectionItem,
    ExampleResponse,
    ItemRequest,
    QueryParam,
    RequestBody,
    RequestHeader,
    RequestURL,
)
from prdocumentator.models.routes import RouteChange

JSON_CONTENT_TYPE = "application/json"


def format_example(value: Any) -> str:
    """Render an example value as header/query text.

    ``None`` renders as ``<nil>``, booleans as ``true``/``false`` and
    integral floats without a trailing ``.0``. Containers become compact
    JSON.
    """
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def _pretty_json(value: dict[str, Any]) -> str:
    return json.dumps(value, indent=2)


def path_segments(path: str) -> list[str]:
    """Split a route path into Postman URL path segments.

    The segmentation is shallow: everything after the leading slash is kept
    as a single segment after the host placeholder.
    """
    if path in ("", "/"):
        return [BASE_URL_PLACEHOLDER]
    if path.startswith("/"):
        path = path[1:]
    return [BASE_URL_PLACEHOLDER, path]


def _build_headers(route: RouteChange) -> list[RequestHeader]:
    headers = [RequestHeader(key="Content-Type", value=JSON_CONTENT_TYPE, type="text")]
    for header in route.headers:
        headers.append(
            RequestHeader(
                key=header.name,
                value=format_example(header.example),
                type="text",
                description=header.description,
            )
        )
    return headers


def _build_query(route: RouteChange) -> list[QueryParam]:
    return [
        QueryParam(
            key=param.name,
            value=format_example(param.example),
            description=param.description,
            disabled=not param.required,
        )
        for param in route.parameters
        if param.location == ParameterLocation.QUERY.value
    ]


def route_to_item(route: RouteChange) -> CollectionItem:
    """Build the collection request item documenting ``route``.

    Args:
        route: Inferred route

    Returns:
        A request item named ``"{METHOD} {PATH}"``
    """
    body = None
    if route.request_body:
        body = RequestBody(
            mode="raw",
            raw=_pretty_json(route.request_body),
            options={"raw": {"language": "json"}},
        )

    responses = []
    if route.response:
        responses.append(
            ExampleResponse(
                name="Success Response",
                status="OK",
                code=200,
                headers=[RequestHeader(key="Content-Type", value=JSON_CONTENT_TYPE)],
                body=_pretty_json(route.response),
            )
        )

    request = ItemRequest(
        method=route.method,
        headers=_build_headers(route),
        body=body,
        url=RequestURL(
            raw=route.raw_url,
            host_segments=[BASE_URL_PLACEHOLDER],
            path_segments=path_segments(route.path),
            query=_build_query(route),
        ),
        description=route.description,
    )

    return CollectionItem(
        name=route.display_name,
        description=route.description,
        request=request,
        responses=responses,
    )
