"""
Existing-route extraction.

Flattens a collection tree into the list of documented routes that is sent
to the oracle as context.
"""

from typing import Optional

from prdocumentator.models.base import BASE_URL_PLACEHOLDER
from prdocumentator.models.collection import CollectionItem, CollectionTree, RequestURL
from prdocumentator.models.routes import ExistingRoute


def _is_placeholder(segment: str) -> bool:
    return segment.startswith("{{") and segment.endswith("}}")


def normalize_path(url: RequestURL) -> str:
    """Derive a slash-rooted path from a stored request URL.

    When ``raw`` starts with the base URL placeholder the remainder is used
    (without any query string). Otherwise the path is rebuilt from the path
    segments, skipping a leading ``{{...}}`` placeholder segment. An empty
    result becomes ``/``.
    """
    if url.raw.startswith(BASE_URL_PLACEHOLDER):
        path = url.raw[len(BASE_URL_PLACEHOLDER):].split("?", 1)[0]
        return path or "/"

    segments = list(url.path_segments or [])
    if segments and _is_placeholder(segments[0]):
        segments = segments[1:]
    if not segments:
        return "/"
    return "/" + "/".join(segments)


def _walk(
    items: list[CollectionItem],
    folder_path: list[str],
    routes: list[ExistingRoute],
) -> None:
    for item in items:
        if item.children:
            _walk(item.children, folder_path + [item.name], routes)
        elif item.request is not None:
            routes.append(
                ExistingRoute(
                    method=item.request.method,
                    path=normalize_path(item.request.url),
                    name=item.name,
                    description=item.description or "",
                    folder_path=list(folder_path),
                )
            )


def extract_routes(tree: Optional[CollectionTree]) -> list[ExistingRoute]:
    """List every documented request in the tree, depth-first.

    Folders are recursed into and never emitted themselves, even when they
    also carry a request. Items with neither children nor a request are
    skipped.

    Args:
        tree: Collection snapshot, may be None

    Returns:
        Existing routes in tree order
    """
    routes: list[ExistingRoute] = []
    if tree is not None:
        _walk(tree.items, [], routes)
    return routes


def format_routes_context(routes: list[ExistingRoute]) -> str:
    """Render existing routes as the context block sent to the oracle.

    One line per route: ``METHOD PATH - name [Folder / Sub]``.
    """
    lines = []
    for route in routes:
        line = f"{route.method} {route.path}"
        if route.name:
            line += f" - {route.name}"
        if route.folder_path:
            line += f" [{route.folder_label}]"
        lines.append(line)
    return "\n".join(lines)
