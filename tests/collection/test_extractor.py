"""Tests for existing-route extraction."""

import pytest

from prdocumentator.collection import (
    extract_routes,
    format_routes_context,
    normalize_path,
    route_to_item,
)
from prdocumentator.models import CollectionTree, ExistingRoute, RequestURL, RouteChange


def _tree(items):
    return CollectionTree.model_validate({"info": {"name": "C"}, "item": items})


class TestExtractRoutes:
    """Tests for extract_routes."""

    def test_depth_first_with_lineage(self, sample_tree):
        """Requests are listed in tree order with their folder path."""
        routes = extract_routes(sample_tree)

        assert [(r.method, r.path, r.folder_path) for r in routes] == [
            ("GET", "/api/v1/users", []),
            ("GET", "/api/v1/orders", ["Orders"]),
            ("DELETE", "/api/v1/orders/{id}", ["Orders", "Admin"]),
        ]
        assert routes[0].description == "List users"
        assert routes[2].name == "Delete order"

    def test_folder_with_request_is_not_emitted(self):
        """An item with children is only recursed into."""
        tree = _tree(
            [
                {
                    "name": "Hybrid",
                    "request": {"method": "GET", "url": {"raw": "{{baseUrl}}/hybrid"}},
                    "item": [{"name": "Child", "request": {"method": "GET", "url": {"raw": "{{baseUrl}}/child"}}}],
                }
            ]
        )
        assert [r.path for r in extract_routes(tree)] == ["/child"]

    def test_items_without_request_are_skipped(self):
        """Empty folders and bare items produce nothing."""
        tree = _tree([{"name": "Empty folder", "item": []}, {"name": "Bare"}])
        assert extract_routes(tree) == []

    def test_none_tree(self):
        """A missing tree has no routes."""
        assert extract_routes(None) == []

    def test_sibling_lineage_is_independent(self):
        """Lineage from one folder does not leak into the next."""
        tree = _tree(
            [
                {"name": "A", "item": [{"name": "a", "request": {"method": "GET", "url": {"raw": "{{baseUrl}}/a"}}}]},
                {"name": "B", "item": [{"name": "b", "request": {"method": "GET", "url": {"raw": "{{baseUrl}}/b"}}}]},
            ]
        )
        assert [r.folder_path for r in extract_routes(tree)] == [["A"], ["B"]]

    def test_round_trip_with_converter(self):
        """A converted route extracts back to its method and path."""
        item = route_to_item(RouteChange(method="GET", path="/api/v1/users"))
        tree = CollectionTree(items=[item])

        routes = extract_routes(tree)
        assert [(r.method, r.path) for r in routes] == [("GET", "/api/v1/users")]

    @pytest.mark.parametrize("path", ["", "/"])
    def test_round_trip_root_paths(self, path):
        """Empty and root paths both extract as ``/``."""
        tree = CollectionTree(items=[route_to_item(RouteChange(method="GET", path=path))])
        assert extract_routes(tree)[0].path == "/"


class TestNormalizePath:
    """Tests for normalize_path."""

    @pytest.mark.parametrize(
        "url,expected",
        [
            ({"raw": "{{baseUrl}}/users?page=1"}, "/users"),
            ({"raw": "{{baseUrl}}"}, "/"),
            ({"raw": "https://api.example.com/users", "path": ["users"]}, "/users"),
            ({"raw": "{{host}}/v1/users", "path": ["{{host}}", "v1", "users"]}, "/v1/users"),
            ({"raw": "https://api.example.com"}, "/"),
            ({"raw": "{{host}}", "path": ["{{host}}"]}, "/"),
        ],
    )
    def test_normalize(self, url, expected):
        """Paths come from the raw URL when templated, else from segments."""
        assert normalize_path(RequestURL.model_validate(url)) == expected


class TestFormatRoutesContext:
    """Tests for format_routes_context."""

    def test_format(self):
        """One line per route with name and folders when present."""
        routes = [
            ExistingRoute(method="GET", path="/a", name="List a", folder_path=["Top", "Sub"]),
            ExistingRoute(method="POST", path="/b"),
        ]
        assert format_routes_context(routes) == "GET /a - List a [Top / Sub]\nPOST /b"

    def test_empty(self):
        """No routes renders as an empty string."""
        assert format_routes_context([]) == ""
