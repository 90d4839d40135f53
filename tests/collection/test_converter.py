"""Tests for route to collection item conversion."""

import json

import pytest

from prdocumentator.collection import format_example, route_to_item
from prdocumentator.models import RouteChange


class TestRouteToItem:
    """Tests for route_to_item."""

    def test_naming_and_url(self, users_route):
        """Name, description and URL are derived from the route."""
        item = route_to_item(users_route)

        assert item.name == "POST /api/v1/users"
        assert item.description == "Create a user"
        assert item.request.method == "POST"
        assert item.request.description == "Create a user"
        assert item.request.url.raw == "{{baseUrl}}/api/v1/users"
        assert item.request.url.host_segments == ["{{baseUrl}}"]
        assert item.request.url.path_segments == ["{{baseUrl}}", "api/v1/users"]

    @pytest.mark.parametrize("path,raw", [("", "{{baseUrl}}"), ("/", "{{baseUrl}}/")])
    def test_root_paths(self, path, raw):
        """Empty and root paths keep only the host placeholder segment."""
        item = route_to_item(RouteChange(method="GET", path=path))
        assert item.request.url.path_segments == ["{{baseUrl}}"]
        assert item.request.url.raw == raw

    def test_headers(self, users_route):
        """Content-Type comes first, then the route's headers in order."""
        headers = route_to_item(users_route).request.headers

        assert [(h.key, h.value, h.type) for h in headers] == [
            ("Content-Type", "application/json", "text"),
            ("X-Request-Id", "abc", "text"),
        ]
        assert headers[1].description == "Trace id"

    def test_declared_content_type_is_not_deduplicated(self):
        """A route declaring Content-Type gets two Content-Type headers."""
        route = RouteChange.model_validate(
            {"method": "POST", "path": "/a", "headers": [{"name": "Content-Type", "example": "text/plain"}]}
        )
        keys = [h.key for h in route_to_item(route).request.headers]
        assert keys == ["Content-Type", "Content-Type"]

    def test_query_parameters(self, users_route):
        """Only query parameters are emitted; optional ones are disabled."""
        query = route_to_item(users_route).request.url.query

        assert len(query) == 1
        assert query[0].key == "dry_run"
        assert query[0].value == "true"
        assert query[0].disabled is True

    def test_required_query_parameter_is_enabled(self):
        """A required query parameter is not disabled."""
        route = RouteChange.model_validate(
            {"method": "GET", "path": "/a", "parameters": [{"name": "q", "in": "query", "required": True}]}
        )
        param = route_to_item(route).request.url.query[0]
        assert param.disabled is False
        assert param.value == "<nil>"

    def test_body(self, users_route):
        """The request body is pretty-printed raw JSON."""
        body = route_to_item(users_route).request.body

        assert body.mode == "raw"
        assert body.raw == json.dumps({"name": "string", "email": "string"}, indent=2)
        assert body.options == {"raw": {"language": "json"}}

    def test_example_response(self, users_route):
        """A response schema becomes one saved example response."""
        responses = route_to_item(users_route).responses

        assert len(responses) == 1
        response = responses[0]
        assert response.name == "Success Response"
        assert response.status == "OK"
        assert response.code == 200
        assert [(h.key, h.value) for h in response.headers] == [("Content-Type", "application/json")]
        assert json.loads(response.body) == {"id": "string"}

    @pytest.mark.parametrize("schema", [None, {}])
    def test_empty_schemas_are_omitted(self, schema):
        """No body and no example response without schemas."""
        route = RouteChange(method="GET", path="/a", request_body=schema, response=schema)
        item = route_to_item(route)
        assert item.request.body is None
        assert item.responses == []

    def test_is_deterministic(self, users_route):
        """Converting the same route twice yields equal items."""
        assert route_to_item(users_route) == route_to_item(users_route)

    def test_wire_shape(self, users_route):
        """Serialized items use Postman's key names."""
        wire = route_to_item(users_route).model_dump(by_alias=True, exclude_none=True)
        assert set(wire) >= {"name", "request", "response"}
        assert set(wire["request"]) >= {"method", "header", "url", "body"}
        assert wire["request"]["url"]["host"] == ["{{baseUrl}}"]


class TestFormatExample:
    """Tests for example value rendering."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, "<nil>"),
            (True, "true"),
            (False, "false"),
            (10, "10"),
            (10.0, "10"),
            (1.5, "1.5"),
            ("abc", "abc"),
            ([1, 2], "[1,2]"),
            ({"a": 1}, '{"a":1}'),
        ],
    )
    def test_format(self, value, expected):
        """Values render the same way in headers and query parameters."""
        assert format_example(value) == expected
