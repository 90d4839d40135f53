"""Tests for route change models."""

import pytest
from pydantic import ValidationError

from prdocumentator.models import RouteChange, RouteChangeSet, RouteParameter


class TestRouteChange:
    """Tests for RouteChange."""

    def test_method_is_uppercased(self):
        """Lowercase verbs from the oracle are canonicalized."""
        route = RouteChange(method="patch", path="/items")
        assert route.method == "PATCH"

    def test_null_fields_are_tolerated(self):
        """Null lists and paths from the oracle become empty values."""
        route = RouteChange.model_validate(
            {"method": "GET", "path": None, "parameters": None, "headers": None, "tags": None}
        )
        assert route.path == ""
        assert route.parameters == []
        assert route.headers == []
        assert route.tags == []

    def test_parameter_location_uses_wire_alias(self):
        """Parameters accept and emit ``in`` for the location."""
        param = RouteParameter.model_validate({"name": "page", "in": "Query"})
        assert param.location == "query"
        assert param.model_dump(by_alias=True)["in"] == "query"

    def test_unknown_parameter_location_is_preserved(self):
        """An unexpected location does not fail validation."""
        param = RouteParameter.model_validate({"name": "session", "in": "cookie"})
        assert param.location == "cookie"

    def test_display_name_and_raw_url(self):
        """Both matching keys are derived from method and path."""
        route = RouteChange(method="GET", path="/api/v1/users/{id}")
        assert route.display_name == "GET /api/v1/users/{id}"
        assert route.raw_url == "{{baseUrl}}/api/v1/users/{id}"

    def test_template_variables_are_kept_verbatim(self):
        """Double-brace variables in paths are not altered."""
        route = RouteChange(method="GET", path="/api/{{version}}/users")
        assert route.raw_url == "{{baseUrl}}/api/{{version}}/users"


class TestRouteChangeSet:
    """Tests for RouteChangeSet."""

    @pytest.mark.parametrize("confidence", [1.7, -0.2, 0.0, 0.55])
    def test_confidence_is_not_clamped(self, confidence):
        """Out-of-range confidence passes through unchanged."""
        change_set = RouteChangeSet(confidence=confidence)
        assert change_set.confidence == confidence

    def test_null_lists_become_empty(self):
        """Null route lists from the oracle are treated as empty."""
        change_set = RouteChangeSet.model_validate(
            {
                "new_routes": None,
                "modified_routes": None,
                "deleted_routes": None,
                "summary": None,
                "confidence": 0.5,
            }
        )
        assert change_set.new_routes == []
        assert change_set.summary == ""
        assert not change_set.has_changes

    def test_is_frozen(self):
        """A received change set cannot be modified."""
        change_set = RouteChangeSet(summary="x")
        with pytest.raises(ValidationError):
            change_set.summary = "y"

    def test_counts(self):
        """has_changes and total_routes reflect all three lists."""
        change_set = RouteChangeSet(
            new_routes=[RouteChange(method="GET", path="/a")],
            deleted_routes=[RouteChange(method="GET", path="/b"), RouteChange(method="GET", path="/c")],
        )
        assert change_set.has_changes
        assert change_set.total_routes == 3

    def test_invalid_route_is_rejected(self):
        """A route without a method fails validation."""
        with pytest.raises(ValidationError):
            RouteChangeSet.model_validate({"new_routes": [{"path": "/a"}]})
