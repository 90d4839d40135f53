"""
PR Documentator Test Configuration and Fixtures

All fixtures avoid real network calls and provide deterministic behavior.

Fixture Categories:
- Routes: route change factories
- Collections: sample Postman collection trees
- Collaborators: mocked oracle and collection store
- Clock: a controllable clock for session expiry
"""

from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from prdocumentator.models import (
    CollectionMeta,
    CollectionTree,
    RouteChange,
    RouteChangeSet,
)

COLLECTION_ID = "col-123"


# =============================================================================
# Route Fixtures
# =============================================================================


def make_route(method: str = "GET", path: str = "/api/v1/users", **kwargs: Any) -> RouteChange:
    """Build a route change with sensible defaults."""
    return RouteChange(method=method, path=path, **kwargs)


@pytest.fixture
def users_route() -> RouteChange:
    """A fully specified POST /api/v1/users route."""
    return RouteChange.model_validate(
        {
            "method": "post",
            "path": "/api/v1/users",
            "description": "Create a user",
            "parameters": [
                {"name": "dry_run", "in": "query", "type": "boolean", "required": False, "example": True},
                {"name": "id", "in": "path", "type": "string", "required": True},
            ],
            "headers": [
                {"name": "X-Request-Id", "required": True, "description": "Trace id", "example": "abc"},
            ],
            "request_body": {"name": "string", "email": "string"},
            "response": {"id": "string"},
            "tags": ["users"],
        }
    )


# =============================================================================
# Collection Fixtures
# =============================================================================


def request_item(method: str, raw: str, name: str | None = None, **extra: Any) -> dict[str, Any]:
    """Wire-format request item."""
    item = {
        "name": name if name is not None else f"{method} {raw}",
        "request": {"method": method, "header": [], "url": {"raw": raw}},
        "response": [],
    }
    item.update(extra)
    return item


@pytest.fixture
def collection_wire() -> dict[str, Any]:
    """A collection with a root request and a nested folder."""
    return {
        "info": {
            "_postman_id": COLLECTION_ID,
            "name": "Sample API",
            "schema": "https://schema.getpostman.com/json/collection/v2.1.0/collection.json",
        },
        "item": [
            request_item(
                "GET",
                "{{baseUrl}}/api/v1/users",
                name="GET {{baseUrl}}/api/v1/users",
                description="List users",
            ),
            {
                "name": "Orders",
                "item": [
                    request_item("GET", "{{baseUrl}}/api/v1/orders", name="List orders"),
                    {
                        "name": "Admin",
                        "item": [
                            request_item("DELETE", "{{baseUrl}}/api/v1/orders/{id}", name="Delete order"),
                        ],
                    },
                ],
            },
        ],
    }


@pytest.fixture
def sample_tree(collection_wire: dict[str, Any]) -> CollectionTree:
    """Parsed sample collection."""
    return CollectionTree.model_validate(collection_wire)


# =============================================================================
# Collaborator Fixtures
# =============================================================================


@pytest.fixture
def change_set() -> RouteChangeSet:
    """Oracle answer: one route added, one removed."""
    return RouteChangeSet(
        new_routes=[make_route("POST", "/api/v1/users", description="Create a user")],
        deleted_routes=[make_route("GET", "/api/v1/users")],
        summary="Added user creation, removed user listing",
        confidence=0.9,
    )


@pytest.fixture
def mock_oracle(change_set: RouteChangeSet) -> MagicMock:
    """Oracle returning ``change_set``."""
    oracle = MagicMock()
    oracle.analyze = AsyncMock(return_value=change_set)
    oracle.close = AsyncMock()
    return oracle


@pytest.fixture
def mock_store(sample_tree: CollectionTree) -> MagicMock:
    """Collection store serving ``sample_tree``."""
    store = MagicMock()
    store.collection_id = COLLECTION_ID
    store.fetch_tree = AsyncMock(return_value=sample_tree)
    store.persist_tree = AsyncMock(return_value=CollectionMeta(id=COLLECTION_ID, name="Sample API"))
    store.close = AsyncMock()
    return store


# =============================================================================
# Clock
# =============================================================================


class FakeClock:
    """Controllable clock for expiry tests."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
