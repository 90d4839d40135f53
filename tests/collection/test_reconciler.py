"""Tests for collection reconciliation."""

from prdocumentator.collection import mark_deprecated, reconcile, route_to_item
from prdocumentator.models import (
    CollectionItem,
    CollectionTree,
    RouteChange,
    RouteChangeSet,
    UpdateStatus,
)


def _route(method, path, **kwargs):
    return RouteChange(method=method, path=path, **kwargs)


class TestReconcileAdditions:
    """New routes."""

    def test_appends_in_order(self, sample_tree):
        """New items go after the existing root items, in oracle order."""
        change_set = RouteChangeSet(new_routes=[_route("POST", "/a"), _route("POST", "/b")])
        updated, summary = reconcile(sample_tree, change_set)

        assert [i.name for i in updated.items[:2]] == [i.name for i in sample_tree.items]
        assert [i.name for i in updated.items[2:]] == ["POST /a", "POST /b"]
        assert summary.items_added == 2
        assert summary.items_modified == 0

    def test_does_not_mutate_input(self, sample_tree):
        """The input tree is left untouched."""
        before = sample_tree.model_dump()
        change_set = RouteChangeSet(
            new_routes=[_route("POST", "/a")],
            modified_routes=[_route("GET", "/api/v1/orders", description="changed")],
            deleted_routes=[_route("GET", "/api/v1/users")],
        )
        reconcile(sample_tree, change_set)
        assert sample_tree.model_dump() == before

    def test_target_folder(self, sample_tree):
        """New items go into an existing folder when one is named."""
        change_set = RouteChangeSet(new_routes=[_route("POST", "/orders/export")])
        updated, _ = reconcile(sample_tree, change_set, target_folder="Admin")

        admin = updated.items[1].children[1]
        assert admin.children[-1].name == "POST /orders/export"
        assert len(updated.items) == len(sample_tree.items)

    def test_missing_target_folder_is_created(self, sample_tree):
        """A missing target folder is created at the root."""
        change_set = RouteChangeSet(new_routes=[_route("POST", "/a")])
        updated, summary = reconcile(sample_tree, change_set, target_folder="API Changes")

        folder = updated.items[-1]
        assert folder.name == "API Changes"
        assert [c.name for c in folder.children] == ["POST /a"]
        assert summary.items_added == 1

    def test_target_folder_not_created_without_additions(self, sample_tree):
        """Nothing is created when no item is added."""
        updated, _ = reconcile(sample_tree, RouteChangeSet(), target_folder="API Changes")
        assert len(updated.items) == len(sample_tree.items)


class TestReconcileModifications:
    """Modified routes."""

    def test_replaces_nested_item_in_place(self, sample_tree):
        """A matched item is replaced where it lives."""
        route = _route("GET", "/api/v1/orders", description="Paginated orders")
        updated, summary = reconcile(sample_tree, RouteChangeSet(modified_routes=[route]))

        orders = updated.items[1].children
        assert orders[0] == route_to_item(route)
        assert len(orders) == 2
        assert summary.items_modified == 1
        assert summary.items_added == 0

    def test_unmatched_modification_is_added(self, sample_tree):
        """A modification with no matching item degrades to an addition."""
        route = _route("PATCH", "/api/v1/unknown")
        updated, summary = reconcile(sample_tree, RouteChangeSet(modified_routes=[route]))

        assert updated.items[-1] == route_to_item(route)
        assert summary.items_added == 1
        assert summary.items_modified == 0

    def test_modification_matches_route_added_in_same_batch(self):
        """New routes are applied before modifications."""
        tree = CollectionTree()
        change_set = RouteChangeSet(
            new_routes=[_route("POST", "/a", description="v1")],
            modified_routes=[_route("POST", "/a", description="v2")],
        )
        updated, summary = reconcile(tree, change_set)

        assert len(updated.items) == 1
        assert updated.items[0].description == "v2"
        assert (summary.items_added, summary.items_modified) == (1, 1)

    def test_folder_named_like_route_keeps_subtree(self):
        """A folder sharing a route's display name is not replaced."""
        tree = CollectionTree.model_validate(
            {
                "info": {"name": "C"},
                "item": [
                    {
                        "name": "GET /users",
                        "item": [{"name": "Child", "request": {"method": "GET", "url": {"raw": "{{baseUrl}}/child"}}}],
                    }
                ],
            }
        )
        route = _route("GET", "/users")
        updated, summary = reconcile(tree, RouteChangeSet(modified_routes=[route], deleted_routes=[route]))

        folder = updated.items[0]
        assert folder.name == "GET /users"
        assert [c.name for c in folder.children] == ["Child"]
        assert updated.items[1].name == "[DEPRECATED] GET /users"
        assert (summary.items_added, summary.items_modified) == (1, 1)


class TestReconcileDeletions:
    """Deleted routes."""

    def test_marks_deprecated(self, sample_tree):
        """A deleted route's item is renamed and its description prefixed."""
        route = _route("DELETE", "/api/v1/orders/{id}")
        updated, summary = reconcile(sample_tree, RouteChangeSet(deleted_routes=[route]))

        item = updated.items[1].children[1].children[0]
        assert item.name == "[DEPRECATED] Delete order"
        assert item.description == "[DEPRECATED] This endpoint is deprecated."
        assert item.request is not None
        assert summary.items_modified == 1
        assert summary.items_deleted == 0

    def test_existing_description_is_prefixed(self, sample_tree):
        """A non-empty description keeps its text after the tag."""
        updated, _ = reconcile(
            sample_tree, RouteChangeSet(deleted_routes=[_route("GET", "/api/v1/users")])
        )
        assert updated.items[0].description == "[DEPRECATED] List users"

    def test_deprecation_is_idempotent(self, sample_tree):
        """Deleting the same route twice gives the same item as once."""
        change_set = RouteChangeSet(deleted_routes=[_route("DELETE", "/api/v1/orders/{id}")])
        once, _ = reconcile(sample_tree, change_set)
        twice, summary = reconcile(once, change_set)

        assert twice.to_wire() == once.to_wire()
        assert summary.items_modified == 1

    def test_unmatched_deletion_is_ignored(self, sample_tree):
        """Deleting an unknown route changes nothing."""
        updated, summary = reconcile(
            sample_tree, RouteChangeSet(deleted_routes=[_route("GET", "/gone")])
        )
        assert updated.to_wire() == sample_tree.to_wire()
        assert summary.total_changes == 0

    def test_mark_deprecated_keeps_empty_name(self):
        """An unnamed item only gets its description tagged."""
        item = CollectionItem(name="")
        mark_deprecated(item)
        assert item.name == ""
        assert item.description == "[DEPRECATED] This endpoint is deprecated."


class TestReconcileScenario:
    """A full batch against a realistic collection."""

    def test_add_and_deprecate(self):
        """One addition and one deprecation in a single batch."""
        tree = CollectionTree.model_validate(
            {
                "info": {"_postman_id": "col-9", "name": "Users API"},
                "item": [
                    {
                        "name": "GET {{baseUrl}}/api/v1/users",
                        "request": {"method": "GET", "url": {"raw": "{{baseUrl}}/api/v1/users"}},
                    }
                ],
            }
        )
        change_set = RouteChangeSet(
            new_routes=[_route("POST", "/api/v1/users")],
            deleted_routes=[_route("GET", "/api/v1/users")],
            summary="users",
            confidence=0.8,
        )
        updated, summary = reconcile(tree, change_set)

        assert [i.name for i in updated.items] == [
            "[DEPRECATED] GET {{baseUrl}}/api/v1/users",
            "POST /api/v1/users",
        ]
        assert updated.items[0].description == "[DEPRECATED] This endpoint is deprecated."
        assert (summary.items_added, summary.items_modified, summary.items_deleted) == (1, 1, 0)
        assert summary.status == UpdateStatus.SUCCESS
        assert summary.collection_id == "col-9"
