"""Tests for reconciliation item matching."""

from prdocumentator.collection import find_folder, find_item
from prdocumentator.models import CollectionTree, RouteChange


def _tree(items):
    return CollectionTree.model_validate({"info": {"name": "C"}, "item": items})


def _request(method, raw, name):
    return {"name": name, "request": {"method": method, "url": {"raw": raw}}}


class TestFindItem:
    """Tests for find_item."""

    def test_matches_by_request(self):
        """Method plus templated URL matches regardless of name."""
        tree = _tree([_request("GET", "{{baseUrl}}/users", "List users")])
        location = find_item(tree.items, RouteChange(method="GET", path="/users"))

        assert location is not None
        assert location.item.name == "List users"

    def test_matches_by_name(self):
        """The display name matches even when the URL differs."""
        tree = _tree([_request("GET", "https://legacy.example.com/users", "GET /users")])
        location = find_item(tree.items, RouteChange(method="GET", path="/users"))
        assert location is not None

    def test_method_must_match_for_request_key(self):
        """Same URL with another method is a different route."""
        tree = _tree([_request("POST", "{{baseUrl}}/users", "Create user")])
        assert find_item(tree.items, RouteChange(method="GET", path="/users")) is None

    def test_searches_nested_folders(self, sample_tree):
        """Items inside nested folders are found and located in their folder."""
        route = RouteChange(method="DELETE", path="/api/v1/orders/{id}")
        location = find_item(sample_tree.items, route)

        assert location is not None
        admin = sample_tree.items[1].children[1]
        assert location.container is admin.children
        assert location.index == 0

    def test_first_match_in_pre_order_wins(self):
        """A match inside an earlier folder beats a later root sibling."""
        tree = _tree(
            [
                {"name": "Folder", "item": [_request("GET", "{{baseUrl}}/users", "nested")]},
                _request("GET", "{{baseUrl}}/users", "root"),
            ]
        )
        location = find_item(tree.items, RouteChange(method="GET", path="/users"))
        assert location.item.name == "nested"

    def test_deprecated_item_is_still_matched_by_url(self):
        """Renaming an item for deprecation does not hide it from the URL key."""
        tree = _tree([_request("GET", "{{baseUrl}}/users", "[DEPRECATED] GET /users")])
        assert find_item(tree.items, RouteChange(method="GET", path="/users")) is not None

    def test_replace_in_place(self, sample_tree):
        """ItemLocation.replace swaps the item inside its container."""
        location = find_item(sample_tree.items, RouteChange(method="GET", path="/api/v1/orders"))
        replacement = sample_tree.items[0].model_copy()
        location.replace(replacement)
        assert sample_tree.items[1].children[0] is replacement

    def test_folders_are_never_matched(self):
        """A folder named like a route is searched through, not matched."""
        tree = _tree([{"name": "GET /users", "item": [_request("GET", "{{baseUrl}}/other", "Other")]}])
        assert find_item(tree.items, RouteChange(method="GET", path="/users")) is None

    def test_no_match(self, sample_tree):
        """Unknown routes are not found."""
        assert find_item(sample_tree.items, RouteChange(method="PUT", path="/nothing")) is None


class TestFindFolder:
    """Tests for find_folder."""

    def test_finds_nested_folder(self, sample_tree):
        """Folders are searched depth-first."""
        folder = find_folder(sample_tree.items, "Admin")
        assert folder is sample_tree.items[1].children[1]

    def test_requests_are_not_folders(self, sample_tree):
        """A request item with the same name is not a folder."""
        assert find_folder(sample_tree.items, "List orders") is None
