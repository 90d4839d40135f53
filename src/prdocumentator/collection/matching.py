"""
Item matching for reconciliation.

An item matches a route when either predicate holds:

* its request has the route's method and ``url.raw`` equals
  ``{{baseUrl}}`` followed by the route path, or
* its name equals the route's display name ``"{METHOD} {PATH}"``.

The tree is searched depth-first in pre-order and the first match wins.
Folders (items with children) are descended into but never matched.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Optional

from prdocumentator.models.collection import CollectionItem
from prdocumentator.models.routes import RouteChange


@dataclass
class ItemLocation:
    """Where a matched item lives: its containing list and index.

    Holding the container rather than the item lets callers replace the
    item in place.
    """

    container: list[CollectionItem]
    index: int

    @property
    def item(self) -> CollectionItem:
        return self.container[self.index]

    def replace(self, item: CollectionItem) -> None:
        self.container[self.index] = item


def matches_request(item: CollectionItem, route: RouteChange) -> bool:
    request = item.request
    if request is None:
        return False
    return request.method == route.method and request.url.raw == route.raw_url


def matches_name(item: CollectionItem, route: RouteChange) -> bool:
    return item.name == route.display_name


def item_matches(item: CollectionItem, route: RouteChange) -> bool:
    """Whether ``item`` documents ``route`` under either matching key."""
    return matches_request(item, route) or matches_name(item, route)


def walk(items: list[CollectionItem]) -> Iterator[ItemLocation]:
    """Yield the location of every item, depth-first pre-order."""
    for index, item in enumerate(items):
        yield ItemLocation(items, index)
        if item.children:
            yield from walk(item.children)


def find_item(items: list[CollectionItem], route: RouteChange) -> Optional[ItemLocation]:
    """Find the first item documenting ``route``.

    Args:
        items: Root item list to search
        route: Route to look for

    Returns:
        Location of the first match, or None
    """
    for location in walk(items):
        if not location.item.is_folder and item_matches(location.item, route):
            return location
    return None


def find_folder(items: list[CollectionItem], name: str) -> Optional[CollectionItem]:
    """Find the first folder called ``name``, depth-first."""
    for location in walk(items):
        item = location.item
        if item.children is not None and item.request is None and item.name == name:
            return item
    return None
