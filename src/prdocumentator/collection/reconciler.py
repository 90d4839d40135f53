"""
Collection reconciliation.

Merges a batch of inferred route changes into a copy of a collection tree.
New routes are appended, modified routes replace their matching item (or
are appended when nothing matches) and deleted routes are soft-deleted by
tagging the matching item as deprecated. Nothing is ever removed from the
tree.
"""

import logging
from typing import Optional

from prdocumentator.collection.converter import route_to_item
from prdocumentator.collection.matching import find_folder, find_item
from prdocumentator.models.analysis import MutationSummary
from prdocumentator.models.base import (
    DEPRECATED_DEFAULT_DESCRIPTION,
    DEPRECATED_TAG,
    UpdateStatus,
)
from prdocumentator.models.collection import CollectionItem, CollectionTree
from prdocumentator.models.routes import RouteChangeSet

logger = logging.getLogger(__name__)


def mark_deprecated(item: CollectionItem) -> None:
    """Tag an item as deprecated in place.

    Both the description and the name get the ``[DEPRECATED]`` prefix.
    Tagging an already tagged item changes nothing.
    """
    description = item.description or ""
    if not description:
        item.description = DEPRECATED_DEFAULT_DESCRIPTION
    elif not description.startswith(DEPRECATED_TAG):
        item.description = f"{DEPRECATED_TAG} {description}"

    if item.name and not item.name.startswith(DEPRECATED_TAG):
        item.name = f"{DEPRECATED_TAG} {item.name}"


def _add_target(tree: CollectionTree, target_folder: Optional[str]) -> list[CollectionItem]:
    """Return the list new items are appended to, creating the folder if needed."""
    if not target_folder:
        return tree.items

    folder = find_folder(tree.items, target_folder)
    if folder is None:
        logger.info(f"Creating folder '{target_folder}' for new routes")
        folder = CollectionItem(name=target_folder, children=[])
        tree.items.append(folder)
    if folder.children is None:
        folder.children = []
    return folder.children


def reconcile(
    tree: CollectionTree,
    change_set: RouteChangeSet,
    target_folder: Optional[str] = None,
) -> tuple[CollectionTree, MutationSummary]:
    """Apply a route change set to a copy of ``tree``.

    Lists are processed new, then modified, then deleted, each in oracle
    order. Modifications and deletions match against the tree as it
    stands at that point, so a route added earlier in the same batch can
    be matched by a later entry.

    Args:
        tree: Current collection snapshot; never mutated
        change_set: Route changes from the oracle
        target_folder: Name of the folder new items go into. Defaults to
            the collection root. Created at the root if missing.

    Returns:
        Tuple of (updated tree copy, mutation summary)
    """
    updated = tree.model_copy(deep=True)
    summary = MutationSummary(
        collection_id=updated.id or "",
        status=UpdateStatus.SUCCESS,
    )

    added: Optional[list[CollectionItem]] = None

    def append(item: CollectionItem) -> None:
        nonlocal added
        if added is None:
            added = _add_target(updated, target_folder)
        added.append(item)
        summary.items_added += 1

    for route in change_set.new_routes:
        append(route_to_item(route))
        logger.debug(f"Added {route.display_name}")

    for route in change_set.modified_routes:
        location = find_item(updated.items, route)
        if location is None:
            logger.debug(f"No item for modified route {route.display_name}, adding it")
            append(route_to_item(route))
            continue
        location.replace(route_to_item(route))
        summary.items_modified += 1
        logger.debug(f"Replaced {route.display_name}")

    for route in change_set.deleted_routes:
        location = find_item(updated.items, route)
        if location is None:
            logger.debug(f"No item for deleted route {route.display_name}")
            continue
        mark_deprecated(location.item)
        summary.items_modified += 1
        logger.debug(f"Deprecated {route.display_name}")

    logger.info(
        f"Reconciled collection: {summary.items_added} added, "
        f"{summary.items_modified} modified"
    )
    return updated, summary
