"""
Collection reconciliation engine.

Pure, synchronous operations over a collection tree: converting inferred
routes to request items, matching routes to existing items, merging a
route change set into a tree, and extracting the routes a tree documents.
"""

from prdocumentator.collection.converter import format_example, route_to_item
from prdocumentator.collection.extractor import (
    extract_routes,
    format_routes_context,
    normalize_path,
)
from prdocumentator.collection.matching import ItemLocation, find_folder, find_item
from prdocumentator.collection.reconciler import mark_deprecated, reconcile

__all__ = [
    "ItemLocation",
    "extract_routes",
    "find_folder",
    "find_item",
    "format_example",
    "format_routes_context",
    "mark_deprecated",
    "normalize_path",
    "reconcile",
    "route_to_item",
]
