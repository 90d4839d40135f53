"""
Upstream clients: the route-change oracle, the collection store and the
diff source.
"""

from prdocumentator.clients.base import (
    BaseHTTPClient,
    CollectionStore,
    DiffSource,
    RouteOracle,
)
from prdocumentator.clients.claude import ClaudeClient
from prdocumentator.clients.github import GitHubDiffFetcher
from prdocumentator.clients.postman import PostmanClient

__all__ = [
    "BaseHTTPClient",
    "ClaudeClient",
    "CollectionStore",
    "DiffSource",
    "GitHubDiffFetcher",
    "PostmanClient",
    "RouteOracle",
]
