"""
Data models for pr-documentator.

Route changes inferred by the oracle, the Postman collection tree they are
reconciled into, analysis results, webhook payloads and sessions.
"""

from prdocumentator.models.analysis import AnalysisResult, MutationSummary
from prdocumentator.models.base import (
    BASE_URL_PLACEHOLDER,
    DEPRECATED_DEFAULT_DESCRIPTION,
    DEPRECATED_TAG,
    ErrorType,
    ParameterLocation,
    UpdateStatus,
)
from prdocumentator.models.collection import (
    CollectionInfo,
    CollectionItem,
    CollectionMeta,
    CollectionTree,
    CollectionVariable,
    ExampleResponse,
    ItemRequest,
    QueryParam,
    RequestBody,
    RequestHeader,
    RequestURL,
)
from prdocumentator.models.github import (
    GitHubBranch,
    GitHubPullRequest,
    GitHubRepository,
    GitHubUser,
    PullRequestEvent,
)
from prdocumentator.models.routes import (
    ExistingRoute,
    RouteChange,
    RouteChangeSet,
    RouteHeader,
    RouteParameter,
)
from prdocumentator.models.session import SessionCredentials, UserSession

__all__ = [
    # Constants and enums
    "BASE_URL_PLACEHOLDER",
    "DEPRECATED_DEFAULT_DESCRIPTION",
    "DEPRECATED_TAG",
    "ErrorType",
    "ParameterLocation",
    "UpdateStatus",
    # Routes
    "ExistingRoute",
    "RouteChange",
    "RouteChangeSet",
    "RouteHeader",
    "RouteParameter",
    # Collection
    "CollectionInfo",
    "CollectionItem",
    "CollectionMeta",
    "CollectionTree",
    "CollectionVariable",
    "ExampleResponse",
    "ItemRequest",
    "QueryParam",
    "RequestBody",
    "RequestHeader",
    "RequestURL",
    # Analysis
    "AnalysisResult",
    "MutationSummary",
    # GitHub
    "GitHubBranch",
    "GitHubPullRequest",
    "GitHubRepository",
    "GitHubUser",
    "PullRequestEvent",
    # Sessions
    "SessionCredentials",
    "UserSession",
]
