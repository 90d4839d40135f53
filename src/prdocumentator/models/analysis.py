"""
Analysis result models.

An analysis result is the oracle's route change set plus a summary of what
happened to the documentation collection. The two halves are independent: a
failed collection write degrades ``postman_update`` but never alters the
routes, summary or confidence that the oracle produced.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from prdocumentator.models.base import UpdateStatus
from prdocumentator.models.routes import RouteChange, RouteChangeSet


def utc_now_rfc3339() -> str:
    """Current UTC time formatted as an RFC 3339 timestamp."""
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class MutationSummary(BaseModel):
    """What a reconciliation (and its persistence) did to the collection.

    Attributes:
        collection_id: Collection that was updated, when known
        status: success, error, partial or skipped
        items_added: Requests appended to the collection
        items_modified: Requests replaced or tagged as deprecated
        items_deleted: Always 0; removed routes are deprecated, not deleted
        error_message: Failure detail when status is error
        updated_at: RFC 3339 timestamp of the update
    """

    collection_id: str = Field(default="")
    status: UpdateStatus = Field(default=UpdateStatus.SUCCESS)
    items_added: int = Field(default=0, ge=0)
    items_modified: int = Field(default=0, ge=0)
    items_deleted: int = Field(default=0, ge=0)
    error_message: Optional[str] = Field(default=None)
    updated_at: str = Field(default_factory=utc_now_rfc3339)

    @classmethod
    def skipped(cls, collection_id: str = "") -> "MutationSummary":
        return cls(collection_id=collection_id, status=UpdateStatus.SKIPPED)

    @classmethod
    def failed(cls, error: Exception, collection_id: str = "") -> "MutationSummary":
        return cls(
            collection_id=collection_id,
            status=UpdateStatus.ERROR,
            error_message=str(error),
        )

    @property
    def total_changes(self) -> int:
        return self.items_added + self.items_modified + self.items_deleted


class AnalysisResult(BaseModel):
    """Final outcome of analyzing one diff.

    Carries the oracle's route changes verbatim together with the
    collection update summary.
    """

    new_routes: list[RouteChange] = Field(default_factory=list)
    modified_routes: list[RouteChange] = Field(default_factory=list)
    deleted_routes: list[RouteChange] = Field(default_factory=list)
    summary: str = Field(default="")
    confidence: float = Field(default=0.0)
    postman_update: MutationSummary = Field(default_factory=MutationSummary)

    @classmethod
    def from_change_set(
        cls,
        change_set: RouteChangeSet,
        postman_update: MutationSummary,
    ) -> "AnalysisResult":
        """Combine an oracle change set with a collection update summary."""
        return cls(
            new_routes=list(change_set.new_routes),
            modified_routes=list(change_set.modified_routes),
            deleted_routes=list(change_set.deleted_routes),
            summary=change_set.summary,
            confidence=change_set.confidence,
            postman_update=postman_update,
        )

    @classmethod
    def skipped(cls, summary: str) -> "AnalysisResult":
        """Result for an event that was not analyzed at all."""
        return cls(summary=summary, postman_update=MutationSummary.skipped())

    def to_json(self) -> dict:
        """Convert to the JSON document returned to callers."""
        return self.model_dump(mode="json", by_alias=True)
