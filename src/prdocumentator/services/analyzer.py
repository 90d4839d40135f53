"""
Analysis orchestration.

Sequences one analysis end to end: fetch the diff, read the documented
routes for context, ask the oracle, reconcile its answer into a copy of the
collection, persist the copy and summarize. The failure policy is:

* the oracle failing (or timing out) aborts the run;
* fetching context failing is logged and the run continues without it;
* persisting failing degrades ``postman_update`` but the oracle's routes,
  summary and confidence are still returned.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import Any, Optional, TypeVar

from prdocumentator.clients.base import CollectionStore, DiffSource, RouteOracle
from prdocumentator.collection.extractor import extract_routes
from prdocumentator.collection.reconciler import reconcile
from prdocumentator.config.models import DEFAULT_PROCESSABLE_ACTIONS, DocumentatorConfig
from prdocumentator.errors import DocumentatorError, UpstreamTimeoutError, ValidationError
from prdocumentator.models.analysis import AnalysisResult, MutationSummary
from prdocumentator.models.collection import CollectionTree
from prdocumentator.models.github import (
    GitHubPullRequest,
    GitHubRepository,
    PullRequestEvent,
)
from prdocumentator.models.routes import ExistingRoute, RouteChangeSet

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT = 120.0


class AnalyzerService:
    """Facade over oracle, collection store and diff source.

    Each call works on its own copy of the collection, so concurrent
    analyses never share mutable state. Two analyses against the same
    collection still race at the store: the later write wins.

    Example:
        async with AnalyzerService.from_config(config) as analyzer:
            result = await analyzer.analyze_diff(diff_text)
    """

    def __init__(
        self,
        oracle: RouteOracle,
        store: CollectionStore,
        diff_source: Optional[DiffSource] = None,
        processable_actions: Optional[list[str]] = None,
        include_existing_routes: bool = True,
        timeout: float = DEFAULT_TIMEOUT,
        target_folder: Optional[str] = None,
    ) -> None:
        """Initialize the analyzer.

        Args:
            oracle: Infers route changes from a diff
            store: Reads and writes the collection
            diff_source: Fetches diffs for webhook events without an inline diff
            processable_actions: PR actions that trigger an analysis
            include_existing_routes: Send documented routes to the oracle
            timeout: Upper bound in seconds for each upstream step
            target_folder: Folder new requests go into (root when None)
        """
        self._oracle = oracle
        self._store = store
        self._diff_source = diff_source
        self._processable_actions = list(
            DEFAULT_PROCESSABLE_ACTIONS if processable_actions is None else processable_actions
        )
        self._include_existing_routes = include_existing_routes
        self._timeout = timeout
        self._target_folder = target_folder

    @classmethod
    def from_config(cls, config: DocumentatorConfig, **kwargs: Any) -> AnalyzerService:
        """Build an analyzer with HTTP clients for every collaborator."""
        from prdocumentator.clients.claude import ClaudeClient
        from prdocumentator.clients.github import GitHubDiffFetcher
        from prdocumentator.clients.postman import PostmanClient

        return cls(
            oracle=ClaudeClient.from_config(config.claude),
            store=PostmanClient.from_config(config.postman),
            diff_source=GitHubDiffFetcher.from_config(config.github),
            processable_actions=config.analysis.processable_actions,
            include_existing_routes=config.analysis.include_existing_routes,
            timeout=config.analysis.analysis_timeout,
            target_folder=config.postman.target_folder,
            **kwargs,
        )

    async def __aenter__(self) -> AnalyzerService:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close any collaborator that holds a connection pool."""
        for collaborator in (self._oracle, self._store, self._diff_source):
            close = getattr(collaborator, "close", None)
            if close is not None:
                await close()

    def should_process(self, action: str) -> bool:
        return action in self._processable_actions

    async def _bounded(self, awaitable: Awaitable[T], step: str) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout)
        except asyncio.TimeoutError as e:
            raise UpstreamTimeoutError(f"{step} timed out after {self._timeout}s") from e

    async def analyze_pull_request(self, event: PullRequestEvent) -> AnalysisResult:
        """Analyze a pull request webhook event.

        Events whose action is not processable are skipped without calling
        the oracle.

        Raises:
            ValidationError: No inline diff and no diff source or URL
            DocumentatorError: The diff fetch or the oracle failed
        """
        pr = event.pull_request
        logger.info(
            f"Starting PR analysis: #{pr.number} in {event.repository.full_name} "
            f"(action: {event.action})"
        )

        if not self.should_process(event.action):
            logger.info(f"Skipping PR action: {event.action}")
            return AnalysisResult.skipped(f"Skipped action: {event.action}")

        diff = event.diff
        if not diff:
            if self._diff_source is None:
                raise ValidationError("Event has no diff and no diff source is configured")
            diff = await self._bounded(self._diff_source.fetch_diff(pr.diff_url), "Diff fetch")

        return await self.analyze_diff(diff, pull_request=pr, repository=event.repository)

    async def analyze_diff(
        self,
        diff: str,
        pull_request: Optional[GitHubPullRequest] = None,
        repository: Optional[GitHubRepository] = None,
    ) -> AnalysisResult:
        """Analyze a raw diff and update the collection.

        Args:
            diff: Unified diff text
            pull_request: Pull request the diff belongs to, for the prompt
            repository: Repository the pull request belongs to

        Returns:
            The oracle's route changes plus the collection update summary

        Raises:
            ValidationError: Empty diff
            DocumentatorError: The oracle failed or timed out
        """
        if not diff or not diff.strip():
            raise ValidationError("Diff is empty")

        tree, existing_routes = await self._load_context()

        change_set: RouteChangeSet = await self._bounded(
            self._oracle.analyze(
                diff,
                existing_routes=existing_routes,
                pull_request=pull_request,
                repository=repository,
            ),
            "Oracle analysis",
        )

        if change_set.has_changes:
            logger.info(
                f"API changes detected, updating collection: "
                f"{len(change_set.new_routes)} new, "
                f"{len(change_set.modified_routes)} modified, "
                f"{len(change_set.deleted_routes)} deleted"
            )
            update = await self._update_collection(change_set, tree)
        else:
            logger.info("No API changes detected, skipping collection update")
            update = MutationSummary.skipped(self._store.collection_id)

        logger.info(
            f"Analysis completed (confidence {change_set.confidence}, "
            f"collection status {update.status.value})"
        )
        return AnalysisResult.from_change_set(change_set, update)

    async def _load_context(self) -> tuple[Optional[CollectionTree], list[ExistingRoute]]:
        """Fetch the collection and its documented routes, tolerating failure."""
        if not self._include_existing_routes:
            return None, []
        try:
            tree = await self._bounded(self._store.fetch_tree(), "Collection fetch")
        except DocumentatorError as e:
            logger.warning(f"Could not fetch existing routes, continuing without context: {e}")
            return None, []
        routes = extract_routes(tree)
        logger.debug(f"Sending {len(routes)} existing routes as context")
        return tree, routes

    async def _update_collection(
        self,
        change_set: RouteChangeSet,
        tree: Optional[CollectionTree],
    ) -> MutationSummary:
        """Reconcile and persist; any store failure becomes an error summary."""
        collection_id = self._store.collection_id
        try:
            if tree is None:
                tree = await self._bounded(self._store.fetch_tree(), "Collection fetch")
            updated, summary = reconcile(tree, change_set, self._target_folder)
            await self._bounded(self._store.persist_tree(updated), "Collection update")
        except DocumentatorError as e:
            logger.error(f"Failed to update collection {collection_id}: {e}")
            return MutationSummary.failed(e, collection_id)

        summary.collection_id = collection_id
        return summary
