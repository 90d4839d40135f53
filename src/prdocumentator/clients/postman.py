"""
Postman API client.

Reads and writes a single collection. The client never edits a collection
itself; reconciliation happens on a fetched copy and the result is written
back whole.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from prdocumentator.clients.base import BaseHTTPClient, error_detail
from prdocumentator.config.models import DEFAULT_POSTMAN_BASE_URL, PostmanConfig
from prdocumentator.errors import (
    ExternalServiceError,
    NotFoundError,
    RateLimitError,
    UnauthorizedError,
    ValidationError,
)
from prdocumentator.models.collection import CollectionMeta, CollectionTree

logger = logging.getLogger(__name__)


class PostmanClient(BaseHTTPClient):
    """Collection store backed by the Postman API.

    Example:
        async with PostmanClient(api_key, collection_id) as store:
            tree = await store.fetch_tree()
            await store.persist_tree(tree)
    """

    service_name = "postman"

    def __init__(
        self,
        api_key: str,
        collection_id: str,
        workspace_id: str = "",
        base_url: str = DEFAULT_POSTMAN_BASE_URL,
        timeout: float = 30.0,
        max_retries: int = 3,
        **kwargs: Any,
    ) -> None:
        super().__init__(base_url=base_url, timeout=timeout, max_retries=max_retries, **kwargs)
        if not api_key:
            raise UnauthorizedError("Postman API key is not configured")
        if not collection_id:
            raise ValidationError("Postman collection id is not configured")
        self._api_key = api_key
        self._collection_id = collection_id
        self._workspace_id = workspace_id

    @classmethod
    def from_config(cls, config: PostmanConfig, **kwargs: Any) -> PostmanClient:
        api_key = config.api_key.get_secret_value() if config.api_key else ""
        return cls(
            api_key=api_key,
            collection_id=config.collection_id or "",
            workspace_id=config.workspace_id or "",
            base_url=config.base_url,
            timeout=config.timeout,
            max_retries=config.max_retries,
            **kwargs,
        )

    @property
    def collection_id(self) -> str:
        return self._collection_id

    @property
    def workspace_id(self) -> str:
        return self._workspace_id

    @property
    def _collection_path(self) -> str:
        return f"/collections/{self._collection_id}"

    def _default_headers(self) -> dict[str, str]:
        return {
            "X-API-Key": self._api_key,
            "Content-Type": "application/json",
        }

    def _raise_for_status(self, response: httpx.Response) -> None:
        status = response.status_code
        if status < 400:
            return
        if status == 401:
            raise UnauthorizedError("Invalid Postman API key")
        if status == 404:
            raise NotFoundError("Collection not found", collection_id=self._collection_id)
        if status == 429:
            raise RateLimitError("Postman rate limit exceeded")
        raise ExternalServiceError(
            f"Postman API error: HTTP {status}: {error_detail(response)}",
            upstream_status=status,
        )

    async def fetch_tree(self) -> CollectionTree:
        """Fetch the current collection.

        Raises:
            UnauthorizedError, NotFoundError, RateLimitError,
            ExternalServiceError: Per the API response
        """
        logger.debug(f"Fetching Postman collection {self._collection_id}")
        response = await self._request("GET", self._collection_path)
        try:
            tree = CollectionTree.from_wire(response.json())
        except (ValueError, PydanticValidationError) as e:
            raise ExternalServiceError("Postman returned an unreadable collection") from e
        logger.info(f"Fetched collection '{tree.name}' with {len(tree.items)} root items")
        return tree

    async def persist_tree(self, tree: CollectionTree) -> CollectionMeta:
        """Replace the stored collection with ``tree``.

        Returns:
            The store's acknowledgement (id, name, uid)
        """
        payload = {"collection": tree.to_wire()}
        response = await self._request("PUT", self._collection_path, json=payload)

        meta = CollectionMeta(id=self._collection_id)
        try:
            data = response.json()
        except ValueError:
            data = None
        if isinstance(data, dict) and isinstance(data.get("collection"), dict):
            try:
                meta = CollectionMeta.model_validate(data["collection"])
            except PydanticValidationError as e:
                # The write itself succeeded; only the acknowledgement is odd.
                logger.warning(f"Unreadable acknowledgement for collection {self._collection_id}: {e}")
        logger.info(f"Updated Postman collection {meta.id or self._collection_id}")
        return meta
