from __future__ import annotations

import logging
from typing import Any, Optional, Sequence, Tuple
from urllib.parse import quote

import httpx

from .errors import FrontmatterError, MissingBody, NetworkFailure, NonJsonResponse
from .extractor import extract_metadata
from .models import FetchOutcome, MetadataBlock

logger = logging.getLogger(__name__)

# Newer hosts serve the API under /_api/v3, older ones under /api/v3.
DEFAULT_API_PREFIXES: Tuple[str, ...] = ("/_api/v3", "/api/v3")

PAGE_BODY_PATHS = (("page", "revision", "body"), ("data", "page", "revision", "body"))
REVISION_BODY_PATHS = (("revision", "body"), ("data", "revision", "body"))


class DocumentFetcher:
    """
    Retrieves raw page bodies from the wiki backend.

    Each configured prefix is tried in order; a prefix that errors or answers
    without a body is logged and skipped. Failures never propagate to the
    caller, they are folded into the returned FetchOutcome.
    """

    def __init__(self, client: httpx.AsyncClient, prefixes: Sequence[str] = DEFAULT_API_PREFIXES):
        self.client = client
        self.prefixes = tuple(prefixes)

    async def fetch(self, identifier: str, revision_id: Optional[str] = None) -> FetchOutcome:
        page_id = identifier.lstrip("/")
        if not page_id:
            return FetchOutcome.empty()

        answered = False
        for prefix in self.prefixes:
            if revision_id:
                url = f"{prefix}/pages/{quote(page_id, safe='')}/revisions/{quote(revision_id, safe='')}"
                params = None
                body_paths = REVISION_BODY_PATHS
            else:
                url = f"{prefix}/page"
                params = {"pageId": page_id}
                body_paths = PAGE_BODY_PATHS
            try:
                payload = await self._get_json(url, params)
                answered = True
                return FetchOutcome.success(self._probe_body(payload, body_paths))
            except MissingBody as exc:
                logger.warning("No page body in response from %s: %s", url, exc)
            except FrontmatterError as exc:
                logger.warning("Page API fetch failed (%s): %s", url, exc)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Page API fetch failed (%s): %s: %s", url, type(exc).__name__, exc)
        return FetchOutcome.empty() if answered else FetchOutcome.failure()

    async def fetch_metadata(self, identifier: str, revision_id: Optional[str] = None) -> Optional[MetadataBlock]:
        outcome = await self.fetch(identifier, revision_id)
        if not outcome.ok:
            return None
        return extract_metadata(outcome.body)

    async def _get_json(self, url: str, params: Optional[dict]) -> Any:
        try:
            response = await self.client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise NetworkFailure(f"{type(exc).__name__}: {exc}") from exc
        if not response.is_success:
            raise NetworkFailure(f"HTTP {response.status_code}")
        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            raise NonJsonResponse(f"Unexpected content type {content_type!r}")
        try:
            return response.json()
        except ValueError as exc:
            raise NonJsonResponse(f"Undecodable JSON: {exc}") from exc

    def _probe_body(self, payload: Any, body_paths: Sequence[Tuple[str, ...]]) -> str:
        for path in body_paths:
            node = payload
            for segment in path:
                node = node.get(segment) if isinstance(node, dict) else None
            if isinstance(node, str) and node:
                return node
        raise MissingBody("none of the known envelope shapes carried a body")
