"""Client for the shared dictionary/template feed.

Endpoints (relative to the configured base URL):
    GET /ocrDictionary/global      -> {"merchants": {...}, "terms": {...}}
    GET /ocrDictionary/{user_id}   -> same shape, per-user overrides
    GET /receiptTemplates          -> [{merchantName, headerPattern, ...}] or {"templates": [...]}

Fetching is never on the extraction path. Every failure is logged and
reported as "no remote data" so extraction falls back to local data.
"""

from __future__ import annotations

import time
from typing import Any

import httpx

from receiptlens.receipt.corrections import CorrectionDocument
from receiptlens.receipt.templates import TemplateRecord, parse_template_records
from receiptlens.runtime.logging import get_logger
from receiptlens.runtime.settings import DEFAULT_REMOTE_TIMEOUT

logger = get_logger(__name__)


class RemoteFeedUnavailable(RuntimeError):
    """Raised when the remote feed cannot be reached or returns an unusable response."""


def _get_json(
    url: str,
    timeout: float = DEFAULT_REMOTE_TIMEOUT,
    client: httpx.Client | None = None,
) -> Any:
    """GET `url` and decode its JSON body, or return None on 404."""
    try:
        start_time = time.time()
        if client is not None:
            response = client.get(url, timeout=timeout)
        else:
            response = httpx.get(url, timeout=timeout)
        logger.debug("GET %s returned %s in %.2f seconds", url, response.status_code, time.time() - start_time)
    except httpx.RequestError as e:
        raise RemoteFeedUnavailable(f"Failed to connect to remote feed: {e}") from e

    if response.status_code == 404:
        return None
    if response.status_code != 200:
        raise RemoteFeedUnavailable(f"Remote feed error: {response.status_code}")

    try:
        return response.json()
    except ValueError as e:
        raise RemoteFeedUnavailable(f"Remote feed returned invalid JSON from {url}") from e


def fetch_correction_documents(
    base_url: str,
    user_id: str | None = None,
    timeout: float = DEFAULT_REMOTE_TIMEOUT,
    client: httpx.Client | None = None,
) -> tuple[CorrectionDocument | None, CorrectionDocument | None]:
    """
    Fetch the global and (optionally) per-user correction documents.

    Returns:
        Tuple of (global_document, user_document); either is None when unavailable.
    """
    base_url = base_url.rstrip("/")

    global_doc: CorrectionDocument | None = None
    try:
        raw = _get_json(f"{base_url}/ocrDictionary/global", timeout=timeout, client=client)
        if raw is not None:
            global_doc = CorrectionDocument.from_remote(raw, source="global dictionary")
    except RemoteFeedUnavailable as e:
        logger.warning("Error updating global dictionary: %s", e)

    user_doc: CorrectionDocument | None = None
    if user_id:
        try:
            raw = _get_json(f"{base_url}/ocrDictionary/{user_id}", timeout=timeout, client=client)
            if raw is not None:
                user_doc = CorrectionDocument.from_remote(raw, source="user dictionary")
        except RemoteFeedUnavailable as e:
            logger.warning("Error updating user dictionary: %s", e)

    return global_doc, user_doc


def fetch_template_records(
    base_url: str,
    timeout: float = DEFAULT_REMOTE_TIMEOUT,
    client: httpx.Client | None = None,
) -> list[TemplateRecord] | None:
    """Fetch remote template records; None when the feed is unavailable."""
    url = f"{base_url.rstrip('/')}/receiptTemplates"
    try:
        raw = _get_json(url, timeout=timeout, client=client)
    except RemoteFeedUnavailable as e:
        logger.warning("Error updating templates from remote feed: %s", e)
        return None

    if raw is None:
        return None
    if isinstance(raw, dict):
        raw = raw.get("templates", [])
    if not isinstance(raw, list):
        logger.warning("Ignoring malformed remote template document from %s", url)
        return None
    return parse_template_records(raw, source="remote feed")
