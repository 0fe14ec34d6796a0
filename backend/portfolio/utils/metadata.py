"""Best-effort video metadata lookups (YouTube oEmbed, Vimeo simple API).

The ``fetch_*`` functions return None on any failure (network error, non-2xx,
malformed JSON) and log a warning; callers fall back to what the resolver
and embed builder can compute offline. One attempt per call, no retries.

Set METADATA_FETCH_DISABLED=1 to skip outbound calls entirely (used by the
test suite). Passing an explicit ``client`` bypasses that switch.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

import httpx

from ..core.config import settings

logger = logging.getLogger(__name__)

YOUTUBE_OEMBED_URL = "https://www.youtube.com/oembed"
VIMEO_VIDEO_API_URL = "https://vimeo.com/api/v2/video/{id}.json"


class MetadataFetchFailed(Exception):
    """Upstream metadata lookup failed; carries the upstream status when there was one."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class YouTubeOEmbed:
    title: Optional[str]
    author: Optional[str]
    thumbnail_url: Optional[str]


@dataclass(frozen=True)
class VimeoMetadata:
    title: Optional[str]
    thumbnail_url: Optional[str]
    upload_date: Optional[datetime]
    raw: Dict[str, Any]


def fetch_disabled() -> bool:
    return os.environ.get("METADATA_FETCH_DISABLED", "0") in {"1", "true", "TRUE", "True"}


def youtube_watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


async def _get_json(url: str, params: Optional[Dict[str, str]] = None, client: Optional[httpx.AsyncClient] = None) -> Any:
    """GET ``url`` and decode JSON, raising MetadataFetchFailed on any failure."""
    try:
        if client is not None:
            resp = await client.get(url, params=params)
        else:
            async with httpx.AsyncClient(timeout=settings.metadata_timeout, follow_redirects=True) as ac:
                resp = await ac.get(url, params=params)
    except httpx.HTTPError as e:
        raise MetadataFetchFailed(f"request to {url} failed: {e}") from e
    if resp.status_code < 200 or resp.status_code >= 300:
        raise MetadataFetchFailed(
            f"{url} returned {resp.status_code} {resp.reason_phrase}", status_code=resp.status_code
        )
    try:
        return resp.json()
    except ValueError as e:
        raise MetadataFetchFailed(f"{url} returned malformed JSON") from e


async def get_youtube_oembed(video_id: str, client: Optional[httpx.AsyncClient] = None) -> YouTubeOEmbed:
    """oEmbed lookup that raises MetadataFetchFailed; the title endpoint needs the upstream status."""
    if client is None and fetch_disabled():
        # no upstream was contacted; 503 is reported as our own status
        raise MetadataFetchFailed("metadata fetch disabled", status_code=503)
    data = await _get_json(
        YOUTUBE_OEMBED_URL,
        params={"url": youtube_watch_url(video_id), "format": "json"},
        client=client,
    )
    if not isinstance(data, dict):
        raise MetadataFetchFailed("unexpected oEmbed payload")
    return YouTubeOEmbed(
        title=data.get("title") or None,
        author=data.get("author_name") or None,
        thumbnail_url=data.get("thumbnail_url") or None,
    )


async def fetch_youtube_oembed(video_id: str, client: Optional[httpx.AsyncClient] = None) -> Optional[YouTubeOEmbed]:
    try:
        return await get_youtube_oembed(video_id, client=client)
    except MetadataFetchFailed as e:
        logger.warning("YouTube oEmbed lookup failed for %s: %s", video_id, e)
        return None


async def fetch_youtube_title(video_id: str, client: Optional[httpx.AsyncClient] = None) -> Optional[str]:
    meta = await fetch_youtube_oembed(video_id, client=client)
    return meta.title if meta else None


def _parse_upload_date(value: Any) -> Optional[datetime]:
    # Vimeo uses "YYYY-MM-DD HH:MM:SS"
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        return None


async def fetch_vimeo_metadata(video_id: str, client: Optional[httpx.AsyncClient] = None) -> Optional[VimeoMetadata]:
    if client is None and fetch_disabled():
        return None
    try:
        data = await _get_json(VIMEO_VIDEO_API_URL.format(id=video_id), client=client)
    except MetadataFetchFailed as e:
        logger.warning("Vimeo metadata lookup failed for %s: %s", video_id, e)
        return None
    if not isinstance(data, list) or not data or not isinstance(data[0], dict):
        logger.warning("Vimeo metadata for %s has unexpected shape", video_id)
        return None
    item = data[0]
    return VimeoMetadata(
        title=item.get("title") or None,
        thumbnail_url=item.get("thumbnail_large") or None,
        upload_date=_parse_upload_date(item.get("upload_date")),
        raw=item,
    )
