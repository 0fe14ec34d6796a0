"""Operability endpoints for the video system and the in-memory log view."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from ...core.config import settings
from ...utils import metadata
from ...utils.embed import build_embed_url, build_thumbnail_url
from ...utils.video import VideoPlatform, resolve_video_url

logger = logging.getLogger(__name__)

router = APIRouter(tags=["debug"])


@router.get("/debug/video-info")
async def video_info(url: Optional[str] = Query(None, description="Raw video URL to resolve")):
    if not url:
        raise HTTPException(status_code=400, detail="Missing video URL parameter")

    ref = resolve_video_url(url)
    if ref is None:
        return {
            "success": False,
            "message": "Could not extract video information from the provided URL",
            "url": url,
            "info": None,
            "title": None,
            "embed_url": None,
        }

    title = None
    vimeo_metadata = None
    thumbnail_url = build_thumbnail_url(ref)
    if ref.platform is VideoPlatform.youtube:
        title = await metadata.fetch_youtube_title(ref.id)
    elif ref.platform is VideoPlatform.vimeo:
        vimeo = await metadata.fetch_vimeo_metadata(ref.id)
        if vimeo is not None:
            title = vimeo.title
            thumbnail_url = vimeo.thumbnail_url
            vimeo_metadata = vimeo.raw

    return {
        "success": True,
        "url": url,
        "info": ref.to_dict(),
        "title": title,
        "vimeo_metadata": vimeo_metadata,
        "embed_url": build_embed_url(ref),
        "thumbnail_url": thumbnail_url,
    }


@router.get("/youtube-title")
async def youtube_title(video_id: Optional[str] = Query(None, alias="videoId")):
    if not video_id:
        raise HTTPException(status_code=400, detail="Missing videoId parameter")
    try:
        data = await metadata.get_youtube_oembed(video_id)
    except metadata.MetadataFetchFailed as e:
        logger.warning("YouTube title lookup failed for %s: %s", video_id, e)
        status = e.status_code if e.status_code and e.status_code >= 400 else 502
        raise HTTPException(status_code=status, detail=f"Failed to fetch YouTube title: {e}")

    max_age = settings.youtube_title_cache_seconds
    return JSONResponse(
        {"title": data.title, "author": data.author, "thumbnail_url": data.thumbnail_url},
        headers={"Cache-Control": f"public, max-age={max_age}, s-maxage={max_age}"},
    )


@router.get("/debug/logs")
def get_logs(
    request: Request,
    count: Optional[int] = Query(None, ge=1, le=5000),
    level: Optional[str] = Query(None, description="DEBUG, INFO, WARN or ERROR"),
):
    buffer = request.app.state.services.log_buffer
    entries = buffer.entries(count=count, level=level)
    return {
        "max_lines": buffer.max_lines,
        "count": len(entries),
        "entries": [e.to_dict() for e in entries],
    }


@router.delete("/debug/logs", status_code=204)
def clear_logs(request: Request):
    request.app.state.services.log_buffer.clear()
