from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...db.session import get_session
from ...db.models.models import MediaItem, Project
from ...schemas.models import (
    CleanupResult,
    DuplicateCheckRead,
    DuplicateCheckRequest,
    MediaCreate,
    MediaRead,
    ProcessVideoUrlRead,
    ProcessVideoUrlRequest,
)
from ...utils import metadata
from ...utils.embed import build_thumbnail_url
from ...utils.media_dedup import DuplicateCheck, MediaCandidate, match_duplicate, plan_duplicate_cleanup
from ...utils.video import VideoPlatform, resolve_video_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/media", tags=["media"])

LINKEDIN_ICON = "/generic-icon.png"


async def _all_media(session: AsyncSession) -> List[MediaItem]:
    result = await session.execute(select(MediaItem).order_by(MediaItem.created_at, MediaItem.id))
    return list(result.scalars().all())


async def _check_duplicate(session: AsyncSession, candidate: MediaCandidate) -> DuplicateCheck:
    return match_duplicate(candidate, await _all_media(session))


def _conflict(check: DuplicateCheck) -> HTTPException:
    return HTTPException(status_code=409, detail=check.to_dict())


async def _ensure_project(session: AsyncSession, project_id: Optional[int]) -> None:
    if project_id is not None and not await session.get(Project, project_id):
        raise HTTPException(status_code=404, detail="Project not found")


@router.get("/", response_model=List[MediaRead])
async def list_media(
    project_id: Optional[int] = Query(None),
    tag: Optional[str] = Query(None),
    session: AsyncSession = Depends(get_session),
):
    stmt = select(MediaItem).order_by(MediaItem.created_at.desc(), MediaItem.id.desc())
    if project_id is not None:
        stmt = stmt.where(MediaItem.project_id == project_id)
    items = (await session.execute(stmt)).scalars().all()
    if tag:
        # tags is a JSON list; filter in Python to stay portable across backends
        items = [m for m in items if tag in (m.tags or [])]
    return items


@router.post("/", response_model=MediaRead)
async def create_media(payload: MediaCreate, session: AsyncSession = Depends(get_session)):
    await _ensure_project(session, payload.project_id)
    check = await _check_duplicate(
        session,
        MediaCandidate(
            url=payload.public_url,
            file_hash=payload.meta.get("fileHash"),
            filename=payload.filename,
            filepath=payload.filepath,
        ),
    )
    if check.is_duplicate:
        logger.info("Rejected duplicate media %r: %s", payload.filename, check.reason)
        raise _conflict(check)
    item = MediaItem(**payload.model_dump())
    session.add(item)
    await session.flush()
    await session.refresh(item)
    return item


@router.post("/check-duplicate", response_model=DuplicateCheckRead)
async def check_duplicate(payload: DuplicateCheckRequest, session: AsyncSession = Depends(get_session)):
    check = await _check_duplicate(session, MediaCandidate(**payload.model_dump()))
    return check.to_dict()


@router.post("/process-video-url", response_model=ProcessVideoUrlRead)
async def process_video_url(payload: ProcessVideoUrlRequest, session: AsyncSession = Depends(get_session)):
    """Register a hosted video (YouTube, Vimeo, LinkedIn) in the media library."""
    if not payload.url or not payload.url.strip():
        raise HTTPException(status_code=400, detail="No URL provided")
    url = payload.url.strip()
    ref = resolve_video_url(url)
    if ref is None:
        raise HTTPException(status_code=400, detail="Invalid video URL format")
    await _ensure_project(session, payload.project_id)

    check = await _check_duplicate(session, MediaCandidate(url=url))
    if check.is_duplicate:
        raise _conflict(check)

    upload_date = None
    if ref.platform is VideoPlatform.vimeo:
        vimeo = await metadata.fetch_vimeo_metadata(ref.id)
        thumbnail_url = vimeo.thumbnail_url if vimeo else None
        title = (vimeo.title if vimeo else None) or f"Vimeo Video {ref.id}"
        upload_date = vimeo.upload_date if vimeo else None
    elif ref.platform is VideoPlatform.youtube:
        thumbnail_url = build_thumbnail_url(ref)
        title = f"YouTube Video {ref.id}"
    else:
        thumbnail_url = LINKEDIN_ICON
        title = f"LinkedIn Post {ref.id}"

    tags = ["video", ref.platform.value] + (["bts"] if payload.is_bts else [])
    item = MediaItem(
        filename=title,
        filepath=url,
        public_url=url,
        filesize=0,
        filetype=ref.platform.value,
        thumbnail_url=thumbnail_url,
        tags=tags,
        meta={
            f"{ref.platform.value}Id": ref.id,
            "uploadedBy": "admin",
            "isBts": payload.is_bts,
            "uploadDate": upload_date.isoformat() if upload_date else None,
        },
        uploaded_by="admin",
        project_id=payload.project_id,
    )
    session.add(item)
    await session.flush()
    await session.refresh(item)
    logger.info("Added %s video %s to media library as id=%s", ref.platform.value, ref.id, item.id)
    return {
        "url": url,
        "platform": ref.platform,
        "id": ref.id,
        "title": title,
        "thumbnail_url": thumbnail_url,
        "upload_date": upload_date,
        "media": item,
    }


@router.post("/cleanup-duplicates", response_model=CleanupResult)
async def cleanup_duplicates(session: AsyncSession = Depends(get_session)):
    items = await _all_media(session)
    if not items:
        return {"message": "No media items found", "duplicates_removed": 0, "duplicate_ids": []}
    to_remove = plan_duplicate_cleanup(items)
    if to_remove:
        await session.execute(delete(MediaItem).where(MediaItem.id.in_(to_remove)))
        logger.info("Removed %d duplicate media items: %s", len(to_remove), to_remove)
    return {
        "message": "Cleanup completed successfully",
        "duplicates_removed": len(to_remove),
        "duplicate_ids": to_remove,
    }


@router.get("/{media_id}", response_model=MediaRead)
async def get_media(media_id: int, session: AsyncSession = Depends(get_session)):
    item = await session.get(MediaItem, media_id)
    if not item:
        raise HTTPException(status_code=404, detail="Media item not found")
    return item


@router.delete("/{media_id}", status_code=204)
async def delete_media(media_id: int, session: AsyncSession = Depends(get_session)):
    item = await session.get(MediaItem, media_id)
    if not item:
        raise HTTPException(status_code=404, detail="Media item not found")
    await session.delete(item)
    return Response(status_code=204)
