from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.config import settings
from ...db.session import get_session
from ...db.models.models import BtsMedia, Project
from ...schemas.models import (
    BtsMediaRead,
    BtsMediaResult,
    BtsMediaUpdate,
    ProjectCreate,
    ProjectRead,
    ProjectSearchRead,
    ProjectUpdate,
    ProjectVideoRead,
)
from ...utils.bts import plan_append, plan_replace
from ...utils.embed import build_thumbnail_url, describe_video
from ...utils.player import VideoPlayer
from ...utils.video import resolve_video_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])


def _fill_thumbnail(project: Project) -> None:
    """Use the YouTube still as thumbnail when none was given."""
    if project.thumbnail_url or not project.video_url:
        return
    thumb = build_thumbnail_url(resolve_video_url(project.video_url))
    if thumb:
        project.thumbnail_url = thumb


async def _get_or_404(session: AsyncSession, project_id: int) -> Project:
    project = await session.get(Project, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.get("/", response_model=List[ProjectRead])
async def list_projects(
    featured: Optional[bool] = Query(None),
    public_only: bool = Query(False),
    session: AsyncSession = Depends(get_session),
):
    stmt = select(Project).order_by(Project.project_date.desc(), Project.created_at.desc())
    if featured is not None:
        stmt = stmt.where(Project.featured == featured)
    if public_only:
        stmt = stmt.where(Project.is_public.is_(True))
    result = await session.execute(stmt)
    return result.scalars().all()


@router.get("/search", response_model=ProjectSearchRead)
async def search_projects(
    q: Optional[str] = Query(None, description="Matched against title, description, category and role"),
    category: Optional[str] = Query(None),
    role: Optional[str] = Query(None),
    session: AsyncSession = Depends(get_session),
):
    """Case-insensitive project search. An empty query or ``*`` matches everything."""
    stmt = select(Project).order_by(Project.created_at.desc(), Project.id.desc())
    term = q.strip() if q else ""
    if term and term != "*":
        pattern = f"%{term}%"
        stmt = stmt.where(
            or_(
                Project.title.ilike(pattern),
                Project.description.ilike(pattern),
                Project.category.ilike(pattern),
                Project.role.ilike(pattern),
            )
        )
    if category:
        stmt = stmt.where(Project.category == category)
    if role:
        stmt = stmt.where(Project.role.ilike(f"%{role}%"))
    projects = (await session.execute(stmt)).scalars().all()
    return {"data": projects, "count": len(projects), "query": q, "category": category, "role": role}


@router.post("/", response_model=ProjectRead)
async def create_project(payload: ProjectCreate, session: AsyncSession = Depends(get_session)):
    project = Project(**payload.model_dump())
    _fill_thumbnail(project)
    session.add(project)
    await session.flush()
    await session.refresh(project)
    logger.info("Created project id=%s title=%r", project.id, project.title)
    return project


@router.get("/{project_id}", response_model=ProjectRead)
async def get_project(project_id: int, session: AsyncSession = Depends(get_session)):
    return await _get_or_404(session, project_id)


@router.patch("/{project_id}", response_model=ProjectRead)
async def update_project(project_id: int, payload: ProjectUpdate, session: AsyncSession = Depends(get_session)):
    project = await _get_or_404(session, project_id)
    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(project, field, value)
    if "video_url" in changes and "thumbnail_url" not in changes:
        # the old still belongs to the old video
        if project.thumbnail_url and project.thumbnail_url.startswith("https://img.youtube.com/"):
            project.thumbnail_url = None
    _fill_thumbnail(project)
    await session.flush()
    await session.refresh(project)
    return project


@router.delete("/{project_id}", status_code=204)
async def delete_project(project_id: int, session: AsyncSession = Depends(get_session)):
    project = await _get_or_404(session, project_id)
    await session.delete(project)
    logger.info("Deleted project id=%s", project_id)
    return Response(status_code=204)


@router.get("/{project_id}/video", response_model=ProjectVideoRead)
async def project_video(project_id: int, session: AsyncSession = Depends(get_session)):
    """Resolve the stored video URL into embed/thumbnail URLs and the initial player state."""
    project = await _get_or_404(session, project_id)
    ref = resolve_video_url(project.video_url)
    result = describe_video(ref)

    error = None
    if ref is None:
        error = "not_recognized"
    elif not result.ok:
        error = result.error.value

    player = VideoPlayer(load_timeout=settings.player_load_timeout)
    view = player.render(ref.platform.value if ref else None, ref.id if ref else None)
    return {
        "project_id": project.id,
        "video_url": project.video_url,
        "info": ref.to_dict() if ref else None,
        "embed_url": result.descriptor.embed_url if result.ok else None,
        "thumbnail_url": build_thumbnail_url(ref),
        "error": error,
        "player": view.to_dict(),
    }


async def _bts_rows(session: AsyncSession, project_id: int):
    result = await session.execute(
        select(BtsMedia).where(BtsMedia.project_id == project_id).order_by(BtsMedia.sort_order, BtsMedia.id)
    )
    return list(result.scalars().all())


@router.get("/{project_id}/bts", response_model=List[BtsMediaRead])
async def list_bts_media(project_id: int, session: AsyncSession = Depends(get_session)):
    await _get_or_404(session, project_id)
    return await _bts_rows(session, project_id)


@router.post("/{project_id}/bts", response_model=BtsMediaResult)
async def update_bts_media(project_id: int, payload: BtsMediaUpdate, session: AsyncSession = Depends(get_session)):
    """Append to or replace the project's behind-the-scenes media list."""
    await _get_or_404(session, project_id)
    existing = await _bts_rows(session, project_id)
    plan_fn = plan_replace if payload.replace_existing else plan_append
    plan = plan_fn(existing, payload.images, caption=payload.caption)

    if plan.delete_ids:
        await session.execute(delete(BtsMedia).where(BtsMedia.id.in_(plan.delete_ids)))
    for row_id, sort_order in plan.reorder.items():
        await session.execute(update(BtsMedia).where(BtsMedia.id == row_id).values(sort_order=sort_order))
    for new in plan.inserts:
        session.add(
            BtsMedia(
                project_id=project_id,
                image_url=new.image_url,
                caption=new.caption,
                category=payload.category or "general",
                sort_order=new.sort_order,
            )
        )
    await session.flush()
    # bulk statements above bypass the identity map
    session.expire_all()
    items = await _bts_rows(session, project_id)

    if payload.replace_existing:
        message = "BTS media updated successfully (replaced)."
    elif not plan.inserts and not plan.duplicates_skipped:
        message = "No new BTS images to add."
    elif not plan.inserts:
        message = "All provided BTS images already exist for this project (append mode)."
    else:
        message = f"{len(plan.inserts)} new BTS images added."
    if plan.changed:
        logger.info(
            "BTS media for project %s: +%d -%d reordered=%d",
            project_id,
            len(plan.inserts),
            len(plan.delete_ids),
            len(plan.reorder),
        )
    return {
        "message": message,
        "added": len(plan.inserts),
        "removed": len(plan.delete_ids),
        "duplicates_skipped": plan.duplicates_skipped,
        "items": items,
    }
