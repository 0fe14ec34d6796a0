from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ...db.session import get_session
from ...db.models.models import SiteSetting
from ...schemas.models import SettingsUpdateResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/", response_model=Dict[str, Any])
async def get_settings(session: AsyncSession = Depends(get_session)):
    """Return every site setting as one ``{key: value}`` object."""
    result = await session.execute(select(SiteSetting).order_by(SiteSetting.key))
    return {row.key: row.value for row in result.scalars().all()}


@router.get("/{key}")
async def get_setting(key: str, session: AsyncSession = Depends(get_session)):
    row = await session.get(SiteSetting, key)
    if not row:
        raise HTTPException(status_code=404, detail="Setting not found")
    return {"key": row.key, "value": row.value}


@router.post("/", response_model=SettingsUpdateResult)
async def update_settings(
    payload: Dict[str, Any] = Body(..., description="Settings to insert or overwrite, as {key: value}"),
    session: AsyncSession = Depends(get_session),
):
    keys = [k.strip() for k in payload]
    if any(not k for k in keys):
        raise HTTPException(status_code=400, detail="Invalid settings data")
    for raw_key, key in zip(payload, keys):
        row = await session.get(SiteSetting, key)
        if row is None:
            session.add(SiteSetting(key=key, value=payload[raw_key]))
        else:
            row.value = payload[raw_key]
    await session.flush()
    logger.info("Updated site settings: %s", ", ".join(keys))
    return {"message": "Settings updated successfully", "updated": sorted(keys)}
