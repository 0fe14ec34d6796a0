from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ...db.session import get_session
from ...db.models.models import UserRole
from ...schemas.models import RoleSyncRequest, UserRolesRead
from ...utils.roles import ROLE_SET_VERSION, Role, RoleMetadataError, parse_role_metadata

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/roles", tags=["roles"])


async def _stored_roles(session: AsyncSession, user_id: str) -> list[str]:
    result = await session.execute(select(UserRole.role).where(UserRole.user_id == user_id))
    return sorted(r.value for r in result.scalars().all())


@router.post("/sync", response_model=UserRolesRead)
async def sync_roles(payload: RoleSyncRequest, session: AsyncSession = Depends(get_session)):
    """Copy roles from the identity provider's public metadata into user_roles.

    Roles already stored but absent from the metadata are kept; removal is explicit.
    """
    try:
        role_set = parse_role_metadata(payload.public_metadata)
    except RoleMetadataError as e:
        logger.warning("Rejected role metadata for user %s: %s", payload.user_id, e)
        raise HTTPException(status_code=400, detail=f"Invalid role metadata: {e}")

    existing = set(await _stored_roles(session, payload.user_id))
    for role in role_set.roles:
        if role.value not in existing:
            session.add(UserRole(user_id=payload.user_id, role=role))
            logger.info("Granted role %s to user %s", role.value, payload.user_id)
    await session.flush()
    return {
        "user_id": payload.user_id,
        "roles": await _stored_roles(session, payload.user_id),
        "version": role_set.version,
    }


@router.get("/{user_id}", response_model=UserRolesRead)
async def get_roles(user_id: str, session: AsyncSession = Depends(get_session)):
    return {"user_id": user_id, "roles": await _stored_roles(session, user_id), "version": ROLE_SET_VERSION}


@router.delete("/{user_id}/{role}", status_code=204)
async def revoke_role(user_id: str, role: Role, session: AsyncSession = Depends(get_session)):
    result = await session.execute(
        select(UserRole).where(UserRole.user_id == user_id, UserRole.role == role)
    )
    row = result.scalars().first()
    if not row:
        raise HTTPException(status_code=404, detail="Role not assigned")
    await session.delete(row)
    return Response(status_code=204)
