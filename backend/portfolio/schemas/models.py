from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..utils.video import VideoPlatform


class ProjectCreate(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    role: Optional[str] = None
    client: Optional[str] = None
    url: Optional[str] = None
    video_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    featured: bool = False
    is_public: bool = True
    project_date: Optional[date] = None


class ProjectUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    role: Optional[str] = None
    client: Optional[str] = None
    url: Optional[str] = None
    video_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    featured: Optional[bool] = None
    is_public: Optional[bool] = None
    project_date: Optional[date] = None


class ProjectRead(ProjectCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    updated_at: datetime


class VideoInfo(BaseModel):
    platform: VideoPlatform
    id: str


class PlayerViewRead(BaseModel):
    state: str
    embed_url: Optional[str] = None
    show_spinner: bool
    message: Optional[str] = None
    error: Optional[str] = None


class ProjectVideoRead(BaseModel):
    project_id: int
    video_url: Optional[str] = None
    info: Optional[VideoInfo] = None
    embed_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    error: Optional[str] = None
    player: PlayerViewRead


class MediaCreate(BaseModel):
    filename: str = Field(min_length=1)
    filepath: Optional[str] = None
    public_url: Optional[str] = None
    filesize: int = 0
    filetype: Optional[str] = None
    thumbnail_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    meta: Dict[str, Any] = Field(default_factory=dict, alias="metadata")
    uploaded_by: Optional[str] = None
    project_id: Optional[int] = None

    model_config = ConfigDict(populate_by_name=True)


class MediaRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    filename: str
    filepath: Optional[str] = None
    public_url: Optional[str] = None
    filesize: int = 0
    filetype: Optional[str] = None
    thumbnail_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    meta: Dict[str, Any] = Field(default_factory=dict, serialization_alias="metadata")
    uploaded_by: Optional[str] = None
    project_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class DuplicateCheckRequest(BaseModel):
    url: Optional[str] = None
    file_hash: Optional[str] = None
    filename: Optional[str] = None
    filepath: Optional[str] = None


class DuplicateCheckRead(BaseModel):
    is_duplicate: bool
    existing_id: Optional[int] = None
    reason: Optional[str] = None
    match_type: Optional[str] = None


class ProcessVideoUrlRequest(BaseModel):
    url: Optional[str] = None
    is_bts: bool = False
    project_id: Optional[int] = None


class ProcessVideoUrlRead(BaseModel):
    success: bool = True
    url: str
    platform: VideoPlatform
    id: str
    title: str
    thumbnail_url: Optional[str] = None
    upload_date: Optional[datetime] = None
    media: MediaRead


class CleanupResult(BaseModel):
    message: str
    duplicates_removed: int
    duplicate_ids: List[int]


class RoleSyncRequest(BaseModel):
    user_id: str = Field(min_length=1)
    public_metadata: Optional[Dict[str, Any]] = None


class UserRolesRead(BaseModel):
    user_id: str
    roles: List[str]
    version: int


class ProjectSearchRead(BaseModel):
    success: bool = True
    data: List[ProjectRead]
    count: int
    query: Optional[str] = None
    category: Optional[str] = None
    role: Optional[str] = None


class BtsMediaRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    image_url: str
    caption: Optional[str] = None
    category: str
    sort_order: int
    created_at: datetime


class BtsMediaUpdate(BaseModel):
    images: List[str] = Field(default_factory=list)
    caption: Optional[str] = None
    category: str = "general"
    replace_existing: bool = False


class BtsMediaResult(BaseModel):
    success: bool = True
    message: str
    added: int = 0
    removed: int = 0
    duplicates_skipped: int = 0
    items: List[BtsMediaRead]


class SettingsUpdateResult(BaseModel):
    success: bool = True
    message: str
    updated: List[str]
