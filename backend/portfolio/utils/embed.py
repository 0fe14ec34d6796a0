"""Embed, thumbnail and canonical URLs derived from a VideoReference.

Nothing here raises for bad input: a missing reference or a platform without
iframe playback (LinkedIn) comes back as an ``EmbedResult`` carrying an error
kind, which the player turns into its errored state.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .video import VideoPlatform, VideoReference

YOUTUBE_EMBED_URL = "https://www.youtube.com/embed/{id}?autoplay=0&rel=0&modestbranding=1"
VIMEO_EMBED_URL = "https://player.vimeo.com/video/{id}?color=ffffff&title=0&byline=0&portrait=0"
YOUTUBE_THUMBNAIL_URL = "https://img.youtube.com/vi/{id}/hqdefault.jpg"

_EMBED_TEMPLATES = {
    VideoPlatform.youtube: YOUTUBE_EMBED_URL,
    VideoPlatform.vimeo: VIMEO_EMBED_URL,
}

_CANONICAL_TEMPLATES = {
    VideoPlatform.youtube: "https://www.youtube.com/watch?v={id}",
    VideoPlatform.vimeo: "https://vimeo.com/{id}",
    VideoPlatform.linkedin: "https://www.linkedin.com/feed/update/urn:li:activity:{id}",
}


class EmbedError(str, Enum):
    missing_reference = "missing_reference"
    unsupported_platform = "unsupported_platform"


@dataclass(frozen=True)
class EmbedDescriptor:
    embed_url: str
    thumbnail_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"embed_url": self.embed_url, "thumbnail_url": self.thumbnail_url}


@dataclass(frozen=True)
class EmbedResult:
    descriptor: Optional[EmbedDescriptor] = None
    error: Optional[EmbedError] = None

    @property
    def ok(self) -> bool:
        return self.descriptor is not None


def _usable(ref: Optional[VideoReference]) -> bool:
    return ref is not None and isinstance(ref.platform, VideoPlatform) and bool(ref.id)


def build_embed_url(ref: Optional[VideoReference]) -> Optional[str]:
    """Iframe URL for ``ref``; None when there is no reference or no embeddable player."""
    if not _usable(ref):
        return None
    template = _EMBED_TEMPLATES.get(ref.platform)
    return template.format(id=ref.id) if template else None


def build_thumbnail_url(ref: Optional[VideoReference]) -> Optional[str]:
    # Only YouTube exposes a predictable image URL; the others need a metadata fetch.
    if not _usable(ref) or ref.platform is not VideoPlatform.youtube:
        return None
    return YOUTUBE_THUMBNAIL_URL.format(id=ref.id)


def build_canonical_url(ref: Optional[VideoReference]) -> Optional[str]:
    """Shortest public URL identifying the video, used to compare stored URLs."""
    if not _usable(ref):
        return None
    return _CANONICAL_TEMPLATES[ref.platform].format(id=ref.id)


def describe_video(ref: Optional[VideoReference]) -> EmbedResult:
    if not _usable(ref):
        return EmbedResult(error=EmbedError.missing_reference)
    embed_url = build_embed_url(ref)
    if embed_url is None:
        return EmbedResult(error=EmbedError.unsupported_platform)
    return EmbedResult(descriptor=EmbedDescriptor(embed_url=embed_url, thumbnail_url=build_thumbnail_url(ref)))
