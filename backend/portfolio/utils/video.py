"""
Video URL recognition.

Classifies a raw, untrusted string (form field, stored project/media URL,
debug query parameter) as a reference to a supported video platform.

Rules, first match wins:
- anything containing ``youtube.com`` / ``youtu.be`` is tried as YouTube only
- then ``vimeo.com``
- then ``linkedin.com``

Resolution is pure and never raises: absent, blank or unparsable input
yields ``None``. Every route and component goes through
``resolve_video_url``; do not re-implement the patterns elsewhere.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class VideoPlatform(str, Enum):
    youtube = "youtube"
    vimeo = "vimeo"
    linkedin = "linkedin"


@dataclass(frozen=True)
class VideoReference:
    platform: VideoPlatform
    id: str

    def to_dict(self) -> Dict[str, Any]:
        return {"platform": self.platform.value, "id": self.id}


# watch?v=, /v/, /e/, /embed/, /shorts/, /live/ and youtu.be/ shapes; the id is
# exactly 11 id characters followed by a non-id character or end of input.
_YOUTUBE_RE = re.compile(
    r"(?:youtube(?:-nocookie)?\.com/(?:(?:v|e|embed|shorts|live)/|\S*?[?&]v=)|youtu\.be/)"
    r"([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])",
    re.IGNORECASE,
)

_VIMEO_RE = re.compile(
    r"vimeo\.com/"
    r"(?:channels/[^/?\s]+/|groups/[^/?\s]+/videos/|album/\d+/video/|video/)?"
    r"(\d+)(?=$|[/?])",
    re.IGNORECASE,
)

# feed/update/urn:li:activity:<n>, posts/<n> and posts/<slug>-activity-<n>-<suffix>
_LINKEDIN_RE = re.compile(
    r"linkedin\.com/(?:posts|feed/update)/(?:urn:li:activity:|[^/?\s]*?activity-)?(\d+)",
    re.IGNORECASE,
)


def _clean(raw: Any) -> str:
    if not isinstance(raw, str):
        return ""
    # fragments never carry the id
    return raw.strip().split("#", 1)[0]


def _match_youtube(url: str) -> Optional[str]:
    m = _YOUTUBE_RE.search(url)
    return m.group(1) if m else None


def _match_vimeo(url: str) -> Optional[str]:
    m = _VIMEO_RE.search(url)
    return m.group(1) if m else None


def _match_linkedin(url: str) -> Optional[str]:
    m = _LINKEDIN_RE.search(url)
    return m.group(1) if m else None


def resolve_video_url(raw: Any) -> Optional[VideoReference]:
    """Return the (platform, id) referenced by ``raw`` or None when not recognized."""
    url = _clean(raw)
    if not url:
        return None

    lowered = url.lower()
    video_id: Optional[str] = None
    platform: Optional[VideoPlatform] = None
    if "youtube.com" in lowered or "youtube-nocookie.com" in lowered or "youtu.be" in lowered:
        platform, video_id = VideoPlatform.youtube, _match_youtube(url)
    elif "vimeo.com" in lowered:
        platform, video_id = VideoPlatform.vimeo, _match_vimeo(url)
    elif "linkedin.com" in lowered:
        platform, video_id = VideoPlatform.linkedin, _match_linkedin(url)

    if platform is None or not video_id:
        logger.debug("Unrecognized video URL: %r", url[:200])
        return None
    return VideoReference(platform=platform, id=video_id)


def coerce_reference(platform: Any, video_id: Any) -> Optional[VideoReference]:
    """Build a VideoReference from loose (platform, id) values, e.g. stored columns.

    Unknown platforms and empty ids give None.
    """
    if not isinstance(platform, str) or not isinstance(video_id, str):
        return None
    video_id = video_id.strip()
    if not video_id:
        return None
    try:
        return VideoReference(platform=VideoPlatform(platform.strip().lower()), id=video_id)
    except ValueError:
        return None
