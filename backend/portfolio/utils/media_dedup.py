"""
Duplicate detection for media library records.

Works on any objects exposing ``id``, ``filename``, ``filepath``,
``public_url``, ``meta`` (dict) and ``created_at``: ORM rows in the API,
plain namespaces in tests. All functions are pure.

URL candidates are compared by exact URL, normalized URL and platform video
id (stored as ``meta["<platform>Id"]``); uploaded files by content hash
(``meta["fileHash"]``), filename and storage path.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from .embed import build_canonical_url
from .video import VideoPlatform, resolve_video_url

_CANONICAL_PLATFORMS = {VideoPlatform.youtube, VideoPlatform.vimeo}


@dataclass(frozen=True)
class MediaCandidate:
    url: Optional[str] = None
    file_hash: Optional[str] = None
    filename: Optional[str] = None
    filepath: Optional[str] = None


@dataclass(frozen=True)
class DuplicateCheck:
    is_duplicate: bool
    existing_id: Optional[int] = None
    reason: Optional[str] = None
    match_type: Optional[str] = None  # hash | url | filename | video_id | path

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_duplicate": self.is_duplicate,
            "existing_id": self.existing_id,
            "reason": self.reason,
            "match_type": self.match_type,
        }


NO_DUPLICATE = DuplicateCheck(is_duplicate=False)


def normalize_media_url(url: Optional[str]) -> str:
    """Canonical form used to compare stored URLs.

    - YouTube/Vimeo URLs collapse to their watch/page URL
    - utm_* tracking params are dropped
    - input that does not parse as an absolute URL is returned stripped
    """
    if not url or not url.strip():
        return ""
    url = url.strip()
    ref = resolve_video_url(url)
    if ref is not None and ref.platform in _CANONICAL_PLATFORMS:
        return build_canonical_url(ref) or url
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    if not parts.scheme or not parts.netloc:
        return url
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if not k.lower().startswith("utm_")]
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), parts.path, urlencode(query), parts.fragment))


def _meta(item: Any) -> Dict[str, Any]:
    meta = getattr(item, "meta", None)
    return meta if isinstance(meta, dict) else {}


def _url_match(url: str, items: Sequence[Any]) -> DuplicateCheck:
    normalized = normalize_media_url(url)
    wanted = {url, normalized} - {""}
    ref = resolve_video_url(url)
    id_key = f"{ref.platform.value}Id" if ref else None

    for item in items:
        same_video = id_key is not None and _meta(item).get(id_key) == ref.id
        stored = {getattr(item, "public_url", None), getattr(item, "filepath", None)} - {None, ""}
        same_url = bool(stored & wanted) or any(normalize_media_url(s) == normalized for s in stored)
        if same_video or same_url:
            return DuplicateCheck(
                is_duplicate=True,
                existing_id=item.id,
                reason=f'URL already exists as "{item.filename}"',
                match_type="video_id" if same_video else "url",
            )
    return NO_DUPLICATE


def _file_match(candidate: MediaCandidate, items: Sequence[Any]) -> DuplicateCheck:
    for item in items:
        if candidate.file_hash and _meta(item).get("fileHash") == candidate.file_hash:
            match_type = "hash"
        elif candidate.filename and getattr(item, "filename", None) == candidate.filename:
            match_type = "filename"
        elif candidate.filepath and getattr(item, "filepath", None) == candidate.filepath:
            match_type = "path"
        else:
            continue
        return DuplicateCheck(
            is_duplicate=True,
            existing_id=item.id,
            reason=f'File already exists as "{item.filename}"',
            match_type=match_type,
        )
    return NO_DUPLICATE


def match_duplicate(candidate: MediaCandidate, items: Iterable[Any]) -> DuplicateCheck:
    """URL checks run first; file checks only when the URL did not match."""
    pool = list(items)
    if candidate.url and candidate.url.strip():
        result = _url_match(candidate.url.strip(), pool)
        if result.is_duplicate:
            return result
    if candidate.file_hash or candidate.filename or candidate.filepath:
        return _file_match(candidate, pool)
    return NO_DUPLICATE


def _created_key(item: Any) -> tuple:
    created = getattr(item, "created_at", None)
    # rows without a timestamp sort last so a dated original is kept
    return (created is None, created or datetime.max, item.id)


def plan_duplicate_cleanup(items: Iterable[Any]) -> List[Any]:
    """Ids to delete so that each file hash and each public URL keeps only its earliest item."""
    ordered = sorted(items, key=_created_key)
    remove: List[Any] = []
    removed: Set[Any] = set()

    by_hash: Dict[str, List[Any]] = {}
    by_url: Dict[str, List[Any]] = {}
    for item in ordered:
        file_hash = _meta(item).get("fileHash")
        if file_hash:
            by_hash.setdefault(file_hash, []).append(item)
        if getattr(item, "public_url", None):
            by_url.setdefault(item.public_url, []).append(item)

    for group in list(by_hash.values()) + list(by_url.values()):
        remaining = [i for i in group if i.id not in removed]
        for extra in remaining[1:]:
            removed.add(extra.id)
            remove.append(extra.id)
    return remove
