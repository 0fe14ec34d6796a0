"""
Ordering rules for a project's behind-the-scenes (BTS) media.

Two update modes:
- append: new URLs go after the current highest ``sort_order``; URLs the
  project already has are skipped
- replace: the submitted list becomes the full set, in the submitted order;
  rows whose URL is missing from it are deleted, kept rows are renumbered

Planning is pure; the API applies the plan inside one session.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence


@dataclass(frozen=True)
class BtsInsert:
    image_url: str
    sort_order: int
    caption: str


@dataclass
class BtsPlan:
    inserts: List[BtsInsert] = field(default_factory=list)
    delete_ids: List[int] = field(default_factory=list)
    reorder: Dict[int, int] = field(default_factory=dict)
    duplicates_skipped: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.inserts or self.delete_ids or self.reorder)


def clean_urls(urls: Optional[Iterable[Any]]) -> List[str]:
    """Strip, drop blanks and non-strings, keep the first occurrence of each URL."""
    seen = set()
    out: List[str] = []
    for url in urls or []:
        if not isinstance(url, str):
            continue
        url = url.strip()
        if url and url not in seen:
            seen.add(url)
            out.append(url)
    return out


def plan_append(existing: Sequence[Any], urls: Iterable[Any], caption: Optional[str] = None) -> BtsPlan:
    wanted = clean_urls(urls)
    known = {item.image_url for item in existing}
    start = max((item.sort_order for item in existing), default=-1) + 1
    new = [u for u in wanted if u not in known]
    return BtsPlan(
        inserts=[
            BtsInsert(image_url=u, sort_order=start + i, caption=caption or f"BTS Image {i + 1}")
            for i, u in enumerate(new)
        ],
        duplicates_skipped=len(wanted) - len(new),
    )


def plan_replace(existing: Sequence[Any], urls: Iterable[Any], caption: Optional[str] = None) -> BtsPlan:
    wanted = clean_urls(urls)
    position = {u: i for i, u in enumerate(wanted)}
    plan = BtsPlan()
    stored = set()
    for item in existing:
        if item.image_url not in position:
            plan.delete_ids.append(item.id)
            continue
        stored.add(item.image_url)
        if item.sort_order != position[item.image_url]:
            plan.reorder[item.id] = position[item.image_url]
    for i, url in enumerate(wanted):
        if url not in stored:
            plan.inserts.append(BtsInsert(image_url=url, sort_order=i, caption=caption or f"BTS Media {i + 1}"))
    return plan
