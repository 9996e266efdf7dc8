# espacogeek/dto.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from .search import Page

"""
Data transfer objects for search results.

Search results are partially-populated entities: only the projected fields
are meaningful. These helpers copy exactly those fields into plain data so
callers never read an unpopulated attribute by accident.
"""


def _plain(value: Any) -> Any:
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


# --- MediaDTO --------------------------------------------------------------
@dataclass(frozen=True)
class MediaDTO:
    """
    Projected view of a Media: id and name always, the rest in `fields`.
    """
    id: int
    name: Optional[str]
    fields: Dict[str, Any] = field(default_factory=dict)


def to_media_dto(media, projection: Sequence[str]) -> MediaDTO:
    extra = {
        f: _plain(getattr(media, f, None))
        for f in projection
        if f not in ("id", "name")
    }
    return MediaDTO(
        id=int(media.id),
        name=getattr(media, "name", None),
        fields=extra,
    )


# --- PageDTO ---------------------------------------------------------------
@dataclass(frozen=True)
class PageDTO:
    content: list[MediaDTO]
    total_elements: int
    total_pages: int
    number: int
    size: int


def to_page_dto(page: Page, projection: Sequence[str]) -> PageDTO:
    return PageDTO(
        content=[to_media_dto(m, projection) for m in page.content],
        total_elements=page.total_elements,
        total_pages=page.total_pages,
        number=page.number,
        size=page.size,
    )


__all__ = [
    "MediaDTO",
    "to_media_dto",
    "PageDTO",
    "to_page_dto",
]
