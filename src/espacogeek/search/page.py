# espacogeek/search/page.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from .options import DEFAULT_PAGE_SIZE


# --- PageRequest ---------------------------------------------------------------
@dataclass(frozen=True)
class PageRequest:
    """
    Page coordinates: `offset` rows are skipped, at most `size` are returned.
    An offset past the last row is valid and yields an empty page.
    """
    offset: int = 0
    size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError(f"offset must be >= 0, got {self.offset}")
        if self.size < 1:
            raise ValueError(f"size must be >= 1, got {self.size}")

    @classmethod
    def of(cls, page_number: int, size: int = DEFAULT_PAGE_SIZE) -> "PageRequest":
        """Zero-based page number -> offset."""
        return cls(offset=max(0, page_number) * size, size=size)

    @property
    def page_number(self) -> int:
        return self.offset // self.size


# --- Page ----------------------------------------------------------------------
@dataclass(frozen=True)
class Page:
    content: list[Any] = field(default_factory=list)
    total_elements: int = 0
    pageable: PageRequest = field(default_factory=PageRequest)

    @classmethod
    def empty(cls, pageable: PageRequest) -> "Page":
        return cls(content=[], total_elements=0, pageable=pageable)

    @property
    def size(self) -> int:
        return self.pageable.size

    @property
    def number(self) -> int:
        return self.pageable.page_number

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.pageable.size) if self.total_elements else 0

    @property
    def is_empty(self) -> bool:
        return not self.content

    @property
    def has_next(self) -> bool:
        return self.pageable.offset + self.pageable.size < self.total_elements

    def __len__(self) -> int:
        return len(self.content)

    def __iter__(self):
        return iter(self.content)
