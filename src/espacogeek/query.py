# espacogeek/query.py
from __future__ import annotations

import random
from typing import Any, Iterable, List, Mapping, Optional

from .logging import get_logger
from .models import GAME_ID, MOVIE_ID, SERIE_ID, VN_ID, Media
from .repos import MediaCategoryRepository, MediaRepository
from .search import Page, PageRequest


"""
MediaQueryService for EspacoGeek.

Read-mostly service the outer layers (CLI today) talk to. Translates
"find a serie/game/movie/visual novel by id or name" into repository calls
and owns the small amount of policy around them (category must exist, id
lookups win over name search).
"""

log = get_logger("query")

# upper bound on random picks in random_artwork()
MAX_ARTWORK_ATTEMPTS = 200


class MediaQueryService:

    def __init__(
        self,
        repo: Optional[MediaRepository] = None,
        category_repo: Optional[MediaCategoryRepository] = None,
    ):
        self.repo = repo or MediaRepository()
        self.category_repo = category_repo or MediaCategoryRepository()

    # -----------------------------------------------------------------------
    # Find by id or name
    # -----------------------------------------------------------------------
    def _find_by_id_or_name(
        self,
        category_id: int,
        media_id: Optional[int],
        name: Optional[str],
        alternative_title: Optional[str],
        requested_fields: Optional[Mapping[str, Any]],
        page: Optional[PageRequest],
    ) -> Page:
        page = page or PageRequest()

        if media_id is not None:
            media = self.repo.get_by_id(media_id)
            content = [media] if media is not None else []
            return Page(content=content, total_elements=len(content), pageable=page)

        category = self.category_repo.get_by_id(category_id)
        if category is None:
            raise ValueError(f"Media category {category_id} not found")

        return self.repo.find_media_by_name_or_alternative_title_and_category(
            name,
            alternative_title,
            category.id,
            requested_fields,
            page,
        )

    def find_serie_by_id_or_name(
        self,
        media_id: Optional[int] = None,
        name: Optional[str] = None,
        *,
        alternative_title: Optional[str] = None,
        requested_fields: Optional[Mapping[str, Any]] = None,
        page: Optional[PageRequest] = None,
    ) -> Page:
        return self._find_by_id_or_name(SERIE_ID, media_id, name, alternative_title, requested_fields, page)

    def find_game_by_id_or_name(
        self,
        media_id: Optional[int] = None,
        name: Optional[str] = None,
        *,
        alternative_title: Optional[str] = None,
        requested_fields: Optional[Mapping[str, Any]] = None,
        page: Optional[PageRequest] = None,
    ) -> Page:
        return self._find_by_id_or_name(GAME_ID, media_id, name, alternative_title, requested_fields, page)

    def find_movie_by_id_or_name(
        self,
        media_id: Optional[int] = None,
        name: Optional[str] = None,
        *,
        alternative_title: Optional[str] = None,
        requested_fields: Optional[Mapping[str, Any]] = None,
        page: Optional[PageRequest] = None,
    ) -> Page:
        return self._find_by_id_or_name(MOVIE_ID, media_id, name, alternative_title, requested_fields, page)

    def find_visual_novel_by_id_or_name(
        self,
        media_id: Optional[int] = None,
        name: Optional[str] = None,
        *,
        alternative_title: Optional[str] = None,
        requested_fields: Optional[Mapping[str, Any]] = None,
        page: Optional[PageRequest] = None,
    ) -> Page:
        return self._find_by_id_or_name(VN_ID, media_id, name, alternative_title, requested_fields, page)

    # -----------------------------------------------------------------------
    # Detail / writes
    # -----------------------------------------------------------------------
    def find_by_id(self, media_id: int) -> Optional[Media]:
        return self.repo.get_by_id(media_id)

    def find_by_id_eager(self, media_id: int) -> Optional[Media]:
        return self.repo.get_by_id_eager(media_id)

    def find_by_reference_and_type_reference(self, reference: str, type_reference_id: int) -> Optional[Media]:
        return self.repo.find_by_external_reference(reference, type_reference_id)

    def save(self, media: Media) -> Media:
        return self.repo.save(media)

    def save_all(self, medias: Iterable[Media]) -> List[Media]:
        return self.repo.save_all(medias)

    # -----------------------------------------------------------------------
    # Artwork
    # -----------------------------------------------------------------------
    def random_artwork(self, rng: Optional[random.Random] = None) -> Optional[str]:
        """
        Banner URL of a randomly picked media, or None when no media has one
        within the attempt budget.
        """
        total = self.repo.count()
        if total <= 0:
            return None

        rng = rng or random.Random()
        attempts = min(total + 10, MAX_ARTWORK_ATTEMPTS)
        for _ in range(attempts):
            page = self.repo.find_page(PageRequest(offset=rng.randrange(total), size=1))
            if page.is_empty:
                continue
            media = page.content[0]
            if media.banner and media.banner.strip():
                return media.banner

        log.debug("no banner found after %d attempts", attempts)
        return None
