# espacogeek/repos.py
from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional

from sqlalchemy import func, inspect, select
from sqlalchemy.orm import selectinload

from .db import SessionLocal, session_scope
from .models import ExternalReference, Media, MediaCategory
from .search import DynamicQueryEngine, Page, PageRequest, SearchRequest, SessionExecutor



# --- Media Repository ----------------------------------------------------------

class MediaRepository:
    """
    Data-access boundary for Media objects.
    - Plain CRUD/reads go through the ORM.
    - Name / alternative title / category search goes through the
      DynamicQueryEngine and returns partially-populated Media instances.
    """

    def __init__(self, session_factory=SessionLocal, engine: Optional[DynamicQueryEngine] = None):
        self._session_factory = session_factory
        self._engine = engine or DynamicQueryEngine(executor=SessionExecutor(session_factory))

    # -- basic reads ------------------------------------------------------------

    def get_by_id(self, media_id: int) -> Optional[Media]:
        with session_scope(self._session_factory) as s:
            return s.get(Media, media_id)

    def get_by_id_eager(self, media_id: int) -> Optional[Media]:
        """
        Load a Media with every collection relationship populated, so it can
        be used after the session is gone.
        """
        collections = [rel.key for rel in inspect(Media).relationships if rel.uselist]
        with session_scope(self._session_factory) as s:
            stmt = (
                select(Media)
                .options(*(selectinload(getattr(Media, key)) for key in collections))
                .where(Media.id == media_id)
            )
            return s.execute(stmt).scalar_one_or_none()

    def find_by_external_reference(self, reference: str, type_reference_id: int) -> Optional[Media]:
        with session_scope(self._session_factory) as s:
            stmt = (
                select(Media)
                .join(ExternalReference, ExternalReference.media_id == Media.id)
                .where(
                    ExternalReference.reference == reference,
                    ExternalReference.type_reference_id == type_reference_id,
                )
            )
            return s.execute(stmt).scalars().first()

    def count(self) -> int:
        with session_scope(self._session_factory) as s:
            return int(s.execute(select(func.count()).select_from(Media)).scalar_one())

    def find_page(self, pageable: PageRequest) -> Page:
        with session_scope(self._session_factory) as s:
            total = int(s.execute(select(func.count()).select_from(Media)).scalar_one())
            stmt = (
                select(Media)
                .order_by(Media.id.asc())
                .offset(pageable.offset)
                .limit(pageable.size)
            )
            items = list(s.execute(stmt).scalars().all())
            return Page(content=items, total_elements=total, pageable=pageable)

    # -- writes -----------------------------------------------------------------

    def save(self, media: Media) -> Media:
        with session_scope(self._session_factory) as s:
            s.add(media)
            s.flush()  # ensure PK populated
            return media

    def save_all(self, medias: Iterable[Media]) -> List[Media]:
        saved = list(medias)
        with session_scope(self._session_factory) as s:
            s.add_all(saved)
            s.flush()
        return saved

    # -- search -----------------------------------------------------------------

    def find_media_by_name_or_alternative_title_and_category(
        self,
        name: Optional[str],
        alternative_title: Optional[str],
        category_id: Optional[int],
        requested_fields: Optional[Mapping[str, Any]] = None,
        page: Optional[PageRequest] = None,
    ) -> Page:
        """
        Paginated search; only id, name and the requested scalar fields are
        populated on the returned Media instances.
        """
        request = SearchRequest(
            name=name,
            alternative_title=alternative_title,
            category_id=category_id,
            requested_fields=requested_fields,
            page=page or PageRequest(),
        )
        return self._engine.search(Media, request)

    def projection(self, requested_fields: Optional[Mapping[str, Any]] = None) -> List[str]:
        return self._engine.projection(Media, requested_fields)


# --- MediaCategory Repository ----------------------------------------------------

class MediaCategoryRepository:
    def __init__(self, session_factory=SessionLocal):
        self._session_factory = session_factory

    def get_by_id(self, category_id: int) -> Optional[MediaCategory]:
        with session_scope(self._session_factory) as s:
            return s.get(MediaCategory, category_id)

    def list_all(self) -> List[MediaCategory]:
        with session_scope(self._session_factory) as s:
            stmt = select(MediaCategory).order_by(MediaCategory.id.asc())
            return list(s.execute(stmt).scalars().all())
