from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    String,
    Text,
    ForeignKey,
    DateTime,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

"""
These are data models for the EspacoGeek catalog database.
They include:

- MediaCategory
- Media
- AlternativeTitle
- TypeReference
- ExternalReference
- TypePerson

Column names are declared explicitly; the search engine reads them from
the mapper instead of assuming attribute == column.

date: 2026-10-19
version: 0.1.0
"""


# ---------------------------------------------------------------------------
# Well-known ids
# ---------------------------------------------------------------------------

# medias_categories.id_media_category
SERIE_ID = 1
GAME_ID = 2
VN_ID = 3
MOVIE_ID = 4

# types_references.id_type_reference
TMDB_ID = 1
IGDB_ID = 2


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

class Base(DeclarativeBase):
    pass


# ---------------------------------------------------------------------------
# MediaCategory
# ---------------------------------------------------------------------------

class MediaCategory(Base):
    """
    Kind of media: serie, game, visual novel, movie.
    """
    __tablename__ = "medias_categories"

    id: Mapped[int] = mapped_column("id_media_category", Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column("name_media_category", String(50), nullable=False, unique=True)

    medias: Mapped[list["Media"]] = relationship(back_populates="media_category")

    def __repr__(self) -> str:
        return f"<MediaCategory(id={self.id}, name={self.name!r})>"


# ---------------------------------------------------------------------------
# Media
# ---------------------------------------------------------------------------

class Media(Base):
    """
    A catalog item (game, serie, movie, visual novel).
    """
    __tablename__ = "medias"

    id: Mapped[int] = mapped_column("id_media", Integer, primary_key=True, autoincrement=True)

    # Core fields
    name: Mapped[str] = mapped_column("name_media", String(255), nullable=False, index=True)
    episode_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    episode_length: Mapped[int | None] = mapped_column(Integer, nullable=True)
    about: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Artwork
    banner: Mapped[str | None] = mapped_column(String(255), nullable=True)
    cover: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Sync bookkeeping
    next_update: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    update_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    media_category_id: Mapped[int | None] = mapped_column(
        "id_media_category",
        ForeignKey("medias_categories.id_media_category"),
        nullable=True,
        index=True,
    )

    # Relationships
    media_category: Mapped[Optional["MediaCategory"]] = relationship(back_populates="medias")
    alternative_titles: Mapped[list["AlternativeTitle"]] = relationship(
        back_populates="media",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    external_references: Mapped[list["ExternalReference"]] = relationship(
        back_populates="media",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Media(id={self.id}, name={self.name!r})>"


# ---------------------------------------------------------------------------
# AlternativeTitle
# ---------------------------------------------------------------------------

class AlternativeTitle(Base):
    """
    Another known title of a Media (translations, romanizations, abbreviations).
    """
    __tablename__ = "alternative_titles"

    id: Mapped[int] = mapped_column("id_alternative_title", Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column("name_alternative_title", String(255), nullable=False)

    media_id: Mapped[int] = mapped_column(
        "id_media",
        ForeignKey("medias.id_media", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    media: Mapped["Media"] = relationship(back_populates="alternative_titles")

    def __repr__(self) -> str:
        return f"<AlternativeTitle(id={self.id}, media={self.media_id}, name={self.name!r})>"


# ---------------------------------------------------------------------------
# TypeReference / ExternalReference
# ---------------------------------------------------------------------------

class TypeReference(Base):
    """
    External data source a reference points into (TMDB, IGDB, ...).
    """
    __tablename__ = "types_references"

    id: Mapped[int] = mapped_column("id_type_reference", Integer, primary_key=True, autoincrement=True)
    name_reference: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<TypeReference(id={self.id}, name={self.name_reference!r})>"


class ExternalReference(Base):
    """
    Id of a Media in an external data source.
    """
    __tablename__ = "external_references"
    __table_args__ = (
        UniqueConstraint("reference", "id_type_reference", name="uq_reference_per_type"),
    )

    id: Mapped[int] = mapped_column("id_external_reference", Integer, primary_key=True, autoincrement=True)
    reference: Mapped[str] = mapped_column(String(100), nullable=False)

    media_id: Mapped[int] = mapped_column(
        "id_media",
        ForeignKey("medias.id_media", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type_reference_id: Mapped[int] = mapped_column(
        "id_type_reference",
        ForeignKey("types_references.id_type_reference"),
        nullable=False,
    )

    media: Mapped["Media"] = relationship(back_populates="external_references")
    type_reference: Mapped["TypeReference"] = relationship()

    def __repr__(self) -> str:
        return (
            f"<ExternalReference(id={self.id}, media={self.media_id}, "
            f"type={self.type_reference_id}, reference={self.reference!r})>"
        )


# ---------------------------------------------------------------------------
# TypePerson
# ---------------------------------------------------------------------------

class TypePerson(Base):
    """
    Role of a person in a media (director, voice actor, ...).
    """
    __tablename__ = "types_person"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name_type_person: Mapped[str | None] = mapped_column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<TypePerson(id={self.id}, name={self.name_type_person!r})>"
