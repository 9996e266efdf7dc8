# tests/test_metadata.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from espacogeek.errors import MetadataResolutionError
from espacogeek.models import AlternativeTitle, Media
from espacogeek.naming import camel_to_snake
from espacogeek.search.engine import DynamicQueryEngine
from espacogeek.search.metadata import FieldKind, MetadataRegistry, resolve_metadata
from espacogeek.search.options import DEFAULT_CATEGORY_COLUMN, DEFAULT_DISPLAY_COLUMN, DEFAULT_OPTIONS, SearchOptions

from sample_entities import Album, NoKey, Quote, Show, VisualNovel


# ----------------------------
# camel_to_snake
# ----------------------------

def test_camel_to_snake_is_deterministic():
    assert camel_to_snake("MediaModel") == "media_model"
    assert camel_to_snake("mediaCategory") == "media_category"
    assert camel_to_snake("name") == "name"
    assert camel_to_snake("TypePersonModel") == camel_to_snake("TypePersonModel")


# ----------------------------
# Mapped entities
# ----------------------------

def test_media_table_id_and_columns():
    md = resolve_metadata(Media)
    assert md.table_name == "medias"
    assert md.id_field == "id"
    assert md.id_column == "id_media"
    assert md.column_for("name") == "name_media"
    assert md.column_for("episode_count") == "episode_count"
    assert md.column_for("missing") is None
    assert md.has_field("about")
    assert not md.has_field("missing")


def test_media_scalar_classification():
    md = resolve_metadata(Media)
    for f in ("id", "name", "episode_count", "about", "banner", "next_update", "media_category_id"):
        assert md.is_scalar(f), f
    assert md.python_type_for("next_update") is datetime
    assert md.python_type_for("episode_count") is int

    # associations are never scalar
    assert md.descriptor("alternative_titles").kind is FieldKind.ASSOCIATION
    assert md.descriptor("media_category").kind is FieldKind.ASSOCIATION
    assert not md.is_scalar("alternative_titles")
    assert not md.is_scalar("media_category")


def test_media_join_columns_and_association():
    md = resolve_metadata(Media)
    assert md.join_column("media_category", DEFAULT_CATEGORY_COLUMN) == "id_media_category"

    assoc = md.association
    assert assoc is not None
    assert assoc.name == "alternative_titles"
    assert assoc.related_table == "alternative_titles"
    assert assoc.foreign_key_column == "id_media"
    assert assoc.related_id_column == "id_media"
    assert assoc.display_column == "name_alternative_title"


def test_association_without_back_reference_degrades():
    md = resolve_metadata(Show)
    assert md.association is None
    # the rest of the metadata is still there
    assert md.table_name == "shows"
    assert md.is_scalar("name")
    # no explicit category relation -> default column
    assert md.join_column("media_category", DEFAULT_CATEGORY_COLUMN) == DEFAULT_CATEGORY_COLUMN


def test_association_display_column_falls_back_to_default():
    md = resolve_metadata(Album)
    assoc = md.association
    assert assoc is not None
    assert assoc.foreign_key_column == "owner_album"
    assert assoc.related_id_column == "album_pk"
    assert assoc.display_column == DEFAULT_DISPLAY_COLUMN


def test_unknown_or_wrong_direction_association_degrades():
    assert resolve_metadata(Media, association="does_not_exist").association is None
    # many-to-one, not a collection
    assert resolve_metadata(Media, association="media_category").association is None
    assert resolve_metadata(AlternativeTitle).association is None
    assert resolve_metadata(Media, association=None).association is None


# ----------------------------
# Plain annotated classes
# ----------------------------

def test_plain_class_uses_naming_fallbacks():
    md = resolve_metadata(VisualNovel)
    assert md.table_name == "visual_novel"
    assert md.id_field == "id"
    assert md.id_column == "id"
    assert md.column_for("originalName") == "original_name"
    assert md.column_for("releasedOn") == "released_on"
    assert md.column_for("score") == "vn_score"
    assert md.is_scalar("originalName")
    assert md.python_type_for("score") is Decimal
    assert md.descriptor("tags").kind is FieldKind.ASSOCIATION
    assert md.association is None


def test_plain_class_declared_table_and_key():
    md = resolve_metadata(Quote)
    assert md.table_name == "quotes"
    assert md.id_field == "quote_id"
    assert md.id_column == "quote_id"


def test_not_an_entity_raises():
    with pytest.raises(MetadataResolutionError):
        resolve_metadata(NoKey)
    with pytest.raises(MetadataResolutionError):
        resolve_metadata("medias")  # type: ignore[arg-type]


# ----------------------------
# Registry
# ----------------------------

def test_registry_caches_per_type():
    reg = MetadataRegistry()
    first = reg.get(Media)
    assert reg.get(Media) is first
    assert Media in reg
    assert Show not in reg


def test_registry_register_with_own_association():
    reg = MetadataRegistry()
    md = reg.register(Media, association="external_references")
    assert md.association is not None
    assert md.association.related_table == "external_references"
    # display column falls back: ExternalReference has no `name`
    assert md.association.display_column == DEFAULT_DISPLAY_COLUMN
    # first registration wins
    assert reg.register(Media).association.name == "external_references"


def test_display_default_column_is_configurable():
    md = resolve_metadata(Album, display_default="label")
    assert md.association.display_column == "label"

    reg = MetadataRegistry.from_options(SearchOptions(display_default_column="label"))
    assert reg.get(Album).association.display_column == "label"


def test_engine_builds_registry_from_options():
    engine = DynamicQueryEngine(executor=object(), options=SearchOptions(display_default_column="label"))
    assert engine.registry.get(Album).association.display_column == "label"
    assert engine.registry.matches(SearchOptions(display_default_column="label"))
    assert not engine.registry.matches(DEFAULT_OPTIONS)


def test_registry_register_can_disable_association():
    reg = MetadataRegistry()
    assert reg.register(Media, association=None).association is None
    assert reg.get(Media).association is None

    # omitted: the registry's own association applies
    assert MetadataRegistry().register(Media).association.name == "alternative_titles"
