# tests/test_mapper.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from espacogeek.errors import RowMappingError
from espacogeek.models import Media
from espacogeek.search.mapper import coerce_value, map_row, map_rows
from espacogeek.search.metadata import resolve_metadata

from sample_entities import Strict, VisualNovel


MEDIA = resolve_metadata(Media)


# --- coerce_value ----------------------------------------------------------------

def test_numeric_text_is_parsed():
    assert coerce_value("42", int) == 42
    assert coerce_value(" 42 ", int) == 42
    assert coerce_value("2.5", float) == 2.5
    assert coerce_value("1.50", Decimal) == Decimal("1.50")


def test_numbers_are_widened_or_truncated():
    assert coerce_value(7, float) == 7.0
    assert isinstance(coerce_value(7, float), float)
    assert coerce_value(4.9, int) == 4
    assert coerce_value(Decimal("12"), int) == 12
    assert coerce_value(3, Decimal) == Decimal("3")
    assert coerce_value(True, int) == 1


def test_unparseable_values_become_none():
    assert coerce_value("4.2", int) is None
    assert coerce_value("abc", float) is None
    assert coerce_value("abc", Decimal) is None
    assert coerce_value(float("nan"), int) is None
    assert coerce_value(object(), int) is None


def test_text_targets_take_any_value():
    assert coerce_value(5, str) == "5"
    assert coerce_value(b"Zelda", str) == "Zelda"
    assert coerce_value("same", str) == "same"


def test_bool_targets():
    assert coerce_value(1, bool) is True
    assert coerce_value(0, bool) is False
    assert coerce_value("Yes", bool) is True
    assert coerce_value("false", bool) is False
    assert coerce_value("maybe", bool) is None


def test_temporal_values_pass_through():
    now = datetime(2024, 5, 1, 12, 30)
    assert coerce_value(now, datetime) is now
    # SQLite hands DATETIME back as text from native queries
    assert coerce_value("2024-05-01 12:30:00", datetime) == "2024-05-01 12:30:00"


def test_unclassified_targets():
    assert coerce_value(None, int) is None
    assert coerce_value(1, None) is None
    assert coerce_value([1], dict) is None
    assert coerce_value({"a": 1}, dict) == {"a": 1}


# --- map_row ---------------------------------------------------------------------

def test_map_row_sets_only_projected_fields():
    m = map_row(Media, MEDIA, ["id", "name", "episode_count"], (3, "Dragonball", "153"))
    assert isinstance(m, Media)
    assert m.id == 3
    assert m.name == "Dragonball"
    assert m.episode_count == 153
    assert m.banner is None
    assert m.about is None


def test_map_row_bad_field_is_left_at_default():
    m = map_row(Media, MEDIA, ["id", "name", "episode_count"], (1, "Dragon Quest", "lots"))
    assert m.id == 1
    assert m.episode_count is None


def test_map_row_accepts_bare_scalar_and_short_rows():
    md = resolve_metadata(VisualNovel)
    vn = map_row(VisualNovel, md, ["id"], "9")
    assert vn.id == 9

    m = map_row(Media, MEDIA, ["id", "name"], (5,))
    assert m.id == 5
    assert m.name is None


def test_map_rows_keeps_order():
    out = map_rows(Media, MEDIA, ["id", "name"], [(1, "a"), (2, "b")])
    assert [(m.id, m.name) for m in out] == [(1, "a"), (2, "b")]


def test_map_row_raises_when_entity_cannot_be_built():
    md = resolve_metadata(Strict)
    with pytest.raises(RowMappingError) as ei:
        map_row(Strict, md, ["id", "name"], (1, "x"))
    assert ei.value.model is Strict
