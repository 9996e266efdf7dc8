# tests/test_engine.py
from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from espacogeek.errors import QueryExecutionError, RowMappingError
from espacogeek.models import GAME_ID, Media
from espacogeek.search import (
    DynamicQueryEngine,
    MetadataRegistry,
    PageRequest,
    SearchRequest,
    SessionExecutor,
)

from sample_entities import Show, Strict, VisualNovel


# ----------------------------
# Stub store
# ----------------------------

class StubExecutor:
    """Counts round-trips and returns canned results."""

    def __init__(self, total, rows=()):
        self.total = total
        self._rows = list(rows)
        self.calls: list[tuple[str, str, dict]] = []

    def scalar(self, sql, params):
        self.calls.append(("count", sql, dict(params)))
        return self.total

    def rows(self, sql, params):
        self.calls.append(("data", sql, dict(params)))
        return self._rows

    def kinds(self) -> list[str]:
        return [c[0] for c in self.calls]


class BrokenExecutor:
    def scalar(self, sql, params):
        raise QueryExecutionError("store unavailable", statement="count")

    def rows(self, sql, params):
        raise AssertionError("data statement must not run")


# ----------------------------
# Tests
# ----------------------------

def test_zero_count_skips_data_statement():
    stub = StubExecutor(total=0, rows=[(1, "never")])
    engine = DynamicQueryEngine(executor=stub)

    page = engine.search(Media, SearchRequest(name="nothing", page=PageRequest(0, 10)))

    assert page.content == []
    assert page.total_elements == 0
    assert stub.kinds() == ["count"]


def test_null_count_is_zero():
    stub = StubExecutor(total=None)
    page = DynamicQueryEngine(executor=stub).search(Media, SearchRequest())
    assert page.total_elements == 0
    assert page.is_empty
    assert stub.kinds() == ["count"]


def test_count_then_data_with_same_params_plus_paging():
    stub = StubExecutor(total=2, rows=[(1, "Dragon Quest"), ("2", "Dragonball")])
    engine = DynamicQueryEngine(executor=stub)

    page = engine.search(
        Media,
        SearchRequest(name="dragon", category_id=GAME_ID, page=PageRequest(offset=20, size=5)),
    )

    assert stub.kinds() == ["count", "data"]
    (_, count_sql, count_params), (_, data_sql, data_params) = stub.calls
    assert count_sql.startswith("SELECT COUNT(DISTINCT m.id_media)")
    assert count_params == {"name": "%dragon%", "category": GAME_ID}
    assert data_params == {**count_params, "offset": 20, "limit": 5}
    assert "ORDER BY m.id_media ASC" in data_sql

    assert page.total_elements == 2
    assert [(m.id, m.name) for m in page.content] == [(1, "Dragon Quest"), (2, "Dragonball")]
    assert page.pageable == PageRequest(offset=20, size=5)


def test_out_of_range_offset_keeps_total():
    stub = StubExecutor(total=3, rows=[])
    page = DynamicQueryEngine(executor=stub).search(Media, SearchRequest(page=PageRequest(offset=100, size=10)))
    assert page.content == []
    assert page.total_elements == 3
    assert not page.has_next


def test_single_column_rows_arrive_as_scalars():
    stub = StubExecutor(total=2, rows=[1, "2"])
    page = DynamicQueryEngine(executor=stub).search(VisualNovel, SearchRequest())
    assert [vn.id for vn in page.content] == [1, 2]


def test_unresolved_association_drops_alt_filter_but_runs():
    stub = StubExecutor(total=1, rows=[(4, "Show")])
    page = DynamicQueryEngine(executor=stub).search(Show, SearchRequest(alternative_title="x", name="sh"))
    (_, count_sql, count_params), _ = stub.calls
    assert "JOIN" not in count_sql
    assert count_params == {"name": "%sh%"}
    assert page.content[0].name == "Show"


def test_execution_error_propagates():
    engine = DynamicQueryEngine(executor=BrokenExecutor())
    with pytest.raises(QueryExecutionError) as ei:
        engine.search(Media, SearchRequest())
    assert ei.value.statement == "count"


def test_row_mapping_error_propagates():
    stub = StubExecutor(total=1, rows=[(1, "x")])
    with pytest.raises(RowMappingError):
        DynamicQueryEngine(executor=stub).search(Strict, SearchRequest())


def test_registry_is_shared_across_calls():
    registry = MetadataRegistry()
    engine = DynamicQueryEngine(registry=registry, executor=StubExecutor(total=0))
    engine.search(Media, SearchRequest())
    engine.search(Media, SearchRequest(name="x"))
    assert Media in registry
    assert engine.projection(Media, {"banner": [], "nope": []}) == ["id", "name", "banner"]


def test_session_executor_wraps_store_errors():
    # no tables created: every statement fails in the driver
    eng = create_engine("sqlite+pysqlite:///:memory:", future=True)
    factory = sessionmaker(bind=eng, future=True)
    engine = DynamicQueryEngine(executor=SessionExecutor(factory))
    try:
        with pytest.raises(QueryExecutionError) as ei:
            engine.search(Media, SearchRequest())
        assert ei.value.statement == "count"
        assert ei.value.__cause__ is not None
    finally:
        eng.dispose()
