# tests/test_db.py
from sqlalchemy import inspect

import espacogeek.db as db
from espacogeek.models import Media


def test_default_database_url_points_into_src_data():
    assert db.DEFAULT_DATABASE_URL.startswith("sqlite:///")
    assert db.DEFAULT_DATABASE_URL.endswith("/data/espacogeek.db")


def test_init_db_creates_tables(temp_db):
    # run again: must be idempotent
    db.init_db()

    inspector = inspect(db.engine)
    tables = inspector.get_table_names()
    for t in (
        "medias",
        "medias_categories",
        "alternative_titles",
        "external_references",
        "types_references",
        "types_person",
    ):
        assert t in tables


def test_sessionlocal_add_and_query(temp_db):
    session = db.SessionLocal()
    m = Media(name="Test Media", episode_count=12)
    session.add(m)
    session.commit()

    found = session.query(Media).filter_by(name="Test Media").one()
    assert found.episode_count == 12
    assert found.media_category_id is None

    session.close()


def test_session_scope_rolls_back_on_error(temp_db):
    try:
        with db.session_scope() as s:
            s.add(Media(name="Never Saved"))
            s.flush()
            raise RuntimeError("boom")
    except RuntimeError:
        pass

    with db.session_scope() as s:
        assert s.query(Media).count() == 0
