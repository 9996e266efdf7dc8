# tests/conftest.py
from __future__ import annotations

import os
import tempfile

import pytest

import espacogeek.db as db


# --- Temp DB fixture (isolated per test) --------------------------------------
@pytest.fixture(scope="function")
def temp_db(monkeypatch):
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    url = f"sqlite:///{path}"

    # Rebind module-level engine/session to this temp DB
    monkeypatch.setattr(db, "DATABASE_URL", url, raising=True)
    monkeypatch.setattr(db, "engine", db.create_engine(url, echo=False, future=True))
    db.SessionLocal.configure(bind=db.engine)

    db.init_db()
    yield path

    # Teardown: close pooled connections first (Windows file lock), then remove
    try:
        db.engine.dispose()
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
