from __future__ import annotations
import os
from pathlib import Path
from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from .models import Base

# ---------------------------------------------------------------------------
# Database Path (always absolute, in src/data)
# ---------------------------------------------------------------------------
# This resolves to: <project_root>/src/data/espacogeek.db
# Override via DATABASE_URL env (or .env) for MySQL/Postgres or tests.
# ---------------------------------------------------------------------------

PKG_DIR = Path(__file__).resolve().parent            # src/espacogeek
SRC_DIR = PKG_DIR.parent                             # src
DATA_DIR = SRC_DIR / "data"
DB_PATH = DATA_DIR / "espacogeek.db"
DEFAULT_DATABASE_URL = f"sqlite:///{DB_PATH.as_posix()}"

# DATABASE_URL is the URL of the database
DATABASE_URL = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)

if DATABASE_URL == DEFAULT_DATABASE_URL:
    DATA_DIR.mkdir(exist_ok=True)

_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# engine is the database engine
engine = create_engine(
    DATABASE_URL,
    echo=False,
    future=True,
    connect_args=_connect_args,
)

# SessionLocal is a factory for creating new database sessions
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,
)


def init_db() -> None:
    """Create all tables defined in models.py (idempotent)."""
    Base.metadata.create_all(bind=engine)


@contextmanager
def session_scope(session_factory=SessionLocal):
    s: Session = session_factory()
    try:
        yield s
        s.commit()
    except Exception:
        s.rollback()
        raise
    finally:
        s.close()
