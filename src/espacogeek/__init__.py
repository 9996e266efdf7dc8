"""
EspacoGeek package initializer.

Loads the .env file (DATABASE_URL, ESPACOGEEK_LOG_LEVEL) and re-exports
the commonly used components.

date: 2026-10-19
version: 0.1.0
"""

import os
from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

from .logging import setup as setup_logging

setup_logging(os.getenv("ESPACOGEEK_LOG_LEVEL", "WARNING"))

# Re-export commonly used components
from .db import SessionLocal, engine, init_db
from .errors import (
    EspacoGeekError,
    MetadataResolutionError,
    QueryExecutionError,
    RowMappingError,
)
from .models import AlternativeTitle, Media, MediaCategory
from .search import DynamicQueryEngine, Page, PageRequest, SearchRequest
from .repos import MediaRepository, MediaCategoryRepository
from .query import MediaQueryService

__all__ = [
    # DB
    "SessionLocal",
    "engine",
    "init_db",
    # Errors
    "EspacoGeekError",
    "MetadataResolutionError",
    "QueryExecutionError",
    "RowMappingError",
    # Models
    "Media",
    "MediaCategory",
    "AlternativeTitle",
    # Search
    "DynamicQueryEngine",
    "Page",
    "PageRequest",
    "SearchRequest",
    # Repos / services
    "MediaRepository",
    "MediaCategoryRepository",
    "MediaQueryService",
]
