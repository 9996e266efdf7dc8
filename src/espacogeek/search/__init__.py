# espacogeek/search/__init__.py
from __future__ import annotations

from .builder import QueryStatements, build_statements
from .engine import DynamicQueryEngine
from .executor import SessionExecutor, StatementExecutor
from .mapper import coerce_value, map_row, map_rows
from .metadata import (
    AssociationInfo,
    EntityMetadata,
    FieldDescriptor,
    FieldKind,
    MetadataRegistry,
    resolve_metadata,
)
from .options import DEFAULT_OPTIONS, SearchOptions
from .page import Page, PageRequest
from .planner import Predicate, SearchPlan, SearchRequest, plan_fields, plan_predicates, plan_search

"""
Metadata-driven search engine.

    engine = DynamicQueryEngine()
    page = engine.search(Media, SearchRequest(name="dragon", category_id=GAME_ID))
"""

__all__ = [
    "AssociationInfo",
    "DEFAULT_OPTIONS",
    "DynamicQueryEngine",
    "EntityMetadata",
    "FieldDescriptor",
    "FieldKind",
    "MetadataRegistry",
    "Page",
    "PageRequest",
    "Predicate",
    "QueryStatements",
    "SearchOptions",
    "SearchPlan",
    "SearchRequest",
    "SessionExecutor",
    "StatementExecutor",
    "build_statements",
    "coerce_value",
    "map_row",
    "map_rows",
    "plan_fields",
    "plan_predicates",
    "plan_search",
    "resolve_metadata",
]
