# espacogeek/search/options.py
from __future__ import annotations

from dataclasses import dataclass

"""
Defaults for the dynamic search engine.

The two fallback column names are only used when the entity does not declare
the corresponding metadata (no many-to-one `media_category` relationship, or
no `name` attribute on the alternative-title type). Keep the schema tests in
tests/test_metadata.py in sync with them.
"""

# SQL aliases shared by the planner and the builder
ENTITY_ALIAS = "m"
ASSOCIATION_ALIAS = "alt"

DEFAULT_NAME_FIELD = "name"
DEFAULT_ASSOCIATION_FIELD = "alternative_titles"
DEFAULT_CATEGORY_FIELD = "media_category"
DEFAULT_CATEGORY_COLUMN = "media_category_id"
DEFAULT_DISPLAY_COLUMN = "name"
DEFAULT_PAGE_SIZE = 10

# bind parameter names; the paging ones are added by the engine
PARAM_NAME = "name"
PARAM_CATEGORY = "category"
PARAM_ALT_TITLE = "alt_title"
PARAM_LIMIT = "limit"
PARAM_OFFSET = "offset"


@dataclass(frozen=True)
class SearchOptions:
    name_field: str = DEFAULT_NAME_FIELD
    association_field: str = DEFAULT_ASSOCIATION_FIELD
    category_field: str = DEFAULT_CATEGORY_FIELD
    category_default_column: str = DEFAULT_CATEGORY_COLUMN
    display_field: str = DEFAULT_NAME_FIELD
    display_default_column: str = DEFAULT_DISPLAY_COLUMN


DEFAULT_OPTIONS = SearchOptions()
