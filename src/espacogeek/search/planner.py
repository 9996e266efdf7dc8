# espacogeek/search/planner.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..logging import get_logger
from .metadata import EntityMetadata
from .options import (
    ASSOCIATION_ALIAS,
    DEFAULT_OPTIONS,
    ENTITY_ALIAS,
    PARAM_ALT_TITLE,
    PARAM_CATEGORY,
    PARAM_NAME,
    SearchOptions,
)
from .page import PageRequest

log = get_logger("search.planner")


# --- Search request ------------------------------------------------------------

@dataclass
class SearchRequest:
    name: Optional[str] = None
    alternative_title: Optional[str] = None
    category_id: Optional[int] = None
    # keys are candidate field names; values are ignored here
    requested_fields: Optional[Mapping[str, Any]] = None
    page: PageRequest = field(default_factory=PageRequest)


@dataclass(frozen=True)
class Predicate:
    """One WHERE condition; caller values only ever travel in `params`."""
    sql: str
    params: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SearchPlan:
    fields: List[str]
    predicates: List[Predicate]

    @property
    def params(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for p in self.predicates:
            out.update(p.params)
        return out


# --- Internal helpers ----------------------------------------------------------

def _trim(s: Optional[str]) -> Optional[str]:
    if s is None:
        return None
    t = s.strip()
    return t if t else None


def _contains_pattern(value: str) -> str:
    # value is already trimmed: leading/trailing blanks never take part in the match
    return f"%{value.lower()}%"


# --- Projection ------------------------------------------------------------------

def plan_fields(
    metadata: EntityMetadata,
    requested_fields: Optional[Mapping[str, Any]],
    options: SearchOptions = DEFAULT_OPTIONS,
) -> List[str]:
    """
    Ordered, deduplicated projection: id, then name (when the entity has
    one), then every requested scalar field. Unknown and association fields
    are dropped without error.
    """
    fields: Dict[str, None] = {metadata.id_field: None}
    if metadata.has_field(options.name_field):
        fields[options.name_field] = None

    for name in requested_fields or ():
        if metadata.is_scalar(name):
            fields.setdefault(name, None)
        else:
            log.debug("dropping requested field %r on %s", name, metadata.model.__name__)

    return [f for f in fields if metadata.has_field(f)]


# --- Predicates ------------------------------------------------------------------

def plan_predicates(
    metadata: EntityMetadata,
    request: SearchRequest,
    options: SearchOptions = DEFAULT_OPTIONS,
) -> List[Predicate]:
    predicates: List[Predicate] = []

    name = _trim(request.name)
    name_col = metadata.column_for(options.name_field)
    if name and name_col:
        predicates.append(Predicate(
            f"LOWER({ENTITY_ALIAS}.{name_col}) LIKE :{PARAM_NAME}",
            {PARAM_NAME: _contains_pattern(name)},
        ))

    if request.category_id is not None:
        fk_col = metadata.join_column(options.category_field, options.category_default_column)
        predicates.append(Predicate(
            f"{ENTITY_ALIAS}.{fk_col} = :{PARAM_CATEGORY}",
            {PARAM_CATEGORY: request.category_id},
        ))

    alt = _trim(request.alternative_title)
    if alt:
        assoc = metadata.association
        if assoc is None:
            log.debug("alternative title filter dropped: %s has no association", metadata.model.__name__)
        else:
            predicates.append(Predicate(
                f"LOWER({ASSOCIATION_ALIAS}.{assoc.display_column}) LIKE :{PARAM_ALT_TITLE}",
                {PARAM_ALT_TITLE: _contains_pattern(alt)},
            ))

    return predicates


def plan_search(
    metadata: EntityMetadata,
    request: SearchRequest,
    options: SearchOptions = DEFAULT_OPTIONS,
) -> SearchPlan:
    return SearchPlan(
        fields=plan_fields(metadata, request.requested_fields, options),
        predicates=plan_predicates(metadata, request, options),
    )
