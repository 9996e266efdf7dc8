# espacogeek/search/engine.py
from __future__ import annotations

from typing import Any, List, Mapping, Optional

from ..logging import get_logger
from .builder import build_statements
from .executor import SessionExecutor, StatementExecutor
from .mapper import map_rows
from .metadata import MetadataRegistry
from .options import DEFAULT_OPTIONS, SearchOptions
from .page import Page
from .planner import SearchRequest, plan_fields, plan_search

log = get_logger("search.engine")


class DynamicQueryEngine:
    """
    Paginated, filtered, partially-projected search over any entity type,
    driven only by its metadata.

    Per call: plan -> build count/data SQL -> count -> (data) -> map rows.
    The engine keeps no per-call state; the registry is the only shared part.
    A supplied registry keeps its own association and display settings.
    """

    def __init__(
        self,
        registry: Optional[MetadataRegistry] = None,
        executor: Optional[StatementExecutor] = None,
        options: SearchOptions = DEFAULT_OPTIONS,
    ):
        self.options = options
        if registry is None:
            registry = MetadataRegistry.from_options(options)
        elif not registry.matches(options):
            log.warning("supplied registry overrides the association and display settings in %r", options)
        self.registry = registry
        self.executor = executor or SessionExecutor()

    def search(self, model: type, request: SearchRequest) -> Page:
        metadata = self.registry.get(model)
        plan = plan_search(metadata, request, self.options)
        stmts = build_statements(metadata, plan)
        pageable = request.page

        log.debug("count: %s %s", stmts.count_sql, stmts.params)
        total = self._to_total(self.executor.scalar(stmts.count_sql, stmts.params))
        if total == 0:
            log.debug("no %s rows match; skipping data statement", model.__name__)
            return Page.empty(pageable)

        log.debug("data: %s", stmts.data_sql)
        rows = self.executor.rows(stmts.data_sql, stmts.page_params(pageable.offset, pageable.size))
        content = map_rows(model, metadata, plan.fields, rows)
        return Page(content=content, total_elements=total, pageable=pageable)

    @staticmethod
    def _to_total(value: Any) -> int:
        if value is None:
            return 0
        if isinstance(value, (tuple, list)):
            value = value[0] if value else 0
        return int(value)

    def projection(self, model: type, requested_fields: Optional[Mapping[str, Any]] = None) -> List[str]:
        """Field names a search with these requested fields populates, in row order."""
        return plan_fields(self.registry.get(model), requested_fields, self.options)
