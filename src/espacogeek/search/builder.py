# espacogeek/search/builder.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from .metadata import EntityMetadata
from .options import ASSOCIATION_ALIAS, ENTITY_ALIAS, PARAM_LIMIT, PARAM_OFFSET
from .planner import SearchPlan


"""
SQL assembly for the count and data statements.

Both statements share the same FROM / LEFT JOIN / WHERE text. Identifiers
come from entity metadata only; caller values are bound parameters.

  count: SELECT COUNT(DISTINCT m.<id>) FROM <table> m [LEFT JOIN ...] [WHERE ...]
  data:  SELECT [DISTINCT] m.<col> AS <field>, ... FROM ... [WHERE ...]
         ORDER BY m.<id> ASC LIMIT :limit OFFSET :offset
"""


@dataclass(frozen=True)
class QueryStatements:
    count_sql: str
    data_sql: str
    params: Dict[str, Any] = field(default_factory=dict)

    def page_params(self, offset: int, limit: int) -> Dict[str, Any]:
        return {**self.params, PARAM_OFFSET: offset, PARAM_LIMIT: limit}


def _select_list(metadata: EntityMetadata, plan: SearchPlan) -> str:
    return ", ".join(
        f"{ENTITY_ALIAS}.{metadata.column_for(f)} AS {f}" for f in plan.fields
    )


def _from_clause(metadata: EntityMetadata) -> str:
    sql = f"FROM {metadata.table_name} {ENTITY_ALIAS}"
    assoc = metadata.association
    if assoc is not None:
        # LEFT: entities without related rows must survive when no filter targets them
        sql += (
            f" LEFT JOIN {assoc.related_table} {ASSOCIATION_ALIAS}"
            f" ON {ASSOCIATION_ALIAS}.{assoc.foreign_key_column}"
            f" = {ENTITY_ALIAS}.{assoc.related_id_column}"
        )
    return sql


def _where_clause(plan: SearchPlan) -> str:
    if not plan.predicates:
        return ""
    return " WHERE " + " AND ".join(p.sql for p in plan.predicates)


def build_statements(metadata: EntityMetadata, plan: SearchPlan) -> QueryStatements:
    from_sql = _from_clause(metadata)
    where_sql = _where_clause(plan)
    id_ref = f"{ENTITY_ALIAS}.{metadata.id_column}"

    count_sql = f"SELECT COUNT(DISTINCT {id_ref}) {from_sql}{where_sql}"

    # the join fans out rows; projected columns all come from the entity table
    distinct = "DISTINCT " if metadata.association is not None else ""
    data_sql = (
        f"SELECT {distinct}{_select_list(metadata, plan)} {from_sql}{where_sql}"
        f" ORDER BY {id_ref} ASC LIMIT :{PARAM_LIMIT} OFFSET :{PARAM_OFFSET}"
    )

    return QueryStatements(count_sql=count_sql, data_sql=data_sql, params=plan.params)
