# espacogeek/search/executor.py
from __future__ import annotations

from typing import Any, List, Mapping, Protocol, Sequence

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ..db import SessionLocal, session_scope
from ..errors import QueryExecutionError
from ..logging import get_logger

log = get_logger("search.executor")


class StatementExecutor(Protocol):
    """The two store round-trips the engine needs."""

    def scalar(self, sql: str, params: Mapping[str, Any]) -> Any:
        ...

    def rows(self, sql: str, params: Mapping[str, Any]) -> List[Sequence[Any]]:
        ...


class SessionExecutor:
    """
    Runs native statements through a SQLAlchemy session factory.
    Driver/database failures surface as QueryExecutionError.
    """

    def __init__(self, session_factory=SessionLocal):
        self._session_factory = session_factory

    def scalar(self, sql: str, params: Mapping[str, Any]) -> Any:
        try:
            with session_scope(self._session_factory) as s:
                return s.execute(text(sql), dict(params)).scalar()
        except SQLAlchemyError as exc:
            log.warning("count statement failed: %s", exc)
            raise QueryExecutionError(f"count statement failed: {exc}", statement="count") from exc

    def rows(self, sql: str, params: Mapping[str, Any]) -> List[Sequence[Any]]:
        try:
            with session_scope(self._session_factory) as s:
                return [tuple(r) for r in s.execute(text(sql), dict(params))]
        except SQLAlchemyError as exc:
            log.warning("data statement failed: %s", exc)
            raise QueryExecutionError(f"data statement failed: {exc}", statement="data") from exc
