# espacogeek/errors.py
from __future__ import annotations

from typing import Optional

"""
Error taxonomy for the catalog search engine.

- MetadataResolutionError: entity/association metadata could not be resolved.
  The resolver absorbs it for associations and join columns (the query
  degrades); it only reaches callers when a type is not an entity at all.
- QueryExecutionError: the store rejected a statement or was unreachable.
- RowMappingError: an entity instance could not be built for a returned row.
"""


class EspacoGeekError(Exception):
    """Base class for all package errors."""


class MetadataResolutionError(EspacoGeekError):
    pass


class QueryExecutionError(EspacoGeekError):
    def __init__(self, message: str, *, statement: Optional[str] = None):
        super().__init__(message)
        # "count" or "data"
        self.statement = statement


class RowMappingError(EspacoGeekError):
    def __init__(self, message: str, *, model: Optional[type] = None):
        super().__init__(message)
        self.model = model


__all__ = [
    "EspacoGeekError",
    "MetadataResolutionError",
    "QueryExecutionError",
    "RowMappingError",
]
