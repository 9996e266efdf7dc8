# espacogeek/search/metadata.py
from __future__ import annotations

import types
import typing
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from sqlalchemy import Column
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Mapper, RelationshipDirection

from ..errors import MetadataResolutionError
from ..logging import get_logger
from ..naming import camel_to_snake
from .options import DEFAULT_ASSOCIATION_FIELD, DEFAULT_DISPLAY_COLUMN, DEFAULT_NAME_FIELD, SearchOptions


"""
Entity metadata resolution.

Answers, for an entity type, every structural question the search engine
needs: table name, primary-key column, field -> column mapping, scalar vs
association classification and the join shape of one named one-to-many
association.

Two sources are understood:
- SQLAlchemy mapped classes, read through `sqlalchemy.inspect` (inherited
  attributes included).
- Plain annotated classes, read from their type hints, with optional
  `__tablename__`, `__column_names__` and `__id__` declarations; anything
  not declared is derived with camel_to_snake.

Metadata is immutable once resolved and is cached per type by
MetadataRegistry.
"""

log = get_logger("search.metadata")

SCALAR_TYPES: tuple[type, ...] = (int, float, Decimal, str, bool, date, datetime, time, timedelta)
TEMPORAL_TYPES: tuple[type, ...] = (date, datetime, time, timedelta)


class FieldKind(Enum):
    SCALAR = "scalar"
    ASSOCIATION = "association"
    # mapped, but not projectable (JSON, blobs, enums, SQL expressions...)
    OPAQUE = "opaque"


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    column_name: Optional[str]
    kind: FieldKind
    python_type: Optional[type] = None

    @property
    def is_scalar(self) -> bool:
        return self.kind is FieldKind.SCALAR


@dataclass(frozen=True)
class AssociationInfo:
    """Join shape of a one-to-many association, used to filter by a related display value."""
    name: str
    related_table: str
    foreign_key_column: str     # on related_table, points back to the owner
    related_id_column: str      # owner's id column
    display_column: str         # related_table's name-like column


@dataclass(frozen=True)
class EntityMetadata:
    model: type
    table_name: str
    id_field: str
    id_column: str
    fields: Mapping[str, FieldDescriptor] = field(default_factory=dict)
    # many-to-one relationship name -> FK column on this table
    join_columns: Mapping[str, str] = field(default_factory=dict)
    association: Optional[AssociationInfo] = None

    def has_field(self, name: str) -> bool:
        return name in self.fields

    def descriptor(self, name: str) -> Optional[FieldDescriptor]:
        return self.fields.get(name)

    def column_for(self, name: str) -> Optional[str]:
        fd = self.fields.get(name)
        return fd.column_name if fd else None

    def is_scalar(self, name: str) -> bool:
        fd = self.fields.get(name)
        return bool(fd and fd.is_scalar)

    def python_type_for(self, name: str) -> Optional[type]:
        fd = self.fields.get(name)
        return fd.python_type if fd else None

    def join_column(self, name: str, default: str) -> str:
        return self.join_columns.get(name) or default


# ---------------------------------------------------------------------------
# Type helpers
# ---------------------------------------------------------------------------

def is_scalar_type(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, SCALAR_TYPES) and not issubclass(tp, Enum)


def _unwrap_optional(tp: Any) -> Any:
    """Optional[X] / X | None -> X; other unions are left alone."""
    origin = typing.get_origin(tp)
    if origin is typing.Union or origin is types.UnionType:
        args = [a for a in typing.get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


def _is_collection_hint(tp: Any) -> bool:
    origin = typing.get_origin(tp)
    return isinstance(origin, type) and issubclass(origin, (list, set, tuple, frozenset))


def _column_python_type(col: Column) -> Optional[type]:
    try:
        return col.type.python_type
    except NotImplementedError:
        return None


# ---------------------------------------------------------------------------
# Mapped (SQLAlchemy) classes
# ---------------------------------------------------------------------------

def _mapped_table_name(model: type, mapper: Mapper) -> str:
    name = getattr(mapper.local_table, "name", None)
    return name or camel_to_snake(model.__name__)


def _mapped_fields(mapper: Mapper) -> tuple[Dict[str, FieldDescriptor], Dict[str, str]]:
    fields: Dict[str, FieldDescriptor] = {}
    join_columns: Dict[str, str] = {}

    for prop in mapper.column_attrs:
        col = prop.columns[0]
        if not isinstance(col, Column):
            # column_property() over a SQL expression: nothing to select by name
            fields[prop.key] = FieldDescriptor(prop.key, None, FieldKind.OPAQUE)
            continue
        col_name = col.name or camel_to_snake(prop.key)
        py_type = _column_python_type(col)
        kind = FieldKind.SCALAR if is_scalar_type(py_type) else FieldKind.OPAQUE
        fields[prop.key] = FieldDescriptor(prop.key, col_name, kind, py_type)

    for rel in mapper.relationships:
        fk_col: Optional[str] = None
        if rel.direction is RelationshipDirection.MANYTOONE:
            local = [c for c in rel.local_columns if isinstance(c, Column)]
            if local:
                fk_col = local[0].name
                join_columns[rel.key] = fk_col
        fields[rel.key] = FieldDescriptor(rel.key, fk_col, FieldKind.ASSOCIATION, rel.mapper.class_)

    return fields, join_columns


def _mapped_id(mapper: Mapper) -> tuple[str, str]:
    pk = list(mapper.primary_key)
    if not pk:
        raise MetadataResolutionError(f"{mapper.class_.__name__} has no primary key")
    if len(pk) > 1:
        log.debug("%s has a composite primary key; using %s", mapper.class_.__name__, pk[0].name)
    prop = mapper.get_property_by_column(pk[0])
    return prop.key, pk[0].name or camel_to_snake(prop.key)


def _resolve_association(
    model: type,
    mapper: Mapper,
    name: str,
    id_column: str,
    display_field: str = DEFAULT_NAME_FIELD,
    display_default: str = DEFAULT_DISPLAY_COLUMN,
) -> AssociationInfo:
    """
    Resolve `name` as a one-to-many association with a back reference.
    Raises MetadataResolutionError on any missing piece.
    """
    rel = mapper.relationships.get(name)
    if rel is None:
        raise MetadataResolutionError(f"{model.__name__}.{name} is not a relationship")
    if not rel.uselist or rel.direction is not RelationshipDirection.ONETOMANY:
        raise MetadataResolutionError(f"{model.__name__}.{name} is not a one-to-many collection")

    related: Mapper = rel.mapper
    related_cls = related.class_

    fk_column: Optional[str] = None
    for back in related.relationships:
        if back.direction is not RelationshipDirection.MANYTOONE:
            continue
        if not issubclass(model, back.mapper.class_):
            continue
        local = [c for c in back.local_columns if isinstance(c, Column)]
        fk_column = local[0].name if local else camel_to_snake(back.key) + "_id"
        break
    if fk_column is None:
        raise MetadataResolutionError(
            f"{related_cls.__name__} has no many-to-one reference back to {model.__name__}"
        )

    display_column = display_default
    display_prop = related.column_attrs.get(display_field)
    if display_prop is not None and isinstance(display_prop.columns[0], Column):
        display_column = display_prop.columns[0].name

    return AssociationInfo(
        name=name,
        related_table=_mapped_table_name(related_cls, related),
        foreign_key_column=fk_column,
        related_id_column=id_column,
        display_column=display_column,
    )


def _resolve_mapped(
    model: type,
    mapper: Mapper,
    association: Optional[str],
    display_field: str,
    display_default: str,
) -> EntityMetadata:
    fields, join_columns = _mapped_fields(mapper)
    id_field, id_column = _mapped_id(mapper)

    assoc: Optional[AssociationInfo] = None
    if association:
        try:
            assoc = _resolve_association(
                model, mapper, association, id_column, display_field, display_default
            )
        except Exception as exc:
            # degrade: no join, no alternative-title filter
            log.debug("association %s.%s unresolved: %s", model.__name__, association, exc)

    return EntityMetadata(
        model=model,
        table_name=_mapped_table_name(model, mapper),
        id_field=id_field,
        id_column=id_column,
        fields=fields,
        join_columns=join_columns,
        association=assoc,
    )


# ---------------------------------------------------------------------------
# Plain annotated classes
# ---------------------------------------------------------------------------

def _class_hints(model: type) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(model)
    except Exception:
        # unresolvable forward references: fall back to the raw annotations
        hints: Dict[str, Any] = {}
        for klass in reversed(model.__mro__):
            hints.update(getattr(klass, "__annotations__", {}))
        return hints


def _resolve_plain(model: type) -> EntityMetadata:
    declared_columns: Mapping[str, str] = getattr(model, "__column_names__", None) or {}
    fields: Dict[str, FieldDescriptor] = {}

    for name, hint in _class_hints(model).items():
        if name.startswith("_") or typing.get_origin(hint) is typing.ClassVar:
            continue
        tp = _unwrap_optional(hint)
        if _is_collection_hint(tp):
            fields[name] = FieldDescriptor(name, None, FieldKind.ASSOCIATION, typing.get_origin(tp))
            continue
        col = declared_columns.get(name) or camel_to_snake(name)
        if is_scalar_type(tp):
            fields[name] = FieldDescriptor(name, col, FieldKind.SCALAR, tp)
        else:
            fields[name] = FieldDescriptor(name, col, FieldKind.OPAQUE, tp if isinstance(tp, type) else None)

    id_field = getattr(model, "__id__", None) or "id"
    id_fd = fields.get(id_field)
    if id_fd is None or id_fd.column_name is None:
        raise MetadataResolutionError(f"{model.__name__} declares no primary key field {id_field!r}")

    table = getattr(model, "__tablename__", None) or camel_to_snake(model.__name__)
    return EntityMetadata(
        model=model,
        table_name=table,
        id_field=id_field,
        id_column=id_fd.column_name,
        fields=fields,
    )


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def resolve_metadata(
    model: type,
    *,
    association: Optional[str] = DEFAULT_ASSOCIATION_FIELD,
    display_field: str = DEFAULT_NAME_FIELD,
    display_default: str = DEFAULT_DISPLAY_COLUMN,
) -> EntityMetadata:
    """
    Build EntityMetadata for `model`.

    `association=None` resolves no association at all. `display_default` is
    the display column used when the related type has no `display_field`.

    Association problems never raise; they leave `association` as None.
    MetadataResolutionError is raised only when `model` is not usable as an
    entity at all (not a class, or no primary key).
    """
    if not isinstance(model, type):
        raise MetadataResolutionError(f"expected an entity class, got {model!r}")

    mapper = sa_inspect(model, raiseerr=False)
    if isinstance(mapper, Mapper):
        return _resolve_mapped(model, mapper, association, display_field, display_default)
    return _resolve_plain(model)


# register() default: "use the registry's association"; None disables it
_REGISTRY_DEFAULT: Any = object()


class MetadataRegistry:
    """
    Per-type cache of EntityMetadata.

    `get()` resolves lazily on first use; `register()` resolves eagerly and
    lets a type name its own association, or pass `association=None` to
    search it without a join. Entries are never replaced, so the cache is
    safe to share between threads without locking.
    """

    def __init__(
        self,
        *,
        association: Optional[str] = DEFAULT_ASSOCIATION_FIELD,
        display_field: str = DEFAULT_NAME_FIELD,
        display_default: str = DEFAULT_DISPLAY_COLUMN,
    ):
        self._association = association
        self._display_field = display_field
        self._display_default = display_default
        self._cache: Dict[type, EntityMetadata] = {}

    @classmethod
    def from_options(cls, options: SearchOptions) -> "MetadataRegistry":
        return cls(
            association=options.association_field,
            display_field=options.display_field,
            display_default=options.display_default_column,
        )

    def matches(self, options: SearchOptions) -> bool:
        """True when `options` describes the same association and display settings."""
        return (
            self._association == options.association_field
            and self._display_field == options.display_field
            and self._display_default == options.display_default_column
        )

    def register(self, model: type, *, association: Optional[str] = _REGISTRY_DEFAULT) -> EntityMetadata:
        existing = self._cache.get(model)
        if existing is not None:
            return existing
        md = resolve_metadata(
            model,
            association=self._association if association is _REGISTRY_DEFAULT else association,
            display_field=self._display_field,
            display_default=self._display_default,
        )
        return self._cache.setdefault(model, md)

    def get(self, model: type) -> EntityMetadata:
        md = self._cache.get(model)
        if md is None:
            md = self.register(model)
        return md

    def __contains__(self, model: object) -> bool:
        return model in self._cache
