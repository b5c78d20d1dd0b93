"""Filter, projection and sort compiler."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Sequence, Tuple

from programhub.commons.exceptions import ValidationError
from programhub.query.operators import ComparisonOperator, to_native
from programhub.query.parser import ParsedQuery, RawFilter

_FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*$")


class SortDirection(IntEnum):
    """Sort direction, valued like pymongo's ``ASCENDING``/``DESCENDING``."""

    ASCENDING = 1
    DESCENDING = -1


@dataclass(frozen=True)
class FilterPredicate:
    """One ``field <operator> value`` comparison of the conjunction."""

    field: str
    operator: ComparisonOperator
    value: Any


@dataclass(frozen=True)
class SortKey:
    """One sort key. Keys apply left to right."""

    field: str
    direction: SortDirection = SortDirection.ASCENDING


@dataclass(frozen=True)
class ProjectionSpec:
    """Included fields. Empty means every field."""

    fields: Tuple[str, ...] = ()

    @property
    def is_full(self) -> bool:
        """True when no field restriction applies."""
        return not self.fields

    def with_field(self, name: str) -> "ProjectionSpec":
        """Return a copy that also includes ``name`` (no-op for full projections)."""
        if self.is_full or name in self.fields:
            return self
        return ProjectionSpec(self.fields + (name,))

    def to_native(self) -> List[str] | None:
        """Projection as a list of field names, or ``None`` for every field."""
        return None if self.is_full else list(self.fields)


@dataclass
class CompiledQuery:
    """Structured, store-agnostic query descriptor."""

    predicates: List[FilterPredicate] = field(default_factory=list)
    projection: ProjectionSpec = field(default_factory=ProjectionSpec)
    sort: List[SortKey] = field(default_factory=list)


def _split_fields(raw: str | None) -> List[str]:
    if not raw:
        return []
    tokens = [token.strip() for token in raw.split(",")]
    return [token for token in tokens if token]


def compile_filters(filters: Sequence[RawFilter]) -> List[FilterPredicate]:
    """Turn parsed filters into predicates, keeping encounter order."""
    return [FilterPredicate(f.field, f.operator, f.value) for f in filters]


def compile_projection(select: str | None) -> ProjectionSpec:
    """Compile ``select=name,description`` into a ProjectionSpec."""
    fields = []
    for name in _split_fields(select):
        if not _FIELD_NAME.match(name):
            raise ValidationError(f"Invalid field '{name}' in select")
        if name in fields:
            continue
        for other in fields:
            if name.startswith(other + ".") or other.startswith(name + "."):
                raise ValidationError(f"Overlapping fields '{other}' and '{name}' in select")
        fields.append(name)
    return ProjectionSpec(tuple(fields))


def compile_sort(sort: str | None, default_field: str = "createdAt") -> List[SortKey]:
    """Compile ``sort=name,-averageCost`` into sort keys.

    Without a sort, results are ordered by ``default_field`` descending so that
    consecutive pages are taken from the same ordering.
    """
    keys = []
    for token in _split_fields(sort):
        direction = SortDirection.ASCENDING
        if token.startswith("-"):
            direction = SortDirection.DESCENDING
            token = token[1:]
        if not _FIELD_NAME.match(token):
            raise ValidationError(f"Invalid field '{token}' in sort")
        keys.append(SortKey(token, direction))
    if not keys:
        keys.append(SortKey(default_field, SortDirection.DESCENDING))
    return keys


def compile_query(parsed: ParsedQuery, default_sort_field: str = "createdAt") -> CompiledQuery:
    """Compile the whole parser output."""
    return CompiledQuery(
        predicates=compile_filters(parsed.filters),
        projection=compile_projection(parsed.select),
        sort=compile_sort(parsed.sort, default_sort_field),
    )


def predicates_to_native(predicates: Sequence[FilterPredicate]) -> Dict[str, Dict[str, Any]]:
    """Build the store filter document for a flat conjunction of predicates.

    Predicates on the same field share one operator document:
    ``price >= 100`` and ``price <= 500`` become ``{"price": {"$gte": 100, "$lte": 500}}``.
    """
    native: Dict[str, Dict[str, Any]] = {}
    for predicate in predicates:
        native.setdefault(predicate.field, {})[to_native(predicate.operator)] = predicate.value
    return native


def sort_to_native(sort: Sequence[SortKey]) -> List[Tuple[str, int]]:
    """Sort keys as ``[(field, 1 | -1), ...]``."""
    return [(key.field, int(key.direction)) for key in sort]
