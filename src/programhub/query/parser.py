"""Query parameter parser.

Splits the raw query string of a list request into reserved control keys
(``select``, ``sort``, ``page``, ``limit``) and filter keys, and resolves the
bracketed operator suffix of every filter key::

    averageCost[lte]=10000&careers[in]=Business,UI/UX&housing=true&page=2

No store syntax appears in the output; the compiler owns that translation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, NamedTuple, Sequence, Tuple, Union

from programhub.commons.exceptions import ValidationError
from programhub.query.operators import LIST_OPERATORS, ComparisonOperator, parse_suffix

RESERVED_KEYS = ("select", "sort", "page", "limit")

_FILTER_KEY = re.compile(r"^(?P<field>[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*)(?:\[(?P<op>[^\[\]]*)\])?$")

QueryRequest = Mapping[str, Union[str, Sequence[str]]]
FieldTypes = Mapping[str, Callable[[str], Any]]


class RawFilter(NamedTuple):
    """A filter key after operator resolution and value coercion."""

    field: str
    operator: ComparisonOperator
    value: Any


@dataclass
class ParsedQuery:
    """Parser output: ordered filters plus the raw control values."""

    filters: List[RawFilter] = field(default_factory=list)
    select: str | None = None
    sort: str | None = None
    page: str | None = None
    limit: str | None = None


def query_request_from_pairs(pairs: Iterable[Tuple[str, str]]) -> Dict[str, Union[str, List[str]]]:
    """Fold ``(key, value)`` pairs into a QueryRequest, turning repeated keys into lists."""
    request: Dict[str, Union[str, List[str]]] = {}
    for key, value in pairs:
        if key not in request:
            request[key] = value
        elif isinstance(request[key], list):
            request[key].append(value)
        else:
            request[key] = [request[key], value]
    return request


def _values(raw: Union[str, Sequence[str]]) -> List[str]:
    if isinstance(raw, str):
        return [raw]
    return [str(item) for item in raw]


def _last(raw: Union[str, Sequence[str]]) -> str:
    values = _values(raw)
    return values[-1] if values else ""


def _coerce(value: str, field_name: str, coerce: Callable[[str], Any] | None) -> Any:
    if coerce is None or coerce is str:
        return value
    try:
        return coerce(value)
    except Exception as exc:
        raise ValidationError(f"Invalid value '{value}' for field '{field_name}'") from exc


def parse_query_params(params: QueryRequest, field_types: FieldTypes | None = None) -> ParsedQuery:
    """Parse a QueryRequest.

    Parameters
    ----------
    params : mapping
        Parameter name to value (or list of values, for repeated keys).
    field_types : mapping, optional
        Field name to a coercion callable. Fields without one stay strings.

    Returns
    -------
    ParsedQuery
        Filters in encounter order and the raw ``select``/``sort``/``page``/``limit`` values.

    Raises
    ------
    ValidationError
        For malformed keys, unsupported operators, or values that fail coercion.
    """
    field_types = field_types or {}
    parsed = ParsedQuery()
    for key, raw in params.items():
        if key in RESERVED_KEYS:
            setattr(parsed, key, _last(raw))
            continue

        match = _FILTER_KEY.match(key)
        if match is None:
            raise ValidationError(f"Malformed filter key '{key}'")
        field_name = match.group("field")
        token = match.group("op")
        operator = ComparisonOperator.EQ if token is None else parse_suffix(token, key)
        coerce = field_types.get(field_name)

        if operator in LIST_OPERATORS:
            items = [item.strip() for value in _values(raw) for item in value.split(",") if item.strip()]
            value = [_coerce(item, field_name, coerce) for item in items]
        else:
            # Repeated scalar keys: the last occurrence wins.
            value = _coerce(_last(raw), field_name, coerce)
        parsed.filters.append(RawFilter(field_name, operator, value))
    return parsed
