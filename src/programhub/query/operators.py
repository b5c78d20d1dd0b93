"""Comparison operators accepted in bracketed filter keys.

``price[gte]=100`` uses the ``gte`` token; a bare ``price=100`` means ``eq``.
"""

from enum import Enum

from programhub.commons.exceptions import ValidationError


class ComparisonOperator(str, Enum):
    """Closed set of comparison operators."""

    EQ = "eq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    IN = "in"


# Tokens allowed inside brackets. `eq` is only reachable through a bare key.
SUFFIX_OPERATORS = {
    ComparisonOperator.GT,
    ComparisonOperator.GTE,
    ComparisonOperator.LT,
    ComparisonOperator.LTE,
    ComparisonOperator.IN,
}

# Operators that take a comma-separated list of values.
LIST_OPERATORS = {ComparisonOperator.IN}

# Native MongoDB predicate operators.
NATIVE_OPERATOR_MAP = {
    ComparisonOperator.EQ: "$eq",
    ComparisonOperator.GT: "$gt",
    ComparisonOperator.GTE: "$gte",
    ComparisonOperator.LT: "$lt",
    ComparisonOperator.LTE: "$lte",
    ComparisonOperator.IN: "$in",
}


def parse_suffix(token: str, key: str) -> ComparisonOperator:
    """Resolve a bracket token, rejecting anything outside the grammar."""
    for operator in SUFFIX_OPERATORS:
        if operator.value == token:
            return operator
    allowed = ", ".join(sorted(op.value for op in SUFFIX_OPERATORS))
    raise ValidationError(f"Unsupported filter operator '{token}' in '{key}'. Allowed operators: {allowed}")


def to_native(operator: ComparisonOperator) -> str:
    """Return the store operator for ``operator``."""
    return NATIVE_OPERATOR_MAP[operator]
