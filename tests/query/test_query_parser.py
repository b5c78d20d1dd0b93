"""Operator grammar and query parameter parser tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from bson import ObjectId

from programhub.commons.exceptions import ValidationError
from programhub.commons.vocabulary import FIELD_TYPES, Collections
from programhub.query.operators import ComparisonOperator, parse_suffix, to_native
from programhub.query.parser import RawFilter, parse_query_params, query_request_from_pairs

PROGRAM_TYPES = FIELD_TYPES[Collections.PROGRAMS]


def test_suffix_tokens_resolve_to_operators():
    assert parse_suffix("gte", "price[gte]") is ComparisonOperator.GTE
    assert parse_suffix("in", "careers[in]") is ComparisonOperator.IN
    assert to_native(ComparisonOperator.LT) == "$lt"


@pytest.mark.parametrize("token", ["neq", "eq", "regex", "", "GT"])
def test_unknown_suffix_is_rejected(token):
    with pytest.raises(ValidationError):
        parse_suffix(token, f"price[{token}]")


def test_reserved_keys_are_not_filters():
    parsed = parse_query_params({"select": "name,description", "sort": "-createdAt", "page": "2", "limit": "10"})
    assert parsed.filters == []
    assert parsed.select == "name,description"
    assert parsed.sort == "-createdAt"
    assert parsed.page == "2"
    assert parsed.limit == "10"


def test_filters_keep_encounter_order_and_coerce_values():
    parsed = parse_query_params(
        {"averageCost[gte]": "100", "averageCost[lte]": "500", "housing": "true", "name": "Devworks"},
        PROGRAM_TYPES,
    )
    assert parsed.filters == [
        RawFilter("averageCost", ComparisonOperator.GTE, 100.0),
        RawFilter("averageCost", ComparisonOperator.LTE, 500.0),
        RawFilter("housing", ComparisonOperator.EQ, True),
        RawFilter("name", ComparisonOperator.EQ, "Devworks"),
    ]


def test_in_values_split_on_commas_and_flatten_repeats():
    parsed = parse_query_params({"careers[in]": ["Business, UI/UX", "Data Science"]})
    assert parsed.filters == [RawFilter("careers", ComparisonOperator.IN, ["Business", "UI/UX", "Data Science"])]


def test_repeated_scalar_key_keeps_last_value():
    parsed = parse_query_params({"averageCost[lt]": ["100", "200"]}, PROGRAM_TYPES)
    assert parsed.filters == [RawFilter("averageCost", ComparisonOperator.LT, 200.0)]


def test_dotted_fields_and_typed_values():
    oid = ObjectId()
    parsed = parse_query_params(
        {"location.city": "Boston", "_id": str(oid), "createdAt[gt]": "2024-01-01T00:00:00Z"},
        PROGRAM_TYPES,
    )
    assert parsed.filters[0] == RawFilter("location.city", ComparisonOperator.EQ, "Boston")
    assert parsed.filters[1].value == oid
    assert parsed.filters[2].value == datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_unsupported_operator_raises():
    with pytest.raises(ValidationError, match="neq"):
        parse_query_params({"price[neq]": "5"})


@pytest.mark.parametrize("key", ["$where", "price[gt", "price[gt][lt]", "a..b", "price]"])
def test_malformed_keys_raise(key):
    with pytest.raises(ValidationError):
        parse_query_params({key: "1"})


def test_uncoercible_value_raises():
    with pytest.raises(ValidationError, match="averageCost"):
        parse_query_params({"averageCost[gte]": "cheap"}, PROGRAM_TYPES)
    with pytest.raises(ValidationError):
        parse_query_params({"housing": "maybe"}, PROGRAM_TYPES)


def test_pairs_fold_into_request():
    request = query_request_from_pairs([("careers[in]", "Business"), ("page", "1"), ("careers[in]", "UI/UX")])
    assert request == {"careers[in]": ["Business", "UI/UX"], "page": "1"}
