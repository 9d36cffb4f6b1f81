"""Tests for CLI filter parser."""

import pytest

from sqldoc.cli._filters import build_fragments, parse_cli_filters, parse_filter_arg
from sqldoc.filters import Comparison, Logical
from sqldoc.fragments import sql


def test_parse_empty():
    assert parse_cli_filters([]) is None


def test_parse_single_eq():
    result = parse_cli_filters([("$name", "eq", '"luke"')])
    assert isinstance(result, Comparison)
    assert result.path == "name"
    assert result.op == "=="
    assert result.value == "luke"


def test_parse_path_without_dollar():
    result = parse_cli_filters([("home.planet", "eq", '"Naboo"')])
    assert result.path == "home.planet"


def test_parse_numeric():
    result = parse_cli_filters([("age", "gt", "25")])
    assert result.op == ">"
    assert result.value == 25


def test_parse_in():
    result = parse_cli_filters([("id", "in", '["luke","leia"]')])
    assert result.op == "IN"
    assert result.value == ["luke", "leia"]


def test_parse_in_requires_array():
    with pytest.raises(ValueError, match="JSON array"):
        parse_cli_filters([("id", "in", '"luke"')])


def test_parse_is_null():
    result = parse_cli_filters([("email", "is_null", "null")])
    assert result.op == "IS_NULL"
    assert result.value is None


def test_parse_multiple_and():
    result = parse_cli_filters([("name", "eq", '"luke"'), ("age", "gte", "18")])
    assert isinstance(result, Logical)
    assert result.op == "AND"
    assert len(result.children) == 2


def test_parse_all_ops():
    for op_token, expected_op in [
        ("eq", "=="),
        ("ne", "!="),
        ("gt", ">"),
        ("gte", ">="),
        ("lt", "<"),
        ("lte", "<="),
        ("like", "LIKE"),
        ("not_null", "IS_NOT_NULL"),
    ]:
        result = parse_cli_filters([("x", op_token, '"v"')])
        assert result.op == expected_op, f"Failed for {op_token}"


def test_parse_unknown_op():
    with pytest.raises(ValueError, match="Unknown filter operator"):
        parse_cli_filters([("x", "approx", "1")])


def test_parse_bad_json():
    with pytest.raises(ValueError):
        parse_cli_filters([("x", "eq", "luke")])


def test_filter_arg_split():
    assert parse_filter_arg('name eq "\\"luke\\""') == ("name", "eq", '"luke"')
    assert parse_filter_arg("age gt 42") == ("age", "gt", "42")
    assert parse_filter_arg("email is_null") == ("email", "is_null", "null")


def test_filter_arg_wrong_arity():
    with pytest.raises(ValueError, match="expected"):
        parse_filter_arg("age")


@pytest.mark.parametrize("raw", ["age eq", "age gt", "name like", "id in"])
def test_filter_arg_missing_value(raw):
    with pytest.raises(ValueError, match="needs a VALUE_JSON"):
        parse_filter_arg(raw)


def test_filter_arg_null_ops_without_value():
    assert parse_filter_arg("email not_null") == ("email", "not_null", "null")


class TestBuildFragments:
    def test_nothing(self):
        assert build_fragments() == []

    def test_where_with_args(self):
        (frag,) = build_fragments(where_sql="$age > ? and $name = ?", where_args=["40", '"luke"'])
        assert frag == sql("where ($age > ? and $name = ?)", 40, "luke")

    def test_arg_without_where(self):
        with pytest.raises(ValueError, match="--arg requires --where"):
            build_fragments(where_args=["1"])

    def test_combined_conditions(self):
        (frag,) = build_fragments(where_sql="$age > ?", where_args=["40"], id="luke")
        assert frag == sql("where ($age > ?) AND ($id = ?)", 40, "luke")

    def test_filter_order_limit(self):
        frags = build_fragments(filters=["age gte 42"], order="$age", descending=True, max_rows=2)
        assert [f.text for f in frags] == [
            "where (data->>'$.age' >= ?)",
            "order by data->>'$.age' desc",
            "limit ?",
        ]
        assert [f.values for f in frags] == [(42,), (), (2,)]
