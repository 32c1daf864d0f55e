"""
Tests for sql.py - SET and WHERE fragment builders.
"""

import re

import pytest

from jobly.errors import BadRequestError, EmptyUpdateError, InvalidRangeError
from jobly.sql import (
    COMPANY_FILTERS,
    FilterRule,
    build_where_clause,
    sql_for_company_where,
    sql_for_job_where,
    sql_for_partial_update,
    to_number,
)


class TestPartialUpdate:
    """Test the SET clause builder."""

    def test_maps_field_names(self):
        data = {"firstName": "John", "lastName": "Smith"}
        js_to_sql = {"firstName": "first_name", "lastName": "last_name"}

        set_cols, values = sql_for_partial_update(data, js_to_sql)

        assert set_cols == '"first_name"=$1, "last_name"=$2'
        assert values == ["John", "Smith"]

    def test_unmapped_field_keeps_its_name(self):
        result = sql_for_partial_update({"age": 5}, {})
        assert result.clause == '"age"=$1'
        assert result.values == [5]

    def test_mixed_mapped_and_unmapped(self):
        result = sql_for_partial_update(
            {"firstName": "Aliya", "age": 32},
            {"firstName": "first_name"},
        )
        assert result == ('"first_name"=$1, "age"=$2', ["Aliya", 32])

    def test_none_values_are_kept(self):
        result = sql_for_partial_update({"salary": None, "equity": None}, {})
        assert result == ('"salary"=$1, "equity"=$2', [None, None])

    def test_empty_data_fails(self):
        with pytest.raises(EmptyUpdateError) as exc_info:
            sql_for_partial_update({}, {"firstName": "first_name"})
        assert exc_info.value.message == "No data"
        assert exc_info.value.status == 400

    def test_empty_data_is_a_bad_request(self):
        with pytest.raises(BadRequestError):
            sql_for_partial_update({}, {})

    def test_placeholders_follow_insertion_order(self):
        data = {f"field{i}": i * 10 for i in range(1, 13)}

        set_cols, values = sql_for_partial_update(data, {})

        indices = [int(n) for n in re.findall(r"\$(\d+)", set_cols)]
        assert indices == list(range(1, 13))
        assert values == [i * 10 for i in range(1, 13)]
        assert '"field12"=$12' in set_cols

    def test_does_not_mutate_inputs(self):
        data = {"numEmployees": 3}
        js_to_sql = {"numEmployees": "num_employees"}

        sql_for_partial_update(data, js_to_sql)

        assert data == {"numEmployees": 3}
        assert js_to_sql == {"numEmployees": "num_employees"}

    def test_repeat_calls_match(self):
        data = {"title": "Chef", "salary": 1}
        assert sql_for_partial_update(data, {}) == sql_for_partial_update(data, {})


class TestCompanyWhere:
    """Test the company filter builder."""

    def test_all_three_filters(self):
        result = sql_for_company_where({"name": "gray", "minEmployees": 45, "maxEmployees": 100})
        assert result.clause == "name ~* $1 AND num_employees >= $2 AND num_employees <= $3"
        assert result.values == ["gray", 45, 100]

    def test_two_filters(self):
        result = sql_for_company_where({"name": "gray", "minEmployees": 45})
        assert result == ("name ~* $1 AND num_employees >= $2", ["gray", 45])

    def test_single_filter(self):
        result = sql_for_company_where({"minEmployees": 45})
        assert result == ("num_employees >= $1", [45])

    def test_max_only_takes_first_placeholder(self):
        result = sql_for_company_where({"maxEmployees": 100})
        assert result == ("num_employees <= $1", [100])

    def test_key_order_of_bag_is_ignored(self):
        result = sql_for_company_where({"maxEmployees": 100, "name": "gray"})
        assert result == ("name ~* $1 AND num_employees <= $2", ["gray", 100])

    def test_no_filters(self):
        assert sql_for_company_where({}) == ("", [])

    def test_none_values_are_skipped(self):
        result = sql_for_company_where({"name": None, "minEmployees": None, "maxEmployees": 7})
        assert result == ("num_employees <= $1", [7])

    def test_string_numbers_are_coerced(self):
        result = sql_for_company_where({"minEmployees": "45", "maxEmployees": "100"})
        assert result.values == [45, 100]
        assert all(isinstance(v, int) for v in result.values)

    def test_zero_is_a_real_bound(self):
        result = sql_for_company_where({"minEmployees": 0})
        assert result == ("num_employees >= $1", [0])

    def test_inverted_range_fails(self):
        with pytest.raises(InvalidRangeError) as exc_info:
            sql_for_company_where({"minEmployees": 10, "maxEmployees": 1})
        assert exc_info.value.message == "minEmployees cannot be greater than maxEmployees"
        assert str(exc_info.value) == "minEmployees cannot be greater than maxEmployees"
        assert exc_info.value.status == 400

    def test_inverted_range_compares_numerically(self):
        # "10" < "9" as text, but 10 > 9 as numbers
        with pytest.raises(InvalidRangeError):
            sql_for_company_where({"minEmployees": "10", "maxEmployees": "9"})

    def test_equal_bounds_are_fine(self):
        result = sql_for_company_where({"minEmployees": 5, "maxEmployees": "5"})
        assert result == ("num_employees >= $1 AND num_employees <= $2", [5, 5])

    @pytest.mark.parametrize("value", ["lots", "nan", "inf", "-Infinity"])
    def test_non_numeric_bound_fails(self, value):
        with pytest.raises(BadRequestError) as exc_info:
            sql_for_company_where({"minEmployees": value})
        assert "minEmployees" in exc_info.value.message

    def test_nan_bound_does_not_slip_past_range_check(self):
        with pytest.raises(BadRequestError):
            sql_for_company_where({"minEmployees": "nan", "maxEmployees": 1})

    def test_integral_float_text_becomes_int(self):
        result = sql_for_company_where({"minEmployees": "45.0"})
        assert result.values == [45]
        assert isinstance(result.values[0], int)

    def test_name_is_bound_raw(self):
        result = sql_for_company_where({"name": "Gray'; DROP TABLE companies"})
        assert result == ("name ~* $1", ["Gray'; DROP TABLE companies"])


class TestJobWhere:
    """Test the job filter builder."""

    def test_all_three_filters_with_equity(self):
        result = sql_for_job_where({"title": "engineer", "minSalary": 70000, "hasEquity": "true"})
        assert result.clause == "title ~* $1 AND salary >= $2 AND equity != '0'"
        assert result.values == ["engineer", 70000]

    def test_has_equity_false_omits_clause(self):
        result = sql_for_job_where({"title": "engineer", "minSalary": 70000, "hasEquity": "false"})
        assert result == ("title ~* $1 AND salary >= $2", ["engineer", 70000])

    @pytest.mark.parametrize("value", ["sdfsdfsdf", "TRUE", "1", "", False, 1])
    def test_other_has_equity_values_omit_clause(self, value):
        result = sql_for_job_where({"title": "engineer", "hasEquity": value})
        assert result == ("title ~* $1", ["engineer"])

    def test_boolean_true_counts_as_true(self):
        assert sql_for_job_where({"hasEquity": True}) == ("equity != '0'", [])

    def test_title_only(self):
        assert sql_for_job_where({"title": "ist"}) == ("title ~* $1", ["ist"])

    def test_equity_does_not_use_a_placeholder(self):
        result = sql_for_job_where({"hasEquity": "true", "minSalary": "5000"})
        assert result == ("salary >= $1 AND equity != '0'", [5000])

    def test_float_salary_string(self):
        result = sql_for_job_where({"minSalary": "5000.5"})
        assert result.values == [5000.5]

    def test_infinite_salary_fails(self):
        with pytest.raises(BadRequestError):
            sql_for_job_where({"minSalary": "inf"})

    def test_no_filters(self):
        assert sql_for_job_where({"title": None, "minSalary": None, "hasEquity": None}) == ("", [])

    def test_repeat_calls_match(self):
        filters = {"title": "engineer", "minSalary": 1, "hasEquity": "true"}
        first = sql_for_job_where(filters)
        second = sql_for_job_where(filters)
        assert first == second
        assert first.values is not second.values


class TestBuildWhereClause:
    """Test the rule-table driven builder directly."""

    def test_custom_rules(self):
        rules = (
            FilterRule("remote", "remote = TRUE", predicate=lambda v: v == "yes", binds_value=False),
            FilterRule("city", "city = ${idx}"),
            FilterRule("maxSalary", "salary <= ${idx}", transform=to_number),
        )
        result = build_where_clause({"maxSalary": "10", "remote": "yes", "city": "Oslo"}, rules)
        assert result == ("remote = TRUE AND city = $1 AND salary <= $2", ["Oslo", 10])

    def test_unknown_keys_are_ignored(self):
        result = build_where_clause({"color": "red", "name": "x"}, COMPANY_FILTERS)
        assert result == ("name ~* $1", ["x"])


class TestToNumber:
    def test_values(self):
        assert to_number(3) == 3
        assert to_number(2.5) == 2.5
        assert to_number("42") == 42
        assert to_number(" 7 ") == 7
        assert to_number("0.25") == 0.25
        assert to_number(45.0) == 45 and isinstance(to_number(45.0), int)
        assert to_number("45.0") == 45 and isinstance(to_number("45.0"), int)

    def test_rejects_booleans_and_text(self):
        with pytest.raises(ValueError):
            to_number(True)
        with pytest.raises(ValueError):
            to_number("abc")

    @pytest.mark.parametrize("value", ["nan", "inf", "-inf", "Infinity", float("nan"), float("inf")])
    def test_rejects_non_finite(self, value):
        with pytest.raises(ValueError):
            to_number(value)
