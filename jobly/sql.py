"""
Builders for parameterized SQL fragments.

Two kinds of fragment are produced here:

- a ``SET`` clause for partial updates, where only the supplied fields change;
- a ``WHERE`` clause for filtered searches over companies or jobs.

Each builder returns the fragment text with positional ``$k`` placeholders
together with the list of values to bind, so that ``$k`` always refers to
``values[k - 1]``. Nothing here touches the database.
"""

import math
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence

from .errors import BadRequestError, EmptyUpdateError, InvalidRangeError


class Fragment(NamedTuple):
    """SQL text plus the values for its placeholders, in order."""

    clause: str
    values: List[Any]


def sql_for_partial_update(
    data_to_update: Dict[str, Any],
    js_to_sql: Dict[str, str],
) -> Fragment:
    """
    Build the ``SET`` clause of a partial update.

    Args:
        data_to_update: Fields to change, e.g. {"firstName": "John", "age": 32}
        js_to_sql: Logical field name -> column name, e.g.
            {"firstName": "first_name"}. Fields missing from the map are
            used as column names unchanged.

    Returns:
        Fragment('"first_name"=$1, "age"=$2', ["John", 32])

    Raises:
        EmptyUpdateError: If there is nothing to update.
    """
    if not data_to_update:
        raise EmptyUpdateError("No data")

    cols = [
        f'"{js_to_sql.get(key, key)}"=${idx}'
        for idx, key in enumerate(data_to_update, start=1)
    ]
    return Fragment(", ".join(cols), list(data_to_update.values()))


def to_number(value: Any) -> Any:
    """Coerce a filter value to int (when integral) or float. NaN and infinities are rejected."""
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (TypeError, ValueError):
        number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"not a finite number: {value!r}")
    return int(number) if number.is_integer() else number


def _is_set(value: Any) -> bool:
    return value is not None


def _is_true(value: Any) -> bool:
    # Only the literal "true" counts; "false" and junk leave the clause out.
    return value is True or value == "true"


class FilterRule(NamedTuple):
    """
    One recognized filter key and how it becomes a clause.

    ``clause`` is a template whose ``{idx}`` is replaced by the placeholder
    number. Rules with ``binds_value=False`` emit a fixed clause and do not
    advance the placeholder counter.
    """

    key: str
    clause: str
    predicate: Callable[[Any], bool] = _is_set
    transform: Optional[Callable[[Any], Any]] = None
    binds_value: bool = True


MIN_EMPLOYEES = FilterRule("minEmployees", "num_employees >= ${idx}", transform=to_number)
MAX_EMPLOYEES = FilterRule("maxEmployees", "num_employees <= ${idx}", transform=to_number)

COMPANY_FILTERS: Sequence[FilterRule] = (
    FilterRule("name", "name ~* ${idx}"),
    MIN_EMPLOYEES,
    MAX_EMPLOYEES,
)

JOB_FILTERS: Sequence[FilterRule] = (
    FilterRule("title", "title ~* ${idx}"),
    FilterRule("minSalary", "salary >= ${idx}", transform=to_number),
    FilterRule("hasEquity", "equity != '0'", predicate=_is_true, binds_value=False),
)


def _coerce(rule: FilterRule, value: Any) -> Any:
    if rule.transform is None:
        return value
    try:
        return rule.transform(value)
    except (TypeError, ValueError) as e:
        raise BadRequestError(f"{rule.key} must be a number, got {value!r}") from e


def build_where_clause(
    filters: Dict[str, Any],
    rules: Sequence[FilterRule],
) -> Fragment:
    """
    Build a ``WHERE`` clause (without the keyword) from a filter bag.

    Rules are applied in their declared order, not the bag's key order.
    Keys missing from the bag, or set to None, are skipped. An empty clause
    means "no filtering" and the caller must leave ``WHERE`` out.
    """
    parts: List[str] = []
    values: List[Any] = []
    idx = 0

    for rule in rules:
        value = filters.get(rule.key)
        if not rule.predicate(value):
            continue
        if not rule.binds_value:
            parts.append(rule.clause)
            continue
        idx += 1
        parts.append(rule.clause.format(idx=idx))
        values.append(_coerce(rule, value))

    return Fragment(" AND ".join(parts), values)


def sql_for_company_where(filters: Dict[str, Any]) -> Fragment:
    """
    Build the filter clause for companies.

    Input: {"name": "gray", "minEmployees": 45, "maxEmployees": 100}
    Output: Fragment("name ~* $1 AND num_employees >= $2 AND num_employees <= $3",
                     ["gray", 45, 100])

    Raises:
        InvalidRangeError: If minEmployees is greater than maxEmployees.
    """
    min_employees = filters.get("minEmployees")
    max_employees = filters.get("maxEmployees")
    if min_employees is not None and max_employees is not None:
        low = _coerce(MIN_EMPLOYEES, min_employees)
        high = _coerce(MAX_EMPLOYEES, max_employees)
        if low > high:
            raise InvalidRangeError("minEmployees cannot be greater than maxEmployees")

    return build_where_clause(filters, COMPANY_FILTERS)


def sql_for_job_where(filters: Dict[str, Any]) -> Fragment:
    """
    Build the filter clause for jobs.

    ``hasEquity`` adds ``equity != '0'`` only for the literal "true" (or
    Python True, its native spelling); it binds no value. A "false" does
    not filter for zero equity, it simply adds nothing, and neither do
    "TRUE", "1" or 1.
    """
    return build_where_clause(filters, JOB_FILTERS)
