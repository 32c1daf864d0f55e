import math
from typing import Any, Dict, List
from urllib.parse import urlparse

COMPANY_FIELDS = ["handle", "name", "description", "numEmployees", "logoUrl"]
COMPANY_UPDATE_FIELDS = ["name", "description", "numEmployees", "logoUrl"]
JOB_FIELDS = ["title", "salary", "equity", "companyHandle"]
JOB_UPDATE_FIELDS = ["title", "salary", "equity"]

COMPANY_FILTER_KEYS = ["name", "minEmployees", "maxEmployees"]
JOB_FILTER_KEYS = ["title", "minSalary", "hasEquity"]

MAX_HANDLE_LENGTH = 25


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _is_non_negative_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool) and v >= 0


def _is_numeric(v: Any) -> bool:
    if isinstance(v, bool):
        return False
    if isinstance(v, int):
        return True
    if isinstance(v, float):
        return math.isfinite(v)
    if isinstance(v, str):
        try:
            return math.isfinite(float(v))
        except ValueError:
            return False
    return False


def _valid_url(v: str) -> bool:
    p = urlparse(v)
    return bool(p.scheme and p.netloc)


def _unknown_fields(data: Dict[str, Any], allowed: List[str]) -> List[str]:
    return [f"Unknown field: {k}" for k in data if k not in allowed]


def _check_required(data: Dict[str, Any], fields: List[str]) -> List[str]:
    errors: List[str] = []
    for f in fields:
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")
    return errors


def _check_company_fields(data: Dict[str, Any]) -> List[str]:
    errors: List[str] = []

    for f in ("name", "description"):
        if f in data and not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")

    if data.get("numEmployees") is not None and not _is_non_negative_int(data["numEmployees"]):
        errors.append("Field 'numEmployees' must be an integer >= 0")

    logo_url = data.get("logoUrl")
    if logo_url is not None:
        if not isinstance(logo_url, str) or not _valid_url(logo_url):
            errors.append("Field 'logoUrl' must be a valid absolute URL (scheme + host)")

    return errors


def _check_job_fields(data: Dict[str, Any]) -> List[str]:
    errors: List[str] = []

    if "title" in data and not _is_non_empty_str(data["title"]):
        errors.append("Field 'title' must be a non-empty string")

    if data.get("salary") is not None and not _is_non_negative_int(data["salary"]):
        errors.append("Field 'salary' must be an integer >= 0")

    # Equity travels as a string, e.g. "0.05", to keep NUMERIC precision.
    equity = data.get("equity")
    if equity is not None:
        if not isinstance(equity, str) or not _is_numeric(equity) or not 0 <= float(equity) <= 1:
            errors.append("Field 'equity' must be a numeric string between 0 and 1")

    return errors


def validate_company_new(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    """
    errors = _unknown_fields(data, COMPANY_FIELDS)
    errors += _check_required(data, ["handle", "name", "description"])

    handle = data.get("handle")
    if _is_non_empty_str(handle) and len(handle) > MAX_HANDLE_LENGTH:
        errors.append(f"Field 'handle' must be at most {MAX_HANDLE_LENGTH} characters")

    errors += _check_company_fields(data)
    return errors


def validate_company_update(data: Dict[str, Any]) -> List[str]:
    """Same rules as validate_company_new, but every field is optional and handle is fixed."""
    return _unknown_fields(data, COMPANY_UPDATE_FIELDS) + _check_company_fields(data)


def validate_job_new(data: Dict[str, Any]) -> List[str]:
    errors = _unknown_fields(data, JOB_FIELDS)
    errors += _check_required(data, ["title", "companyHandle"])
    errors += _check_job_fields(data)
    return errors


def validate_job_update(data: Dict[str, Any]) -> List[str]:
    return _unknown_fields(data, JOB_UPDATE_FIELDS) + _check_job_fields(data)


def validate_company_filters(filters: Dict[str, Any]) -> List[str]:
    """Check search filters; None values count as absent."""
    errors = _unknown_fields(filters, COMPANY_FILTER_KEYS)
    for f in ("minEmployees", "maxEmployees"):
        if filters.get(f) is not None and not _is_numeric(filters[f]):
            errors.append(f"Filter '{f}' must be a number")
    return errors


def validate_job_filters(filters: Dict[str, Any]) -> List[str]:
    errors = _unknown_fields(filters, JOB_FILTER_KEYS)
    if filters.get("minSalary") is not None and not _is_numeric(filters["minSalary"]):
        errors.append("Filter 'minSalary' must be a number")
    return errors
