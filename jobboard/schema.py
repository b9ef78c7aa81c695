from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

JOB_FIELDS = ["title", "salary", "equity", "companyHandle"]
UPDATABLE_JOB_FIELDS = ["title", "salary", "equity"]
TRUE_STRINGS = {"true", "1", "yes"}
FALSE_STRINGS = {"false", "0", "no"}


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _is_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def as_int(v: Any) -> Any:
    """Return v as an int when it is an int or a string of digits, else None."""
    if _is_int(v):
        return v
    if isinstance(v, str):
        s = v.strip()
        if s.isascii() and (s.isdigit() or (s[:1] == "-" and s[1:].isdigit())):
            return int(s)
    return None


def as_flag(v: Any) -> Any:
    """Return v as a bool when it is one (or a recognised string), else None."""
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        lowered = v.strip().lower()
        if lowered in TRUE_STRINGS:
            return True
        if lowered in FALSE_STRINGS:
            return False
    return None


def _equity_errors(v: Any) -> List[str]:
    if v is None:
        return []
    if isinstance(v, bool) or not isinstance(v, (str, int, float, Decimal)):
        return ["Field 'equity' must be a decimal string or number"]
    try:
        value = Decimal(str(v).strip())
    except InvalidOperation:
        return ["Field 'equity' must be a decimal string or number"]
    if not value.is_finite() or value < 0 or value > 1:
        return ["Field 'equity' must be between 0 and 1"]
    return []


def _salary_errors(v: Any) -> List[str]:
    if v is None:
        return []
    if not _is_int(v):
        return ["Field 'salary' must be an integer"]
    if v < 0:
        return ["Field 'salary' must not be negative"]
    return []


def validate_new_job(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages for a job about to be created.
    Empty list means valid.
    """
    errors: List[str] = []

    for f in ("title", "companyHandle"):
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")

    for f in data:
        if f not in JOB_FIELDS:
            errors.append(f"Unknown field: {f}")

    errors.extend(_salary_errors(data.get("salary")))
    errors.extend(_equity_errors(data.get("equity")))
    return errors


def validate_job_update(data: Dict[str, Any]) -> List[str]:
    """
    Checks a partial update. An empty payload is not an error here;
    the SQL builder rejects it.
    """
    errors: List[str] = []

    for f in data:
        if f not in UPDATABLE_JOB_FIELDS:
            errors.append(f"Field '{f}' cannot be updated")

    if "title" in data and not _is_non_empty_str(data["title"]):
        errors.append("Field 'title' must be a non-empty string")
    errors.extend(_salary_errors(data.get("salary")))
    errors.extend(_equity_errors(data.get("equity")))
    return errors


def validate_job_filters(filters: Dict[str, Any]) -> List[str]:
    """
    Checks the recognised search filters; unknown keys are ignored.
    """
    errors: List[str] = []

    if "title" in filters and not isinstance(filters["title"], str):
        errors.append("Filter 'title' must be a string")

    if "minSalary" in filters:
        min_salary = as_int(filters["minSalary"])
        if min_salary is None:
            errors.append("Filter 'minSalary' must be an integer")
        elif min_salary < 0:
            errors.append("Filter 'minSalary' must not be negative")

    if "hasEquity" in filters and as_flag(filters["hasEquity"]) is None:
        errors.append("Filter 'hasEquity' must be true or false")

    return errors
