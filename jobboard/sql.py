"""
SQL helpers shared by the repositories.
"""

from typing import Any, List, Mapping, Tuple

from .errors import BadRequestError


def sql_for_partial_update(
    data: Mapping[str, Any],
    py_to_sql: Mapping[str, str],
) -> Tuple[str, List[Any]]:
    """
    Build the SET clause of a partial UPDATE.

    Args:
        data: Fields to update, in the order they should be bound
            (e.g. {"firstName": "Aliya", "age": 32})
        py_to_sql: Caller field name -> column name
            (e.g. {"firstName": "first_name"}). Fields missing from the
            mapping are used as column names verbatim.

    Returns:
        (set_cols, values), e.g. ('"first_name"=$1, "age"=$2', ["Aliya", 32])

    Raises:
        BadRequestError: If data is empty
    """
    if len(data) == 0:
        raise BadRequestError("No data")

    cols = [
        f'"{py_to_sql.get(field, field)}"=${idx}'
        for idx, field in enumerate(data, start=1)
    ]
    return ", ".join(cols), list(data.values())
