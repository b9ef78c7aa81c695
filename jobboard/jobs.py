"""
Jobs Repository.

Responsibilities:
- CRUD operations for the jobs table.
- Filtering for job searches.
- Translating store constraint violations into domain errors.

Non-Responsibilities:
- No transaction management (each statement commits on its own).
- No HTTP concerns.

The repository only needs an object exposing
``query(sql, params) -> list[dict]``, normally ``jobboard.database.Database``.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError

from .errors import BadRequestError, JobBoardError, NotFoundError
from .logger import get_logger
from .schema import (
    as_flag,
    as_int,
    validate_job_filters,
    validate_job_update,
    validate_new_job,
)
from .sql import sql_for_partial_update

# Caller-facing field name -> jobs column
PY_TO_SQL = {"companyHandle": "company_handle"}

JOB_COLUMNS = 'id, title, salary, equity, company_handle AS "companyHandle"'

MAX_ID = 2**31 - 1


def _equity_param(value: Any) -> Optional[str]:
    # Stored as canonical decimal text (no exponent, no trailing zeros)
    if value is None:
        return None
    return format(Decimal(str(value).strip()).normalize(), "f")


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _equity_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return format(Decimal(str(value)).normalize(), "f")


def _to_job(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": row["id"],
        "title": row["title"],
        "salary": row["salary"],
        "equity": _equity_str(row["equity"]),
        "companyHandle": row["companyHandle"],
    }


def _parse_id(job_id: Any) -> int:
    value = as_int(job_id)
    if value is None or value < 1 or value > MAX_ID:
        raise BadRequestError(f"Invalid job id: {job_id!r}")
    return value


class JobRepository:
    """
    Data access for job postings.

    Jobs are returned as dicts with the keys
    id, title, salary, equity (decimal string) and companyHandle.
    """

    def __init__(self, db):
        """
        Args:
            db: Query client with query(sql, params) -> list of row dicts
        """
        self.db = db
        self.log = get_logger()

    def _fail(self, operation: str, error: JobBoardError, **context) -> JobBoardError:
        self.log.record_failure(operation, type(error).__name__)
        self.log.warning(f"Job {operation} failed: {error.message}", **context)
        return error

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a job and return it with its generated id.

        Args:
            data: {title, salary, equity, companyHandle}

        Raises:
            BadRequestError: Invalid payload, or companyHandle names no company
        """
        self.log.record_operation("create")
        errors = validate_new_job(data)
        if errors:
            raise self._fail("create", BadRequestError("; ".join(errors)), errors=errors)

        handle = data["companyHandle"]
        try:
            rows = self.db.query(
                f"""INSERT INTO jobs (title, salary, equity, company_handle)
                    VALUES ($1, $2, $3, $4)
                    RETURNING {JOB_COLUMNS}""",
                [data["title"], data.get("salary"), _equity_param(data.get("equity")), handle],
            )
        except IntegrityError as e:
            raise self._fail(
                "create", BadRequestError(f"Cannot create job for company: {handle}"),
                company_handle=handle,
            ) from e

        job = _to_job(rows[0])
        self.log.info("Created job", id=job["id"], company_handle=handle)
        return job

    def find_all(self, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        List jobs ordered by title.

        Args:
            filters: Optional search filters, combined with AND:
                - title: case-insensitive substring of the title
                - minSalary: salary at least this much
                - hasEquity: when true, only jobs with equity > 0
                Other keys are ignored.

        Raises:
            BadRequestError: A recognised filter has an invalid value
        """
        self.log.record_operation("find_all")
        filters = {k: v for k, v in (filters or {}).items() if v is not None}
        errors = validate_job_filters(filters)
        if errors:
            raise self._fail("find_all", BadRequestError("; ".join(errors)), errors=errors)

        where: List[str] = []
        params: List[Any] = []

        if "title" in filters:
            params.append(_like_pattern(filters["title"]))
            where.append(f"LOWER(title) LIKE LOWER(${len(params)}) ESCAPE '\\'")

        if "minSalary" in filters:
            params.append(as_int(filters["minSalary"]))
            where.append(f"salary >= ${len(params)}")

        if as_flag(filters.get("hasEquity")):
            where.append("CAST(equity AS NUMERIC) > 0")

        sql = f"SELECT {JOB_COLUMNS} FROM jobs"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY title"

        rows = self.db.query(sql, params)
        self.log.debug("Found jobs", count=len(rows), filters=filters)
        return [_to_job(row) for row in rows]

    def get(self, job_id: Any) -> Dict[str, Any]:
        """
        Return the job with the given id.

        Raises:
            BadRequestError: job_id is not a valid id
            NotFoundError: No such job
        """
        self.log.record_operation("get")
        try:
            job_id = _parse_id(job_id)
        except BadRequestError as e:
            self._fail("get", e)
            raise

        rows = self.db.query(f"SELECT {JOB_COLUMNS} FROM jobs WHERE id = $1", [job_id])
        if not rows:
            raise self._fail("get", NotFoundError(f"No job: {job_id}"), id=job_id)
        return _to_job(rows[0])

    def update(self, job_id: Any, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Partially update a job's title, salary and/or equity.

        Passing None for salary or equity clears it. companyHandle can
        never be changed.

        Returns:
            The updated job

        Raises:
            BadRequestError: Invalid id, empty payload, companyHandle or
                other non-updatable field present, or invalid values
            NotFoundError: No such job
        """
        self.log.record_operation("update")
        if "companyHandle" in data:
            raise self._fail("update", BadRequestError("companyHandle cannot be changed"), id=job_id)

        try:
            job_id = _parse_id(job_id)
        except BadRequestError as e:
            self._fail("update", e)
            raise

        errors = validate_job_update(data)
        if errors:
            raise self._fail("update", BadRequestError("; ".join(errors)), id=job_id, errors=errors)

        data = dict(data)
        if "equity" in data:
            data["equity"] = _equity_param(data["equity"])

        try:
            set_cols, values = sql_for_partial_update(data, PY_TO_SQL)
        except BadRequestError as e:
            self._fail("update", e, id=job_id)
            raise

        id_idx = len(values) + 1
        try:
            rows = self.db.query(
                f"""UPDATE jobs
                    SET {set_cols}
                    WHERE id = ${id_idx}
                    RETURNING {JOB_COLUMNS}""",
                [*values, job_id],
            )
        except IntegrityError as e:
            raise self._fail("update", BadRequestError(f"Invalid update for job: {job_id}"), id=job_id) from e

        if not rows:
            raise self._fail("update", NotFoundError(f"No job: {job_id}"), id=job_id)

        job = _to_job(rows[0])
        self.log.info("Updated job", id=job_id, fields=list(data))
        return job

    def remove(self, job_id: Any) -> None:
        """
        Delete the job with the given id.

        Raises:
            BadRequestError: job_id is not a valid id
            NotFoundError: No such job
        """
        self.log.record_operation("remove")
        try:
            job_id = _parse_id(job_id)
        except BadRequestError as e:
            self._fail("remove", e)
            raise

        rows = self.db.query("DELETE FROM jobs WHERE id = $1 RETURNING id", [job_id])
        if not rows:
            raise self._fail("remove", NotFoundError(f"No job: {job_id}"), id=job_id)
        self.log.info("Removed job", id=job_id)
