"""
Jobs Repository.

Responsibilities:
- CRUD and filtered search over the jobs table.
- Turning missing rows into NotFoundError.

Non-Responsibilities:
- No payload validation (see jobly.schema).
- No check that companyHandle exists; the foreign key enforces it.

Invariant:
Every statement is parameterized; caller data never lands in SQL text.
"""

from typing import Any, Dict, List, Optional

from ..database import Database
from ..errors import NotFoundError
from ..logger import get_logger
from ..sql import sql_for_job_where, sql_for_partial_update

JOB_COLUMNS = 'id, title, salary, equity, company_handle AS "companyHandle"'

# Job fields share their column names; companyHandle is never updatable.
JS_TO_SQL: Dict[str, str] = {}


def create(db: Database, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a job.

    data should be { title, salary, equity, companyHandle }

    Returns { id, title, salary, equity, companyHandle }
    """
    rows = db.query(
        f"""INSERT INTO jobs
            (title, salary, equity, company_handle)
            VALUES ($1, $2, $3, $4)
            RETURNING {JOB_COLUMNS}""",
        [
            data["title"],
            data.get("salary"),
            data.get("equity"),
            data["companyHandle"],
        ],
    )
    job = rows[0]
    get_logger().info("Job created", id=job["id"], company=job["companyHandle"])
    return job


def find_all(db: Database, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    List jobs ordered by title, optionally filtered.

    filters may hold { title, minSalary, hasEquity }. Title is a
    case-insensitive partial match; hasEquity only filters when it is "true".
    """
    where, values = sql_for_job_where(filters or {})
    where_sql = f"WHERE {where}" if where else ""

    return db.query(
        f"""SELECT {JOB_COLUMNS}
            FROM jobs
            {where_sql}
            ORDER BY title, id""",
        values,
    )


def get(db: Database, job_id: int) -> Dict[str, Any]:
    """Given a job id, return the job. Raises NotFoundError if not found."""
    rows = db.query(
        f"""SELECT {JOB_COLUMNS}
            FROM jobs
            WHERE id = $1""",
        [job_id],
    )
    if not rows:
        raise NotFoundError(f"No job: {job_id}")
    return rows[0]


def update(db: Database, job_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Partially update a job; only the fields in data change.

    data can include { title, salary, equity }

    Returns { id, title, salary, equity, companyHandle }

    Raises EmptyUpdateError for empty data, NotFoundError if not found.
    """
    set_cols, values = sql_for_partial_update(data, JS_TO_SQL)
    id_idx = f"${len(values) + 1}"

    rows = db.query(
        f"""UPDATE jobs
            SET {set_cols}
            WHERE id = {id_idx}
            RETURNING {JOB_COLUMNS}""",
        [*values, job_id],
    )
    if not rows:
        raise NotFoundError(f"No job: {job_id}")
    return rows[0]


def remove(db: Database, job_id: int) -> None:
    """Delete a job. Raises NotFoundError if not found."""
    rows = db.query(
        """DELETE
           FROM jobs
           WHERE id = $1
           RETURNING id""",
        [job_id],
    )
    if not rows:
        raise NotFoundError(f"No job: {job_id}")
    get_logger().info("Job removed", id=job_id)
