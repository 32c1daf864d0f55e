"""
Companies Repository.

Responsibilities:
- CRUD and filtered search over the companies table.
- Turning missing rows into NotFoundError.

Non-Responsibilities:
- No payload validation (see jobly.schema).
- No SQL assembly beyond fixed statements; dynamic parts come from jobly.sql.

Invariant:
Every statement is parameterized; caller data never lands in SQL text.
"""

from typing import Any, Dict, List, Optional

from ..database import Database
from ..errors import BadRequestError, NotFoundError
from ..logger import get_logger
from ..sql import sql_for_company_where, sql_for_partial_update

COMPANY_COLUMNS = (
    'handle, name, description, '
    'num_employees AS "numEmployees", logo_url AS "logoUrl"'
)

JS_TO_SQL = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}


def create(db: Database, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a company.

    data should be { handle, name, description, numEmployees, logoUrl }

    Returns { handle, name, description, numEmployees, logoUrl }

    Raises BadRequestError if the handle is already taken.
    """
    handle = data["handle"]
    duplicate = db.query("SELECT handle FROM companies WHERE handle = $1", [handle])
    if duplicate:
        raise BadRequestError(f"Duplicate company: {handle}")

    rows = db.query(
        f"""INSERT INTO companies
            (handle, name, description, num_employees, logo_url)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING {COMPANY_COLUMNS}""",
        [
            handle,
            data["name"],
            data["description"],
            data.get("numEmployees"),
            data.get("logoUrl"),
        ],
    )
    get_logger().info("Company created", handle=handle)
    return rows[0]


def find_all(db: Database, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    List companies ordered by name, optionally filtered.

    filters may hold { name, minEmployees, maxEmployees }; any of them may be
    missing or None. With nothing to filter on, every company is returned.

    Raises InvalidRangeError if minEmployees > maxEmployees.
    """
    where, values = sql_for_company_where(filters or {})
    where_sql = f"WHERE {where}" if where else ""

    return db.query(
        f"""SELECT {COMPANY_COLUMNS}
            FROM companies
            {where_sql}
            ORDER BY name""",
        values,
    )


def get(db: Database, handle: str) -> Dict[str, Any]:
    """
    Given a handle, return the company with its jobs.

    Returns { handle, name, description, numEmployees, logoUrl, jobs }
      where jobs is [{ id, title, salary, equity }, ...]

    Raises NotFoundError if not found.
    """
    rows = db.query(
        f"""SELECT {COMPANY_COLUMNS}
            FROM companies
            WHERE handle = $1""",
        [handle],
    )
    if not rows:
        raise NotFoundError(f"No company: {handle}")

    company = rows[0]
    company["jobs"] = db.query(
        """SELECT id, title, salary, equity
           FROM jobs
           WHERE company_handle = $1
           ORDER BY id""",
        [handle],
    )
    return company


def update(db: Database, handle: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Partially update a company; only the fields in data change.

    data can include { name, description, numEmployees, logoUrl }

    Returns { handle, name, description, numEmployees, logoUrl }

    Raises EmptyUpdateError for empty data, NotFoundError if not found.
    """
    set_cols, values = sql_for_partial_update(data, JS_TO_SQL)
    handle_idx = f"${len(values) + 1}"

    rows = db.query(
        f"""UPDATE companies
            SET {set_cols}
            WHERE handle = {handle_idx}
            RETURNING {COMPANY_COLUMNS}""",
        [*values, handle],
    )
    if not rows:
        raise NotFoundError(f"No company: {handle}")
    return rows[0]


def remove(db: Database, handle: str) -> None:
    """Delete a company (and, by cascade, its jobs). Raises NotFoundError if not found."""
    rows = db.query(
        """DELETE
           FROM companies
           WHERE handle = $1
           RETURNING handle""",
        [handle],
    )
    if not rows:
        raise NotFoundError(f"No company: {handle}")
    get_logger().info("Company removed", handle=handle)
