"""
Pytest configuration and shared fixtures.
"""

import pytest
from typing import Any, Dict, List, Sequence

from jobly.database import Database
from jobly.logger import get_logger, reset_logger


class RecordingDatabase:
    """Stands in for Database; remembers statements and returns canned rows."""

    def __init__(self, rows: List[Dict[str, Any]] = None):
        self.rows = rows or []
        self.calls = []

    def query(self, sql: str, values: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        self.calls.append((" ".join(sql.split()), list(values)))
        return self.rows


@pytest.fixture(autouse=True)
def quiet_logger():
    """Install a global logger that writes nowhere, so no logs/ dir appears."""
    reset_logger()
    logger = get_logger(name="jobly-test", enable_file=False, enable_console=False)
    yield logger
    reset_logger()


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
def db(db_url) -> Database:
    """Empty database with the schema in place."""
    database = Database(db_url)
    database.init_schema()
    yield database
    database.close()


@pytest.fixture
def seeded_db(db) -> Database:
    """Three companies and three jobs."""
    db.query(
        """INSERT INTO companies (handle, name, num_employees, description, logo_url)
           VALUES ('c1', 'C1', 1, 'Desc1', 'http://c1.img'),
                  ('c2', 'C2', 2, 'Desc2', 'http://c2.img'),
                  ('c3', 'C3', 3, 'Desc3', 'http://c3.img')"""
    )
    db.query(
        """INSERT INTO jobs (title, salary, equity, company_handle)
           VALUES ('Software Engineer', 70000, '0', 'c1'),
                  ('Sous Chef', 60000, '0', 'c2'),
                  ('Data Analyst', 90000, '0.05', 'c1')"""
    )
    return db


@pytest.fixture
def recording_db() -> RecordingDatabase:
    return RecordingDatabase()


@pytest.fixture
def new_company() -> Dict[str, Any]:
    return {
        "handle": "new",
        "name": "New",
        "description": "New Description",
        "numEmployees": 1,
        "logoUrl": "http://new.img",
    }


@pytest.fixture
def new_job() -> Dict[str, Any]:
    return {
        "title": "Janitor",
        "salary": 50000,
        "equity": "0",
        "companyHandle": "c1",
    }
