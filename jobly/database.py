"""
Database schema and query execution.

Tables are declared with SQLAlchemy. Statements assembled from SQL
fragments carry positional ``$k`` placeholders and run through
``Database.query``, which binds ``values[k - 1]`` to each ``$k``.
"""

import re
from typing import Any, Dict, List, Sequence

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    create_engine,
    event,
    text,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base

from .logger import get_logger

Base = declarative_base()

_PLACEHOLDER = re.compile(r"\$(\d+)")


class Company(Base):
    """Company that posts jobs."""

    __tablename__ = "companies"

    handle = Column(String(25), primary_key=True)
    name = Column(Text, unique=True, nullable=False)
    num_employees = Column(Integer, CheckConstraint("num_employees >= 0"))
    description = Column(Text, nullable=False)
    logo_url = Column(Text)


class Job(Base):
    """Job posting, owned by a company."""

    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    salary = Column(Integer, CheckConstraint("salary >= 0"))
    equity = Column(Numeric, CheckConstraint("equity <= 1.0"))
    company_handle = Column(
        String(25),
        ForeignKey("companies.handle", ondelete="CASCADE"),
        nullable=False,
    )


def bind_positional(sql: str) -> str:
    """Rewrite ``$1, $2, ...`` as named binds ``:p1, :p2, ...``."""
    return _PLACEHOLDER.sub(lambda m: f":p{m.group(1)}", sql)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Executes parameterized SQL text against a SQLAlchemy engine."""

    def __init__(self, url: str, echo: bool = False):
        """
        Args:
            url: SQLAlchemy database URL, e.g. postgresql:///jobly
            echo: Echo every statement SQLAlchemy emits
        """
        self.url = url
        self.engine = create_engine(url, echo=echo)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        self.logger = get_logger()

    def init_schema(self) -> None:
        """Create the companies and jobs tables if they do not exist."""
        Base.metadata.create_all(self.engine)

    def drop_schema(self) -> None:
        Base.metadata.drop_all(self.engine)

    def close(self) -> None:
        self.engine.dispose()

    def query(self, sql: str, values: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """
        Run one statement in its own transaction.

        Args:
            sql: Statement text using ``$k`` placeholders
            values: Values for the placeholders, in order

        Returns:
            Result rows as dicts; empty list for statements without rows.

        Raises:
            SQLAlchemyError: Whatever the database rejected, after logging it.
        """
        params = {f"p{idx}": value for idx, value in enumerate(values, start=1)}
        statement = text(bind_positional(sql))
        flat_sql = " ".join(sql.split())

        try:
            with self.engine.begin() as conn:
                result = conn.execute(statement, params)
                rows = [dict(row._mapping) for row in result] if result.returns_rows else []
        except SQLAlchemyError as e:
            self.logger.record_query_failure(type(e).__name__)
            self.logger.error("Query failed", sql=flat_sql, error=str(e))
            raise

        self.logger.record_query(len(rows))
        self.logger.debug("Query executed", sql=flat_sql, params=len(values), rows=len(rows))
        return rows
