"""
Database schema and connection management.

Declares the companies/jobs tables with SQLAlchemy and exposes a small
query client that runs parameterized SQL ($1, $2, ...) and returns rows
as dicts.
"""

import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    String,
    Text,
    create_engine,
    event,
    text,
)
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base

from .logger import get_logger

Base = declarative_base()

_PLACEHOLDER = re.compile(r"\$(\d+)")


class Company(Base):
    """Company that posts jobs."""

    __tablename__ = "companies"

    handle = Column(String(25), primary_key=True)
    name = Column(Text, nullable=False, unique=True)
    num_employees = Column(Integer, CheckConstraint("num_employees >= 0"))
    description = Column(Text)
    logo_url = Column(Text)


class Job(Base):
    """Job posting row."""

    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    salary = Column(Integer, CheckConstraint("salary >= 0"))
    # Exact decimal text, e.g. "0.015"
    equity = Column(Text, CheckConstraint("CAST(equity AS NUMERIC) BETWEEN 0 AND 1"))
    company_handle = Column(
        String(25),
        ForeignKey("companies.handle", ondelete="CASCADE"),
        nullable=False,
    )


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(database_url: str) -> Engine:
    """
    Create an engine for database_url.

    SQLite connections get foreign key enforcement switched on, and the
    parent directory of a file database is created if missing.

    Args:
        database_url: SQLAlchemy URL (e.g. sqlite:///data/jobboard.db)

    Returns:
        SQLAlchemy engine
    """
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(url)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(url)


def init_database(database_url: str) -> Engine:
    """
    Initialize database and create tables.

    Args:
        database_url: SQLAlchemy URL of the database

    Returns:
        The engine used to create the tables
    """
    engine = get_engine(database_url)
    Base.metadata.create_all(engine)
    return engine


def _bind_positional(sql: str, params: Sequence[Any]):
    """Rewrite $n placeholders into named binds understood by text()."""
    bound: Dict[str, Any] = {}

    def replace(match):
        idx = int(match.group(1))
        if idx < 1 or idx > len(params):
            raise IndexError(f"No value supplied for placeholder ${idx}")
        bound[f"p{idx}"] = params[idx - 1]
        return f":p{idx}"

    return _PLACEHOLDER.sub(replace, sql), bound


class Database:
    """Query client over a SQLAlchemy engine.

    Every call runs in its own transaction: committed when the statement
    succeeds, rolled back when it raises. Errors are not caught here.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self.log = get_logger()

    @classmethod
    def from_url(cls, database_url: str) -> "Database":
        return cls(get_engine(database_url))

    def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> List[Dict[str, Any]]:
        """
        Execute a parameterized statement.

        Args:
            sql: SQL text using $1, $2, ... placeholders
            params: Values for the placeholders, in order

        Returns:
            Result rows as dicts keyed by column label; empty for
            statements that return no rows
        """
        statement, bound = _bind_positional(sql, list(params or []))
        self.log.record_query()
        self.log.debug("Executing query", sql=" ".join(statement.split()))
        with self.engine.begin() as conn:
            result = conn.execute(text(statement), bound)
            if not result.returns_rows:
                return []
            return [dict(row) for row in result.mappings()]

    def dispose(self) -> None:
        self.engine.dispose()
