"""
Pytest configuration and shared fixtures.
"""

import pytest
from typing import Any, Dict, List

from jobboard.database import Database, init_database
from jobboard.jobs import JobRepository
from jobboard.logger import get_logger, reset_logger


@pytest.fixture(autouse=True)
def quiet_logger(monkeypatch):
    """Fresh, console-only logger for every test."""
    monkeypatch.delenv("JOBBOARD_LOG_DIR", raising=False)
    reset_logger()
    get_logger(enable_console=False, enable_file=False)
    yield
    reset_logger()


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
def db(database_url) -> Database:
    """Empty database with the schema created."""
    init_database(database_url).dispose()
    database = Database.from_url(database_url)
    yield database
    database.dispose()


@pytest.fixture
def seeded_db(db) -> Database:
    """Database holding companies c1-c3 and jobs j1-j4."""
    for handle in ("c1", "c2", "c3"):
        db.query(
            """INSERT INTO companies (handle, name, num_employees, description, logo_url)
               VALUES ($1, $2, $3, $4, $5)""",
            [handle, handle.upper(), 1, f"Desc{handle[-1]}", f"http://{handle}.img"],
        )
    return db


@pytest.fixture
def job_ids(seeded_db) -> Dict[str, int]:
    """Insert j1-j4 and return their generated ids by title."""
    ids = {}
    for title, salary, equity, handle in [
        ("j1", 10, "0.1", "c1"),
        ("j2", 20, "0.2", "c1"),
        ("j3", 30, "0.3", "c1"),
        ("j4", 40, "0", "c2"),
    ]:
        rows = seeded_db.query(
            """INSERT INTO jobs (title, salary, equity, company_handle)
               VALUES ($1, $2, $3, $4)
               RETURNING id""",
            [title, salary, equity, handle],
        )
        ids[title] = rows[0]["id"]
    return ids


@pytest.fixture
def repo(seeded_db) -> JobRepository:
    return JobRepository(seeded_db)


@pytest.fixture
def all_jobs(job_ids) -> List[Dict[str, Any]]:
    """The seeded jobs as the repository returns them, ordered by title."""
    return [
        {"id": job_ids["j1"], "title": "j1", "salary": 10, "equity": "0.1", "companyHandle": "c1"},
        {"id": job_ids["j2"], "title": "j2", "salary": 20, "equity": "0.2", "companyHandle": "c1"},
        {"id": job_ids["j3"], "title": "j3", "salary": 30, "equity": "0.3", "companyHandle": "c1"},
        {"id": job_ids["j4"], "title": "j4", "salary": 40, "equity": "0", "companyHandle": "c2"},
    ]
