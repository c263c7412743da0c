"""Shared pytest fixtures.

Every test gets its own SQLite database file under ``tmp_path`` with the
schema already created, so no running PostgreSQL server is needed.
"""

from __future__ import annotations

import pathlib
import sqlite3
from decimal import Decimal

import pytest

from db.connection import SQLiteConnectionProvider
from db.init_db import create_tables
from db.statement import StatementHelper
from repositories.project_repo import ProjectRepository
from services.project_service import ProjectService


@pytest.fixture
def db_path(tmp_path: pathlib.Path) -> pathlib.Path:
    return tmp_path / "projects.db"


@pytest.fixture
def provider(db_path: pathlib.Path) -> SQLiteConnectionProvider:
    provider = SQLiteConnectionProvider(str(db_path))
    create_tables(provider)
    return provider


@pytest.fixture
def statements(provider: SQLiteConnectionProvider) -> StatementHelper:
    return StatementHelper(provider)


@pytest.fixture
def repo(provider: SQLiteConnectionProvider) -> ProjectRepository:
    return ProjectRepository(provider)


@pytest.fixture
def service(repo: ProjectRepository) -> ProjectService:
    return ProjectService(repo)


@pytest.fixture
def raw_conn(db_path: pathlib.Path, provider: SQLiteConnectionProvider):
    """A plain sqlite3 connection for seeding and inspecting rows directly."""
    conn = sqlite3.connect(str(db_path))
    conn.execute("PRAGMA foreign_keys=ON;")
    yield conn
    conn.close()


def seed_children(conn: sqlite3.Connection, project_id: int) -> None:
    """Attach two materials, two steps and two categories to a project."""
    conn.executemany(
        "INSERT INTO material (project_id, material_name, num_required, cost) VALUES (?, ?, ?, ?)",
        [
            (project_id, "2x4 lumber", 10, str(Decimal("4.25"))),
            (project_id, "Deck screws", 200, str(Decimal("19.99"))),
        ],
    )
    conn.executemany(
        "INSERT INTO step (project_id, step_text, step_order) VALUES (?, ?, ?)",
        [
            (project_id, "Attach joists", 2),
            (project_id, "Set the posts", 1),
        ],
    )
    conn.executemany(
        "INSERT INTO category (category_name) VALUES (?)",
        [("Outdoor",), ("Carpentry",)],
    )
    conn.execute(
        "INSERT INTO project_category (project_id, category_id) "
        "SELECT ?, category_id FROM category",
        (project_id,),
    )
    conn.commit()


@pytest.fixture
def seed(raw_conn: sqlite3.Connection):
    """Callable that seeds child rows for a project ID."""
    return lambda project_id: seed_children(raw_conn, project_id)
