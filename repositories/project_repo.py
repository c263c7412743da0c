"""
repositories/project_repo.py
-----------------------------
Data access layer for projects and their child rows.
All SQL queries touching `project`, `material`, `step`, `category`
and `project_category` live here.

Every public method opens its own connection and runs inside exactly one
transaction; nothing is shared between calls.
"""

from decimal import Decimal
from typing import Optional, Type, TypeVar

from db.connection import ConnectionProvider
from db.exceptions import DbException
from db.statement import StatementHelper
from db.transaction import unit_of_work
from models.category import Category
from models.material import Material
from models.project import Project
from models.step import Step
from utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

CATEGORY_TABLE = "category"
MATERIAL_TABLE = "material"
PROJECT_TABLE = "project"
PROJECT_CATEGORY_TABLE = "project_category"
STEP_TABLE = "step"


class ProjectRepository:
    """Repository for the project aggregate."""

    def __init__(self, provider: ConnectionProvider, statements: Optional[StatementHelper] = None):
        self.provider = provider
        self.statements = statements or StatementHelper(provider)

    # ── CREATE ────────────────────────────────────────────

    def insert_project(self, project: Project) -> Project:
        """
        Insert a new project row.

        Args:
            project: The Project to persist. Children are not written.

        Returns:
            The same Project with its `project_id` populated.

        Raises:
            DataAccessError: The insert failed and was rolled back.
            TypeMismatchError: A field has the wrong type for its column.
        """
        sql = f"""
            INSERT INTO {PROJECT_TABLE}
                (project_name, estimated_hours, actual_hours, difficulty, notes)
            VALUES (?, ?, ?, ?, ?)
        """
        stmt = self.statements.prepare(sql)
        try:
            with self.provider.connection() as conn, unit_of_work(self.provider, conn) as tx:
                self.statements.bind_parameter(stmt, 1, project.project_name, str)
                self.statements.bind_parameter(stmt, 2, project.estimated_hours, Decimal)
                self.statements.bind_parameter(stmt, 3, project.actual_hours, Decimal)
                self.statements.bind_parameter(stmt, 4, project.difficulty, int)
                self.statements.bind_parameter(stmt, 5, project.notes, str)
                with self.provider.cursor(conn) as cur:
                    self.statements.execute(cur, stmt)
                project_id = self.statements.last_insert_id(conn, PROJECT_TABLE)
                tx.commit()
        except DbException as e:
            logger.error(f"Failed to add project '{project.project_name}': {e}")
            raise

        project.project_id = project_id
        logger.info(f"Added project #{project.project_id} '{project.project_name}'")
        return project

    # ── READ ──────────────────────────────────────────────

    def fetch_all_projects(self) -> list[Project]:
        """
        Fetch every project, ordered by name ascending.

        Collation follows the backend's default text ordering.
        Child collections are left empty.
        """
        sql = f"SELECT * FROM {PROJECT_TABLE} ORDER BY project_name"
        with self.provider.connection() as conn, unit_of_work(self.provider, conn):
            return self._fetch_list(conn, sql, Project)

    def fetch_project_by_id(self, project_id: int) -> Optional[Project]:
        """
        Fetch one project with its materials, steps and categories.

        Args:
            project_id: Primary key.

        Returns:
            A fully hydrated Project, or None if no row matches.
        """
        sql = f"SELECT * FROM {PROJECT_TABLE} WHERE project_id = ?"
        with self.provider.connection() as conn, unit_of_work(self.provider, conn):
            found = self._fetch_list(conn, sql, Project, project_id)
            if not found:
                return None

            project = found[0]
            project.materials.extend(self._fetch_materials_for_project(conn, project_id))
            project.steps.extend(self._fetch_steps_for_project(conn, project_id))
            project.categories.extend(self._fetch_categories_for_project(conn, project_id))
            return project

    # ── CHILDREN ──────────────────────────────────────────

    def _fetch_materials_for_project(self, conn, project_id: int) -> list[Material]:
        sql = f"SELECT * FROM {MATERIAL_TABLE} WHERE project_id = ? ORDER BY material_id"
        return self._fetch_list(conn, sql, Material, project_id)

    def _fetch_steps_for_project(self, conn, project_id: int) -> list[Step]:
        sql = f"SELECT * FROM {STEP_TABLE} WHERE project_id = ? ORDER BY step_order, step_id"
        return self._fetch_list(conn, sql, Step, project_id)

    def _fetch_categories_for_project(self, conn, project_id: int) -> list[Category]:
        sql = f"""
            SELECT c.*
            FROM {CATEGORY_TABLE} c
            JOIN {PROJECT_CATEGORY_TABLE} pc USING (category_id)
            WHERE pc.project_id = ?
            ORDER BY c.category_name
        """
        return self._fetch_list(conn, sql, Category, project_id)

    # ── HELPERS ───────────────────────────────────────────

    def _fetch_list(self, conn, sql: str, kind: Type[T], project_id: Optional[int] = None) -> list[T]:
        """Run a query with an optional project id parameter and map every row."""
        stmt = self.statements.prepare(sql)
        if stmt.count:
            self.statements.bind_parameter(stmt, 1, project_id, int)
        with self.provider.cursor(conn) as cur:
            self.statements.execute(cur, stmt)
            return [self.statements.extract_row(r, kind) for r in cur.fetchall()]
