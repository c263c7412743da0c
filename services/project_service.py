"""
services/project_service.py
----------------------------
Business-facing entry point for projects.
Sits between the console menu and the ProjectRepository.
"""

from models.project import Project
from repositories.project_repo import ProjectRepository
from utils.logger import get_logger

logger = get_logger(__name__)


class ProjectNotFoundError(LookupError):
    """No project exists with the requested ID."""


class ProjectService:
    """
    Handles project operations for the presentation layer.

    The repository reports a missing project as ``None``; this is the
    layer that turns that into an error the user can see.
    """

    def __init__(self, repo: ProjectRepository):
        self.repo = repo

    def add_project(self, project: Project) -> Project:
        """Persist a new project and return it with its ID set."""
        return self.repo.insert_project(project)

    def fetch_all_projects(self) -> list[Project]:
        """Return all projects ordered by name."""
        return self.repo.fetch_all_projects()

    def fetch_project_by_id(self, project_id: int) -> Project:
        """
        Fetch one project with its materials, steps and categories.

        Raises:
            ProjectNotFoundError: If no project has this ID.
        """
        project = self.repo.fetch_project_by_id(project_id)
        if project is None:
            logger.warning(f"Project #{project_id} requested but not found")
            raise ProjectNotFoundError(f"Project with ID={project_id} does not exist.")
        return project
