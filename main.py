"""
main.py
-------
Entry point for the project tracker console application.

Responsibilities:
    - Build the connection provider for the configured backend.
    - Create the schema when AUTO_INIT_SCHEMA is enabled.
    - Wire repository, services and menu together and run the menu loop.
"""

from config import AUTO_INIT_SCHEMA
from db.connection import get_provider
from db.init_db import create_tables
from handlers.menu_handler import ProjectsMenu
from repositories.project_repo import ProjectRepository
from services.export_service import ExportService
from services.project_service import ProjectService
from utils.logger import get_logger

logger = get_logger(__name__)


def main() -> None:
    """Initialize and run the menu."""

    # ── 1. Database setup ─────────────────────────────────
    provider = get_provider()
    logger.info(f"Using {provider.name} backend")
    if AUTO_INIT_SCHEMA:
        create_tables(provider)

    # ── 2. Wiring ─────────────────────────────────────────
    service = ProjectService(ProjectRepository(provider))
    menu = ProjectsMenu(service, ExportService(service))

    # ── 3. Run ────────────────────────────────────────────
    menu.run()
    logger.info("Project tracker stopped.")


if __name__ == "__main__":
    main()
