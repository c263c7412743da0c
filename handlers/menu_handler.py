"""
handlers/menu_handler.py
-------------------------
Interactive console menu for the project tracker.
Reads selections from the user and delegates all work to ProjectService.
"""

import os
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Callable, Optional

import config
from models.project import Project
from services.export_service import ExportService
from services.project_service import ProjectService
from utils.logger import get_logger

logger = get_logger(__name__)

OPERATIONS = [
    "1) Add a project",
    "2) List projects",
    "3) Select a project",
    "4) Export projects to CSV",
    "5) Export projects to Excel",
]


class InvalidInputError(ValueError):
    """The user typed something that is not a valid number."""


class ProjectsMenu:
    """
    The menu loop: print the operations, read a selection, run it.

    Input and output are injectable so the loop can be driven from tests.
    """

    def __init__(
        self,
        service: ProjectService,
        export_service: Optional[ExportService] = None,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
        export_dir: str = config.EXPORT_DIR,
    ):
        self.service = service
        self.export_service = export_service or ExportService(service)
        self.input_fn = input_fn
        self.output_fn = output_fn
        self.export_dir = export_dir
        self.cur_project: Optional[Project] = None

    def run(self) -> None:
        """Process selections until the user enters a blank line."""
        done = False
        while not done:
            try:
                selection = self._get_user_selection()
                if selection == -1:
                    done = self._exit_menu()
                elif selection == 1:
                    self.create_project()
                elif selection == 2:
                    self.list_projects()
                elif selection == 3:
                    self.select_project()
                elif selection == 4:
                    self.export_projects()
                elif selection == 5:
                    self.export_projects(excel=True)
                else:
                    self.output_fn(f"\n{selection} is not valid. Try again.")
            except EOFError:
                done = self._exit_menu()
            except Exception as e:
                logger.error(f"Menu operation failed: {e}")
                self.output_fn(f"\nError: {e} Try again.")

    # ── OPERATIONS ────────────────────────────────────────

    def create_project(self) -> Project:
        project = Project(
            project_name=self._get_string_input("Enter the project name"),
            estimated_hours=self._get_decimal_input("Enter the estimated hours"),
            actual_hours=self._get_decimal_input("Enter the actual hours"),
            difficulty=self._get_int_input("Enter the project difficulty (1-5)"),
            notes=self._get_string_input("Enter the project notes"),
        )
        db_project = self.service.add_project(project)
        self.output_fn(f"You added this project:\n{db_project}")
        return db_project

    def list_projects(self) -> list[Project]:
        projects = self.service.fetch_all_projects()
        self.output_fn("\nProjects:")
        for project in projects:
            self.output_fn(f"   {project.project_id}: {project.project_name}")
        return projects

    def select_project(self) -> None:
        self.list_projects()
        project_id = self._get_int_input("Enter a project ID to select a project")
        self.cur_project = self.service.fetch_project_by_id(project_id)

    def export_projects(self, excel: bool = False) -> str:
        if excel:
            buffer = self.export_service.export_projects_excel()
            filename = "projects.xlsx"
        else:
            buffer = self.export_service.export_projects_csv()
            filename = "projects.csv"
        path = os.path.join(self.export_dir, filename)
        with open(path, "wb") as f:
            f.write(buffer.getvalue())
        self.output_fn(f"Projects exported to {path}")
        return path

    # ── INPUT ─────────────────────────────────────────────

    def _get_user_selection(self) -> int:
        self._print_operations()
        selection = self._get_int_input("\nEnter a menu selection")
        return -1 if selection is None else selection

    def _print_operations(self) -> None:
        self.output_fn("\nThese are the available selections. Press Enter to quit:")
        for line in OPERATIONS:
            self.output_fn(f"   {line}")

        if self.cur_project is None:
            self.output_fn("\nYou are not working with a project.")
        else:
            self.output_fn(f"\nYou are working with project: {self.cur_project}")

    def _get_int_input(self, prompt: str) -> Optional[int]:
        text = self._get_string_input(prompt)
        if text is None:
            return None
        try:
            return int(text)
        except ValueError:
            raise InvalidInputError(f"{text} is not a valid number.")

    def _get_decimal_input(self, prompt: str) -> Optional[Decimal]:
        text = self._get_string_input(prompt)
        if text is None:
            return None
        try:
            value = Decimal(text)
            if not value.is_finite():
                raise InvalidOperation(text)
            return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        except InvalidOperation:
            raise InvalidInputError(f"{text} is not a valid number.")

    def _get_string_input(self, prompt: str) -> Optional[str]:
        line = self.input_fn(f"{prompt}: ")
        return line.strip() if line.strip() else None

    def _exit_menu(self) -> bool:
        self.output_fn("Exiting the menu...")
        return True
