"""
services/export_service.py
---------------------------
Generates CSV and Excel exports of the project list.
"""

import io

import pandas as pd

from models.project import Project
from services.project_service import ProjectService
from utils.logger import get_logger

logger = get_logger(__name__)

COLUMNS = ["ID", "Name", "Estimated Hours", "Actual Hours", "Difficulty", "Notes"]


class ExportService:
    """Generates downloadable project reports in CSV and Excel formats."""

    def __init__(self, service: ProjectService):
        self.service = service

    def export_projects_csv(self) -> io.BytesIO:
        """
        Export all projects as a CSV file.

        Returns:
            A BytesIO buffer containing the CSV data.
        """
        df = self._frame(self.service.fetch_all_projects())
        buffer = io.BytesIO()
        df.to_csv(buffer, index=False, encoding="utf-8-sig")
        buffer.seek(0)
        logger.info(f"Exported {len(df)} projects as CSV")
        return buffer

    def export_projects_excel(self) -> io.BytesIO:
        """
        Export all projects as an Excel (.xlsx) file.

        A second "Summary" sheet totals hours per difficulty level
        when there is at least one project.

        Returns:
            A BytesIO buffer containing the Excel data.
        """
        df = self._frame(self.service.fetch_all_projects())

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Projects", index=False)

            if not df.empty:
                summary = (
                    df.groupby("Difficulty", dropna=False)[["Estimated Hours", "Actual Hours"]]
                    .sum()
                    .reset_index()
                )
                summary.to_excel(writer, sheet_name="Summary", index=False)

        buffer.seek(0)
        logger.info(f"Exported {len(df)} projects as Excel")
        return buffer

    @staticmethod
    def _frame(projects: list[Project]) -> pd.DataFrame:
        data = [
            {
                "ID": p.project_id,
                "Name": p.project_name,
                "Estimated Hours": float(p.estimated_hours) if p.estimated_hours is not None else None,
                "Actual Hours": float(p.actual_hours) if p.actual_hours is not None else None,
                "Difficulty": p.difficulty,
                "Notes": p.notes or "",
            }
            for p in projects
        ]
        return pd.DataFrame(data, columns=COLUMNS)
