"""
models/project.py
-----------------
Domain model for a tracked project and its child collections.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from models.category import Category
from models.material import Material
from models.step import Step


def relation():
    """A child collection: filled by the repository, never read from a row."""
    return field(default_factory=list, metadata={"relation": True})


@dataclass
class Project:
    """
    Represents a single project.

    Attributes:
        project_id: Database primary key (None until inserted).
        project_name: Display name.
        estimated_hours: Estimate, fixed-point with 2 fraction digits.
        actual_hours: Time actually spent, fixed-point with 2 fraction digits.
        difficulty: Expected to be 1-5; not enforced here.
        notes: Free text.
        materials: Materials attached to the project.
        steps: Instructions attached to the project.
        categories: Categories linked through project_category.
    """
    project_name: str
    estimated_hours: Optional[Decimal] = None
    actual_hours: Optional[Decimal] = None
    difficulty: Optional[int] = None
    notes: Optional[str] = None
    project_id: Optional[int] = None
    materials: list[Material] = relation()
    steps: list[Step] = relation()
    categories: list[Category] = relation()

    def __str__(self) -> str:
        lines = [
            f"\n   ID={self.project_id}",
            f"   name={self.project_name}",
            f"   estimatedHours={self.estimated_hours}",
            f"   actualHours={self.actual_hours}",
            f"   difficulty={self.difficulty}",
            f"   notes={self.notes}",
        ]
        lines.append("\n   Materials:")
        lines.extend(f"      {m}" for m in self.materials)
        lines.append("\n   Steps:")
        lines.extend(f"      {s}" for s in self.steps)
        lines.append("\n   Categories:")
        lines.extend(f"      {c}" for c in self.categories)
        return "\n".join(lines)
