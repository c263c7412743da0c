"""
models/step.py
--------------
Domain model for a single instruction in a project.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Step:
    """One ordered instruction; ``step_order`` is plain data, not a constraint."""
    step_text: str
    step_order: int
    project_id: Optional[int] = None
    step_id: Optional[int] = None

    def __str__(self) -> str:
        return f"ID={self.step_id}, stepText={self.step_text}"
