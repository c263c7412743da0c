"""
models/material.py
------------------
Domain model for a material needed by a project.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass
class Material:
    """
    Something to buy or gather for one project.

    Attributes:
        material_id: Database primary key (None for new records).
        project_id: Owning project.
        material_name: What the material is.
        num_required: How many are needed.
        cost: Cost, fixed-point with 2 fraction digits.
    """
    material_name: str
    project_id: Optional[int] = None
    num_required: Optional[int] = None
    cost: Optional[Decimal] = None
    material_id: Optional[int] = None

    def __str__(self) -> str:
        return f"ID={self.material_id}, materialName={self.material_name}, numRequired={self.num_required}, cost={self.cost}"
