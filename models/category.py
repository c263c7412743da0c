"""
models/category.py
------------------
Domain model for a project category.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Category:
    category_name: str
    category_id: Optional[int] = None

    def __str__(self) -> str:
        return f"ID={self.category_id}, categoryName={self.category_name}"
