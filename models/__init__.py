"""
models/ - Domain Models
=======================
Plain dataclasses for projects and their materials, steps and categories.
Field names match column names so rows map onto them directly.
"""
