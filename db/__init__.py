"""
db/ - Database Layer
====================
Handles relational connections, parameter binding, row mapping,
transactions, and schema initialization.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
