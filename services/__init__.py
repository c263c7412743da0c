"""
services/ - Business Logic Layer
================================
Services sit between the console handlers and the repositories.
"""
