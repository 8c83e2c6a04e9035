# File: app/api/endpoints/__init__.py
"""
API endpoints package for DocNotes.

This package contains the endpoint modules for documents, annotations and
the demo user directory.
"""

from app.api.endpoints import annotations, documents, users

__all__ = ["annotations", "documents", "users"]
