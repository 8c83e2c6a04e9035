# File: app/db/__init__.py
"""
Database package for DocNotes.

Exposes the `Database` handle (engine plus session factory) and the ORM
models registered on the declarative `Base`.
"""

from app.db.models import Base, Document, Annotation, AnnotationVisibility
from app.db.session import Database

__all__ = [
    "Base",
    "Database",
    "Document",
    "Annotation",
    "AnnotationVisibility",
]
