"""
Initializes the models package for SQLAlchemy declarative base.

This file imports all model classes into the `app.db.models` namespace so
that SQLAlchemy's metadata is populated with all table definitions when
`Base.metadata.create_all()` is called.
"""

from app.db.models.base import Base
from app.db.models.document import Document
from app.db.models.annotation import Annotation, AnnotationVisibility

__all__ = [
    "Base",
    "Document",
    "Annotation",
    "AnnotationVisibility",
]
