# File: app/api/__init__.py
"""
API package for DocNotes.

This package contains the API layer for the DocNotes application,
including endpoints, dependencies, and routing configuration.
"""

from app.api import deps, endpoints
from app.api.api import api_router

__all__ = ["deps", "endpoints", "api_router"]
