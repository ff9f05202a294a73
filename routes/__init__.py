"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.imports import router as imports_router
from routes.templates import router as templates_router

__all__ = [
    "imports_router",
    "templates_router",
]
