"""API routers for Docflow."""

from . import documents
from . import health

__all__ = [
    "documents",
    "health",
]
