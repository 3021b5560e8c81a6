"""
Bookmarker API

FastAPI-based REST API for PDF outline editing.
"""

from .app import create_app, BookmarkerAPI

__all__ = ["create_app", "BookmarkerAPI"]
