"""
Recipe catalog API package.

Provides the FastAPI application serving users, authors and recipes.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
