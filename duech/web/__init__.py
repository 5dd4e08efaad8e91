"""
Web module - Flask JSON API over the search, editorial, and auth modules.
"""
from .app import create_app

__all__ = ["create_app"]
