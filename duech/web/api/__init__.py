"""
API blueprints.
"""
from . import auth, editorial, search, sources, users, words

BLUEPRINTS = (
    search.bp,
    words.bp,
    sources.bp,
    editorial.bp,
    auth.bp,
    users.bp,
)

__all__ = ["BLUEPRINTS"]
