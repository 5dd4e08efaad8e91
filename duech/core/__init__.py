"""
Core module - Configuration, storage, schemas, and vocabularies.
"""
from .config import Settings, get_settings
from .database import Database
from .errors import (
    DuechError,
    ValidationError,
    AuthenticationError,
    PermissionDeniedError,
    NotFoundError,
    WordNotFoundError,
    DuplicateWordError,
    ConflictError,
)
from .schemas import Example, Meaning, WordPayload, WordNote
from .vocabulary import WordStatus, Role

__all__ = [
    "Settings",
    "get_settings",
    "Database",
    "DuechError",
    "ValidationError",
    "AuthenticationError",
    "PermissionDeniedError",
    "NotFoundError",
    "WordNotFoundError",
    "DuplicateWordError",
    "ConflictError",
    "Example",
    "Meaning",
    "WordPayload",
    "WordNote",
    "WordStatus",
    "Role",
]
