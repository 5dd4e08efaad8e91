"""
Domain exceptions shared by the search, editorial and auth modules.

The web layer maps each class to an HTTP status code.
"""


class DuechError(Exception):
    """Base class for application errors."""
    status_code = 500


class ValidationError(DuechError):
    """Rejected input (bad payload, weak password, malformed e-mail)."""
    status_code = 400


class AuthenticationError(DuechError):
    """Missing, invalid or expired credentials."""
    status_code = 401


class PermissionDeniedError(DuechError):
    """Authenticated, but the role does not allow the action."""
    status_code = 403


class NotFoundError(DuechError):
    status_code = 404


class WordNotFoundError(NotFoundError):
    """No word exists with the given lemma."""

    def __init__(self, lemma: str):
        super().__init__(f"Word not found: {lemma}")
        self.lemma = lemma


class DuplicateWordError(DuechError):
    """A word with the same lemma already exists."""
    status_code = 409

    def __init__(self, lemma: str):
        super().__init__(f'Ya existe una palabra con el lema "{lemma}"')
        self.lemma = lemma


class ConflictError(DuechError):
    """Unique constraint on users (username or e-mail) would be violated."""
    status_code = 409
