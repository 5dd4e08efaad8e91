"""
Auth module - Users, sessions, roles, and account administration.
"""
from .users import User, UserStore
from .sessions import SessionUser, SessionManager
from .roles import get_allowed_roles, validate_role_assignment, is_admin
from .accounts import (
    AccountService,
    generate_password,
    generate_reset_token,
    validate_password,
)

__all__ = [
    "User",
    "UserStore",
    "SessionUser",
    "SessionManager",
    "get_allowed_roles",
    "validate_role_assignment",
    "is_admin",
    "AccountService",
    "generate_password",
    "generate_reset_token",
    "validate_password",
]
