"""
Editorial module - Word mutations, notes, and workflow rules.
"""
from .mutations import WordEditor, UNSET, parse_word, resolve_user_id
from .workflow import (
    status_options,
    status_options_for_role,
    can_assign_status,
    ensure_can_assign_status,
    assignable_users,
    vocabulary_options,
)

__all__ = [
    "WordEditor",
    "UNSET",
    "parse_word",
    "resolve_user_id",
    "status_options",
    "status_options_for_role",
    "can_assign_status",
    "ensure_can_assign_status",
    "assignable_users",
    "vocabulary_options",
]
