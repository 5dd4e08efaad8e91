"""
Editorial workflow rules: which statuses and assignees a role may pick.
"""
import logging

from ..core.errors import PermissionDeniedError
from ..core.vocabulary import (
    ADMIN_ROLES,
    DICTIONARIES,
    GRAMMATICAL_CATEGORIES,
    MARKER_GROUPS,
    ORIGINS,
    STATUS_LABELS,
    Role,
    WordStatus,
)

logger = logging.getLogger(__name__)

_ROLE_STATUSES: dict[str, tuple[WordStatus, ...]] = {
    Role.COORDINATOR.value: (WordStatus.PREREDACTED, WordStatus.REVIEWED),
    Role.LEXICOGRAPHER.value: (WordStatus.PREREDACTED, WordStatus.REDACTED),
}

_ASSIGNABLE_ROLES = {Role.LEXICOGRAPHER.value, Role.COORDINATOR.value}


def status_options() -> list[dict]:
    """Every workflow status with its display label, in workflow order."""
    return [{"value": s.value, "label": STATUS_LABELS[s.value]} for s in WordStatus]


def _options(labels: dict[str, str]) -> list[dict]:
    return [{"value": code, "label": label} for code, label in labels.items()]


def vocabulary_options() -> dict:
    """
    Controlled vocabularies for the meaning editor as {value, label} options.

    Markers are keyed by their payload name and carry the group label.
    """
    return {
        "categories": _options(GRAMMATICAL_CATEGORIES),
        "origins": _options(ORIGINS),
        "dictionaries": _options(DICTIONARIES),
        "markers": {
            group.key: {"label": group.label, "options": _options(group.labels)}
            for group in MARKER_GROUPS
        },
    }


def status_options_for_role(role: str | None) -> list[dict]:
    """Statuses ``role`` may assign, in workflow order."""
    if role in ADMIN_ROLES:
        return [o for o in status_options() if o["value"] != WordStatus.IMPORTED.value]
    allowed = {s.value for s in _ROLE_STATUSES.get(role or "", ())}
    return [o for o in status_options() if o["value"] in allowed]


def can_assign_status(role: str | None, status: str) -> bool:
    return any(o["value"] == status for o in status_options_for_role(role))


def ensure_can_assign_status(role: str | None, status: str):
    """Raise PermissionDeniedError unless ``role`` may set ``status``."""
    if not can_assign_status(role, status):
        logger.warning(f"Role {role!r} may not set status {status!r}")
        raise PermissionDeniedError(f"El rol {role or 'anónimo'} no puede asignar el estado '{status}'")


def assignable_users(users: list[dict], current_user: dict | None) -> list[dict]:
    """
    Users the current user may assign a word to, as {value, label} options.

    Admins and coordinators pick among lexicographers and coordinators;
    a lexicographer may only pick themself.
    """
    if not current_user:
        return []
    role = current_user.get("role")

    if role in ADMIN_ROLES or role == Role.COORDINATOR.value:
        pool = [u for u in users if u.get("role") in _ASSIGNABLE_ROLES]
    elif role == Role.LEXICOGRAPHER.value:
        pool = [u for u in users if u.get("username") == current_user.get("username")]
    else:
        pool = []
    return [{"value": str(u["id"]), "label": u["username"]} for u in pool]
