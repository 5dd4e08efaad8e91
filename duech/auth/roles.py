"""
Which roles a user may hand out to other users.
"""
from ..core.errors import PermissionDeniedError
from ..core.vocabulary import ADMIN_ROLES, Role

_ALLOWED_ROLES: dict[str, list[str]] = {
    Role.SUPERADMIN.value: [
        Role.LEXICOGRAPHER.value,
        Role.EDITOR.value,
        Role.ADMIN.value,
        Role.SUPERADMIN.value,
    ],
    Role.ADMIN.value: [Role.LEXICOGRAPHER.value, Role.ADMIN.value],
}


def is_admin(role: str | None) -> bool:
    return role in ADMIN_ROLES


def get_allowed_roles(user_role: str | None) -> list[str]:
    """Roles ``user_role`` may assign when creating or updating users."""
    return list(_ALLOWED_ROLES.get(user_role or "", []))


def validate_role_assignment(current_role: str | None, target_role: str):
    """Raise PermissionDeniedError unless ``current_role`` may assign ``target_role``."""
    allowed = get_allowed_roles(current_role)
    if target_role not in allowed:
        raise PermissionDeniedError(
            f"You are not authorized to assign role '{target_role}'. "
            f"Allowed roles: {', '.join(allowed)}"
        )
