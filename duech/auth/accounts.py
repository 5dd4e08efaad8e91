"""
Administrative account actions and password changes.

Every admin action takes the acting SessionUser and enforces the
role rules before touching storage. New accounts get a random
password and a reset token so the user can pick their own.
"""
import logging
import re
import secrets

from werkzeug.security import generate_password_hash

from ..core.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from .roles import is_admin, validate_role_assignment
from .sessions import SessionUser
from .users import User, UserStore

logger = logging.getLogger(__name__)

PASSWORD_CHARSET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789!@#$%&*"

_PASSWORD_RULES = (
    (re.compile(r"[a-z]"), "La contraseña debe incluir al menos una letra minúscula"),
    (re.compile(r"[A-Z]"), "La contraseña debe incluir al menos una letra mayúscula"),
    (re.compile(r"[0-9]"), "La contraseña debe incluir al menos un número"),
)


def generate_password(length: int = 12) -> str:
    return "".join(secrets.choice(PASSWORD_CHARSET) for _ in range(length))


def generate_reset_token() -> str:
    return secrets.token_hex(32)


def validate_password(password: str):
    """Raise ValidationError unless the password meets the strength rules."""
    if len(password) < 8:
        raise ValidationError("La contraseña debe tener al menos 8 caracteres")
    for pattern, message in _PASSWORD_RULES:
        if not pattern.search(password):
            raise ValidationError(message)


def _clean_username(username) -> str:
    if not isinstance(username, str) or len(username.strip()) < 3:
        raise ValidationError("Username must be at least 3 characters long")
    return username.strip().lower()


def _clean_email(email) -> str:
    if not isinstance(email, str) or "@" not in email:
        raise ValidationError("Invalid email address")
    return email.strip().lower()


class AccountService:
    """User administration for admins and superadmins."""

    def __init__(self, store: UserStore):
        self.store = store

    @staticmethod
    def require_admin(actor: SessionUser | None) -> SessionUser:
        if actor is None:
            raise AuthenticationError("Unauthorized")
        if not is_admin(actor.role):
            raise PermissionDeniedError("Forbidden: Admin role required")
        return actor

    def list_users(self, actor: SessionUser | None) -> list[User]:
        self.require_admin(actor)
        return self.store.list_users()

    def get_user(self, actor: SessionUser | None, user_id: int) -> User:
        self.require_admin(actor)
        user = self.store.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def create_user(
        self,
        actor: SessionUser | None,
        username: str,
        email: str,
        role: str,
    ) -> tuple[User, str, str]:
        """
        Create an account with a generated password.

        Returns:
            (user, generated password, password-reset token)

        Raises:
            PermissionDeniedError: The actor may not assign ``role``
            ValidationError: Missing role, short username or malformed e-mail
            ConflictError: Username or e-mail already taken
        """
        actor = self.require_admin(actor)
        if not isinstance(role, str) or not role.strip():
            raise ValidationError("Role is required")
        validate_role_assignment(actor.role, role)
        username = _clean_username(username)
        email = _clean_email(email)

        if self.store.get_by_username(username):
            raise ConflictError("Username already exists")
        if self.store.get_by_email(email):
            raise ConflictError("Email already exists")

        password = generate_password(12)
        user = self.store.create_user(username, email, generate_password_hash(password), role)

        token = generate_reset_token()
        self.store.create_reset_token(user.id, token)
        logger.info(f"User '{username}' created by {actor.name}")
        return user, password, token

    def update_user(
        self,
        actor: SessionUser | None,
        user_id: int,
        username: str | None = None,
        email: str | None = None,
        role: str | None = None,
    ) -> User:
        """Update username, e-mail and/or role; omitted fields are left unchanged."""
        actor = self.require_admin(actor)
        fields: dict = {}

        if username is not None:
            fields["username"] = _clean_username(username)
            existing = self.store.get_by_username(fields["username"])
            if existing and existing.id != user_id:
                raise ConflictError("Username already exists")
        if email is not None:
            fields["email"] = _clean_email(email)
            existing = self.store.get_by_email(fields["email"])
            if existing and existing.id != user_id:
                raise ConflictError("Email already exists")
        if role is not None:
            validate_role_assignment(actor.role, role)
            fields["role"] = role

        user = self.store.update_user(user_id, **fields)
        if user is None:
            raise NotFoundError("User not found")
        logger.info(f"User {user_id} updated by {actor.name}: {sorted(fields)}")
        return user

    def delete_user(self, actor: SessionUser | None, user_id: int) -> User:
        actor = self.require_admin(actor)
        if actor.id == user_id:
            raise ValidationError("Cannot delete your own account")
        user = self.store.delete_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def reset_password(self, actor: SessionUser | None, user_id: int) -> tuple[User, str]:
        """
        Issue a password-reset token for another user.

        The actor must be allowed to assign the target's role, so admins
        cannot reset superadmin passwords.

        Returns:
            (target user, reset token)
        """
        actor = self.require_admin(actor)
        target = self.store.get_by_id(user_id)
        if target is None:
            raise NotFoundError("User not found")

        try:
            validate_role_assignment(actor.role, target.role)
        except PermissionDeniedError:
            logger.warning(f"{actor.name} may not reset the password of user {user_id}")
            raise PermissionDeniedError(
                "No tienes permisos para restablecer la contraseña de este usuario"
            ) from None

        if not target.email:
            raise ValidationError("El usuario no tiene un correo electrónico configurado")

        token = generate_reset_token()
        self.store.create_reset_token(target.id, token)
        logger.info(f"Password reset issued for user {user_id} by {actor.name}")
        return target, token

    def change_password(self, token: str, new_password: str) -> User:
        """
        Set a new password using a reset token; the token is consumed.

        Raises:
            ValidationError: Missing input or weak password
            AuthenticationError: Unknown token
        """
        if not token or not new_password:
            raise ValidationError("Token y contraseña son requeridos")

        user = self.store.get_reset_token_user(token)
        if user is None:
            raise AuthenticationError("Token inválido o expirado")

        validate_password(new_password)
        self.store.update_user(user.id, password_hash=generate_password_hash(new_password))
        self.store.delete_reset_token(token)
        logger.info(f"Password changed for user {user.id}")
        return user
