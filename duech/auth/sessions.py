"""
Signed session tokens with single-session enforcement.

A token carries the user's id, e-mail, name, role and a random session
id. The session id is also stored on the user row at login; a token
whose session id no longer matches (the user logged in elsewhere or
logged out) is rejected even if its signature is still valid.
"""
import logging
import secrets
from dataclasses import dataclass

from itsdangerous import BadSignature, URLSafeTimedSerializer
from werkzeug.security import check_password_hash

from ..core.errors import AuthenticationError
from .users import User, UserStore

logger = logging.getLogger(__name__)

SESSION_SALT = "duech-session"


@dataclass
class SessionUser:
    """The authenticated caller, as carried in the session token."""
    id: int
    email: str
    name: str
    role: str
    session_id: str | None = None

    def to_dict(self) -> dict:
        return {"id": str(self.id), "email": self.email, "name": self.name, "role": self.role}

    def to_payload(self) -> dict:
        return {**self.to_dict(), "sessionId": self.session_id}

    @classmethod
    def from_user(cls, user: User, session_id: str | None = None) -> "SessionUser":
        return cls(
            id=user.id,
            email=user.email or user.username,
            name=user.username,
            role=user.role,
            session_id=session_id,
        )


class SessionManager:
    """Issues, verifies and revokes session tokens."""

    def __init__(self, store: UserStore, secret: str, max_age: int = 60 * 60 * 24 * 7):
        """
        Args:
            store: User storage for session-id cross-checks
            secret: Signing key
            max_age: Token lifetime in seconds
        """
        self.store = store
        self.max_age = max_age
        self._serializer = URLSafeTimedSerializer(secret, salt=SESSION_SALT)

    def issue_token(self, user: SessionUser) -> str:
        return self._serializer.dumps(user.to_payload())

    def verify_token(self, token: str) -> SessionUser | None:
        """Decode a token; None when tampered with, malformed or expired."""
        try:
            payload = self._serializer.loads(token, max_age=self.max_age)
        except BadSignature:
            return None
        if not isinstance(payload, dict):
            return None
        try:
            return SessionUser(
                id=int(payload["id"]),
                email=payload.get("email") or "",
                name=payload.get("name") or "",
                role=payload.get("role") or "",
                session_id=payload.get("sessionId"),
            )
        except (KeyError, TypeError, ValueError):
            return None

    def resolve(self, token: str | None) -> SessionUser | None:
        """
        Authenticate a request's token.

        Returns:
            The session user, or None when the token is missing, invalid,
            or its session id no longer matches the database
        """
        if not token:
            return None
        user = self.verify_token(token)
        if user is None:
            return None

        if user.session_id:
            db_user = self.store.get_by_id(user.id)
            if db_user is None or db_user.current_session_id != user.session_id:
                logger.info(f"Rejected stale session for user {user.id}")
                return None
        return user

    def login(self, identifier: str, password: str) -> tuple[SessionUser, str]:
        """
        Check credentials and start a new session.

        Logging in stores a fresh session id, which invalidates every
        other token issued to the same user.

        Returns:
            (session user, signed token)

        Raises:
            AuthenticationError: Unknown user or wrong password
        """
        db_user = self.store.find_for_login(identifier)
        if db_user is None or not check_password_hash(db_user.password_hash or "", password):
            logger.warning(f"Failed login for '{identifier}'")
            raise AuthenticationError("Invalid email or password")

        session_id = secrets.token_hex(32)
        self.store.set_session_id(db_user.id, session_id)
        user = SessionUser.from_user(db_user, session_id)
        logger.info(f"User '{db_user.username}' logged in")
        return user, self.issue_token(user)

    def logout(self, user: SessionUser | None):
        if user is not None:
            self.store.set_session_id(user.id, None)
            logger.info(f"User {user.id} logged out")
