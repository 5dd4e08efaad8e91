"""
User accounts and password-reset tokens in SQLite.
"""
import logging
import sqlite3
from dataclasses import dataclass

from ..core.database import Database, now_iso
from ..core.errors import ConflictError

logger = logging.getLogger(__name__)


@dataclass
class User:
    """A user row. ``password_hash`` and the session id never leave the server."""
    id: int
    username: str
    email: str | None
    role: str
    created_at: str | None = None
    updated_at: str | None = None
    password_hash: str | None = None
    current_session_id: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "role": self.role,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "User":
        return cls(
            id=row["id"],
            username=row["username"],
            email=row["email"],
            role=row["role"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            password_hash=row["password_hash"],
            current_session_id=row["current_session_id"],
        )


class UserStore:
    """CRUD on ``users`` and ``password_reset_tokens``."""

    _UPDATABLE = ("username", "email", "role", "password_hash", "current_session_id")

    def __init__(self, database: Database):
        self.database = database

    # --------------------------------------------------------
    # Lookups
    # --------------------------------------------------------

    def get_by_id(self, user_id: int) -> User | None:
        return self._fetch_one("SELECT * FROM users WHERE id = ?", (user_id,))

    def get_by_username(self, username: str) -> User | None:
        """Case-insensitive username lookup."""
        return self._fetch_one(
            "SELECT * FROM users WHERE lower(username) = lower(?) LIMIT 1", (username,)
        )

    def get_by_email(self, email: str) -> User | None:
        """Case-insensitive e-mail lookup."""
        return self._fetch_one(
            "SELECT * FROM users WHERE lower(email) = lower(?) LIMIT 1", (email,)
        )

    def find_for_login(self, identifier: str) -> User | None:
        """Resolve a login identifier, trying e-mail first and then username."""
        identifier = identifier.strip()
        return self.get_by_email(identifier.lower()) or self.get_by_username(identifier)

    def list_users(self) -> list[User]:
        with self.database.connect() as conn:
            rows = conn.execute("SELECT * FROM users ORDER BY id").fetchall()
        return [User.from_row(row) for row in rows]

    # --------------------------------------------------------
    # Mutations
    # --------------------------------------------------------

    def create_user(self, username: str, email: str | None, password_hash: str, role: str) -> User:
        timestamp = now_iso()
        try:
            with self.database.connect() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO users (username, email, password_hash, role, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (username, email, password_hash, role, timestamp, timestamp),
                )
                conn.commit()
                user_id = cursor.lastrowid
        except sqlite3.IntegrityError as e:
            raise ConflictError("Username or email already exists") from e

        logger.info(f"Created user '{username}' (id={user_id}, role={role})")
        return self.get_by_id(user_id)

    def update_user(self, user_id: int, **fields) -> User | None:
        """
        Update the given columns of a user.

        Args:
            user_id: User to update
            **fields: Any of username, email, role, password_hash,
                current_session_id

        Returns:
            The updated user, or None if it does not exist
        """
        unknown = set(fields) - set(self._UPDATABLE)
        if unknown:
            raise ValueError(f"Cannot update user columns: {sorted(unknown)}")

        updates = {**fields, "updated_at": now_iso()}
        assignments = ", ".join(f"{column} = ?" for column in updates)
        try:
            with self.database.connect() as conn:
                cursor = conn.execute(
                    f"UPDATE users SET {assignments} WHERE id = ?",
                    (*updates.values(), user_id),
                )
                conn.commit()
        except sqlite3.IntegrityError as e:
            raise ConflictError("Username or email already exists") from e

        if cursor.rowcount == 0:
            return None
        return self.get_by_id(user_id)

    def set_session_id(self, user_id: int, session_id: str | None):
        self.update_user(user_id, current_session_id=session_id)

    def delete_user(self, user_id: int) -> User | None:
        user = self.get_by_id(user_id)
        if user is None:
            return None
        with self.database.connect() as conn:
            conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
            conn.commit()
        logger.info(f"Deleted user '{user.username}' (id={user_id})")
        return user

    # --------------------------------------------------------
    # Password reset tokens
    # --------------------------------------------------------

    def create_reset_token(self, user_id: int, token: str):
        with self.database.connect() as conn:
            conn.execute(
                "INSERT INTO password_reset_tokens (user_id, token, created_at) VALUES (?, ?, ?)",
                (user_id, token, now_iso()),
            )
            conn.commit()

    def get_reset_token_user(self, token: str) -> User | None:
        """The user a reset token belongs to, or None for an unknown token."""
        return self._fetch_one(
            """
            SELECT u.* FROM password_reset_tokens t
            JOIN users u ON u.id = t.user_id
            WHERE t.token = ?
            """,
            (token,),
        )

    def delete_reset_token(self, token: str):
        with self.database.connect() as conn:
            conn.execute("DELETE FROM password_reset_tokens WHERE token = ?", (token,))
            conn.commit()

    def _fetch_one(self, sql: str, params: tuple) -> User | None:
        with self.database.connect() as conn:
            row = conn.execute(sql, params).fetchone()
        return User.from_row(row) if row else None
