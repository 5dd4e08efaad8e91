"""
Write side of the dictionary: create, update, delete words and add notes.

Updates replace a word's meanings wholesale; examples and markers of the
old meanings go with them through ON DELETE CASCADE.
"""
import logging
import sqlite3
from typing import Any

import pydantic

from ..core.database import Database, now_iso
from ..core.errors import DuplicateWordError, ValidationError, WordNotFoundError
from ..core.schemas import MARKER_FIELD_COLUMNS, Meaning, WordNote, WordPayload
from ..core.vocabulary import WordStatus
from ..search.word_index import EXAMPLE_COLUMNS, note_from_row
from .workflow import ensure_can_assign_status

logger = logging.getLogger(__name__)

# Distinguishes "leave unchanged" from an explicit None
UNSET: Any = object()

_MEANING_COLUMNS = (
    "word_id", "number", "origin", "meaning", "observation", "remission",
    "grammar_categ", "dictionary", *MARKER_FIELD_COLUMNS.values(),
    "created_at", "updated_at",
)


def resolve_user_id(raw: Any) -> int | None:
    """Coerce an assignee/creator value (int, numeric string, or list) to an id."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            return None
    if isinstance(raw, (list, tuple)) and raw:
        return resolve_user_id(raw[0])
    return None


def parse_word(word: WordPayload | dict) -> WordPayload:
    """Validate an editor payload into a WordPayload."""
    if isinstance(word, WordPayload):
        return word
    if not isinstance(word, dict):
        raise ValidationError("Solicitud inválida: se esperaba un objeto JSON")
    try:
        return WordPayload.model_validate(word)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Palabra inválida: {e.errors()[0]['msg']}") from e


class WordEditor:
    """Mutations on words, meanings, examples and notes."""

    def __init__(self, database: Database):
        self.database = database

    # --------------------------------------------------------
    # Words
    # --------------------------------------------------------

    def create_word(
        self,
        word: WordPayload | dict,
        letter: str | None = None,
        status: str | None = None,
        created_by: int | None = None,
        assigned_to: int | None = None,
        actor_role: str | None = None,
    ) -> dict:
        """
        Create a word with its meanings.

        Args:
            word: Lemma, root and meanings
            letter: Dictionary letter; defaults to the lemma's first character
            status: Initial status, 'included' by default
            created_by: Author user id
            assigned_to: Assignee user id
            actor_role: Role of the caller; when given, an explicit status
                must be one the role may assign

        Returns:
            {"wordId", "lemma", "letter"}

        Raises:
            ValidationError: Blank lemma
            DuplicateWordError: A word with this lemma exists
        """
        payload = parse_word(word)
        lemma = payload.lemma
        if not lemma:
            raise ValidationError("El lema es obligatorio")

        requested = (letter or "").strip()
        word_letter = (requested[:1] or lemma[:1]).lower()
        if status is not None and actor_role is not None:
            ensure_can_assign_status(actor_role, status)
        status = status or WordStatus.INCLUDED.value
        timestamp = now_iso()

        with self.database.connect() as conn:
            if self._find_word_id(conn, lemma) is not None:
                raise DuplicateWordError(lemma)

            cursor = conn.execute(
                """
                INSERT INTO words (lemma, root, letter, status, created_by, assigned_to,
                                   created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (lemma, payload.root or None, word_letter, status, created_by, assigned_to,
                 timestamp, timestamp),
            )
            word_id = cursor.lastrowid
            for meaning in payload.meanings:
                self._insert_meaning(conn, word_id, meaning, timestamp)
            conn.commit()

        logger.info(f"Created word '{lemma}' (id={word_id}, letter={word_letter}, status={status})")
        return {"wordId": word_id, "lemma": lemma, "letter": word_letter}

    def update_word_by_lemma(
        self,
        prev_lemma: str,
        word: WordPayload | dict,
        status: str | None = UNSET,
        assigned_to: int | None = UNSET,
        actor_role: str | None = None,
        note: str | None = None,
        note_by: int | None = None,
    ) -> WordNote | None:
        """
        Update lemma and root, optionally status and assignee, and replace all meanings.

        A note given with the update is stored in the same transaction, so
        it is only kept when the update succeeds.

        Args:
            prev_lemma: Current lemma of the word
            word: New lemma, root and meanings
            status: New status; UNSET leaves it unchanged
            assigned_to: New assignee; UNSET leaves it unchanged, None clears it
            actor_role: Role of the caller; when given, a status change must be
                one the role may assign
            note: Editorial comment to append, or None
            note_by: Author of the note

        Returns:
            The stored note, or None when no note was given

        Raises:
            WordNotFoundError: No word has ``prev_lemma``
            DuplicateWordError: The new lemma belongs to another word
            PermissionDeniedError: The status change is not allowed for the role
        """
        payload = parse_word(word)
        if not payload.lemma:
            raise ValidationError("El lema es obligatorio")
        note = (note or "").strip() or None
        timestamp = now_iso()

        with self.database.connect() as conn:
            row = conn.execute(
                "SELECT id, status FROM words WHERE lemma = ? ORDER BY id LIMIT 1",
                (prev_lemma,),
            ).fetchone()
            if row is None:
                raise WordNotFoundError(prev_lemma)
            word_id = row["id"]

            if payload.lemma != prev_lemma:
                other = self._find_word_id(conn, payload.lemma)
                if other is not None and other != word_id:
                    raise DuplicateWordError(payload.lemma)

            updates = {"lemma": payload.lemma, "root": payload.root or None, "updated_at": timestamp}
            if status is not UNSET and status is not None:
                if actor_role is not None and status != row["status"]:
                    ensure_can_assign_status(actor_role, status)
                updates["status"] = status
            if assigned_to is not UNSET:
                updates["assigned_to"] = assigned_to

            assignments = ", ".join(f"{column} = ?" for column in updates)
            conn.execute(
                f"UPDATE words SET {assignments} WHERE id = ?",
                (*updates.values(), word_id),
            )
            conn.execute("DELETE FROM meanings WHERE word_id = ?", (word_id,))
            for meaning in payload.meanings:
                self._insert_meaning(conn, word_id, meaning, timestamp)
            stored = self._insert_note(conn, word_id, note, note_by) if note else None
            conn.commit()

        logger.info(f"Updated word '{prev_lemma}' -> '{payload.lemma}' ({len(payload.meanings)} meanings)")
        return stored

    def delete_word_by_lemma(self, lemma: str):
        """Delete a word; meanings, examples and notes cascade."""
        with self.database.connect() as conn:
            word_id = self._find_word_id(conn, lemma)
            if word_id is None:
                raise WordNotFoundError(lemma)
            conn.execute("DELETE FROM words WHERE id = ?", (word_id,))
            conn.commit()
        logger.info(f"Deleted word '{lemma}' (id={word_id})")

    # --------------------------------------------------------
    # Notes
    # --------------------------------------------------------

    def add_note(self, lemma: str, text: str, user_id: int | None) -> WordNote:
        """Append an editorial comment to a word and return it with its author."""
        text = (text or "").strip()
        if not text:
            raise ValidationError("El comentario no puede estar vacío")

        with self.database.connect() as conn:
            word_id = self._find_word_id(conn, lemma)
            if word_id is None:
                raise WordNotFoundError(lemma)

            note = self._insert_note(conn, word_id, text, user_id)
            conn.commit()

        logger.info(f"Note {note.id} added to '{lemma}' by user {user_id}")
        return note

    # --------------------------------------------------------
    # Helpers
    # --------------------------------------------------------

    @staticmethod
    def _insert_note(conn: sqlite3.Connection, word_id: int, text: str, user_id: int | None) -> WordNote:
        cursor = conn.execute(
            "INSERT INTO notes (word_id, user_id, note, created_at) VALUES (?, ?, ?, ?)",
            (word_id, user_id, text, now_iso()),
        )
        row = conn.execute("""
            SELECT n.id, n.word_id, n.note, n.resolved, n.created_at,
                   u.id AS user_id, u.username
            FROM notes n
            LEFT JOIN users u ON u.id = n.user_id
            WHERE n.id = ?
        """, (cursor.lastrowid,)).fetchone()
        return note_from_row(row)

    @staticmethod
    def _find_word_id(conn: sqlite3.Connection, lemma: str) -> int | None:
        row = conn.execute(
            "SELECT id FROM words WHERE lemma = ? ORDER BY id LIMIT 1", (lemma,)
        ).fetchone()
        return row["id"] if row else None

    @staticmethod
    def _insert_meaning(conn: sqlite3.Connection, word_id: int, meaning: Meaning, timestamp: str):
        values = (
            word_id,
            meaning.number,
            meaning.origin,
            meaning.meaning,
            meaning.observation,
            meaning.remission,
            meaning.grammar_category,
            meaning.dictionary,
            *(getattr(meaning, name) for name in MARKER_FIELD_COLUMNS),
            timestamp,
            timestamp,
        )
        placeholders = ",".join("?" * len(_MEANING_COLUMNS))
        cursor = conn.execute(
            f"INSERT INTO meanings ({', '.join(_MEANING_COLUMNS)}) VALUES ({placeholders})",
            values,
        )
        meaning_id = cursor.lastrowid

        example_placeholders = ",".join("?" * (len(EXAMPLE_COLUMNS) + 1))
        for example in meaning.examples:
            conn.execute(
                f"INSERT INTO examples (meaning_id, {', '.join(EXAMPLE_COLUMNS)}) "
                f"VALUES ({example_placeholders})",
                (meaning_id, *(getattr(example, column) for column in EXAMPLE_COLUMNS)),
            )
