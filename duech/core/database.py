"""
SQLite storage for the dictionary.

Owns the schema (users, words, meanings, examples, notes, reset tokens)
and hands out configured connections. Every connection registers an
``unaccent`` SQL function backed by the same folding the search
classifier uses, so SQL pre-filtering and Python ranking agree.
"""
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from .text_utils import normalize

logger = logging.getLogger(__name__)


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    username TEXT NOT NULL UNIQUE,
    email TEXT UNIQUE,
    password_hash TEXT NOT NULL,
    role TEXT NOT NULL DEFAULT 'lexicographer',
    current_session_id TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS password_reset_tokens (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    token TEXT NOT NULL UNIQUE,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS words (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    lemma TEXT NOT NULL,
    root TEXT,
    letter TEXT NOT NULL,
    variant TEXT,
    status TEXT NOT NULL DEFAULT 'draft',
    created_by INTEGER REFERENCES users(id) ON DELETE SET NULL,
    assigned_to INTEGER REFERENCES users(id) ON DELETE SET NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS meanings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    word_id INTEGER NOT NULL REFERENCES words(id) ON DELETE CASCADE,
    number INTEGER NOT NULL,
    origin TEXT,
    meaning TEXT NOT NULL,
    observation TEXT,
    remission TEXT,  -- cross-reference to another lemma
    grammar_categ TEXT,
    social_valuation TEXT,
    social_mark TEXT,
    style_mark TEXT,
    inten_mark TEXT,
    geo_mark TEXT,
    chrono_mark TEXT,
    freq_mark TEXT,
    dictionary TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS examples (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    meaning_id INTEGER NOT NULL REFERENCES meanings(id) ON DELETE CASCADE,
    value TEXT NOT NULL,
    author TEXT,
    year TEXT,
    publication TEXT,
    format TEXT,
    title TEXT,
    date TEXT,
    city TEXT,
    editorial TEXT,
    volume TEXT,
    number TEXT,
    page TEXT,
    doi TEXT,
    url TEXT
);

CREATE TABLE IF NOT EXISTS notes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    word_id INTEGER NOT NULL REFERENCES words(id) ON DELETE CASCADE,
    user_id INTEGER REFERENCES users(id) ON DELETE SET NULL,
    note TEXT NOT NULL,
    resolved INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_words_lemma ON words(lemma);
CREATE INDEX IF NOT EXISTS idx_words_letter ON words(letter);
CREATE INDEX IF NOT EXISTS idx_words_status ON words(status);
CREATE INDEX IF NOT EXISTS idx_meanings_word ON meanings(word_id);
CREATE INDEX IF NOT EXISTS idx_examples_meaning ON examples(meaning_id);
CREATE INDEX IF NOT EXISTS idx_examples_publication ON examples(publication);
CREATE INDEX IF NOT EXISTS idx_notes_word ON notes(word_id);
"""


def now_iso() -> str:
    """Current UTC time as an ISO 8601 string, the format stored in every timestamp column."""
    return datetime.now(timezone.utc).isoformat()


def _unaccent(value):
    return normalize(value) if value is not None else None


class Database:
    """
    Connection factory and schema owner for the dictionary database.

    Connections are short-lived: one per operation, closed on exit.
    """

    def __init__(self, db_path: str | Path = "data/duech.db"):
        """
        Initialize the database.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._init_db()
        logger.info(f"Database initialized at {self.db_path}")

    def _init_db(self):
        """Create tables if they don't exist."""
        with self.connect() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection with row access by name and FK enforcement."""
        conn = sqlite3.connect(self.db_path)
        try:
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON")
            conn.create_function("unaccent", 1, _unaccent, deterministic=True)
            yield conn
        finally:
            conn.close()

    def clear(self):
        """Delete all dictionary content and users."""
        with self.connect() as conn:
            for table in ("notes", "examples", "meanings", "words",
                          "password_reset_tokens", "users"):
                conn.execute(f"DELETE FROM {table}")
            conn.commit()
        logger.warning("Database cleared")
