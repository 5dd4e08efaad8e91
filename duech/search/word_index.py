"""
Word index over the dictionary database.

Provides:
- Faceted search with match-type ranking and stable pagination
- Search metadata (codes present in the data) for filter widgets
- Single-entry lookup with meanings, examples and editorial notes
- Source listings and the redacted-words report
"""
import logging
import math
import sqlite3
from dataclasses import dataclass, field
from typing import Any, Iterable

from ..core.database import Database
from ..core.schemas import MARKER_FIELD_COLUMNS, Meaning, NoteAuthor, WordNote
from ..core.text_utils import spanish_sort_key, spanish_sorted
from ..core.vocabulary import MARKER_COLUMNS, WordStatus
from .facets import SearchFilters, build_predicates, compose_where
from .matching import MatchType, classify, ranking_key

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 1000

# Keeps IN (...) lists under SQLite's host parameter limit
_ID_CHUNK = 500

EXAMPLE_COLUMNS = (
    "value", "author", "year", "publication", "format", "title", "date",
    "city", "editorial", "volume", "number", "page", "doi", "url",
)


def coerce_int(value: Any, default: int) -> int:
    """Parse an integer, falling back to ``default`` for anything else."""
    if isinstance(value, bool):
        return default
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def clamp_pagination(page: Any, page_size: Any, max_page_size: int = MAX_PAGE_SIZE) -> tuple[int, int]:
    """Normalize page to >= 1 and page size to [1, max_page_size]."""
    page = max(1, coerce_int(page, 1))
    page_size = min(max(1, coerce_int(page_size, DEFAULT_PAGE_SIZE)), max_page_size)
    return page, page_size


def _chunks(ids: list[int], size: int = _ID_CHUNK) -> Iterable[list[int]]:
    for start in range(0, len(ids), size):
        yield ids[start:start + size]


@dataclass
class WordEntry:
    """A word with its meanings and, when loaded, its editorial notes."""
    word_id: int
    lemma: str
    root: str | None
    letter: str
    variant: str | None
    status: str
    created_by: int | None
    assigned_to: int | None
    created_at: str | None = None
    updated_at: str | None = None
    meanings: list[Meaning] = field(default_factory=list)
    notes: list[WordNote] | None = None

    def to_dict(self) -> dict:
        data = {
            "wordId": self.word_id,
            "lemma": self.lemma,
            "root": self.root or self.lemma,
            "letter": self.letter,
            "variant": self.variant,
            "status": self.status,
            "assignedTo": self.assigned_to,
            "createdBy": self.created_by,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "meanings": [m.model_dump(by_alias=True, mode="json") for m in self.meanings],
        }
        if self.notes is not None:
            data["comments"] = [n.model_dump(by_alias=True, mode="json") for n in self.notes]
        return data


@dataclass
class SearchResult:
    """A word and how it matched the text query."""
    entry: WordEntry
    match_type: MatchType

    def to_dict(self) -> dict:
        data = self.entry.to_dict()
        data["matchType"] = self.match_type.value
        return data


@dataclass
class SearchPage:
    """One page of ranked results plus pagination totals."""
    results: list[SearchResult]
    page: int
    page_size: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.total else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    def to_dict(self) -> dict:
        return {
            "results": [r.to_dict() for r in self.results],
            "pagination": {
                "page": self.page,
                "limit": self.page_size,
                "total": self.total,
                "totalPages": self.total_pages,
                "hasNext": self.has_next,
                "hasPrev": self.has_prev,
            },
        }


class WordIndex:
    """
    Read side of the dictionary.

    Candidate rows are narrowed in SQL by the facet predicates; match
    classification, ordering and slicing happen in Python over the
    complete candidate set, so every page is cut from the same order.
    """

    def __init__(self, database: Database):
        """
        Initialize the word index.

        Args:
            database: Dictionary database
        """
        self.database = database
        logger.info(f"WordIndex initialized on {database.db_path}")

    # --------------------------------------------------------
    # Search
    # --------------------------------------------------------

    def search(
        self,
        filters: SearchFilters | None = None,
        page: Any = 1,
        page_size: Any = DEFAULT_PAGE_SIZE,
        editor_mode: bool = False,
    ) -> SearchPage:
        """
        Search words with facet filters and match-type ranking.

        Args:
            filters: Text query and facet filters
            page: 1-based page number (clamped)
            page_size: Results per page (clamped to [1, 1000])
            editor_mode: When False only published words are visible

        Returns:
            SearchPage with the requested slice and totals
        """
        filters = filters or SearchFilters()
        page, page_size = clamp_pagination(page, page_size)
        where_sql, params = compose_where(build_predicates(filters, editor_mode))

        with self.database.connect() as conn:
            rows = conn.execute(f"SELECT w.id, w.lemma FROM words w {where_sql}", params).fetchall()

            ranked = []
            for row in rows:
                match_type = classify(row["lemma"], filters.text)
                if match_type is None:
                    continue
                ranked.append((ranking_key(row["lemma"], match_type), row["id"], match_type))
            ranked.sort(key=lambda item: (item[0], item[1]))

            start = (page - 1) * page_size
            window = ranked[start:start + page_size]
            entries = self._load_entries(conn, [word_id for _, word_id, _ in window])

        results = [SearchResult(entries[word_id], match_type) for _, word_id, match_type in window]
        logger.debug(
            f"Search q={filters.text!r} editor={editor_mode}: "
            f"{len(ranked)} matches, page {page} -> {len(results)}"
        )
        return SearchPage(results=results, page=page, page_size=page_size, total=len(ranked))

    def search_metadata(self) -> dict:
        """Distinct codes present in meanings, Spanish-sorted, for filter widgets."""
        with self.database.connect() as conn:
            def distinct(column: str) -> list[str]:
                rows = conn.execute(
                    f"SELECT DISTINCT {column} FROM meanings "
                    f"WHERE {column} IS NOT NULL AND {column} != ''"
                ).fetchall()
                return spanish_sorted(row[0] for row in rows)

            return {
                "categories": distinct("grammar_categ"),
                "origins": distinct("origin"),
                "dictionaries": distinct("dictionary"),
                "markers": {key: distinct(column) for key, column in MARKER_COLUMNS.items()},
            }

    # --------------------------------------------------------
    # Lookups
    # --------------------------------------------------------

    def get_word_by_lemma(self, lemma: str, include_drafts: bool = False) -> WordEntry | None:
        """
        Get one word with meanings, examples and notes.

        Args:
            lemma: Exact headword
            include_drafts: When False only a published word is returned
        """
        sql = "SELECT id FROM words WHERE lemma = ?"
        params: list = [lemma]
        if not include_drafts:
            sql += " AND status = ?"
            params.append(WordStatus.PUBLISHED.value)
        sql += " ORDER BY id LIMIT 1"

        with self.database.connect() as conn:
            row = conn.execute(sql, params).fetchone()
            if not row:
                return None
            return self._load_entries(conn, [row["id"]], with_notes=True)[row["id"]]

    def list_lemmas(self, letter: str | None = None, status: str | None = WordStatus.PUBLISHED.value) -> list[str]:
        """Lemmas, Spanish-sorted, optionally restricted by letter and status."""
        sql = "SELECT lemma FROM words WHERE 1=1"
        params: list = []
        if letter:
            sql += " AND letter = ?"
            params.append(letter.lower())
        if status:
            sql += " AND status = ?"
            params.append(status)

        with self.database.connect() as conn:
            return spanish_sorted(row["lemma"] for row in conn.execute(sql, params))

    def get_words_by_source(self, publication: str, include_drafts: bool = False) -> list[WordEntry]:
        """Words citing ``publication`` in any example, alphabetical."""
        sql = """
            SELECT DISTINCT w.id, w.lemma
            FROM words w
            JOIN meanings m ON m.word_id = w.id
            JOIN examples e ON e.meaning_id = m.id
            WHERE e.publication = ?
        """
        params: list = [publication]
        if not include_drafts:
            sql += " AND w.status = ?"
            params.append(WordStatus.PUBLISHED.value)

        with self.database.connect() as conn:
            return self._alphabetical_entries(conn, conn.execute(sql, params).fetchall())

    def get_unique_sources(self, include_drafts: bool = False) -> list[dict]:
        """Distinct bibliographic sources cited in examples, with word counts."""
        sql = """
            SELECT e.publication, e.author, e.year, e.city, e.editorial, e.format,
                   COUNT(DISTINCT w.id) AS words
            FROM examples e
            JOIN meanings m ON e.meaning_id = m.id
            JOIN words w ON m.word_id = w.id
            WHERE e.publication IS NOT NULL AND e.publication != ''
        """
        params: list = []
        if not include_drafts:
            sql += " AND w.status = ?"
            params.append(WordStatus.PUBLISHED.value)
        sql += " GROUP BY e.publication, e.author, e.year, e.city, e.editorial, e.format"

        with self.database.connect() as conn:
            sources = [dict(row) for row in conn.execute(sql, params)]

        sources.sort(key=lambda s: (spanish_sort_key(s["publication"]), s["author"] or "", s["year"] or ""))
        return sources

    def get_redacted_words(self) -> list[WordEntry]:
        """Words in status 'redacted' with meanings and notes, alphabetical."""
        with self.database.connect() as conn:
            rows = conn.execute(
                "SELECT id, lemma FROM words WHERE status = ?",
                (WordStatus.REDACTED.value,),
            ).fetchall()
            return self._alphabetical_entries(conn, rows, with_notes=True)

    def count(self) -> int:
        """Get total number of words."""
        with self.database.connect() as conn:
            return conn.execute("SELECT COUNT(*) FROM words").fetchone()[0]

    # --------------------------------------------------------
    # Loading
    # --------------------------------------------------------

    def _alphabetical_entries(
        self,
        conn: sqlite3.Connection,
        rows: list[sqlite3.Row],
        with_notes: bool = False,
    ) -> list[WordEntry]:
        ordered = sorted(rows, key=lambda r: (spanish_sort_key(r["lemma"]), r["id"]))
        ids = [row["id"] for row in ordered]
        entries = self._load_entries(conn, ids, with_notes=with_notes)
        return [entries[word_id] for word_id in ids]

    def _load_entries(
        self,
        conn: sqlite3.Connection,
        word_ids: list[int],
        with_notes: bool = False,
    ) -> dict[int, WordEntry]:
        """Load words by id with meanings and examples (and notes)."""
        entries: dict[int, WordEntry] = {}
        if not word_ids:
            return entries

        for chunk in _chunks(word_ids):
            placeholders = ",".join("?" * len(chunk))
            for row in conn.execute(f"SELECT * FROM words WHERE id IN ({placeholders})", chunk):
                entries[row["id"]] = WordEntry(
                    word_id=row["id"],
                    lemma=row["lemma"],
                    root=row["root"],
                    letter=row["letter"],
                    variant=row["variant"],
                    status=row["status"],
                    created_by=row["created_by"],
                    assigned_to=row["assigned_to"],
                    created_at=row["created_at"],
                    updated_at=row["updated_at"],
                    notes=[] if with_notes else None,
                )

            meaning_rows = conn.execute(
                f"SELECT * FROM meanings WHERE word_id IN ({placeholders}) ORDER BY word_id, number, id",
                chunk,
            ).fetchall()
            examples = self._load_examples(conn, [m["id"] for m in meaning_rows])
            for row in meaning_rows:
                entries[row["word_id"]].meanings.append(
                    meaning_from_row(row, examples.get(row["id"], []))
                )

            if with_notes:
                note_rows = conn.execute(f"""
                    SELECT n.id, n.word_id, n.note, n.resolved, n.created_at,
                           u.id AS user_id, u.username
                    FROM notes n
                    LEFT JOIN users u ON u.id = n.user_id
                    WHERE n.word_id IN ({placeholders})
                    ORDER BY n.created_at DESC, n.id DESC
                """, chunk)
                for row in note_rows:
                    entries[row["word_id"]].notes.append(note_from_row(row))

        return entries

    def _load_examples(self, conn: sqlite3.Connection, meaning_ids: list[int]) -> dict[int, list[dict]]:
        examples: dict[int, list[dict]] = {}
        for chunk in _chunks(meaning_ids):
            placeholders = ",".join("?" * len(chunk))
            rows = conn.execute(
                f"SELECT * FROM examples WHERE meaning_id IN ({placeholders}) ORDER BY id",
                chunk,
            )
            for row in rows:
                examples.setdefault(row["meaning_id"], []).append(
                    {column: row[column] for column in EXAMPLE_COLUMNS}
                )
        return examples


def meaning_from_row(row: sqlite3.Row, examples: list[dict]) -> Meaning:
    """Build a Meaning from a ``meanings`` row and its example dicts."""
    data = {
        "id": row["id"],
        "number": row["number"],
        "meaning": row["meaning"],
        "origin": row["origin"],
        "observation": row["observation"],
        "remission": row["remission"],
        "grammar_category": row["grammar_categ"],
        "dictionary": row["dictionary"],
        "examples": examples,
    }
    for name, column in MARKER_FIELD_COLUMNS.items():
        data[name] = row[column]
    return Meaning.model_validate(data)


def note_from_row(row: sqlite3.Row) -> WordNote:
    author = None
    if row["user_id"] is not None:
        author = NoteAuthor(id=row["user_id"], username=row["username"])
    return WordNote(
        id=row["id"],
        note=row["note"],
        created_at=row["created_at"],
        resolved=bool(row["resolved"]),
        user=author,
    )
