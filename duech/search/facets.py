"""
Facet predicates for word search.

Each facet becomes one SQL predicate: OR across the accepted values,
AND across facets. Word-level facets filter the ``words`` row directly;
meaning-level facets must all hold on the same meaning, so they are
grouped into a single EXISTS subquery over ``meanings``.
"""
from dataclasses import dataclass, field
from enum import Enum

from ..core.text_utils import normalize
from ..core.vocabulary import MARKER_COLUMNS, WordStatus


class Scope(str, Enum):
    WORD = "word"
    MEANING = "meaning"


@dataclass(frozen=True)
class Predicate:
    """A parameterized SQL condition and the table it applies to."""
    sql: str
    params: tuple = ()
    scope: Scope = Scope.WORD


@dataclass
class SearchFilters:
    """Filters for word search. Empty lists mean no constraint."""
    query: str | None = None
    categories: list[str] = field(default_factory=list)
    origins: list[str] = field(default_factory=list)
    letters: list[str] = field(default_factory=list)
    dictionaries: list[str] = field(default_factory=list)
    markers: dict[str, list[str]] = field(default_factory=dict)
    status: str | None = None
    assigned_to: list[str] = field(default_factory=list)

    @property
    def text(self) -> str | None:
        """Trimmed query, or None when blank."""
        if self.query is None:
            return None
        return self.query.strip() or None

    def is_empty(self) -> bool:
        return all([
            self.text is None,
            not self.categories,
            not self.origins,
            not self.letters,
            not self.dictionaries,
            not any(self.markers.values()),
            not self.status,
            not self.assigned_to,
        ])

    def to_dict(self) -> dict:
        return {
            "query": self.text,
            "categories": self.categories,
            "origins": self.origins,
            "letters": self.letters,
            "dictionaries": self.dictionaries,
            "markers": {k: v for k, v in self.markers.items() if v},
            "status": self.status,
            "assignedTo": self.assigned_to,
        }


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user text matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _clean(values) -> list[str]:
    return [v.strip() for v in values or [] if isinstance(v, str) and v.strip()]


def any_of(column: str, values, scope: Scope = Scope.WORD) -> Predicate | None:
    """Equality against any of ``values``; None when there are none."""
    values = _clean(values)
    if not values:
        return None
    placeholders = ",".join("?" * len(values))
    return Predicate(f"{column} IN ({placeholders})", tuple(values), scope)


def contains_any(column: str, values, scope: Scope = Scope.WORD) -> Predicate | None:
    """Accent- and case-insensitive substring match against any value."""
    values = [normalize(v) for v in _clean(values)]
    if not values:
        return None
    conditions = " OR ".join(f"unaccent({column}) LIKE ? ESCAPE '\\'" for _ in values)
    return Predicate(f"({conditions})", tuple(f"%{escape_like(v)}%" for v in values), scope)


def text_predicate(query: str | None) -> Predicate | None:
    """Cheap pre-filter: lemma contains the folded query."""
    folded = normalize((query or "").strip())
    if not folded:
        return None
    return Predicate(
        "unaccent(w.lemma) LIKE ? ESCAPE '\\'",
        (f"%{escape_like(folded)}%",),
    )


def status_predicate(status: str | None, editor_mode: bool) -> Predicate | None:
    """Public callers only ever see published words."""
    if not editor_mode:
        return Predicate("w.status = ?", (WordStatus.PUBLISHED.value,))
    if status and status.strip():
        return Predicate("w.status = ?", (status.strip(),))
    return None


def assigned_predicate(assigned_to) -> Predicate | None:
    """Assignee ids; values that are not integers are ignored."""
    ids = []
    for value in assigned_to or []:
        try:
            ids.append(int(str(value).strip()))
        except ValueError:
            continue
    if not ids:
        return None
    placeholders = ",".join("?" * len(ids))
    return Predicate(f"w.assigned_to IN ({placeholders})", tuple(ids))


def build_predicates(filters: SearchFilters, editor_mode: bool = False) -> list[Predicate]:
    """Translate filters into the list of active predicates."""
    letters = [v.lower() for v in _clean(filters.letters)]
    candidates = [
        text_predicate(filters.text),
        status_predicate(filters.status, editor_mode),
        any_of("w.letter", letters),
        assigned_predicate(filters.assigned_to),
        any_of("m.grammar_categ", filters.categories, Scope.MEANING),
        contains_any("m.origin", filters.origins, Scope.MEANING),
        any_of("m.dictionary", filters.dictionaries, Scope.MEANING),
    ]
    for key, column in MARKER_COLUMNS.items():
        candidates.append(any_of(f"m.{column}", filters.markers.get(key), Scope.MEANING))
    return [p for p in candidates if p is not None]


def compose_where(predicates: list[Predicate]) -> tuple[str, list]:
    """
    Join predicates into a WHERE clause for ``words w``.

    Returns:
        (sql, params); sql is empty when nothing constrains the query
    """
    conditions: list[str] = []
    params: list = []

    for predicate in predicates:
        if predicate.scope is Scope.WORD:
            conditions.append(predicate.sql)
            params.extend(predicate.params)

    meaning_level = [p for p in predicates if p.scope is Scope.MEANING]
    if meaning_level:
        inner = " AND ".join(p.sql for p in meaning_level)
        conditions.append(
            f"EXISTS (SELECT 1 FROM meanings m WHERE m.word_id = w.id AND {inner})"
        )
        for predicate in meaning_level:
            params.extend(predicate.params)

    if not conditions:
        return "", params
    return "WHERE " + " AND ".join(conditions), params
