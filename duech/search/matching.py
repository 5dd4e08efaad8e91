"""
Match-type classification and result ordering.

A lemma is classified against the folded query by walking an ordered
list of (predicate, match type) rules; the first rule that holds wins.
Results sort by match type rank, then by Spanish collation of the lemma.
"""
import re
from enum import Enum
from typing import Callable

from ..core.text_utils import normalize, spanish_sort_key


class MatchType(str, Enum):
    """How strongly a lemma matched the text query, strongest first."""
    EXACT = "exact"
    PREFIX = "prefix"
    INLINE = "inline"
    PARTIAL = "partial"
    FILTER_ONLY = "filter-only"

    @property
    def rank(self) -> int:
        return _RANKS[self]


_RANKS = {match_type: index for index, match_type in enumerate(MatchType)}

_LEADING_PUNCTUATION = re.compile(r"^[^a-z0-9]+")


def _inline_match(lemma: str, query: str) -> bool:
    """True when a word after the first one starts with the query."""
    tokens = lemma.split()[1:]
    return any(
        _LEADING_PUNCTUATION.sub("", token).startswith(query)
        for token in tokens
    )


MatchRule = tuple[Callable[[str, str], bool], MatchType]

# Evaluated top-down on folded strings
MATCH_RULES: tuple[MatchRule, ...] = (
    (lambda lemma, query: lemma == query, MatchType.EXACT),
    (lambda lemma, query: lemma.startswith(query), MatchType.PREFIX),
    (_inline_match, MatchType.INLINE),
    (lambda lemma, query: query in lemma, MatchType.PARTIAL),
)


def classify(lemma: str, query: str | None) -> MatchType | None:
    """
    Classify a lemma against a text query.

    Args:
        lemma: Raw headword
        query: Raw query; None or blank means no text query

    Returns:
        FILTER_ONLY without a query, the first matching rule's type
        otherwise, or None when the lemma does not match the query at all
    """
    folded_query = normalize((query or "").strip())
    if not folded_query:
        return MatchType.FILTER_ONLY

    folded_lemma = normalize(lemma)
    for predicate, match_type in MATCH_RULES:
        if predicate(folded_lemma, folded_query):
            return match_type
    return None


def ranking_key(lemma: str, match_type: MatchType) -> tuple:
    """Total order: match type first, then Spanish alphabetical order."""
    return (match_type.rank, spanish_sort_key(lemma))
