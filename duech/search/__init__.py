"""
Search module - Faceted word search, ranking, and lookups.
"""
from .facets import SearchFilters, build_predicates, compose_where
from .matching import MatchType, classify, ranking_key
from .word_index import (
    WordIndex,
    WordEntry,
    SearchResult,
    SearchPage,
    clamp_pagination,
    coerce_int,
)
from .word_of_the_day import WordOfTheDay, DailyWord, hash_seed

__all__ = [
    "SearchFilters",
    "build_predicates",
    "compose_where",
    "MatchType",
    "classify",
    "ranking_key",
    "WordIndex",
    "WordEntry",
    "SearchResult",
    "SearchPage",
    "clamp_pagination",
    "coerce_int",
    "WordOfTheDay",
    "DailyWord",
    "hash_seed",
]
