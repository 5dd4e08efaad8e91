"""
Deterministic word of the day.

Every visitor sees the same word on the same (UTC) date: the date
picks a letter, the date and letter pick a word from that letter's
published lemmas in alphabetical order.

Only the chosen lemma is cached, for the most recent few dates; the
entry itself is reloaded on every call so edits show up immediately.
"""
import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date as Date, datetime, timezone

from ..core.vocabulary import LETTERS
from .word_index import WordEntry, WordIndex

logger = logging.getLogger(__name__)

FALLBACK_LETTER = "o"
MAX_CACHED_DAYS = 8


def hash_seed(seed: str) -> int:
    """31-multiplier string hash, kept to unsigned 32 bits."""
    value = 0
    for char in seed:
        value = (value * 31 + ord(char)) & 0xFFFFFFFF
    return value


@dataclass
class DailyWord:
    date: str
    letter: str
    entry: WordEntry

    def to_dict(self) -> dict:
        return {"date": self.date, "letter": self.letter, "word": self.entry.to_dict()}


class WordOfTheDay:
    """Picks the word of the day, remembering the choice for recent dates."""

    def __init__(self, index: WordIndex, max_cached_days: int = MAX_CACHED_DAYS):
        self.index = index
        self.max_cached_days = max_cached_days
        # ISO date -> (letter, lemma), least recently used first
        self._cache: OrderedDict[str, tuple[str, str]] = OrderedDict()
        self._lock = threading.Lock()

    def pick(self, day: Date | None = None) -> DailyWord:
        """
        Get the word for ``day`` (today, UTC, by default).

        A cached choice whose word is no longer published is dropped and
        the day is picked again from the current pool.

        Raises:
            LookupError: No published word exists for the chosen or fallback letter
        """
        seed = (day or datetime.now(timezone.utc).date()).isoformat()
        with self._lock:
            cached = self._cache.get(seed)
            if cached is not None:
                self._cache.move_to_end(seed)

        if cached is not None:
            letter, lemma = cached
            entry = self.index.get_word_by_lemma(lemma)
            if entry is not None:
                return DailyWord(date=seed, letter=letter, entry=entry)
            logger.info(f"Word of the day {lemma!r} for {seed} is gone, picking again")
            with self._lock:
                self._cache.pop(seed, None)

        letter, lemma = self._choose(seed)
        entry = self.index.get_word_by_lemma(lemma)
        if entry is None:
            raise LookupError(f"Word of the day {lemma!r} disappeared")

        with self._lock:
            self._cache[seed] = (letter, lemma)
            self._cache.move_to_end(seed)
            while len(self._cache) > self.max_cached_days:
                self._cache.popitem(last=False)
        logger.info(f"Word of the day for {seed}: {lemma} ({letter})")
        return DailyWord(date=seed, letter=letter, entry=entry)

    def _choose(self, seed: str) -> tuple[str, str]:
        letter = LETTERS[hash_seed(seed) % len(LETTERS)]
        pool = self.index.list_lemmas(letter=letter)
        if not pool:
            letter = FALLBACK_LETTER
            pool = self.index.list_lemmas(letter=letter)
        if not pool:
            raise LookupError(f"No published words for {seed} (letter={letter})")
        return letter, pool[hash_seed(f"{seed}:{letter}") % len(pool)]

    def cached_days(self) -> list[str]:
        """Dates with a remembered choice, oldest first."""
        with self._lock:
            return list(self._cache)

    def clear_cache(self):
        with self._lock:
            self._cache.clear()
