"""
Text normalization and Spanish collation helpers.

Matching folds every diacritic, ñ included, so "nino" finds "niño".
Sorting keeps ñ as its own letter between n and o, as Spanish
dictionaries order it.
"""
import unicodedata

# Sorts after every other code point, so "n" + _ENYE_WEIGHT lands after "nz"
_ENYE_WEIGHT = "\U0010ffff"


def strip_accents(text: str) -> str:
    """Remove combining marks after canonical decomposition."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def normalize(text: str | None) -> str:
    """
    Fold text for matching: lower-case and strip diacritics.

    Args:
        text: Raw lemma or query

    Returns:
        Folded text ("Ñandú" -> "nandu"); empty string for None
    """
    if not text:
        return ""
    return strip_accents(text.lower())


def spanish_sort_key(text: str) -> tuple[str, str, str]:
    """
    Sort key approximating Spanish locale collation.

    Primary level ignores case and accents but keeps ñ after n.
    The accented lower-case form and the raw text break the remaining
    ties, so two distinct strings never compare equal.
    """
    composed = unicodedata.normalize("NFC", text).lower()
    primary = strip_accents(composed.replace("ñ", "n" + _ENYE_WEIGHT))
    return (primary, composed, text)


def spanish_sorted(values) -> list[str]:
    """Sort strings with Spanish collation."""
    return sorted(values, key=spanish_sort_key)
