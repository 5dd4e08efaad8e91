"""
Pydantic schemas for dictionary entries.

These models validate editor payloads and serialize entries for the API.
Field names are snake_case in Python and camelCase on the wire.
"""
from typing import Any
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .vocabulary import MARKER_COLUMNS


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _first_code(value: Any) -> str | None:
    """Collapse a multi-select value to the single code a meaning stores."""
    if isinstance(value, (list, tuple)):
        value = next((v for v in value if isinstance(v, str) and v.strip()), None)
    if isinstance(value, str):
        return value.strip() or None
    return None


# ============================================================
# Examples / Citations
# ============================================================

class Example(_CamelModel):
    """Usage example with optional bibliographic metadata."""
    value: str = Field(..., description="Example text")
    author: str | None = None
    year: str | None = None
    publication: str | None = Field(None, description="Source work; 'source' is accepted as legacy input")
    format: str | None = None
    title: str | None = None
    date: str | None = None
    city: str | None = None
    editorial: str | None = None
    volume: str | None = None
    number: str | None = None
    page: str | None = None
    doi: str | None = None
    url: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _legacy_source(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("publication") and data.get("source"):
            data = {**data, "publication": data["source"]}
        return data

    @field_validator("year", "number", "page", "volume", mode="before")
    @classmethod
    def _numbers_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @model_validator(mode="after")
    def _blank_to_none(self) -> "Example":
        for name in type(self).model_fields:
            if name != "value" and getattr(self, name) == "":
                setattr(self, name, None)
        return self


# ============================================================
# Meanings
# ============================================================

class Meaning(_CamelModel):
    """One numbered sense of a word, with its origin, category and markers."""
    id: int | None = None
    number: int = Field(default=1, ge=1)
    meaning: str = ""
    origin: str | None = Field(None, description="Etymology, e.g. 'mapuche'")
    observation: str | None = None
    remission: str | None = Field(None, description="Cross-reference to another lemma")
    grammar_category: str | None = Field(
        None,
        validation_alias=AliasChoices("grammarCategory", "grammar_category", "categories"),
    )
    dictionary: str | None = Field(None, description="Source dictionary code, e.g. 'duech'")

    # Sociolinguistic markers, one code each
    social_valuations: str | None = None
    social_stratum_markers: str | None = None
    style_markers: str | None = None
    intentionality_markers: str | None = None
    geographical_markers: str | None = None
    chronological_markers: str | None = None
    frequency_markers: str | None = None

    examples: list[Example] = Field(
        default_factory=list,
        validation_alias=AliasChoices("examples", "example"),
    )

    @field_validator(
        "grammar_category",
        "social_valuations",
        "social_stratum_markers",
        "style_markers",
        "intentionality_markers",
        "geographical_markers",
        "chronological_markers",
        "frequency_markers",
        mode="before",
    )
    @classmethod
    def _single_code(cls, value: Any) -> str | None:
        return _first_code(value)

    @field_validator("origin", "observation", "remission", "dictionary", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("meaning", mode="before")
    @classmethod
    def _meaning_text(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("examples", mode="before")
    @classmethod
    def _examples_list(cls, value: Any) -> list:
        if value is None:
            return []
        items = value if isinstance(value, list) else [value]
        return [
            item for item in items
            if isinstance(item, dict) and str(item.get("value") or "").strip()
        ]

    @model_validator(mode="after")
    def _default_text(self) -> "Meaning":
        if not self.meaning.strip():
            self.meaning = f"Definición {self.number}"
        return self


MARKER_FIELDS: tuple[str, ...] = (
    "social_valuations",
    "social_stratum_markers",
    "style_markers",
    "intentionality_markers",
    "geographical_markers",
    "chronological_markers",
    "frequency_markers",
)

# Meaning field -> meanings table column
MARKER_FIELD_COLUMNS: dict[str, str] = {
    name: MARKER_COLUMNS[to_camel(name)] for name in MARKER_FIELDS
}


# ============================================================
# Words
# ============================================================

class WordPayload(_CamelModel):
    """A headword with its meanings, as sent by the editor."""
    lemma: str
    root: str = ""
    meanings: list[Meaning] = Field(
        default_factory=list,
        validation_alias=AliasChoices("meanings", "values"),
    )

    @field_validator("lemma", mode="before")
    @classmethod
    def _strip_lemma(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("root", mode="before")
    @classmethod
    def _root_text(cls, value: Any) -> str:
        return value.strip() if isinstance(value, str) else ""

    @field_validator("meanings", mode="before")
    @classmethod
    def _number_meanings(cls, value: Any) -> list:
        if not isinstance(value, list):
            return []
        numbered = []
        for index, item in enumerate(value):
            if not isinstance(item, dict):
                continue
            if not isinstance(item.get("number"), int) or isinstance(item.get("number"), bool):
                item = {**item, "number": index + 1}
            numbered.append(item)
        return numbered

    def with_placeholder_meaning(self) -> "WordPayload":
        """Ensure at least one meaning exists for a newly created word."""
        if self.meanings:
            return self
        return self.model_copy(update={"meanings": [Meaning(number=1, meaning="Definición pendiente")]})


class NoteAuthor(_CamelModel):
    id: int | None = None
    username: str | None = None


class WordNote(_CamelModel):
    """Editorial comment attached to a word."""
    id: int
    note: str
    created_at: str
    resolved: bool = False
    user: NoteAuthor | None = None
