"""
Controlled vocabularies for the Chilean Spanish dictionary.

Each vocabulary maps the code stored in the database to its Spanish
display label. Marker groups also carry the meanings column they live in.
"""
from dataclasses import dataclass
from enum import Enum


class WordStatus(str, Enum):
    """Editorial lifecycle of a dictionary entry."""
    IMPORTED = "imported"
    INCLUDED = "included"
    PREREDACTED = "preredacted"
    REDACTED = "redacted"
    REVIEWED = "reviewed"
    PUBLISHED = "published"
    ARCHAIC = "archaic"
    QUARANTINED = "quarantined"


STATUS_LABELS: dict[str, str] = {
    WordStatus.IMPORTED.value: "Importado",
    WordStatus.INCLUDED.value: "Incorporado",
    WordStatus.PREREDACTED.value: "Prerredactada",
    WordStatus.REDACTED.value: "Redactado",
    WordStatus.REVIEWED.value: "Revisado por comisión",
    WordStatus.PUBLISHED.value: "Publicado",
    WordStatus.ARCHAIC.value: "Arcaico",
    WordStatus.QUARANTINED.value: "Cuarentena",
}


class Role(str, Enum):
    """User roles, lowest privilege first."""
    LEXICOGRAPHER = "lexicographer"
    COORDINATOR = "coordinator"
    EDITOR = "editor"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


ADMIN_ROLES = {Role.ADMIN.value, Role.SUPERADMIN.value}


GRAMMATICAL_CATEGORIES: dict[str, str] = {
    "adj": "Adjetivo",
    "adj/adv": "Adjetivo/Adverbio",
    "adj/sust": "Adjetivo/Sustantivo",
    "adv": "Adverbio",
    "fórm": "Fórmula",
    "interj": "Interjección",
    "loc. sust/adj": "Locución sustantiva/adjetiva",
    "loc. adj": "Locución adjetiva",
    "loc. adj/adv": "Locución adjetiva/adverbial",
    "loc. adj/sust": "Locución adjetiva/sustantiva",
    "loc. adv/adj": "Locución adverbial/adjetiva",
    "loc. adv": "Locución adverbial",
    "loc. interj": "Locución interjectiva",
    "loc. sust": "Locución sustantiva",
    "loc. verb": "Locución verbal",
    "impers": "Impersonal",
    "marc. disc": "Marcador discursivo",
    "sust": "Sustantivo/Adjetivo",
    "f": "Sustantivo femenino",
    "m": "Sustantivo masculino",
    "m o f": "Sustantivo masculino o femenino",
    "m-f": "Sustantivo masculino-femenino",
    "m y f": "Sustantivo masculino y femenino",
    "m. pl": "Sustantivo masculino plural",
    "f. pl": "Sustantivo femenino plural",
    "intr": "Verbo intransitivo",
    "tr": "Verbo transitivo",
}

ORIGINS: dict[str, str] = {
    "africano": "Africano",
    "aimara": "Aymara",
    "aimara y quechua": "Aymara y quechua",
    "alemán": "Alemán",
    "alemán, con influencia del inglés": "Alemán, con influencia del inglés",
    "arahuaco": "Arawaco",
    "croata": "Croata",
    "francés": "Francés",
    "indígena antillano o mexicano": "Indígena antillano o mexicano",
    "inglés": "Inglés",
    "italiano": "Italiano",
    "kawesqar": "Kawésqar",
    "mapuche": "Mapuche",
    "maya": "Maya",
    "nahua": "Náhuatl",
    "polinésico": "Polinésico",
    "portugués": "Portugués",
    "quechua": "Quechua",
    "quechua o aimara": "Quechua o aymara",
    "rapa nui": "Rapa Nui",
    "romané": "Romané",
    "selknam": "Selk'nam",
    "taíno": "Taíno",
}

DICTIONARIES: dict[str, str] = {
    "duech": "DUECh",
    "difruech": "DIFRUECh",
    "dfp": "DFP",
    "damer": "Damer",
    "m2015": "María Moliner 2015",
}


@dataclass(frozen=True)
class MarkerGroup:
    """A sociolinguistic marker dimension of a meaning."""
    key: str      # API / payload key
    column: str   # meanings table column
    label: str
    labels: dict[str, str]


MARKER_GROUPS: tuple[MarkerGroup, ...] = (
    MarkerGroup("socialValuations", "social_valuation", "Valoración social",
                {"vulgar": "Vulgar", "euf": "Eufemismo"}),
    MarkerGroup("socialStratumMarkers", "social_mark", "Marca de estrato social",
                {"pop": "Popular", "cult": "Culto"}),
    MarkerGroup("styleMarkers", "style_mark", "Marca de estilo",
                {"espon": "Espontáneo", "esm": "Esmerado"}),
    MarkerGroup("intentionalityMarkers", "inten_mark", "Marca de intencionalidad",
                {"fest": "Festivo", "desp": "Despectivo", "afect": "Afectivo"}),
    MarkerGroup("geographicalMarkers", "geo_mark", "Marca geográfica",
                {"norte": "Norte", "centro": "Centro", "sur": "Sur", "austral": "Zona Austral"}),
    MarkerGroup("chronologicalMarkers", "chrono_mark", "Marca cronológica",
                {"hist": "Histórico", "obsol": "Obsolescente"}),
    MarkerGroup("frequencyMarkers", "freq_mark", "Marca de frecuencia",
                {"p. us": "Poco usado"}),
)

MARKER_KEYS: tuple[str, ...] = tuple(group.key for group in MARKER_GROUPS)
MARKER_COLUMNS: dict[str, str] = {group.key: group.column for group in MARKER_GROUPS}

# Spanish alphabet, ñ included
LETTERS: tuple[str, ...] = tuple("abcdefghijklmnñopqrstuvwxyz")
