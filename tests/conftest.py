"""
Pytest configuration and fixtures.
"""
import pytest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from werkzeug.security import generate_password_hash

from duech.auth import UserStore
from duech.core.config import AuthSettings, RateLimitSettings, Settings
from duech.core.database import Database
from duech.editorial import WordEditor
from duech.search import WordIndex


PASSWORD = "Secret123"

SAMPLE_USERS = [
    ("root", "root@duech.cl", "superadmin"),
    ("admin", "admin@duech.cl", "admin"),
    ("coord", "coord@duech.cl", "coordinator"),
    ("lexi", "lexi@duech.cl", "lexicographer"),
    ("edit", "edit@duech.cl", "editor"),
]

SAMPLE_WORDS = [
    {"lemma": "chancho", "status": "published", "values": [
        {"meaning": "Cerdo.", "grammarCategory": "m",
         "examples": [{"value": "Mataron el chancho.", "publication": "Martín Rivas", "author": "Blest Gana"}]},
    ]},
    {"lemma": "chanchería", "status": "published", "values": [
        {"meaning": "Tienda donde se vende carne de cerdo.", "grammarCategory": "f"},
    ]},
    {"lemma": "chiripa", "status": "published", "values": [
        {"meaning": "Casualidad favorable.", "grammarCategory": "f", "origin": "mapuche"},
    ]},
    {"lemma": "cahuín", "status": "published", "values": [
        {"meaning": "Enredo, chisme.", "grammarCategory": "m", "origin": "mapuche",
         "socialValuations": ["vulgar"]},
    ]},
    {"lemma": "pololo", "status": "published", "values": [
        {"meaning": "Novio.", "grammarCategory": "m", "origin": "mapuche",
         "examples": [{"value": "Vino con el pololo.", "publication": "Martín Rivas"}]},
    ]},
    {"lemma": "ñache", "status": "published", "values": [
        {"meaning": "Sangre de cordero aliñada.", "grammarCategory": "m", "origin": "mapuche"},
    ]},
    {"lemma": "niño", "status": "published", "values": [
        {"meaning": "Muchacho.", "grammarCategory": "m", "dictionary": "drae"},
    ]},
    {"lemma": "guagua", "status": "published", "values": [
        {"meaning": "Bebé.", "grammarCategory": "f", "origin": "quechua"},
    ]},
    {"lemma": "al tiro", "status": "published", "values": [
        {"meaning": "Inmediatamente.", "grammarCategory": "loc. adv"},
    ]},
    {"lemma": "cuncuna", "status": "published", "values": [
        {"number": 1, "meaning": "Oruga.", "grammarCategory": "f"},
        {"number": 2, "meaning": "Persona lenta.", "grammarCategory": "adj", "origin": "mapuche"},
    ]},
    {"lemma": "pololear", "status": "redacted", "values": [
        {"meaning": "Tener una relación amorosa.", "grammarCategory": "intr", "origin": "mapuche"},
    ]},
    {"lemma": "cachai", "status": "included", "values": [
        {"meaning": "¿Entiendes?", "grammarCategory": "interj"},
    ]},
]

PUBLISHED_ALPHABETICAL = [
    "al tiro", "cahuín", "chanchería", "chancho", "chiripa",
    "cuncuna", "guagua", "niño", "ñache", "pololo",
]


@pytest.fixture
def database(tmp_path):
    """Empty database in a temporary directory."""
    return Database(tmp_path / "duech.db")


@pytest.fixture
def editor(database):
    return WordEditor(database)


@pytest.fixture
def index(database):
    return WordIndex(database)


@pytest.fixture
def user_store(database):
    return UserStore(database)


@pytest.fixture
def users(user_store):
    """Sample users keyed by username; all share PASSWORD."""
    password_hash = generate_password_hash(PASSWORD)
    return {
        username: user_store.create_user(username, email, password_hash, role)
        for username, email, role in SAMPLE_USERS
    }


@pytest.fixture
def seeded(editor):
    """Database loaded with SAMPLE_WORDS."""
    for word in SAMPLE_WORDS:
        editor.create_word(word, status=word["status"])
    return editor.database


@pytest.fixture
def settings():
    return Settings(
        auth=AuthSettings(AUTH_SECRET="test-secret"),
        rate_limits=RateLimitSettings(RATE_LIMIT_ENABLED=False),
    )


@pytest.fixture
def app(settings, database, seeded, users):
    from duech.web import create_app
    app = create_app(settings, database=database)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, identifier: str, password: str = PASSWORD):
    """Log a test client in; the session cookie stays on the client."""
    response = client.post("/api/auth/login", json={"email": identifier, "password": password})
    assert response.status_code == 200, response.get_json()
    return response
