"""
Seed the dictionary database.

Loads a JSON dump of words and optionally creates the first superadmin.
The dump is a list of objects shaped like the editor payload:

    [{"lemma": "chancho", "letter": "c", "status": "published",
      "values": [{"meaning": "Cerdo.", "grammarCategory": "m"}]}]

Usage:
    python scripts/seed.py data/words.json
    python scripts/seed.py data/words.json --admin admin --admin-email admin@example.cl
    python scripts/seed.py --clear data/words.json
"""
import argparse
import getpass
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from werkzeug.security import generate_password_hash

from duech.auth import UserStore, validate_password
from duech.core import Database, DuplicateWordError, ValidationError, get_settings
from duech.core.vocabulary import Role
from duech.editorial import WordEditor

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger("seed")


def load_words(editor: WordEditor, path: Path) -> tuple[int, int]:
    """Create every word in the dump; returns (created, skipped)."""
    entries = json.loads(path.read_text(encoding="utf-8"))
    created = skipped = 0
    for entry in entries:
        try:
            editor.create_word(
                entry,
                letter=entry.get("letter"),
                status=entry.get("status"),
            )
            created += 1
        except DuplicateWordError:
            skipped += 1
        except ValidationError as e:
            logger.warning(f"Skipping {entry.get('lemma')!r}: {e}")
            skipped += 1
    return created, skipped


def create_superadmin(store: UserStore, username: str, email: str | None):
    if store.get_by_username(username):
        logger.info(f"User '{username}' already exists")
        return
    password = getpass.getpass(f"Password for {username}: ")
    validate_password(password)
    store.create_user(username.lower(), email.lower() if email else None,
                      generate_password_hash(password), Role.SUPERADMIN.value)


def main():
    parser = argparse.ArgumentParser(description="Seed the DUECh database")
    parser.add_argument("dump", nargs="?", type=Path, help="JSON list of words")
    parser.add_argument("--db", type=Path, help="Database path (default from settings)")
    parser.add_argument("--clear", action="store_true", help="Delete existing content first")
    parser.add_argument("--admin", help="Username of a superadmin to create")
    parser.add_argument("--admin-email", help="E-mail of the superadmin")
    args = parser.parse_args()

    database = Database(args.db or get_settings().resolve_db_path())
    if args.clear:
        database.clear()

    if args.dump:
        created, skipped = load_words(WordEditor(database), args.dump)
        logger.info(f"Loaded {created} words ({skipped} skipped) from {args.dump}")

    if args.admin:
        try:
            create_superadmin(UserStore(database), args.admin, args.admin_email)
        except ValidationError as e:
            logger.error(f"Superadmin not created: {e}")
            sys.exit(1)


if __name__ == "__main__":
    main()
