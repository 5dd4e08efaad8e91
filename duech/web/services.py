"""
Application services shared by the blueprints.
"""
from dataclasses import dataclass

from flask import current_app

from ..auth import AccountService, SessionManager, UserStore
from ..core.config import Settings
from ..core.database import Database
from ..editorial import WordEditor
from ..search import WordIndex, WordOfTheDay


@dataclass
class Services:
    settings: Settings
    database: Database
    index: WordIndex
    editor: WordEditor
    word_of_the_day: WordOfTheDay
    users: UserStore
    sessions: SessionManager
    accounts: AccountService


def build_services(settings: Settings, database: Database | None = None) -> Services:
    """Wire storage, search, editorial and auth components for one app."""
    database = database or Database(settings.resolve_db_path())
    index = WordIndex(database)
    users = UserStore(database)
    return Services(
        settings=settings,
        database=database,
        index=index,
        editor=WordEditor(database),
        word_of_the_day=WordOfTheDay(index),
        users=users,
        sessions=SessionManager(users, settings.auth.secret, settings.auth.max_age),
        accounts=AccountService(users),
    )


def get_services() -> Services:
    return current_app.extensions["duech"]
