from __future__ import annotations

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from bible_reader.core.config import get_settings
from bible_reader.db.models import Base


def get_engine(database_url: str | None = None):
    url = database_url or get_settings().database_url
    return create_engine(url, future=True)


def make_session_factory(database_url: str | None = None) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine(database_url))


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker:
    return make_session_factory()


def init_db(session_factory: sessionmaker | None = None) -> None:
    factory = session_factory or get_session_factory()
    Base.metadata.create_all(factory.kw["bind"])
