"""FastAPI dependency factories."""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session as DBSession

from server.config import Settings
from server.db.session import get_session_factory
from server.services.book_repository import BookRepository


@lru_cache()
def get_settings() -> Settings:
    """Singleton Settings -- override via app.dependency_overrides in tests."""
    return Settings()


def get_db_session(settings: Settings = Depends(get_settings)):
    factory = get_session_factory(settings)
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_book_repository(db: DBSession = Depends(get_db_session)) -> BookRepository:
    return BookRepository(db)
