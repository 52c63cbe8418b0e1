"""Database layer: SQLAlchemy models and session."""

from server.db.models import Base, Book
from server.db.session import get_db, init_db

__all__ = [
    "Base",
    "Book",
    "get_db",
    "init_db",
]
