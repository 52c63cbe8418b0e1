"""Book lookup and creation over the SQLAlchemy session."""

import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session as DBSession

from server.db.models import Book
from server.services.content_segmenter import KnownChapter


def canonical_uuid(value: str) -> Optional[str]:
    """Return the canonical hyphenated UUID string, or None if value is not a UUID."""
    if not value:
        return None
    try:
        return str(uuid.UUID(value.strip()))
    except ValueError:
        return None


def normalize_chapters(records: Optional[List[Any]]) -> List[Dict[str, Optional[str]]]:
    """Coerce chapter records into the stored [{"title", "anchor_id"}] shape."""
    out: List[Dict[str, Optional[str]]] = []
    for rec in records or []:
        ch = KnownChapter.from_record(rec)
        if ch is None:
            continue
        out.append({"title": ch.title, "anchor_id": ch.anchor_id})
    return out


class BookRepository:
    """All book lookups go through here; callers never query Book directly."""

    def __init__(self, db: DBSession):
        self.db = db

    def find_by_any_id(self, book_id: str) -> Optional[Book]:
        """
        Find a book by id in any accepted spelling.

        UUID-shaped ids (bare hex, braces, upper case) are tried in canonical
        form first; the raw string is the fallback for ids that are not UUIDs
        or were stored verbatim.
        """
        if not book_id:
            return None
        canonical = canonical_uuid(book_id)
        if canonical is not None:
            book = self.db.get(Book, canonical)
            if book is not None:
                return book
        if canonical == book_id:
            return None
        return self.db.get(Book, book_id)

    def list_books(self) -> List[Book]:
        return self.db.query(Book).order_by(Book.title, Book.id).all()

    def add_book(
        self,
        title: str,
        author: str,
        file: Optional[str] = None,
        cover: Optional[str] = None,
        price: float = 0.0,
        is_paid: bool = False,
        chapters: Optional[List[Any]] = None,
        book_id: Optional[str] = None,
    ) -> Book:
        """Create a book row. Raises ValueError if book_id already exists."""
        if book_id is not None and self.db.get(Book, book_id) is not None:
            raise ValueError(f"Book already exists: {book_id}")
        book = Book(
            title=title.strip(),
            author=author.strip(),
            file=file,
            cover=cover,
            price=price or 0.0,
            is_paid=bool(is_paid),
            chapters=normalize_chapters(chapters) or None,
        )
        if book_id is not None:
            book.id = book_id
        self.db.add(book)
        self.db.flush()
        return book
