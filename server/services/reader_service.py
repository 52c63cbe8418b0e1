"""Reader endpoints: list, read (segmented) and download books."""

import logging
from pathlib import Path
from typing import Any, Dict, List

from server.db.models import Book
from server.services.book_repository import BookRepository
from server.services.book_storage import (
    BookNotFoundError,
    read_book_text,
    resolve_book_file,
    safe_basename,
)
from server.services.content_segmenter import segment

logger = logging.getLogger("bookstore.reader")


def summarize_book(book: Book) -> Dict[str, Any]:
    """List view of a book: metadata only, no content."""
    return {
        "_id": book.id,
        "title": book.title,
        "author": book.author,
        "cover": book.cover,
        "isPaid": bool(book.is_paid),
        "price": book.price or 0,
    }


def list_books(repo: BookRepository) -> List[Dict[str, Any]]:
    return [summarize_book(b) for b in repo.list_books()]


def _get_book(repo: BookRepository, book_id: str) -> Book:
    book = repo.find_by_any_id(book_id)
    if book is None:
        logger.info("Book not found: %s", book_id)
        raise BookNotFoundError("Book not found")
    return book


def read_book(repo: BookRepository, books_dir: Path, book_id: str) -> Dict[str, Any]:
    """
    Load a book's text file and return metadata plus segmented content.

    Raises BookNotFoundError (unknown id, missing file) or BookReadError.
    """
    book = _get_book(repo, book_id)
    path = resolve_book_file(books_dir, book.file or "")
    text = read_book_text(path)
    segmented = segment(text, book.chapters)
    payload = summarize_book(book)
    payload["file"] = book.file
    payload.update(segmented.to_dict())
    return payload


def download_path(repo: BookRepository, books_dir: Path, book_id: str) -> Path:
    """Return the on-disk file for a book. Raises BookNotFoundError."""
    book = _get_book(repo, book_id)
    if not book.file or not safe_basename(book.file):
        raise BookNotFoundError("Book file not found")
    return resolve_book_file(books_dir, book.file)
