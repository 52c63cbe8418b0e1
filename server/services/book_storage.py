"""Book file storage: trusted path join and text reads under BOOKS_DIR."""

import logging
from pathlib import Path

logger = logging.getLogger("bookstore.storage")


class BookNotFoundError(Exception):
    """Raised when a book id is unknown or its file is missing on storage."""


class BookReadError(Exception):
    """Raised when a book file exists but cannot be read."""


def safe_basename(stored_name: str) -> str:
    """
    Strip every directory component from a stored filename.

    Both separators are honoured so Windows-style names stored by other
    clients cannot climb out of the books directory either.
    """
    if not stored_name:
        return ""
    name = stored_name.replace("\\", "/").rstrip("/")
    return name.rsplit("/", 1)[-1].strip()


def safe_join(books_dir: Path, stored_name: str) -> Path:
    """Join the basename of stored_name onto books_dir. Raises BookNotFoundError if unusable."""
    name = safe_basename(stored_name)
    if name in ("", ".", ".."):
        raise BookNotFoundError("Book file not found on server")
    return Path(books_dir) / name


def resolve_book_file(books_dir: Path, stored_name: str) -> Path:
    """Return the on-disk path for a stored filename; BookNotFoundError if absent."""
    path = safe_join(books_dir, stored_name)
    if not path.is_file():
        logger.info("Book file missing: %s", path)
        raise BookNotFoundError("Book file not found on server")
    return path


def read_book_text(path: Path) -> str:
    """Read the whole file as UTF-8. Raises BookReadError on I/O or decode failure."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.exception("Error reading book file %s", path)
        raise BookReadError("Failed to load book file") from e
