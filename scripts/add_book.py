#!/usr/bin/env python3
"""
Register a plain-text book in the catalog.

Stores the file's basename as the book's file reference; with --copy the file
is copied into BOOKS_DIR first. Known chapters can be supplied as a JSON list
of titles or {"title", "anchor_id"} objects.
"""
from __future__ import annotations

import argparse
import json
import shutil
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


def load_chapters(path: Path | None) -> list:
    """Read a chapters JSON file. Raises ValueError if it is not a list."""
    if path is None:
        return []
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list of chapters")
    return data


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Register a .txt book in the catalog")
    parser.add_argument("file", type=Path, help="Plain-text book file")
    parser.add_argument("--title", required=True)
    parser.add_argument("--author", required=True)
    parser.add_argument("--cover", default=None, help="Cover image URL")
    parser.add_argument("--price", type=float, default=0.0)
    parser.add_argument("--paid", action="store_true", help="Mark as a paid book")
    parser.add_argument("--chapters-json", type=Path, default=None,
                        help="JSON list of known chapter titles or {title, anchor_id} objects")
    parser.add_argument("--copy", action="store_true", help="Copy the file into BOOKS_DIR")
    parser.add_argument("--books-dir", type=Path, default=None, help="Override BOOKS_DIR")
    parser.add_argument("--database-url", default=None, help="Override DATABASE_URL")
    args = parser.parse_args(argv)

    from server.config import Settings
    from server.db.session import get_db, init_db
    from server.services.book_repository import BookRepository

    settings = Settings(books_dir=args.books_dir, database_url=args.database_url)

    src = args.file.resolve()
    if not src.is_file():
        print(f"File not found: {src}", file=sys.stderr)
        return 1
    try:
        chapters = load_chapters(args.chapters_json)
    except (OSError, ValueError) as e:
        print(f"Could not load chapters: {e}", file=sys.stderr)
        return 1

    if args.copy:
        settings.books_dir.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, settings.books_dir / src.name)
        print(f"  ✓ Copied to {settings.books_dir / src.name}")

    init_db(settings)
    with get_db(settings) as db:
        book = BookRepository(db).add_book(
            title=args.title,
            author=args.author,
            file=src.name,
            cover=args.cover,
            price=args.price,
            is_paid=args.paid,
            chapters=chapters,
        )
        book_id = book.id

    print(f"  ✓ Registered '{args.title}' ({book_id})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
