"""Configuration for the bookstore API server."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

DEFAULT_CORS_ORIGINS = ["http://localhost:5173", "http://127.0.0.1:5173"]


@dataclass
class Settings:
    """
    Filesystem paths, database URL and HTTP options the server needs.

    Defaults resolve relative to the project root.
    Every field is overridable at construction for testing.
    """
    books_dir: Optional[Path] = None
    database_url: Optional[str] = None
    cors_origins: List[str] = field(default_factory=list)

    def __post_init__(self):
        project_root = Path(__file__).resolve().parent.parent

        if self.books_dir is None:
            env_dir = os.environ.get("BOOKS_DIR")
            self.books_dir = Path(env_dir) if env_dir else project_root / "books"
        self.books_dir = Path(self.books_dir)

        if self.database_url is None:
            self.database_url = os.environ.get("DATABASE_URL", "sqlite:///./bookstore.db")

        if not self.cors_origins:
            env_origins = os.environ.get("CORS_ORIGINS", "")
            origins = [o.strip() for o in env_origins.split(",") if o.strip()]
            self.cors_origins = origins or list(DEFAULT_CORS_ORIGINS)
