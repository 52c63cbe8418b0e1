"""FastAPI application -- routes for the bookstore reader."""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import List

_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse

from server.__version__ import __version__
from server.config import Settings
from server.dependencies import get_book_repository, get_settings
from server.schemas import ApiHealthResponse, BookSummary, ReadBookResponse
from server.services import reader_service
from server.services.book_repository import BookRepository
from server.services.book_storage import BookNotFoundError, BookReadError

logger = logging.getLogger("bookstore")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan: create tables. Book files are read per request."""
    from server.db.session import init_db
    settings = get_settings()
    init_db(settings)
    logger.info("Startup: database ready, books_dir=%s", settings.books_dir)
    yield
    logger.info("Shutdown: complete")


app = FastAPI(title="Bookstore", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


# ---- Health (no dependencies, always fast) ----

@app.get("/health")
def health():
    """Minimal health check. No deps. Always returns immediately."""
    return {"ok": True}


@app.get("/api/health", response_model=ApiHealthResponse)
def api_health():
    return {"status": "OK", "time": datetime.now(timezone.utc).isoformat()}


# ---- Books ----

@app.get("/api/books", response_model=List[BookSummary])
def books_list(repo: BookRepository = Depends(get_book_repository)):
    """All books, metadata only."""
    try:
        return reader_service.list_books(repo)
    except Exception:
        logger.exception("Listing books failed")
        raise HTTPException(status_code=500, detail="Failed to fetch books")


@app.get("/api/books/read/{book_id}", response_model=ReadBookResponse)
def books_read(
    book_id: str,
    repo: BookRepository = Depends(get_book_repository),
    settings: Settings = Depends(get_settings),
):
    """Book metadata plus segmented content (blocks, chapters, rendered markup)."""
    try:
        return reader_service.read_book(repo, settings.books_dir, book_id)
    except BookNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BookReadError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception:
        logger.exception("Read failed for book %s", book_id)
        raise HTTPException(status_code=500, detail="Failed to read book")


@app.get("/api/books/download/{book_id}")
def books_download(
    book_id: str,
    repo: BookRepository = Depends(get_book_repository),
    settings: Settings = Depends(get_settings),
):
    """Raw book file as an attachment."""
    try:
        path = reader_service.download_path(repo, settings.books_dir, book_id)
    except BookNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.exception("Download failed for book %s", book_id)
        raise HTTPException(status_code=500, detail="Failed to download book")
    return FileResponse(path, filename=path.name, media_type="text/plain; charset=utf-8")
