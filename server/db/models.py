"""SQLAlchemy models for the book catalog."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, Float, JSON, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class Book(Base):
    __tablename__ = "books"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    title: Mapped[str] = mapped_column(String(512), index=True, nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    cover: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    file: Mapped[str | None] = mapped_column(String(512), nullable=True)  # stored filename, basename used on read
    price: Mapped[float] = mapped_column(Float, default=0.0)
    is_paid: Mapped[bool] = mapped_column(Boolean, default=False)
    chapters: Mapped[list | None] = mapped_column(JSON, nullable=True)  # [{"title": ..., "anchor_id": ...}]
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow)
