"""Pydantic response schemas for the bookstore API.

Field aliases keep the camelCase keys the reader client consumes.
"""

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _AliasModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ---- Books ----

class BookSummary(_AliasModel):
    id: str = Field(..., alias="_id")
    title: str
    author: str
    cover: Optional[str] = None
    is_paid: bool = Field(default=False, alias="isPaid")
    price: float = 0


# ---- Reader ----

class ParagraphBlock(BaseModel):
    type: Literal["paragraph"] = "paragraph"
    text: str


class ChapterBlock(_AliasModel):
    type: Literal["chapter"] = "chapter"
    title: str
    anchor_id: str = Field(..., alias="anchorId")


class ImageBlock(BaseModel):
    type: Literal["image"] = "image"
    url: str


ContentBlock = Annotated[Union[ParagraphBlock, ChapterBlock, ImageBlock], Field(discriminator="type")]


class ChapterItem(_AliasModel):
    title: str
    anchor_id: str = Field(..., alias="anchorId")


class ReadBookResponse(BookSummary):
    file: Optional[str] = None
    blocks: List[ContentBlock] = Field(default_factory=list)
    chapters: List[ChapterItem] = Field(default_factory=list)
    content: str


# ---- Health ----

class ApiHealthResponse(BaseModel):
    status: str
    time: str
