"""
Plain-text book segmentation for the reader.

Splits a raw text file into paragraph, chapter and image blocks, collects a
deduplicated chapter list for navigation and renders the blocks as markup.

Supported input: blank-line separated paragraphs, uppercase or keyword
chapter headings ("CHAPTER 3", "PART TWO", "IV. The Storm") and
``[image:<url>]`` paragraphs.
"""

import re
import unicodedata
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union

NO_CONTENT = "No content available."

# One or more blank lines, CRLF tolerant
_PARAGRAPH_BREAK = re.compile(r"\r?\n\r?\n+")
_LINE_BREAK = re.compile(r"\r?\n")

# Keyword or roman-numeral headings: "PART", "CHAPTER", "XIV. "
_HEADING_PREFIX = re.compile(r"^\s*(?:PART\b|CHAPTER\b|[IVXLCDM]+\.\s+)", re.I)
_IMAGE_REF = re.compile(r"^\[image:(.*)\]$", re.I)

_HEADING_MAX_CHARS = 120
_HEADING_MAX_WORDS = 12

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True)
class Paragraph:
    text: str
    type: str = field(default="paragraph", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "text": self.text}

    def render(self) -> str:
        return f"<p>{self.text}</p>"


@dataclass(frozen=True)
class ChapterHeading:
    title: str
    anchor_id: str
    type: str = field(default="chapter", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "title": self.title, "anchorId": self.anchor_id}

    def render(self) -> str:
        return f"<h2>{self.title}</h2>"


@dataclass(frozen=True)
class Image:
    url: str
    type: str = field(default="image", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "url": self.url}

    def render(self) -> str:
        return f'<img src="{self.url}" alt="image" />'


Block = Union[Paragraph, ChapterHeading, Image]


@dataclass(frozen=True)
class ChapterEntry:
    title: str
    anchor_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "anchorId": self.anchor_id}


@dataclass(frozen=True)
class KnownChapter:
    """Chapter metadata stored with the book record."""
    title: str
    anchor_id: Optional[str] = None

    @classmethod
    def from_record(cls, record: Any) -> Optional["KnownChapter"]:
        """Accept {"title", "anchor_id"/"anchorId"} dicts, KnownChapter or plain titles.

        Stored anchors that are not strings are ignored and derived from the title.
        """
        if isinstance(record, KnownChapter):
            return record
        if isinstance(record, str):
            return cls(title=record)
        if isinstance(record, dict):
            title = record.get("title")
            if not title or not isinstance(title, str):
                return None
            anchor = record.get("anchor_id") or record.get("anchorId")
            if not isinstance(anchor, str):
                anchor = None
            return cls(title=title, anchor_id=anchor or None)
        return None

    def resolved_anchor_id(self) -> str:
        return self.anchor_id or anchor_id(self.title)


@dataclass
class SegmentedBook:
    blocks: List[Block]
    chapters: List[ChapterEntry]
    content: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "blocks": [b.to_dict() for b in self.blocks],
            "chapters": [c.to_dict() for c in self.chapters],
            "content": self.content,
        }


def anchor_id(title: str) -> str:
    """
    Derive a URL/HTML-safe slug from a chapter title.

    Lowercases, folds diacritics (NFKD, combining marks dropped), removes
    punctuation and symbols, then joins the remaining alphanumeric runs with
    single hyphens. Non-ASCII letters without an ASCII decomposition are dropped
    ("Straße" gives "strae").
    """
    if not title:
        return ""
    s = unicodedata.normalize("NFKD", title.lower())
    kept = []
    for ch in s:
        if unicodedata.combining(ch):
            continue
        cat = unicodedata.category(ch)
        # Dashes separate words like whitespace does
        if cat == "Pd":
            kept.append(" ")
        elif ch.isspace() or (ch.isascii() and ch.isalnum()):
            kept.append(ch)
    s = "".join(kept)
    return _NON_ALNUM_RUN.sub("-", s).strip("-")


def split_paragraphs(text: str) -> List[str]:
    """Split on blank lines; internal line breaks become spaces. Empty paragraphs dropped."""
    if not text:
        return []
    paras = []
    for raw in _PARAGRAPH_BREAK.split(text):
        para = _LINE_BREAK.sub(" ", raw).strip()
        if para:
            paras.append(para)
    return paras


def is_heading(para: str) -> bool:
    """
    Keyword/roman-numeral prefix, or short all-uppercase paragraph.

    Short uppercase sentences ("STOP!") also qualify.
    """
    if _HEADING_PREFIX.match(para):
        return True
    return (
        para == para.upper()
        and len(para) < _HEADING_MAX_CHARS
        and len(para.split()) < _HEADING_MAX_WORDS
    )


def _known_chapters(records: Optional[Iterable[Any]]) -> List[KnownChapter]:
    if not records:
        return []
    known = []
    for rec in records:
        ch = KnownChapter.from_record(rec)
        if ch is not None:
            known.append(ch)
    return known


def _classify(para: str, known_by_title: Dict[str, KnownChapter]) -> Block:
    match = known_by_title.get(para.strip().lower())
    if match is not None:
        anchor = match.resolved_anchor_id()
        if anchor:
            return ChapterHeading(title=match.title, anchor_id=anchor)

    if is_heading(para):
        anchor = anchor_id(para)
        if anchor:
            return ChapterHeading(title=para, anchor_id=anchor)

    m = _IMAGE_REF.match(para)
    if m:
        return Image(url=m.group(1).strip())

    return Paragraph(text=para)


def render_blocks(blocks: List[Block]) -> str:
    return "\n".join(b.render() for b in blocks) or NO_CONTENT


def segment(text: str, known_chapters: Optional[Iterable[Any]] = None) -> SegmentedBook:
    """
    Segment raw book text into blocks, a chapter list and rendered markup.

    known_chapters: stored chapter records; a paragraph equal to one of their
    titles (case-insensitive) becomes that chapter, keeping its stored anchor id.
    When none of them is found in the text (and no heading is detected), the
    chapter list is built from the stored records instead.
    """
    known = _known_chapters(known_chapters)
    known_by_title: Dict[str, KnownChapter] = {}
    for ch in known:
        known_by_title.setdefault(ch.title.strip().lower(), ch)

    blocks: List[Block] = []
    chapters: List[ChapterEntry] = []
    seen_anchors = set()

    for para in split_paragraphs(text):
        block = _classify(para, known_by_title)
        blocks.append(block)
        if isinstance(block, ChapterHeading) and block.anchor_id not in seen_anchors:
            seen_anchors.add(block.anchor_id)
            chapters.append(ChapterEntry(title=block.title, anchor_id=block.anchor_id))

    if known and not chapters:
        for ch in known:
            anchor = ch.resolved_anchor_id()
            if anchor and anchor not in seen_anchors:
                seen_anchors.add(anchor)
                chapters.append(ChapterEntry(title=ch.title, anchor_id=anchor))

    return SegmentedBook(blocks=blocks, chapters=chapters, content=render_blocks(blocks))
