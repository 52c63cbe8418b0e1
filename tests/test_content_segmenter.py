"""Tests for plain-text book segmentation: paragraphs, headings, images, anchors."""

import re
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from server.services.content_segmenter import (
    NO_CONTENT,
    ChapterEntry,
    ChapterHeading,
    Image,
    Paragraph,
    anchor_id,
    segment,
    split_paragraphs,
)

_SLUG = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def test_example_book():
    """Heading, paragraph and image in source order, with markup."""
    result = segment("CHAPTER ONE\n\nHello world.\n\n[image:pic.png]")
    assert result.blocks == [
        ChapterHeading(title="CHAPTER ONE", anchor_id="chapter-one"),
        Paragraph(text="Hello world."),
        Image(url="pic.png"),
    ]
    assert result.chapters == [ChapterEntry(title="CHAPTER ONE", anchor_id="chapter-one")]
    assert result.content == (
        '<h2>CHAPTER ONE</h2>\n<p>Hello world.</p>\n<img src="pic.png" alt="image" />'
    )


def test_example_book_to_dict():
    """JSON shape uses type tags and camelCase anchorId."""
    result = segment("CHAPTER ONE\n\nHello world.\n\n[image:pic.png]").to_dict()
    assert result["blocks"] == [
        {"type": "chapter", "title": "CHAPTER ONE", "anchorId": "chapter-one"},
        {"type": "paragraph", "text": "Hello world."},
        {"type": "image", "url": "pic.png"},
    ]
    assert result["chapters"] == [{"title": "CHAPTER ONE", "anchorId": "chapter-one"}]


def test_empty_input():
    for text in ("", "   ", "\n\n\n", " \r\n \r\n "):
        result = segment(text)
        assert result.blocks == []
        assert result.chapters == []
        assert result.content == NO_CONTENT


def test_single_paragraph_without_blank_lines():
    """Line breaks inside a paragraph collapse to spaces; one block total."""
    result = segment("It was a dark\nand stormy night;\nthe rain fell.")
    assert result.blocks == [Paragraph(text="It was a dark and stormy night; the rain fell.")]
    assert result.chapters == []


def test_split_paragraphs_crlf_and_runs_of_blank_lines():
    text = "First line\r\ncontinues.\r\n\r\n\r\n\r\nSecond.\n\n\n  \n\nThird."
    assert split_paragraphs(text) == ["First line continues.", "Second.", "Third."]


def test_known_chapter_uses_stored_anchor():
    """Case-insensitive exact match keeps the stored title and anchor id."""
    known = [{"title": "The Long Road", "anchor_id": "road"}]
    result = segment("the long road\n\nThey walked for days.", known)
    assert result.blocks[0] == ChapterHeading(title="The Long Road", anchor_id="road")
    assert result.chapters == [ChapterEntry(title="The Long Road", anchor_id="road")]


def test_known_chapter_accepts_camel_case_anchor():
    known = [{"title": "Prologue", "anchorId": "pro"}]
    result = segment("Prologue\n\nOnce upon a time.", known)
    assert result.blocks[0] == ChapterHeading(title="Prologue", anchor_id="pro")


def test_known_chapter_without_anchor_derives_one():
    known = [{"title": "A Quiet Beginning"}]
    result = segment("  A QUIET beginning  \n\nSome text here.", known)
    assert result.blocks[0] == ChapterHeading(title="A Quiet Beginning", anchor_id="a-quiet-beginning")


def test_known_chapters_fallback_when_none_found():
    """Stored chapters become the chapter list when the text has no headings."""
    known = [
        {"title": "Morning", "anchor_id": "am"},
        {"title": "Evening"},
        {"title": "Evening"},
    ]
    result = segment("The sun rose.\n\nThe sun set.", known)
    assert [b.type for b in result.blocks] == ["paragraph", "paragraph"]
    assert result.chapters == [
        ChapterEntry(title="Morning", anchor_id="am"),
        ChapterEntry(title="Evening", anchor_id="evening"),
    ]


def test_known_chapters_fallback_skipped_when_heading_detected():
    known = [{"title": "Morning", "anchor_id": "am"}]
    result = segment("PART ONE\n\nThe sun rose.", known)
    assert result.chapters == [ChapterEntry(title="PART ONE", anchor_id="part-one")]


def test_heading_keywords_and_roman_numerals():
    text = "Chapter 3: The Storm\n\nPart Two\n\nIV. A New Hope\n\nThe wind blew."
    result = segment(text)
    assert [b.type for b in result.blocks] == ["chapter", "chapter", "chapter", "paragraph"]
    assert [c.anchor_id for c in result.chapters] == ["chapter-3-the-storm", "part-two", "iv-a-new-hope"]


def test_keyword_must_be_whole_word():
    result = segment("Partial success was all they got.")
    assert result.blocks == [Paragraph(text="Partial success was all they got.")]


def test_short_uppercase_sentence_is_a_heading():
    """Short all-caps paragraphs are headings, even if they read like dialogue."""
    result = segment("STOP!\n\nShe froze.")
    assert result.blocks[0] == ChapterHeading(title="STOP!", anchor_id="stop")


def test_long_uppercase_paragraph_is_not_a_heading():
    shout = "THIS IS A VERY LONG SHOUTED SENTENCE THAT GOES ON AND ON WITHOUT END"
    assert len(shout.split()) >= 12
    result = segment(shout)
    assert result.blocks == [Paragraph(text=shout)]


def test_scene_break_without_slug_stays_paragraph():
    """Headings need a usable anchor id; punctuation-only breaks stay paragraphs."""
    result = segment("Before.\n\n* * *\n\nAfter.")
    assert result.blocks[1] == Paragraph(text="* * *")
    assert result.chapters == []


def test_image_url_trimmed():
    result = segment("[image:  http://x/y.png  ]")
    assert result.blocks == [Image(url="http://x/y.png")]


def test_image_plain_url():
    result = segment("[image:http://x/y.png]")
    assert result.blocks == [Image(url="http://x/y.png")]
    assert result.content == '<img src="http://x/y.png" alt="image" />'


def test_image_keyword_case_insensitive():
    result = segment("[Image:cover.jpg]")
    assert result.blocks == [Image(url="cover.jpg")]


def test_degenerate_image_yields_empty_url():
    result = segment("[image:]")
    assert result.blocks == [Image(url="")]


def test_malformed_image_falls_through_to_paragraph():
    for text in ("[image:pic.png", "see [image:pic.png] here", "[img:pic.png]"):
        result = segment(text)
        assert result.blocks == [Paragraph(text=text)]


def test_chapter_list_deduplicates_by_anchor():
    """Differently cased headings with the same slug share one chapter entry."""
    result = segment("CHAPTER ONE\n\nText.\n\nChapter One\n\nMore text.")
    chapter_blocks = [b for b in result.blocks if b.type == "chapter"]
    assert len(chapter_blocks) == 2
    assert {b.anchor_id for b in chapter_blocks} == {"chapter-one"}
    assert result.chapters == [ChapterEntry(title="CHAPTER ONE", anchor_id="chapter-one")]


def test_chapter_anchor_ids_unique_and_non_empty():
    text = "PART ONE\n\nI. Dawn\n\nPart One\n\nII. Dusk\n\nPART—ONE\n\nEnd."
    result = segment(text)
    anchors = [c.anchor_id for c in result.chapters]
    assert len(anchors) == len(set(anchors))
    assert all(anchors)


def test_markup_rendering():
    result = segment("INTRO\n\nBody text.")
    assert result.content == "<h2>INTRO</h2>\n<p>Body text.</p>"


def test_anchor_id_examples():
    assert anchor_id("CHAPTER ONE") == "chapter-one"
    assert anchor_id("Café Society") == "cafe-society"
    assert anchor_id("Part I: The Beginning!") == "part-i-the-beginning"
    assert anchor_id("Don't Panic") == "dont-panic"
    assert anchor_id("  --Hello--World--  ") == "hello-world"
    assert anchor_id("“Quoted” (title)") == "quoted-title"
    assert anchor_id("Naïve Ångström") == "naive-angstrom"
    assert anchor_id("Straße") == "strae"
    assert anchor_id("Bjørn Lake") == "bjrn-lake"
    assert anchor_id("Глава 1") == "1"
    assert anchor_id("") == ""


def test_anchor_id_deterministic_and_slug_shaped():
    titles = [
        "CHAPTER ONE",
        "Chapter 12 — The Return",
        "  spaces   everywhere  ",
        "Über_alles / A&B",
        "IV. The Storm...",
        "émigré's café",
        "tab\tand\nnewline",
        "100% Pure",
    ]
    for title in titles:
        a = anchor_id(title)
        assert a == anchor_id(title)
        assert _SLUG.match(a), (title, a)
        assert anchor_id(a) == a


def test_anchor_id_dashes_separate_words():
    """Dash punctuation splits words instead of being removed."""
    assert anchor_id("PART—ONE") == "part-one"
    assert anchor_id("Before–After") == "before-after"
    assert anchor_id("well-known") == "well-known"


def test_known_chapter_non_string_anchor_is_derived():
    """A stored anchor that is not a string falls back to the title's slug."""
    known = [{"title": "Prologue", "anchor_id": 7}, {"title": "Epilogue", "anchorId": ["x"]}]
    result = segment("Prologue\n\nText.\n\nEpilogue", known)
    assert result.blocks[0] == ChapterHeading(title="Prologue", anchor_id="prologue")
    assert result.blocks[2] == ChapterHeading(title="Epilogue", anchor_id="epilogue")
    assert [c.anchor_id for c in result.chapters] == ["prologue", "epilogue"]
