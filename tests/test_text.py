from __future__ import annotations

from pyphen import Pyphen

from rednote_slides.cleaning import normalize_line_breaks, normalize_whitespace, split_paragraphs
from rednote_slides.text import SOFT_HYPHEN, escape_markup, has_cjk, paragraph_markup


def test_split_paragraphs_drops_blank_lines_and_trims():
    assert split_paragraphs("\n  first  \n\t\n second\n") == ["first", "second"]
    assert split_paragraphs("") == []


def test_split_paragraphs_handles_crlf():
    assert split_paragraphs("a\r\nb\r\n") == ["a", "b"]


def test_literal_newline_marker_splits_like_typed_newline():
    typed = "first\nsecond"
    escaped = normalize_line_breaks("first\\nsecond")
    assert split_paragraphs(escaped) == split_paragraphs(typed)


def test_normalize_whitespace():
    assert normalize_whitespace(" Mia\u00a0 Chen\u200b ") == "Mia Chen"


def test_has_cjk():
    assert has_cjk("今天")
    assert has_cjk("カード")
    assert not has_cjk("plain text")


def test_escape_markup():
    assert escape_markup("a & <b>") == "a &amp; &lt;b&gt;"


def test_paragraph_markup_hyphenates_latin_only():
    dic = Pyphen(lang="en_US")
    latin = paragraph_markup("extraordinary adventures", hyphenator=dic)
    assert SOFT_HYPHEN in latin
    assert latin.replace(SOFT_HYPHEN, "") == "extraordinary adventures"
    cjk = paragraph_markup("今天 extraordinary", hyphenator=dic)
    assert SOFT_HYPHEN not in cjk


def test_paragraph_markup_keeps_escaping():
    dic = Pyphen(lang="en_US")
    assert paragraph_markup("1 < 2 & 3", hyphenator=dic) == "1 &lt; 2 &amp; 3"
    assert paragraph_markup("x", hyphenator=None) == "x"
