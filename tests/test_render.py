from __future__ import annotations

import fitz
import pytest

from rednote_slides.card import card_render
from rednote_slides.card.card_render import CardDeck, render_card_pdf, write_deck_pdf
from rednote_slides.card.export import load_avatar
from rednote_slides.models import UserProfile
from rednote_slides.settings import CardSettings


@pytest.fixture
def drawn(monkeypatch):
    """Record header and paragraph drawing while still rendering them."""

    calls = {"header": 0, "paragraphs": []}
    draw_header = card_render._draw_header
    draw_paragraph = card_render._draw_paragraph

    def spy_header(canv, **kwargs):
        calls["header"] += 1
        return draw_header(canv, **kwargs)

    def spy_paragraph(canv, **kwargs):
        calls["paragraphs"].append((kwargs["markup"], kwargs["style"].name))
        return draw_paragraph(canv, **kwargs)

    monkeypatch.setattr(card_render, "_draw_header", spy_header)
    monkeypatch.setattr(card_render, "_draw_paragraph", spy_paragraph)
    return calls


def test_first_card_draws_header_and_title(deck, drawn):
    pdf = render_card_pdf(deck=deck, page_index=0, skip_fonts=True)
    assert pdf.startswith(b"%PDF")
    assert drawn["header"] == 1
    markups = [markup for markup, _ in drawn["paragraphs"]]
    assert markups[0] == "Hi"
    assert markups[1] == "Short line."
    assert [style for _, style in drawn["paragraphs"]] == ["card-title", "card-body", "card-body-cjk"]


def test_later_cards_skip_header_and_title(deck, drawn):
    render_card_pdf(deck=deck, page_index=1, skip_fonts=True)
    assert drawn["header"] == 0
    assert drawn["paragraphs"] == [("Second card.", "card-body")]


def test_blank_title_is_not_drawn(profile, drawn):
    deck = CardDeck(pages=[["body"]], title="   ", profile=profile, date_str="d")
    render_card_pdf(deck=deck, page_index=0, skip_fonts=True)
    assert drawn["header"] == 1
    assert [markup for markup, _ in drawn["paragraphs"]] == ["body"]


def test_card_page_size_matches_settings(deck):
    pdf = render_card_pdf(deck=deck, page_index=1, skip_fonts=True)
    with fitz.open(stream=pdf, filetype="pdf") as doc:
        assert doc.page_count == 1
        rect = doc[0].rect
    assert (rect.width, rect.height) == (1242, 1660)


def test_custom_card_size(profile):
    small = CardSettings(width=600, height=800)
    deck = CardDeck(pages=[["x"]], title="", profile=profile, date_str="d", settings=small)
    pdf = render_card_pdf(deck=deck, page_index=0, skip_fonts=True)
    with fitz.open(stream=pdf, filetype="pdf") as doc:
        assert doc[0].rect.width == 600


def test_avatar_is_drawn(png_data_url):
    deck = CardDeck(
        pages=[["body"]],
        title="T",
        profile=UserProfile("Mia", png_data_url),
        date_str="2024.01.01",
    )
    pdf = render_card_pdf(deck=deck, page_index=0, skip_fonts=True, avatar=load_avatar(png_data_url))
    with fitz.open(stream=pdf, filetype="pdf") as doc:
        assert doc[0].get_images()


def test_write_deck_pdf(deck, tmp_path):
    path = write_deck_pdf(deck=deck, output_path=tmp_path / "deck" / "cards.pdf")
    with fitz.open(path) as doc:
        assert doc.page_count == 2

