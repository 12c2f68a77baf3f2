"""Behaviour of the card paginator."""

from __future__ import annotations

import random

import pytest

from rednote_slides.cleaning import split_paragraphs
from rednote_slides.pagination import (
    estimate_lines,
    fill_pages,
    page_cost,
    paginate,
    rebalance_trailing_page,
)
from rednote_slides.settings import CardSettings


def para(length: int, char: str = "x") -> str:
    return char * length


def _flatten(pages):
    return [item for page in pages for item in page]


def _random_body(rng: random.Random) -> str:
    lines = []
    for _ in range(rng.randint(0, 40)):
        kind = rng.random()
        if kind < 0.15:
            lines.append("   ")
        elif kind < 0.2:
            lines.append(para(rng.randint(600, 2500)))
        else:
            lines.append(f"  {para(rng.randint(1, 300), rng.choice('abc字'))} ")
    return "\n".join(lines)


RANDOM_BODIES = [_random_body(random.Random(seed)) for seed in range(60)]


def test_estimate_lines_rounds_up_and_counts_newlines(settings):
    assert estimate_lines("", settings=settings) == 0
    assert estimate_lines("   \n  ", settings=settings) == 0
    assert estimate_lines("a", settings=settings) == 1
    assert estimate_lines(para(26), settings=settings) == 1
    assert estimate_lines(para(27), settings=settings) == 2
    assert estimate_lines(" ab\ncd ", settings=settings) == 2


def test_estimate_lines_uses_configured_chars_per_line():
    narrow = CardSettings(chars_per_line=10)
    assert estimate_lines(para(25), settings=narrow) == 3


def test_empty_input_gives_no_pages():
    assert paginate("", "") == []


def test_title_without_paragraphs_gives_no_pages():
    assert paginate("A title", " \n\n  ") == []


def test_short_body_fits_one_page():
    assert paginate("Hi", "Short line.") == [["Short line."]]


def test_long_body_spans_pages_in_order(settings):
    paragraphs = [f"{idx:02d}" + para(38) for idx in range(30)]
    pages = paginate("", "\n".join(paragraphs))
    assert len(pages) >= 2
    assert _flatten(pages) == paragraphs
    assert [len(page) for page in pages] == [7, 8, 8, 7]


def test_single_oversized_paragraph_is_one_page():
    text = para(2000)
    assert paginate("Title", text) == [[text]]


def test_oversized_paragraph_is_isolated():
    big = para(2000)
    pages = paginate("", "\n".join(["short", big, "short two"]))
    assert pages == [["short"], [big], ["short two"]]


def test_sparse_last_page_takes_previous_paragraph():
    paragraphs = [f"{idx}" + para(39) for idx in range(7)]
    body = "\n".join(paragraphs + ["End."])
    filled = fill_pages(split_paragraphs(body))
    assert filled == [paragraphs, ["End."]]
    assert paginate("", body) == [paragraphs[:6], [paragraphs[6], "End."]]


def test_rebalance_requires_more_than_one_paragraph_on_previous_page():
    pages = [[para(400)], ["tail"]]
    assert rebalance_trailing_page(pages) == pages


def test_rebalance_skips_when_previous_page_has_no_headroom():
    pages = [["a", "b"], ["c"]]
    assert rebalance_trailing_page(pages) == pages


def test_rebalance_skips_when_last_page_is_not_sparse():
    pages = [[para(200), para(100)], [para(60)]]
    assert rebalance_trailing_page(pages) == pages


def test_rebalance_does_not_mutate_input():
    pages = [[para(200), para(100)], ["c"]]
    snapshot = [list(page) for page in pages]
    result = rebalance_trailing_page(pages)
    assert pages == snapshot
    assert result == [[para(200)], [para(100), "c"]]


def test_rebalance_thresholds_are_configurable():
    pages = [[para(200), para(100)], ["c"]]
    strict = CardSettings(sparse_page_lines=1.0)
    assert rebalance_trailing_page(pages, settings=strict) == pages


def test_empty_title_keeps_header_only_capacity(settings):
    assert settings.first_page_capacity(estimate_lines("")) == pytest.approx(17.5)


def test_first_page_capacity_shrinks_with_title_length(settings):
    capacities = [
        settings.first_page_capacity(estimate_lines(para(length), settings=settings))
        for length in range(0, 400, 7)
    ]
    assert capacities == sorted(capacities, reverse=True)
    assert min(capacities) == settings.min_first_page_lines


def test_long_title_moves_body_to_next_page():
    paragraphs = [para(40) for _ in range(6)]
    with_title = paginate(para(100), "\n".join(paragraphs))
    without_title = paginate("", "\n".join(paragraphs))
    assert len(without_title) == 1
    assert len(with_title[0]) < len(without_title[0])


@pytest.mark.parametrize("body", RANDOM_BODIES)
def test_pages_conserve_paragraphs(body):
    pages = paginate("Title", body)
    expected = [line.strip() for line in body.split("\n") if line.strip()]
    assert _flatten(pages) == expected
    assert all(pages)
    assert (len(pages) == 0) == (len(expected) == 0)


@pytest.mark.parametrize("body", RANDOM_BODIES)
def test_pages_respect_capacity(body, settings):
    title = "A day out"
    pages = paginate(title, body)
    first_capacity = settings.first_page_capacity(estimate_lines(title))
    for idx, page in enumerate(pages):
        capacity = first_capacity if idx == 0 else settings.max_lines_other_page
        limit = capacity + settings.overflow_tolerance
        oversized = [para for para in page if estimate_lines(para) > limit]
        if oversized:
            assert page == oversized
            continue
        used = page_cost(page) - settings.margin_bottom_cost
        assert used <= limit


@pytest.mark.parametrize("body", RANDOM_BODIES)
def test_rebalance_moves_at_most_one_paragraph(body):
    filled = fill_pages(split_paragraphs(body), title="T")
    pages = paginate("T", body)
    assert len(pages) == len(filled)
    if len(filled) < 2:
        assert pages == filled
        return
    assert pages[:-2] == filled[:-2]
    moved = len(filled[-2]) - len(pages[-2])
    assert moved in (0, 1)
    assert pages[-2] + pages[-1] == filled[-2] + filled[-1]


def test_paginate_is_deterministic():
    body = RANDOM_BODIES[7]
    assert paginate("T", body) == paginate("T", body)
