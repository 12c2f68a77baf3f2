"""Run the usage examples embedded in module docstrings."""

from __future__ import annotations

import doctest

import pytest

from rednote_slides import cleaning, cli, models, pagination, profile_store, settings, text
from rednote_slides.card import card_fonts, card_render, export

MODULES = [
    cleaning,
    cli,
    models,
    pagination,
    profile_store,
    settings,
    text,
    card_fonts,
    card_render,
    export,
]


@pytest.mark.parametrize("module", MODULES, ids=lambda module: module.__name__)
def test_docstring_examples(module):
    result = doctest.testmod(module, optionflags=doctest.ELLIPSIS)
    assert result.failed == 0
