from __future__ import annotations

import dataclasses
import json

import pytest

from rednote_slides.errors import SettingsError
from rednote_slides.settings import (
    DEFAULT_SETTINGS,
    CardSettings,
    load_card_settings,
    settings_from_mapping,
)


def test_defaults_match_card_geometry():
    assert DEFAULT_SETTINGS.width == 1242
    assert DEFAULT_SETTINGS.height == 1660
    assert DEFAULT_SETTINGS.body_width == 1062
    assert DEFAULT_SETTINGS.body_height == 1460
    assert DEFAULT_SETTINGS.title_leading == pytest.approx(96)


def test_settings_are_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_SETTINGS.chars_per_line = 10


def test_title_cost_and_floor():
    settings = CardSettings()
    assert settings.title_cost(2) == pytest.approx(6.5)
    assert settings.first_page_capacity(1) == pytest.approx(13.5)
    assert settings.first_page_capacity(10) == settings.min_first_page_lines


def test_load_card_settings_applies_overrides(tmp_path):
    path = tmp_path / "card.json"
    path.write_text(json.dumps({"chars_per_line": 30, "sparse_page_lines": 2}))
    loaded = load_card_settings(path)
    assert loaded.chars_per_line == 30
    assert loaded.sparse_page_lines == 2
    assert loaded.width == DEFAULT_SETTINGS.width


def test_load_card_settings_rejects_unknown_keys(tmp_path):
    path = tmp_path / "card.json"
    path.write_text(json.dumps({"chars_per_lines": 30}))
    with pytest.raises(SettingsError, match="chars_per_lines"):
        load_card_settings(path)


@pytest.mark.parametrize("content", ["[1, 2]", "{not json"])
def test_load_card_settings_rejects_bad_files(tmp_path, content):
    path = tmp_path / "card.json"
    path.write_text(content)
    with pytest.raises(SettingsError):
        load_card_settings(path)


def test_load_card_settings_missing_file(tmp_path):
    with pytest.raises(SettingsError):
        load_card_settings(tmp_path / "missing.json")


@pytest.mark.parametrize(
    "overrides",
    [
        {"chars_per_line": "26.5"},
        {"chars_per_line": True},
        {"overflow_tolerance": None},
        {"max_lines_other_page": [21.5]},
        {"text_color": 0},
        {"font_path": 3},
    ],
)
def test_settings_from_mapping_rejects_wrong_types(overrides):
    with pytest.raises(SettingsError, match=next(iter(overrides))):
        settings_from_mapping(overrides)


@pytest.mark.parametrize(
    "overrides",
    [
        {"chars_per_line": 0},
        {"chars_per_line": -3},
        {"width": 0},
        {"max_lines_first_page": -1},
        {"max_lines_other_page": -0.5},
        {"margin_bottom_cost": -0.6},
        {"header_cost": -4},
        {"min_first_page_lines": -1},
        {"overflow_tolerance": -0.5},
        {"sparse_page_lines": -3},
        {"headroom_page_lines": -10},
        {"chars_per_line": float("nan")},
    ],
)
def test_settings_from_mapping_rejects_out_of_range_values(overrides):
    with pytest.raises(SettingsError, match=next(iter(overrides))):
        settings_from_mapping(overrides)


def test_settings_from_mapping_accepts_ints_and_null_font(settings):
    loaded = settings_from_mapping({"chars_per_line": 20, "font_path": None, "overflow_tolerance": 0})
    assert loaded.chars_per_line == 20
    assert loaded.overflow_tolerance == 0


@pytest.mark.parametrize("content", ['{"chars_per_line": 0}', '{"chars_per_line": "26.5"}'])
def test_invalid_settings_file_raises_before_pagination(tmp_path, content):
    path = tmp_path / "card.json"
    path.write_text(content)
    with pytest.raises(SettingsError):
        load_card_settings(path)


def test_direct_construction_is_range_checked():
    with pytest.raises(SettingsError):
        CardSettings(chars_per_line=0)
