"""Card geometry and pagination constants shared by layout and rendering."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

from .errors import SettingsError

POSITIVE_FIELDS = ("width", "height", "chars_per_line")
NON_NEGATIVE_FIELDS = (
    "max_lines_first_page",
    "max_lines_other_page",
    "margin_bottom_cost",
    "header_cost",
    "title_cost_scale",
    "title_cost_padding",
    "min_first_page_lines",
    "overflow_tolerance",
    "sparse_page_lines",
    "headroom_page_lines",
)


@dataclass(frozen=True, slots=True)
class CardSettings:
    """Geometry constants used by the paginator and the card renderer.

    Sizes are in card pixels; the renderer maps one pixel to one PDF point.
    The ``*_lines`` and ``*_cost`` fields are expressed in body text lines
    and must stay in step with the typography fields above them.

    Example:
        >>> settings = CardSettings()
        >>> settings.body_width
        1062.0
    """

    width: float = 1242.0
    height: float = 1660.0
    padding_x: float = 90.0
    padding_y: float = 100.0
    background_color: str = "#F8F9F4"
    text_color: str = "#2C2C2C"
    title_color: str = "#111827"
    muted_color: str = "#6B7280"
    page_number_color: str = "#9CA3AF"
    avatar_size: float = 100.0
    avatar_placeholder_color: str = "#E5E7EB"
    header_gap: float = 32.0
    header_font_size: float = 36.0
    header_line_gap: float = 8.0
    content_offset_first_page: float = 180.0
    title_font_size: float = 80.0
    title_leading_ratio: float = 1.2
    title_space_after: float = 40.0
    body_font_size: float = 40.0
    body_leading: float = 72.0
    paragraph_space_after: float = 48.0
    page_number_font_size: float = 24.0
    page_number_inset: float = 40.0
    hyphenation_lang: str = "en_US"
    font_path: str | None = None
    bold_font_path: str | None = None
    max_lines_first_page: float = 21.5
    max_lines_other_page: float = 21.5
    chars_per_line: float = 26.5
    margin_bottom_cost: float = 0.6
    header_cost: float = 4.0
    title_cost_scale: float = 2.5
    title_cost_padding: float = 1.5
    min_first_page_lines: float = 4.0
    overflow_tolerance: float = 0.5
    sparse_page_lines: float = 3.0
    headroom_page_lines: float = 10.0

    def __post_init__(self) -> None:
        for name in POSITIVE_FIELDS:
            if not getattr(self, name) > 0:
                raise SettingsError(f"Card setting {name} must be greater than 0")
        for name in NON_NEGATIVE_FIELDS:
            if not getattr(self, name) >= 0:
                raise SettingsError(f"Card setting {name} must not be negative")

    @property
    def body_width(self) -> float:
        """Return the width available for text inside the horizontal padding.

        Returns:
            Width in card pixels.
        """

        return self.width - 2 * self.padding_x

    @property
    def body_height(self) -> float:
        """Return the height available for content inside the vertical padding.

        Returns:
            Height in card pixels.
        """

        return self.height - 2 * self.padding_y

    @property
    def title_leading(self) -> float:
        return self.title_font_size * self.title_leading_ratio

    def title_cost(self, title_lines: int) -> float:
        """Return the body-line cost of a title spanning ``title_lines`` lines.

        An empty title costs nothing; otherwise the larger font and the gap
        below the title are folded into a scale and a fixed padding.

        Args:
            title_lines: Estimated title lines at body size.
        Returns:
            Cost in body lines.

        Example:
            >>> CardSettings().title_cost(1)
            4.0
            >>> CardSettings().title_cost(0)
            0.0
        """

        # Untitled cards get the header-only budget; no title padding is charged.
        if title_lines <= 0:
            return 0.0
        return title_lines * self.title_cost_scale + self.title_cost_padding

    def first_page_capacity(self, title_lines: int) -> float:
        """Return the body-line budget left on the first card.

        Args:
            title_lines: Estimated title lines at body size.
        Returns:
            Remaining capacity, never below ``min_first_page_lines``.

        Example:
            >>> CardSettings().first_page_capacity(0)
            17.5
            >>> CardSettings().first_page_capacity(40)
            4.0
        """

        capacity = self.max_lines_first_page - self.title_cost(title_lines) - self.header_cost
        return max(capacity, self.min_first_page_lines)


DEFAULT_SETTINGS = CardSettings()


def _field_types() -> Dict[str, str]:
    return {item.name: str(item.type) for item in fields(CardSettings)}


def _check_override(name: str, value: Any, type_name: str) -> None:
    """Raise ``SettingsError`` when ``value`` does not fit the field type.

    Example:
        >>> _check_override("chars_per_line", True, "float")
        Traceback (most recent call last):
        ...
        rednote_slides.errors.SettingsError: Card setting chars_per_line must be a number, got True
    """

    if type_name == "float":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise SettingsError(f"Card setting {name} must be a number, got {value!r}")
        if not math.isfinite(value):
            raise SettingsError(f"Card setting {name} must be finite, got {value!r}")
    elif type_name == "str":
        if not isinstance(value, str):
            raise SettingsError(f"Card setting {name} must be a string, got {value!r}")
    elif value is not None and not isinstance(value, str):
        raise SettingsError(f"Card setting {name} must be a string or null, got {value!r}")


def settings_from_mapping(
    overrides: Mapping[str, Any], *, base: CardSettings = DEFAULT_SETTINGS
) -> CardSettings:
    """Return ``base`` with the provided field overrides applied.

    Args:
        overrides: Mapping of ``CardSettings`` field names to values.
        base: Settings to start from.
    Returns:
        New ``CardSettings`` instance.
    Raises:
        SettingsError: When a key is not a ``CardSettings`` field, a value
            has the wrong type, or a size or line budget is out of range.
    """

    types = _field_types()
    unknown = sorted(set(overrides) - set(types))
    if unknown:
        raise SettingsError(f"Unknown card settings: {', '.join(unknown)}")
    for name, value in overrides.items():
        _check_override(name, value, types[name])
    return replace(base, **dict(overrides))


def load_card_settings(path: Path, *, base: CardSettings = DEFAULT_SETTINGS) -> CardSettings:
    """Read a JSON object of overrides from ``path``.

    Args:
        path: JSON file containing field overrides.
        base: Settings the overrides apply to.
    Returns:
        New ``CardSettings`` instance.
    Raises:
        SettingsError: When the file is unreadable, not a JSON object, or
            holds unknown fields or invalid values.
    """

    try:
        data: Dict[str, Any] = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise SettingsError(f"Could not read card settings from {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise SettingsError(f"Card settings in {path} must be a JSON object")
    return settings_from_mapping(data, base=base)
