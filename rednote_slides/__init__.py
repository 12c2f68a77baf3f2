"""Public pagination helpers for RedNote-style cards."""

from __future__ import annotations

from .models import ContentData, Page, UserProfile
from .pagination import estimate_lines, fill_pages, page_cost, paginate, rebalance_trailing_page
from .settings import DEFAULT_SETTINGS, CardSettings, load_card_settings

__all__ = [
    "CardSettings",
    "ContentData",
    "DEFAULT_SETTINGS",
    "Page",
    "UserProfile",
    "estimate_lines",
    "fill_pages",
    "load_card_settings",
    "page_cost",
    "paginate",
    "rebalance_trailing_page",
]
