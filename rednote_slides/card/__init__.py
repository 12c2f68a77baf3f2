"""Card rendering and raster export."""

from __future__ import annotations

from .card_render import CardDeck, draw_card, render_card_pdf, write_deck_pdf
from .export import (
    CAPTURE_LADDER,
    FULL_CAPTURE,
    MINIMAL_CAPTURE,
    SAFE_CAPTURE,
    CaptureOptions,
    capture_card,
    capture_with_fallback,
    export_deck,
    load_avatar,
)

__all__ = [
    "CAPTURE_LADDER",
    "CardDeck",
    "CaptureOptions",
    "FULL_CAPTURE",
    "MINIMAL_CAPTURE",
    "SAFE_CAPTURE",
    "capture_card",
    "capture_with_fallback",
    "draw_card",
    "export_deck",
    "load_avatar",
    "render_card_pdf",
    "write_deck_pdf",
]
