"""Fonts and paragraph styles for card rendering."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Sequence

from reportlab.lib import colors
from reportlab.lib.enums import TA_JUSTIFY, TA_LEFT
from reportlab.lib.styles import ParagraphStyle
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfbase.ttfonts import TTFError, TTFont

from ..settings import CardSettings

logger = logging.getLogger(__name__)

BUILTIN_CJK_FONT = "STSong-Light"
SERIF_CANDIDATES: Sequence[tuple[str, str]] = (
    ("/System/Library/Fonts/Supplemental/Songti.ttc", "Songti"),
    ("/Library/Fonts/Songti.ttc", "Songti"),
    ("C:\\Windows\\Fonts\\simsun.ttc", "SimSun"),
    ("/usr/share/fonts/truetype/arphic/uming.ttc", "ARPLUMing"),
    ("/usr/share/fonts/truetype/wqy/wqy-zenhei.ttc", "WenQuanYiZenHei"),
    ("/usr/share/fonts/truetype/dejavu/DejaVuSerif.ttf", "DejaVuSerif"),
)


@dataclass(frozen=True, slots=True)
class FontSet:
    """Registered font names used on a card.

    Args:
        regular: Body and date font.
        bold: Title and username font.
        embedded: False when only built-in fonts are used and no font file
            was read.
    """

    regular: str
    bold: str
    embedded: bool


def _register_ttf(*, path: str, name: str) -> bool:
    """Register a TrueType font file under ``name``.

    Args:
        path: Font file path.
        name: Name to register.
    Returns:
        True when the font is usable.
    """

    if name in pdfmetrics.getRegisteredFontNames():
        return True
    if not Path(path).exists():
        return False
    try:
        pdfmetrics.registerFont(TTFont(name, path, subfontIndex=0))
    except (TTFError, OSError) as exc:
        logger.info("Skipping font %s (%s): %s", name, path, exc)
        return False
    return True


def register_builtin_fonts() -> FontSet:
    """Register the built-in CJK font that needs no font file.

    Example:
        >>> register_builtin_fonts().regular
        'STSong-Light'
    """

    if BUILTIN_CJK_FONT not in pdfmetrics.getRegisteredFontNames():
        pdfmetrics.registerFont(UnicodeCIDFont(BUILTIN_CJK_FONT))
    return FontSet(regular=BUILTIN_CJK_FONT, bold=BUILTIN_CJK_FONT, embedded=False)


def register_card_fonts(*, settings: CardSettings, skip_fonts: bool = False) -> FontSet:
    """Register the card's serif font family and return its names.

    Args:
        settings: Card settings; ``font_path``/``bold_font_path`` take
            precedence over the platform candidates.
        skip_fonts: Use built-in fonts only, without reading font files.
    Returns:
        FontSet describing the registered fonts.
    """

    if skip_fonts:
        return register_builtin_fonts()
    candidates: list[tuple[str, str]] = []
    if settings.font_path:
        candidates.append((settings.font_path, "CardSerif"))
    candidates.extend(SERIF_CANDIDATES)
    for path, name in candidates:
        if not _register_ttf(path=path, name=name):
            continue
        bold = name
        if settings.bold_font_path and _register_ttf(
            path=settings.bold_font_path, name=f"{name}-Bold"
        ):
            bold = f"{name}-Bold"
        return FontSet(regular=name, bold=bold, embedded=True)
    logger.info("No card font file found; using %s", BUILTIN_CJK_FONT)
    return register_builtin_fonts()


def build_card_styles(*, fonts: FontSet, settings: CardSettings) -> Dict[str, ParagraphStyle]:
    """Create paragraph styles used on a card.

    Args:
        fonts: Registered fonts.
        settings: Card settings with typography sizes.
    Returns:
        Mapping of style keys to ParagraphStyle objects.
    """

    body = ParagraphStyle(
        "card-body",
        fontName=fonts.regular,
        fontSize=settings.body_font_size,
        leading=settings.body_leading,
        alignment=TA_JUSTIFY,
        textColor=colors.HexColor(settings.text_color),
        spaceAfter=settings.paragraph_space_after,
        hyphenationLang=settings.hyphenation_lang,
        embeddedHyphenation=1,
    )
    body_cjk = ParagraphStyle(
        "card-body-cjk",
        parent=body,
        wordWrap="CJK",
        hyphenationLang="",
        embeddedHyphenation=0,
    )
    title = ParagraphStyle(
        "card-title",
        fontName=fonts.bold,
        fontSize=settings.title_font_size,
        leading=settings.title_leading,
        alignment=TA_LEFT,
        textColor=colors.HexColor(settings.title_color),
        spaceAfter=settings.title_space_after,
    )
    title_cjk = ParagraphStyle("card-title-cjk", parent=title, wordWrap="CJK")
    return {
        "body": body,
        "body-cjk": body_cjk,
        "title": title,
        "title-cjk": title_cjk,
    }
