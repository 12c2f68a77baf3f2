"""Draw paginated post content onto fixed-size cards."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Sequence

from pyphen import Pyphen
from reportlab.lib import colors
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph

from ..models import Page, UserProfile
from ..settings import DEFAULT_SETTINGS, CardSettings
from ..text import escape_markup, has_cjk, paragraph_markup
from .card_fonts import FontSet, build_card_styles, register_card_fonts


@dataclass(slots=True)
class CardDeck:
    """Everything needed to draw each card of one post.

    Args:
        pages: Paragraph pages from ``paginate``.
        title: Post title, drawn on the first card only.
        profile: Author shown in the first card's header.
        date_str: Date shown under the username.
        settings: Card settings shared with the paginator.
    """

    pages: Sequence[Page]
    title: str
    profile: UserProfile
    date_str: str
    settings: CardSettings = DEFAULT_SETTINGS
    hyphenator: Pyphen | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.hyphenator is None:
            self.hyphenator = Pyphen(lang=self.settings.hyphenation_lang)

    def __len__(self) -> int:
        return len(self.pages)


def _draw_avatar(
    canv: canvas.Canvas,
    *,
    deck: CardDeck,
    fonts: FontSet,
    avatar: ImageReader | None,
) -> None:
    """Draw the round avatar, or the username initial when there is none.

    Args:
        canv: Target canvas.
        deck: Deck being drawn.
        fonts: Registered fonts.
        avatar: Decoded avatar image.
    """

    settings = deck.settings
    size = settings.avatar_size
    x = settings.padding_x
    y = settings.height - settings.padding_y - size
    radius = size / 2
    canv.saveState()
    path = canv.beginPath()
    path.circle(x + radius, y + radius, radius)
    canv.clipPath(path, stroke=0, fill=0)
    if avatar is not None:
        _draw_image_cover(canv, image=avatar, x=x, y=y, size=size)
    else:
        canv.setFillColor(colors.HexColor(settings.avatar_placeholder_color))
        canv.rect(x, y, size, size, stroke=0, fill=1)
        canv.setFillColor(colors.HexColor(settings.page_number_color))
        canv.setFont(fonts.regular, settings.header_font_size)
        canv.drawCentredString(
            x + radius,
            y + radius - settings.header_font_size * 0.35,
            deck.profile.initial(),
        )
    canv.restoreState()


def _draw_image_cover(
    canv: canvas.Canvas, *, image: ImageReader, x: float, y: float, size: float
) -> None:
    """Scale ``image`` to cover a square, cropping the overflow via the clip."""

    img_w, img_h = image.getSize()
    scale = max(size / img_w, size / img_h) if img_w and img_h else 1.0
    draw_w, draw_h = img_w * scale, img_h * scale
    canv.drawImage(
        image,
        x - (draw_w - size) / 2,
        y - (draw_h - size) / 2,
        width=draw_w,
        height=draw_h,
        mask="auto",
    )


def _draw_header(
    canv: canvas.Canvas,
    *,
    deck: CardDeck,
    fonts: FontSet,
    avatar: ImageReader | None,
) -> None:
    """Draw avatar, username, and date at the top of the first card."""

    settings = deck.settings
    _draw_avatar(canv, deck=deck, fonts=fonts, avatar=avatar)
    text_x = settings.padding_x + settings.avatar_size + settings.header_gap
    center_y = settings.height - settings.padding_y - settings.avatar_size / 2
    size = settings.header_font_size
    canv.setFillColor(colors.HexColor(settings.title_color))
    canv.setFont(fonts.bold, size)
    canv.drawString(text_x, center_y + settings.header_line_gap / 2, deck.profile.username)
    canv.setFillColor(colors.HexColor(settings.muted_color))
    canv.setFont(fonts.regular, size)
    canv.drawString(text_x, center_y - settings.header_line_gap / 2 - size, deck.date_str)


def _draw_paragraph(
    canv: canvas.Canvas,
    *,
    markup: str,
    style: ParagraphStyle,
    settings: CardSettings,
    top: float,
) -> float:
    """Draw one paragraph with its top edge at ``top``.

    Args:
        canv: Target canvas.
        markup: Paragraph markup.
        style: Paragraph style.
        settings: Card settings.
        top: Y coordinate of the paragraph's top edge.
    Returns:
        Y coordinate where the next block starts.
    """

    para = Paragraph(markup, style)
    _, height = para.wrap(settings.body_width, settings.height)
    para.drawOn(canv, settings.padding_x, top - height)
    return top - height - style.spaceAfter


def draw_card(
    canv: canvas.Canvas,
    *,
    deck: CardDeck,
    page_index: int,
    fonts: FontSet,
    styles: Dict[str, ParagraphStyle],
    avatar: ImageReader | None = None,
) -> None:
    """Draw one card onto the current canvas page.

    Content that runs past the bottom edge is drawn anyway and falls
    outside the page box, matching an overflow-hidden card.

    Args:
        canv: Canvas whose page size equals the card size.
        deck: Deck being drawn.
        page_index: Zero-based card index.
        fonts: Registered fonts.
        styles: Styles from ``build_card_styles``.
        avatar: Avatar image for the first card.
    """

    settings = deck.settings
    is_first = page_index == 0
    canv.setFillColor(colors.HexColor(settings.background_color))
    canv.rect(0, 0, settings.width, settings.height, stroke=0, fill=1)
    top = settings.height - settings.padding_y
    if is_first:
        _draw_header(canv, deck=deck, fonts=fonts, avatar=avatar)
        top -= settings.content_offset_first_page
        title = deck.title.strip()
        if title:
            style = styles["title-cjk" if has_cjk(title) else "title"]
            top = _draw_paragraph(
                canv,
                markup=escape_markup(title),
                style=style,
                settings=settings,
                top=top,
            )
    for text in deck.pages[page_index]:
        style = styles["body-cjk" if has_cjk(text) else "body"]
        top = _draw_paragraph(
            canv,
            markup=paragraph_markup(text, hyphenator=deck.hyphenator),
            style=style,
            settings=settings,
            top=top,
        )
    canv.setFillColor(colors.HexColor(settings.page_number_color))
    canv.setFont(fonts.regular, settings.page_number_font_size)
    canv.drawRightString(
        settings.width - settings.page_number_inset,
        settings.page_number_inset,
        str(page_index + 1),
    )


def render_card_pdf(
    *,
    deck: CardDeck,
    page_index: int,
    skip_fonts: bool = False,
    avatar: ImageReader | None = None,
) -> bytes:
    """Render a single card into an in-memory one-page PDF.

    Args:
        deck: Deck to draw from.
        page_index: Zero-based card index.
        skip_fonts: Use built-in fonts instead of reading font files.
        avatar: Avatar image for the first card.
    Returns:
        PDF document bytes.
    """

    fonts = register_card_fonts(settings=deck.settings, skip_fonts=skip_fonts)
    styles = build_card_styles(fonts=fonts, settings=deck.settings)
    buffer = io.BytesIO()
    canv = canvas.Canvas(buffer, pagesize=(deck.settings.width, deck.settings.height))
    draw_card(
        canv, deck=deck, page_index=page_index, fonts=fonts, styles=styles, avatar=avatar
    )
    canv.showPage()
    canv.save()
    return buffer.getvalue()


def write_deck_pdf(
    *,
    deck: CardDeck,
    output_path: Path,
    avatar: ImageReader | None = None,
) -> Path:
    """Write every card of ``deck`` as one page of a PDF file.

    Args:
        deck: Deck to draw.
        output_path: Destination file.
        avatar: Avatar image for the first card.
    Returns:
        ``output_path``.
    """

    fonts = register_card_fonts(settings=deck.settings)
    styles = build_card_styles(fonts=fonts, settings=deck.settings)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    canv = canvas.Canvas(str(output_path), pagesize=(deck.settings.width, deck.settings.height))
    for page_index in range(len(deck.pages)):
        draw_card(
            canv,
            deck=deck,
            page_index=page_index,
            fonts=fonts,
            styles=styles,
            avatar=avatar,
        )
        canv.showPage()
    canv.save()
    return output_path

