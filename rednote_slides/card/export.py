"""Rasterise cards to images with a degrading retry ladder."""

from __future__ import annotations

import base64
import io
import logging
import time
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Callable, List, Sequence
from urllib.parse import unquote_to_bytes

import fitz
import requests
from PIL import Image
from reportlab.lib.utils import ImageReader
from tqdm import tqdm

from ..constants import SLIDE_FILENAME
from ..errors import CaptureError
from .card_render import CardDeck, render_card_pdf

logger = logging.getLogger(__name__)

AVATAR_TIMEOUT = 10.0
AVATAR_CACHE_SIZE = 16


@dataclass(frozen=True, slots=True)
class CaptureOptions:
    """Settings for one rasterisation attempt.

    Args:
        pixel_ratio: Output pixels per card pixel.
        quality: Encoder quality in ``(0, 1]``; used for JPEG output.
        cache_bust: Refetch the avatar instead of using the cached copy.
        skip_fonts: Draw with built-in fonts instead of font files.
        require_avatar: Fail the attempt when the avatar cannot be loaded;
            otherwise the initial placeholder is drawn.
    """

    pixel_ratio: float
    quality: float
    cache_bust: bool
    skip_fonts: bool
    require_avatar: bool = False


FULL_CAPTURE = CaptureOptions(
    pixel_ratio=2, quality=1.0, cache_bust=True, skip_fonts=False, require_avatar=True
)
SAFE_CAPTURE = CaptureOptions(pixel_ratio=2, quality=1.0, cache_bust=False, skip_fonts=True)
MINIMAL_CAPTURE = CaptureOptions(pixel_ratio=1, quality=0.9, cache_bust=False, skip_fonts=True)
CAPTURE_LADDER: Sequence[CaptureOptions] = (FULL_CAPTURE, SAFE_CAPTURE, MINIMAL_CAPTURE)

CaptureFn = Callable[..., bytes]


def _read_avatar_bytes(url: str, *, cache_bust: bool) -> bytes:
    """Return raw avatar bytes for a data URL, HTTP(S) URL, or file path.

    Args:
        url: Avatar reference from the profile.
        cache_bust: Add a timestamp query parameter to defeat HTTP caches.
    Returns:
        Image bytes.
    """

    if url.startswith("data:"):
        header, _, payload = url.partition(",")
        if header.endswith(";base64"):
            return base64.b64decode(payload)
        return unquote_to_bytes(payload)
    if url.startswith(("http://", "https://")):
        params = {"_": str(int(time.time() * 1000))} if cache_bust else None
        response = requests.get(url, params=params, timeout=AVATAR_TIMEOUT)
        response.raise_for_status()
        return response.content
    return Path(url).expanduser().read_bytes()


@lru_cache(maxsize=AVATAR_CACHE_SIZE)
def _cached_avatar_bytes(url: str) -> bytes:
    return _read_avatar_bytes(url, cache_bust=False)


def _fetch_avatar_bytes(url: str, *, cache_bust: bool) -> bytes:
    if cache_bust:
        return _read_avatar_bytes(url, cache_bust=True)
    return _cached_avatar_bytes(url)


def load_avatar(url: str | None, *, cache_bust: bool = False) -> ImageReader | None:
    """Decode the profile avatar for drawing.

    Args:
        url: Avatar reference, or None.
        cache_bust: Refetch instead of using the cached bytes.
    Returns:
        ImageReader, or None when the profile has no avatar.
    Raises:
        OSError, ValueError, requests.RequestException: When the avatar
            cannot be fetched or decoded.
    """

    if not url:
        return None
    data = _fetch_avatar_bytes(url, cache_bust=cache_bust)
    return ImageReader(io.BytesIO(data))


def rasterize_pdf(pdf_bytes: bytes, *, pixel_ratio: float) -> Image.Image:
    """Render the first page of a PDF into a Pillow image.

    Args:
        pdf_bytes: PDF document bytes.
        pixel_ratio: Zoom factor; 1 gives one pixel per card pixel.
    Returns:
        RGB image.
    """

    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        page = doc[0]
        pix = page.get_pixmap(matrix=fitz.Matrix(pixel_ratio, pixel_ratio), alpha=False)
        return Image.frombytes("RGB", (pix.width, pix.height), pix.samples)


def encode_image(image: Image.Image, *, fmt: str, quality: float) -> bytes:
    """Encode ``image`` as PNG or JPEG.

    Args:
        image: Image to encode.
        fmt: ``"png"`` or ``"jpeg"``.
        quality: Quality in ``(0, 1]``; PNG output is lossless.
    Returns:
        Encoded bytes.
    """

    buffer = io.BytesIO()
    if fmt.lower() in {"jpg", "jpeg"}:
        image.save(buffer, format="JPEG", quality=max(1, min(95, int(quality * 100))))
    else:
        image.save(buffer, format="PNG", optimize=quality < 1.0)
    return buffer.getvalue()


def capture_card(
    *,
    deck: CardDeck,
    page_index: int,
    options: CaptureOptions,
    fmt: str = "png",
) -> bytes:
    """Render one card and rasterise it with ``options``.

    Args:
        deck: Deck to draw from.
        page_index: Zero-based card index.
        options: Capture attempt settings.
        fmt: Output image format.
    Returns:
        Encoded image bytes.
    """

    avatar = None
    if page_index == 0:
        try:
            avatar = load_avatar(deck.profile.avatar_url, cache_bust=options.cache_bust)
        except (OSError, ValueError, requests.RequestException) as exc:
            if options.require_avatar:
                raise
            logger.warning("Avatar unavailable, drawing placeholder: %s", exc)
    pdf_bytes = render_card_pdf(
        deck=deck,
        page_index=page_index,
        skip_fonts=options.skip_fonts,
        avatar=avatar,
    )
    image = rasterize_pdf(pdf_bytes, pixel_ratio=options.pixel_ratio)
    return encode_image(image, fmt=fmt, quality=options.quality)


def capture_with_fallback(
    *,
    deck: CardDeck,
    page_index: int,
    fmt: str = "png",
    ladder: Sequence[CaptureOptions] = CAPTURE_LADDER,
    capture: CaptureFn = capture_card,
) -> bytes:
    """Capture a card, retrying with safer settings after each failure.

    Args:
        deck: Deck to draw from.
        page_index: Zero-based card index.
        fmt: Output image format.
        ladder: Attempts in order, most faithful first.
        capture: Function performing one attempt.
    Returns:
        Encoded image bytes from the first attempt that succeeds.
    Raises:
        CaptureError: When every attempt fails.
    """

    last_error: Exception | None = None
    for attempt, options in enumerate(ladder, start=1):
        try:
            return capture(deck=deck, page_index=page_index, options=options, fmt=fmt)
        except Exception as exc:
            last_error = exc
            logger.warning(
                "Capture attempt %d/%d failed for slide %d: %s",
                attempt,
                len(ladder),
                page_index + 1,
                exc,
            )
    raise CaptureError(f"Could not capture slide {page_index + 1}") from last_error


def slide_filename(page_index: int, *, fmt: str = "png") -> str:
    """Return the download name for a card.

    Example:
        >>> slide_filename(0)
        'rednote-slide-1.png'
    """

    ext = "jpg" if fmt.lower() in {"jpg", "jpeg"} else "png"
    return SLIDE_FILENAME.format(number=page_index + 1, ext=ext)


def export_deck(
    *,
    deck: CardDeck,
    output_dir: Path,
    fmt: str = "png",
    progress: bool = True,
    capture: CaptureFn = capture_card,
) -> List[Path]:
    """Write one image per card into ``output_dir``.

    Cards that cannot be captured at all are skipped so the rest are still
    written; they are reported together once every card was attempted.

    Args:
        deck: Deck to export.
        output_dir: Destination directory.
        fmt: Output image format.
        progress: Show a progress bar.
        capture: Function performing one capture attempt.
    Returns:
        Paths of the written images in card order.
    Raises:
        CaptureError: When at least one card could not be captured.
    """

    output_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    failed: List[int] = []
    for page_index in tqdm(
        range(len(deck.pages)), desc="Capturing slides", unit="slide", disable=not progress
    ):
        try:
            data = capture_with_fallback(
                deck=deck, page_index=page_index, fmt=fmt, capture=capture
            )
        except CaptureError:
            logger.exception("Slide %d failed after all fallbacks", page_index + 1)
            failed.append(page_index + 1)
            continue
        path = output_dir / slide_filename(page_index, fmt=fmt)
        path.write_bytes(data)
        written.append(path)
    if failed:
        numbers = ", ".join(str(number) for number in failed)
        raise CaptureError(
            f"Slides {numbers} could not be generated; {len(written)} written",
            written=written,
        )
    return written
