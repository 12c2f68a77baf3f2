"""
Command-line entry point: paginate a post and export one image per card.
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Sequence

import requests

from .card import CardDeck, export_deck, load_avatar, write_deck_pdf
from .constants import DEBUG_PAGINATION
from .errors import CaptureError, PolishError, ProfileStoreError, SettingsError
from .models import ContentData, Page, UserProfile
from .pagination import page_cost, paginate
from .polish import polish_content
from .profile_store import load_profile, save_profile, update_profile
from .settings import DEFAULT_SETTINGS, CardSettings, load_card_settings

logger = logging.getLogger(__name__)

POLISH_FAILED_NOTICE = "AI 优化失败，请检查 API Key 或网络。"
EXPORT_FAILED_NOTICE = "图片生成部分失败，请检查日志或重试。"


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    """Return CLI arguments."""

    parser = argparse.ArgumentParser(
        description="Split a post into RedNote-style cards and export them as images."
    )
    parser.add_argument("--title", default="", help="Post title, drawn on the first card.")
    body = parser.add_mutually_exclusive_group()
    body.add_argument("--body", default=None, help="Post body; one paragraph per line.")
    body.add_argument(
        "--body-file",
        type=Path,
        default=None,
        help="Read the body from a UTF-8 file ('-' reads standard input).",
    )
    parser.add_argument(
        "--polish",
        action="store_true",
        help="Rewrite title and body with Gemini before paginating.",
    )
    parser.add_argument("--username", default=None, help="Override the profile username.")
    parser.add_argument(
        "--avatar", type=Path, default=None, help="Image file to use as the avatar."
    )
    parser.add_argument(
        "--save-profile",
        action="store_true",
        help="Persist --username/--avatar for later runs.",
    )
    parser.add_argument(
        "--profile-path",
        type=Path,
        default=None,
        help="Profile JSON location (default: $REDNOTE_PROFILE_PATH or ~/.config).",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="JSON file overriding card settings.",
    )
    parser.add_argument("--date", default=None, help="Date text for the header (YYYY.MM.DD).")
    parser.add_argument(
        "--output-dir",
        "-o",
        type=Path,
        default=Path("output"),
        help="Directory that receives the slide images.",
    )
    parser.add_argument(
        "--format",
        choices=("png", "jpeg"),
        default="png",
        help="Image format for exported slides.",
    )
    parser.add_argument(
        "--pdf",
        type=Path,
        default=None,
        help="Also write every card into this PDF file.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the page plan without rendering anything.",
    )
    parser.add_argument("--no-progress", action="store_true", help="Hide the progress bar.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def format_card_date(day: date) -> str:
    """Return the header date text.

    Example:
        >>> format_card_date(date(2024, 3, 9))
        '2024.03.09'
    """

    return day.strftime("%Y.%m.%d")


def _read_body(args: argparse.Namespace) -> str:
    if args.body is not None:
        return args.body
    if args.body_file is None:
        return ""
    if str(args.body_file) == "-":
        return sys.stdin.read()
    return args.body_file.read_text(encoding="utf-8")


def _resolve_profile(args: argparse.Namespace) -> UserProfile:
    """Load the stored profile and apply command-line edits.

    Args:
        args: Parsed CLI arguments.
    Returns:
        Profile for this run.
    """

    stored = load_profile(args.profile_path)
    if stored is None:
        logger.info("No stored profile; using defaults (set one with --username --save-profile)")
        stored = UserProfile()
    profile = update_profile(stored, username=args.username, avatar_path=args.avatar)
    if args.save_profile:
        path = save_profile(profile, args.profile_path)
        logger.info("Saved profile to %s", path)
    return profile


def _polish(content: ContentData) -> ContentData:
    """Return rewritten content, or ``content`` unchanged when rewriting fails."""

    try:
        return polish_content(content.combined_text())
    except PolishError as exc:
        logger.error("Polish failed: %s", exc)
        print(POLISH_FAILED_NOTICE, file=sys.stderr)
        return content


def _plan_lines(pages: Sequence[Page], *, settings: CardSettings) -> List[str]:
    """Return a human-readable summary of the page plan.

    Example:
        >>> _plan_lines([["a", "b"]], settings=DEFAULT_SETTINGS)
        ['slide 1: 2 paragraphs, ~3.2 lines', '  | a', '  | b']
    """

    lines: List[str] = []
    for idx, page in enumerate(pages, start=1):
        cost = page_cost(page, settings=settings)
        lines.append(f"slide {idx}: {len(page)} paragraphs, ~{cost:.1f} lines")
        lines.extend(f"  | {para}" for para in page)
    return lines


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return a process exit code.

    Example:
        >>> main(["--title", "Hi", "--body", "Short line.", "--dry-run"])  # doctest: +SKIP
        0
    """

    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose or DEBUG_PAGINATION else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = load_card_settings(args.settings) if args.settings else DEFAULT_SETTINGS
        profile = _resolve_profile(args)
        content = ContentData(title=args.title, body=_read_body(args))
    except (SettingsError, ProfileStoreError, OSError) as exc:
        logger.error("%s", exc)
        return 1
    if content.is_empty():
        logger.error("Nothing to render: provide --title and/or --body")
        return 1
    if args.polish:
        content = _polish(content)

    pages = paginate(content.title, content.body, settings=settings)
    if not pages:
        logger.warning("Body has no paragraphs; no slides to render")
        return 0
    if args.dry_run:
        print("\n".join(_plan_lines(pages, settings=settings)))
        return 0

    deck = CardDeck(
        pages=pages,
        title=content.title,
        profile=profile,
        date_str=args.date or format_card_date(date.today()),
        settings=settings,
    )
    if args.pdf:
        try:
            avatar = load_avatar(profile.avatar_url)
        except (OSError, ValueError, requests.RequestException) as exc:
            logger.warning("Avatar unavailable for PDF, drawing placeholder: %s", exc)
            avatar = None
        write_deck_pdf(deck=deck, output_path=args.pdf, avatar=avatar)
        logger.info("Wrote %d cards to %s", len(deck), args.pdf)
    try:
        written = export_deck(
            deck=deck,
            output_dir=args.output_dir,
            fmt=args.format,
            progress=not args.no_progress,
        )
    except CaptureError as exc:
        logger.error("%s", exc)
        print(EXPORT_FAILED_NOTICE, file=sys.stderr)
        return 2
    print(f"Wrote {len(written)} slides to {args.output_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
