"""
Print estimated line costs and page budgets for a body file.
"""

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from rednote_slides.cleaning import split_paragraphs
from rednote_slides.pagination import estimate_lines, page_cost, paginate
from rednote_slides.settings import DEFAULT_SETTINGS, load_card_settings


def _parse_args() -> argparse.Namespace:
    """Return CLI arguments for the debug script."""

    parser = argparse.ArgumentParser(description="Show how a body is split into cards.")
    parser.add_argument("body_file", type=Path, help="UTF-8 text file with the post body.")
    parser.add_argument("--title", default="", help="Post title.")
    parser.add_argument("--settings", type=Path, default=None, help="Card settings JSON.")
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    settings = load_card_settings(args.settings) if args.settings else DEFAULT_SETTINGS
    body = args.body_file.read_text(encoding="utf-8")
    title_lines = estimate_lines(args.title, settings=settings)
    print(f"title lines: {title_lines}")
    print(f"first page capacity: {settings.first_page_capacity(title_lines):.2f}")
    print(f"other page capacity: {settings.max_lines_other_page:.2f}")
    print("--- Paragraphs ---")
    for idx, para in enumerate(split_paragraphs(body)):
        print(f" [{idx}] lines={estimate_lines(para, settings=settings)} chars={len(para)}")
    print("--- Pages ---")
    for idx, page in enumerate(paginate(args.title, body, settings=settings), start=1):
        print(f" page {idx}: {len(page)} paragraphs, cost={page_cost(page, settings=settings):.2f}")


if __name__ == "__main__":
    main()
