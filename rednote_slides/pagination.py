"""Split post text into cards using a line-count heuristic.

Heights are estimated from character counts rather than measured, so the
renderer and this module must read the same ``CardSettings``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Sequence

from .cleaning import split_paragraphs
from .constants import DEBUG_PAGINATION
from .models import Page
from .settings import DEFAULT_SETTINGS, CardSettings

logger = logging.getLogger(__name__)


def _debug(*, msg: str) -> None:
    """Log pagination debug output when enabled.

    Args:
        msg: Message to log.
    Returns:
        None.
    """

    if DEBUG_PAGINATION:
        logger.debug(msg)


def estimate_lines(text: str, *, settings: CardSettings = DEFAULT_SETTINGS) -> int:
    """Return the estimated number of body lines ``text`` occupies.

    Args:
        text: Title or paragraph text; surrounding whitespace is ignored.
        settings: Card settings supplying ``chars_per_line``.
    Returns:
        Rounded-up character lines plus one line per embedded newline.

    Example:
        >>> estimate_lines("")
        0
        >>> estimate_lines("x" * 27)
        2
        >>> estimate_lines("ab\\ncd")
        2
    """

    clean = text.strip()
    if not clean:
        return 0
    lines_from_chars = math.ceil(len(clean) / settings.chars_per_line)
    return lines_from_chars + clean.count("\n")


def paragraph_cost(text: str, *, settings: CardSettings = DEFAULT_SETTINGS) -> float:
    """Return the estimated lines of ``text`` plus the gap below it.

    Example:
        >>> paragraph_cost("Short line.")
        1.6
    """

    return estimate_lines(text, settings=settings) + settings.margin_bottom_cost


def page_cost(page: Sequence[str], *, settings: CardSettings = DEFAULT_SETTINGS) -> float:
    """Return the summed paragraph cost of one page.

    Example:
        >>> page_cost(["a", "b"])
        3.2
    """

    return sum(paragraph_cost(para, settings=settings) for para in page)


@dataclass(slots=True)
class _FillState:
    """Mutable state for the page currently being filled."""

    capacity: float
    pages: List[Page] = field(default_factory=list)
    current: Page = field(default_factory=list)
    lines: float = 0.0
    idx: int = 0

    def close_page(self, *, next_capacity: float) -> None:
        """Emit the in-progress page and start an empty one.

        Args:
            next_capacity: Budget for the page that follows.
        """

        self.pages.append(self.current)
        self.current = []
        self.lines = 0.0
        self.capacity = next_capacity


def fill_pages(
    paragraphs: Sequence[str],
    *,
    title: str = "",
    settings: CardSettings = DEFAULT_SETTINGS,
) -> List[Page]:
    """Greedily place paragraphs onto pages without splitting any of them.

    The cursor only advances once a paragraph is placed, so a paragraph
    that closes a page is evaluated again against the fresh page. A
    paragraph that overflows an empty page is isolated on its own page.

    Args:
        paragraphs: Non-empty trimmed paragraphs in reading order.
        title: Post title; only its length matters.
        settings: Card settings with capacity constants.
    Returns:
        Pages in order; empty when ``paragraphs`` is empty.

    Example:
        >>> fill_pages(["one", "two"], title="Hi")
        [['one', 'two']]
    """

    title_lines = estimate_lines(title, settings=settings)
    state = _FillState(capacity=settings.first_page_capacity(title_lines))
    _debug(msg=f"first page capacity={state.capacity:.2f} title_lines={title_lines}")
    while state.idx < len(paragraphs):
        para = paragraphs[state.idx]
        text_lines = estimate_lines(para, settings=settings)
        limit = state.capacity + settings.overflow_tolerance
        if state.lines + text_lines > limit:
            if not state.current:
                _debug(msg=f"paragraph {state.idx} ({text_lines} lines) isolated")
                state.current = [para]
                state.close_page(next_capacity=settings.max_lines_other_page)
                state.idx += 1
                continue
            _debug(
                msg=(
                    f"page {len(state.pages) + 1} closed at {state.lines:.2f} lines; "
                    f"paragraph {state.idx} needs {text_lines}"
                )
            )
            state.close_page(next_capacity=settings.max_lines_other_page)
            continue
        state.current.append(para)
        state.lines += text_lines + settings.margin_bottom_cost
        state.idx += 1
    if state.current:
        state.pages.append(state.current)
    return state.pages


def rebalance_trailing_page(
    pages: Sequence[Page], *, settings: CardSettings = DEFAULT_SETTINGS
) -> List[Page]:
    """Move one paragraph onto a sparse final page.

    When the last page holds less than ``sparse_page_lines`` and the page
    before it holds more than ``headroom_page_lines`` across at least two
    paragraphs, the earlier page's last paragraph becomes the first
    paragraph of the last page. Applied at most once.

    Args:
        pages: Pages produced by ``fill_pages``.
        settings: Card settings with the rebalance thresholds.
    Returns:
        New list of pages; ``pages`` itself is left untouched.

    Example:
        >>> pages = rebalance_trailing_page([["a" * 200, "b" * 100], ["c"]])
        >>> [len(page) for page in pages]
        [1, 2]
        >>> pages[1][0] == "b" * 100
        True
    """

    result = [list(page) for page in pages]
    if len(result) < 2:
        return result
    prev_page, last_page = result[-2], result[-1]
    last_lines = page_cost(last_page, settings=settings)
    prev_lines = page_cost(prev_page, settings=settings)
    if (
        last_lines < settings.sparse_page_lines
        and prev_lines > settings.headroom_page_lines
        and len(prev_page) > 1
    ):
        _debug(
            msg=(
                f"rebalance: last page {last_lines:.2f} lines, "
                f"previous page {prev_lines:.2f} lines"
            )
        )
        last_page.insert(0, prev_page.pop())
    return result


def paginate(
    title: str, body: str, *, settings: CardSettings = DEFAULT_SETTINGS
) -> List[Page]:
    """Split ``body`` into card pages, reserving title space on the first.

    Args:
        title: Post title, drawn on the first card only.
        body: Post body; each non-blank line is one paragraph.
        settings: Card settings shared with the renderer.
    Returns:
        Pages of paragraphs. A body without paragraphs yields no pages,
        even when the title is set.

    Example:
        >>> paginate("", "")
        []
        >>> paginate("Hi", "Short line.")
        [['Short line.']]
    """

    paragraphs = split_paragraphs(body)
    pages = fill_pages(paragraphs, title=title, settings=settings)
    pages = rebalance_trailing_page(pages, settings=settings)
    _debug(msg=f"paginated {len(paragraphs)} paragraphs into {len(pages)} pages")
    return pages
