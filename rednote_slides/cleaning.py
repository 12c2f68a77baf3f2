"""
Small, focused text cleaning utilities.
"""

import re
from typing import List

from .constants import LINE_BREAKS

_ZERO_WIDTH = re.compile("[\u200b\u200c\u200d\u2060\ufeff]")
_NON_BREAKING_SPACES = re.compile("[\u00a0\u202f]")


def normalize_line_breaks(value: str) -> str:
    """Turn carriage returns and literal ``\\n`` markers into newlines.

    Rewritten text sometimes arrives with the two-character escape left in
    place; it has to split exactly like a typed newline.

    Example:
        >>> normalize_line_breaks("a\\r\\nb\\\\nc")
        'a\\nb\\nc'
    """

    result = value
    for marker in LINE_BREAKS:
        result = result.replace(marker, "\n")
    return result


def split_paragraphs(body: str) -> List[str]:
    """Return the non-empty, trimmed lines of ``body`` in order.

    Example:
        >>> split_paragraphs("  one \\n\\n two\\nthree")
        ['one', 'two', 'three']
    """

    return [line.strip() for line in body.split("\n") if line.strip()]


def normalize_whitespace(value: str) -> str:
    """Collapse unusual whitespace into single ASCII spaces.

    Example:
        >>> normalize_whitespace("a\\u00a0b\\u200bb")
        'a bb'
    """

    clean = _NON_BREAKING_SPACES.sub(" ", value)
    clean = _ZERO_WIDTH.sub("", clean)
    clean = re.sub(r"[ \t\r\n\f\v]+", " ", clean)
    return clean.strip()
