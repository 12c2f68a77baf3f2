"""
Text helpers for hyphenation and paragraph markup.
"""

from __future__ import annotations

import html
import re

from bs4 import BeautifulSoup
from pyphen import Pyphen


WORD_RE = re.compile(r"[A-Za-z]{7,}")
CJK_RE = re.compile("[\u3000-\u303f\u3040-\u30ff\u3400-\u4dbf\u4e00-\u9fff\uac00-\ud7af\uff00-\uffef]")
SOFT_HYPHEN = "\u00ad"


def has_cjk(text: str) -> bool:
    """Return True when ``text`` contains CJK ideographs, kana, or hangul.

    Example:
        >>> has_cjk("今天 sunny")
        True
        >>> has_cjk("sunny")
        False
    """

    return bool(CJK_RE.search(text))


def escape_markup(text: str) -> str:
    """Escape ``text`` for ReportLab paragraph markup, keeping line breaks.

    Example:
        >>> escape_markup("a < b\\nc")
        'a &lt; b<br/>c'
    """

    return html.escape(text, quote=False).replace("\n", "<br/>")


def hyphenate_markup(markup: str, dic: Pyphen) -> str:
    """Insert soft hyphens into long words inside a markup fragment.

    Example:
        >>> dic = Pyphen(lang='en_US')
        >>> SOFT_HYPHEN in hyphenate_markup('everlasting', dic)
        True
        >>> hyphenate_markup('a &lt; b', dic)
        'a &lt; b'
    """

    soup = BeautifulSoup(markup, "html.parser")
    for text_node in list(soup.strings):

        def repl(match: re.Match[str]) -> str:
            return dic.inserted(match.group(0), hyphen=SOFT_HYPHEN)

        text_node.replace_with(WORD_RE.sub(repl, str(text_node)))
    return soup.decode_contents()


def paragraph_markup(text: str, *, hyphenator: Pyphen | None = None) -> str:
    """Return ReportLab markup for one paragraph of card text.

    Latin text gets soft hyphens so justified lines stay even; CJK text is
    left alone because it already breaks between characters.

    Args:
        text: Paragraph text.
        hyphenator: Optional Pyphen dictionary.
    Returns:
        Escaped markup ready for ``Paragraph``.
    """

    markup = escape_markup(text)
    if hyphenator is None or has_cjk(text):
        return markup
    return hyphenate_markup(markup, hyphenator)
