"""HTML and text helpers shared by the blog services."""

from html import escape, unescape

from bs4 import BeautifulSoup
from markdown import markdown

from fanblog.configs.settings import EXCERPT_WORD_LIMIT


def clean_html(text: str | None) -> str:
    """Strip all tags from ``text`` and return its trimmed plain text."""
    if not text:
        return ""
    return BeautifulSoup(text, "html.parser").get_text().strip()


def html_decode(text: str | None) -> str | None:
    """Unescape HTML entities, e.g. ``&amp;`` back to ``&``."""
    return unescape(text) if text else text


def html_encode(text: str | None) -> str | None:
    return escape(text, quote=False) if text else text


def get_excerpt(body: str | None, word_limit: int = EXCERPT_WORD_LIMIT) -> str:
    """
    First ``word_limit`` words of ``body`` with HTML removed.

    An ellipsis is appended when the body is longer than the limit.
    """
    words = clean_html(body).split()
    if len(words) <= word_limit:
        return " ".join(words)
    return " ".join(words[:word_limit]) + "..."


def md_to_html(text: str | None) -> str:
    """Render Markdown to HTML."""
    if not text:
        return ""
    return markdown(text)
