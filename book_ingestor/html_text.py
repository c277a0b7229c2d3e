"""Utilities for pulling readable text out of (X)HTML chapter documents.

This is a tag-boundary scan rather than a parser: malformed markup in real
e-books degrades the output instead of failing the import.
"""

import html
import re

_TITLE_RE = re.compile(r"<title\b[^>]*>(.*?)</title\s*>", re.IGNORECASE | re.DOTALL)
_H1_RE = re.compile(r"<h1\b[^>]*>(.*?)</h1\s*>", re.IGNORECASE | re.DOTALL)


def strip_tags(content: str) -> str:
    """Remove every ``<...>`` run and collapse whitespace.

    Each tag is replaced by a single space at its closing bracket, so text
    in adjacent block elements does not run together. Character entities are
    unescaped after the scan.

    Args:
        content: HTML or XHTML markup

    Returns:
        Visible text with runs of whitespace collapsed to single spaces.
    """
    chunks: list[str] = []
    in_tag = False
    for char in content:
        if char == "<":
            in_tag = True
        elif char == ">":
            in_tag = False
            chunks.append(" ")
        elif not in_tag:
            chunks.append(char)
    text = html.unescape("".join(chunks))
    return " ".join(text.split())


def _element_text(pattern: re.Pattern[str], content: str) -> str | None:
    match = pattern.search(content)
    if not match:
        return None
    text = strip_tags(match.group(1))
    return text or None


def extract_html_title(content: str) -> str | None:
    """Find a title for a chapter document.

    Prefers the ``<title>`` element and falls back to the first ``<h1>``.
    Both are matched case-insensitively and may carry attributes.

    Returns:
        The title text, or None when neither element has text.
    """
    return _element_text(_TITLE_RE, content) or _element_text(_H1_RE, content)
