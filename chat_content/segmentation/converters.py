"""HTML-to-text converters used when normalizing rich-editor content.

Two implementations are available:

- :class:`DomHtmlToTextConverter` parses the markup and reads its text content,
  keeping block boundaries as line breaks.
- :class:`RegexHtmlToTextConverter` strips every tag and collapses whitespace.
  It is the fallback for callers that want no markup parsing at all and it does
  not preserve line breaks.

The converter is picked once (see :func:`get_html_converter`) and passed to the
normalizer, never detected at call time.
"""

from __future__ import annotations

import re
from enum import StrEnum
from html.parser import HTMLParser
from typing import Protocol


class HtmlConverterKind(StrEnum):
    """Available HTML-to-text conversion strategies."""

    DOM = "dom"
    REGEX = "regex"


class HtmlToTextConverter(Protocol):
    """Interface for turning an HTML fragment into plain text."""

    def convert(self, html: str) -> str:
        """Return the plain-text rendition of *html*."""
        ...


# Rewrites applied before text extraction, in order.
_BLOCK_REWRITES: list[tuple[re.Pattern[str], str]] = [
    # Block closings -> newline
    (re.compile(r"</(p|div|li|h[1-6]|blockquote|pre)>", re.IGNORECASE), "\n"),
    (re.compile(r"<br\s*/?>", re.IGNORECASE), "\n"),
    # Table rows and cells -> rough spacing
    (re.compile(r"</(tr)>", re.IGNORECASE), "\n"),
    (re.compile(r"</(td|th)>", re.IGNORECASE), "\t"),
    # Opening tags of the same blocks carry no whitespace
    (re.compile(r"<p\b[^>]*>", re.IGNORECASE), ""),
    (re.compile(r"<div\b[^>]*>", re.IGNORECASE), ""),
    (re.compile(r"<li\b[^>]*>", re.IGNORECASE), ""),
    (re.compile(r"<h[1-6]\b[^>]*>", re.IGNORECASE), ""),
    (re.compile(r"<blockquote\b[^>]*>", re.IGNORECASE), ""),
    (re.compile(r"<pre\b[^>]*>", re.IGNORECASE), ""),
    (re.compile(r"<code\b[^>]*>", re.IGNORECASE), ""),
]

_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")
_ANY_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RUN_RE = re.compile(r"\s+")


class _TextContentParser(HTMLParser):
    """Collect the text nodes of a fragment, like a DOM ``textContent`` read."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._parts: list[str] = []

    def handle_data(self, data: str) -> None:
        self._parts.append(data)

    @property
    def text(self) -> str:
        return "".join(self._parts)


class DomHtmlToTextConverter:
    """Markup-parsing converter that keeps conversational line breaks."""

    def convert(self, html: str) -> str:
        if not html:
            return ""

        processed = html
        for pattern, replacement in _BLOCK_REWRITES:
            processed = pattern.sub(replacement, processed)

        parser = _TextContentParser()
        parser.feed(processed)
        parser.close()

        text = parser.text.replace("\r\n", "\n").replace("\r", "\n")
        return _EXCESS_NEWLINES_RE.sub("\n\n", text).strip()


class RegexHtmlToTextConverter:
    """Tag-stripping converter; flattens the text onto a single line."""

    def convert(self, html: str) -> str:
        if not html:
            return ""
        text = _ANY_TAG_RE.sub(" ", html)
        return _WHITESPACE_RUN_RE.sub(" ", text).strip()


def get_html_converter(kind: str | HtmlConverterKind = HtmlConverterKind.DOM) -> HtmlToTextConverter:
    """Build the converter for *kind*.

    Raises:
        ValueError: If *kind* is not a known converter.
    """
    dispatch: dict[HtmlConverterKind, type[DomHtmlToTextConverter | RegexHtmlToTextConverter]] = {
        HtmlConverterKind.DOM: DomHtmlToTextConverter,
        HtmlConverterKind.REGEX: RegexHtmlToTextConverter,
    }

    try:
        key = HtmlConverterKind(kind)
    except ValueError:
        msg = f"Unknown HTML converter: {kind!r}. Supported: {[k.value for k in dispatch]}"
        raise ValueError(msg) from None

    return dispatch[key]()
