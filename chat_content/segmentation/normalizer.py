"""Normalization of chat content stored as plain text or rich-editor HTML."""

from __future__ import annotations

import re

from chat_content.segmentation.converters import DomHtmlToTextConverter, HtmlToTextConverter

RICH_HTML_TAG_RE = re.compile(
    r"</?(p|div|br|span|strong|em|ul|ol|li|h[1-6]|blockquote|pre|code)\b",
    re.IGNORECASE,
)

_DEFAULT_CONVERTER: HtmlToTextConverter = DomHtmlToTextConverter()


def looks_like_rich_html(value: str | None) -> bool:
    """Return True if *value* carries rich-editor markup.

    Content with fenced code blocks is always plain text, so that ``<p>`` or
    similar inside a code sample is never stripped.
    """
    if not value:
        return False
    if "```" in value:
        return False
    return RICH_HTML_TAG_RE.search(value) is not None


def html_to_plain_text_preserve_newlines(
    html: str | None,
    converter: HtmlToTextConverter | None = None,
) -> str:
    """Convert rich-editor HTML into plain text, keeping block breaks as newlines."""
    if not html:
        return ""
    return (converter or _DEFAULT_CONVERTER).convert(html)


def normalize_chat_input(
    value: str | None,
    converter: HtmlToTextConverter | None = None,
) -> str:
    """Normalize line endings and, for rich HTML, convert to plain text.

    Args:
        value: Raw stored content. ``None`` is treated as an empty string.
        converter: HTML-to-text converter; defaults to the DOM-based one.

    Returns:
        Plain text with ``\\n`` line endings.
    """
    if not value:
        return ""
    normalized = value.replace("\r\n", "\n").replace("\r", "\n")
    if not looks_like_rich_html(normalized):
        return normalized
    return html_to_plain_text_preserve_newlines(normalized, converter)
