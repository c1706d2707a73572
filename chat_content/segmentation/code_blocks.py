"""Lift syntax-highlighted code blocks out of explanation HTML."""

from __future__ import annotations

import html
import re

from chat_content.segmentation.models import CodeBlock

# <pre class="ql-syntax" ...>...</pre> as written by the rich-text editor
SYNTAX_BLOCK_RE = re.compile(
    r"<pre[^>]*class=\"[^\"]*ql-syntax[^\"]*\"[^>]*>([\s\S]*?)</pre>",
    re.IGNORECASE,
)

_BR_RE = re.compile(r"<br\s*/?>(\r?\n)?", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")

_LANGUAGE_HINTS: list[tuple[str, re.Pattern[str]]] = [
    ("javascript", re.compile(r"^(function|const|let|var|import|export)\s", re.MULTILINE)),
    ("python", re.compile(r"^(def|class|import|from|print)\s", re.MULTILINE)),
    ("sql", re.compile(r"^(SELECT|INSERT|UPDATE|DELETE|CREATE|DROP)\s", re.MULTILINE | re.IGNORECASE)),
]

DEFAULT_LANGUAGE = "python"


def placeholder(index: int) -> str:
    return f"<!--CODE_BLOCK_{index}-->"


def guess_language(code: str) -> str:
    """Guess the language of *code* from its first keywords."""
    for language, pattern in _LANGUAGE_HINTS:
        if pattern.search(code):
            return language
    return DEFAULT_LANGUAGE


def _decode(block_html: str) -> str:
    text = _BR_RE.sub("\n", block_html)
    text = _TAG_RE.sub("", text)
    return html.unescape(text).strip()


def extract_code_blocks(explanation_html: str) -> tuple[str, list[CodeBlock]]:
    """Replace code blocks in *explanation_html* with numbered placeholders.

    Returns:
        The rewritten HTML and the extracted blocks, where block ``n`` belongs
        to placeholder ``<!--CODE_BLOCK_n-->``.
    """
    blocks: list[CodeBlock] = []

    def _replace(match: re.Match[str]) -> str:
        code = _decode(match.group(1))
        blocks.append(CodeBlock(code=code, language=guess_language(code)))
        return placeholder(len(blocks) - 1)

    processed = SYNTAX_BLOCK_RE.sub(_replace, explanation_html)
    return processed, blocks
