"""Comparison of two versions of stored content.

Chat transcripts are compared bubble by bubble; any other content gets a
word-level diff that keeps whitespace and HTML tags as their own tokens.
"""

from __future__ import annotations

import re
from itertools import zip_longest

from rapidfuzz.distance import Indel

from chat_content.segmentation.extractor import ChatSegmenter
from chat_content.segmentation.models import (
    BubbleChange,
    BubbleStatus,
    DiffType,
    VersionDiff,
    WordChange,
)

# An HTML tag, a whitespace run, a word, or a stray "<".
_TOKEN_RE = re.compile(r"<[^>]+>|\s+|[^\s<]+|<")

_default_segmenter = ChatSegmenter()


def tokenize(text: str) -> list[str]:
    return _TOKEN_RE.findall(text)


def _append(changes: list[WordChange], text: str, status: BubbleStatus) -> None:
    if changes and changes[-1].status is status:
        changes[-1].text += text
    else:
        changes.append(WordChange(text=text, status=status))


def compute_word_diff(old_text: str, new_text: str) -> list[WordChange]:
    """Diff two texts token by token along their longest common subsequence.

    Within each changed stretch the removed tokens come before the added
    ones, and adjacent runs with the same status are merged.
    """
    old_tokens = tokenize(old_text)
    new_tokens = tokenize(new_text)

    changes: list[WordChange] = []
    removed: list[str] = []
    added: list[str] = []
    for op in Indel.opcodes(old_tokens, new_tokens):
        if op.tag == "equal":
            if removed:
                _append(changes, "".join(removed), BubbleStatus.REMOVED)
            if added:
                _append(changes, "".join(added), BubbleStatus.ADDED)
            removed, added = [], []
            _append(changes, "".join(new_tokens[op.dest_start:op.dest_end]), BubbleStatus.UNCHANGED)
            continue
        removed.extend(old_tokens[op.src_start:op.src_end])
        added.extend(new_tokens[op.dest_start:op.dest_end])

    if removed:
        _append(changes, "".join(removed), BubbleStatus.REMOVED)
    if added:
        _append(changes, "".join(added), BubbleStatus.ADDED)
    return changes


def compare_chat_bubbles(
    old_content: str | None,
    new_content: str | None,
    segmenter: ChatSegmenter | None = None,
) -> list[BubbleChange]:
    """Compare bubbles position by position.

    Both versions are segmented with ``allow_single=True`` so every line an
    editor created counts as a bubble. Without old content, every new bubble
    is reported as added.
    """
    segmenter = segmenter or _default_segmenter
    old_bubbles = segmenter.extract_segments(old_content, allow_single=True) if old_content else []
    new_bubbles = segmenter.extract_segments(new_content, allow_single=True)

    changes: list[BubbleChange] = []
    for old, new in zip_longest(old_bubbles, new_bubbles):
        if old is None:
            changes.append(BubbleChange(bubble=new, status=BubbleStatus.ADDED))
        elif new is None:
            changes.append(BubbleChange(bubble=old, status=BubbleStatus.REMOVED))
        elif old != new:
            changes.append(BubbleChange(bubble=new, status=BubbleStatus.MODIFIED, old_bubble=old))
        else:
            changes.append(BubbleChange(bubble=new, status=BubbleStatus.UNCHANGED))
    return changes


def compare_versions(
    old_content: str | None,
    new_content: str | None,
    segmenter: ChatSegmenter | None = None,
) -> VersionDiff:
    """Compare two versions, choosing the diff by the newer version's content.

    When the new version reads as a chat transcript the result carries bubble
    changes, otherwise a word diff. Empty old content marks a first version:
    every bubble, or the whole new text, is reported as added.
    """
    segmenter = segmenter or _default_segmenter
    first_version = not old_content

    if segmenter.is_transcript(new_content):
        return VersionDiff(
            type=DiffType.CHAT,
            bubbles=compare_chat_bubbles(old_content, new_content, segmenter),
            is_first_version=first_version,
        )

    new_text = new_content or ""
    if first_version:
        words = [WordChange(text=new_text, status=BubbleStatus.ADDED)] if new_text else []
    else:
        words = compute_word_diff(old_content, new_text)
    return VersionDiff(type=DiffType.RICH, words=words, is_first_version=first_version)
