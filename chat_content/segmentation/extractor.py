"""Chat transcript segmentation.

Stored lesson and post content may be a chat transcript of ``Speaker: message``
turns, optionally followed by a free-form explanation after a ``---`` line::

    Mentor: What does this print?
    Student: Probably 3.

    Mentor: Close, it prints 4.
    ---
    <p>The loop runs one extra time because ...</p>

:class:`ChatSegmenter` decides whether such content is a transcript and splits
the chat portion into ordered turns. Lines that merely look like labels
(``Note: ...``) are kept out by an admission heuristic: speakers who repeat
are trusted, and only as many one-off speakers as needed to reach two
participants are admitted, in order of first appearance.

Takeaway and freeform canvas blocks use the same ``Label: content`` shape but
are recognized by their content prefix and always survive.
"""

from __future__ import annotations

import logging
import re
from collections import Counter

from chat_content.segmentation.converters import HtmlToTextConverter
from chat_content.segmentation.markers import find_chat_markers
from chat_content.segmentation.models import ChatSegment, Marker, SegmentKind
from chat_content.segmentation.normalizer import normalize_chat_input

logger = logging.getLogger(__name__)

# Separator between the chat part and the explanation part of mixed content
MIXED_CONTENT_SEPARATOR = "\n---\n"

TAKEAWAY_TOKEN = "[TAKEAWAY"
FREEFORM_CANVAS_TOKEN = "[FREEFORM_CANVAS]"

# Lower-cased speaker label -> (content prefix, kind) of structured blocks
_STRUCTURED_BLOCKS: dict[str, tuple[str, SegmentKind]] = {
    "takeaway": (TAKEAWAY_TOKEN, SegmentKind.TAKEAWAY),
    "freeform": (FREEFORM_CANVAS_TOKEN, SegmentKind.FREEFORM_CANVAS),
}

_TRAILING_PARAGRAPH_BREAK_RE = re.compile(r"\n{2,}\Z")


def split_mixed_content(text: str) -> tuple[str, list[str]]:
    """Split normalized *text* into its chat portion and the parts after separators."""
    parts = text.split(MIXED_CONTENT_SEPARATOR)
    return parts[0], parts[1:]


def _speaker_key(speaker: str) -> str:
    return speaker.strip().lower()


def _structured_kind(marker: Marker, text: str) -> SegmentKind | None:
    """Return the block kind if *marker* introduces a takeaway or freeform canvas."""
    block = _STRUCTURED_BLOCKS.get(_speaker_key(marker.speaker))
    if block is None:
        return None
    token, kind = block
    if text[marker.end :].lstrip().startswith(token):
        return kind
    return None


def _admitted_speakers(markers: list[Marker], required: int, admit_all: bool) -> frozenset[str]:
    """Pick the speaker keys trusted as genuine participants."""
    counts = Counter(_speaker_key(m.speaker) for m in markers)
    # Counter keeps first-insertion order, i.e. order of first appearance.
    by_appearance = list(counts)

    if admit_all:
        return frozenset(by_appearance)

    allowed = {key for key, count in counts.items() if count >= 2}
    for key in by_appearance:
        if len(allowed) >= required:
            break
        allowed.add(key)
    return frozenset(allowed)


class ChatSegmenter:
    """Transcript segmentation bound to one HTML-to-text converter.

    Args:
        converter: Converter for rich-editor HTML; the DOM-based converter
            is used when omitted.
    """

    def __init__(self, converter: HtmlToTextConverter | None = None) -> None:
        self.converter = converter

    def normalize(self, value: str | None) -> str:
        return normalize_chat_input(value, self.converter)

    def extract_segments(self, value: str | None, *, allow_single: bool = False) -> list[ChatSegment]:
        """Split chat content into ordered speaker turns.

        Args:
            value: Raw content (plain text or rich-editor HTML).
            allow_single: Admit every detected speaker and accept a single
                turn. Editors use this to build one bubble per line.

        Returns:
            The turns in document order, or an empty list if the content is
            not a transcript.
        """
        text = self.normalize(value)
        if not text.strip():
            return []

        chat_portion, _ = split_mixed_content(text)

        raw_markers = find_chat_markers(chat_portion)
        if not raw_markers:
            return []

        required = 1 if allow_single else 2
        allowed = _admitted_speakers(raw_markers, required, admit_all=allow_single)

        kinds: dict[int, SegmentKind] = {}
        for marker in raw_markers:
            kind = _structured_kind(marker, chat_portion)
            if kind is not None:
                kinds[marker.start] = kind

        markers = sorted(
            (m for m in raw_markers if _speaker_key(m.speaker) in allowed or m.start in kinds),
            key=lambda m: m.start,
        )
        logger.debug(
            "Found %d markers, %d admitted (%d speakers allowed)",
            len(raw_markers),
            len(markers),
            len(allowed),
        )

        if not markers:
            return []
        if not allow_single and len(markers) < 2 and not kinds:
            return []

        segments: list[ChatSegment] = []
        for i, marker in enumerate(markers):
            has_next = i + 1 < len(markers)
            next_start = markers[i + 1].start if has_next else len(chat_portion)
            content = chat_portion[marker.end : next_start]

            # Blank lines before the next speaker are spacing, not message text
            if has_next:
                content = _TRAILING_PARAGRAPH_BREAK_RE.sub("", content)

            content = content.strip()
            if content:
                segments.append(
                    ChatSegment(
                        speaker=marker.speaker,
                        content=content,
                        kind=kinds.get(marker.start, SegmentKind.DIALOGUE),
                    )
                )

        return segments

    def is_transcript(self, value: str | None) -> bool:
        """Cheap check whether *value* should be rendered as a chat at all."""
        text = self.normalize(value)
        if not text.strip():
            return False
        chat_portion, _ = split_mixed_content(text)
        if FREEFORM_CANVAS_TOKEN in chat_portion or TAKEAWAY_TOKEN in chat_portion:
            return True
        return len(find_chat_markers(chat_portion)) >= 2

    def extract_explanation(self, value: str | None) -> str | None:
        """Return the explanation after the first ``---`` separator, if any."""
        text = self.normalize(value)
        _, rest = split_mixed_content(text)
        if not rest:
            return None
        explanation = MIXED_CONTENT_SEPARATOR.join(rest).strip()
        return explanation or None


_default_segmenter = ChatSegmenter()


def extract_chat_segments(value: str | None, *, allow_single: bool = False) -> list[ChatSegment]:
    """Split chat content into turns with the default segmenter."""
    return _default_segmenter.extract_segments(value, allow_single=allow_single)


def is_chat_transcript(value: str | None) -> bool:
    return _default_segmenter.is_transcript(value)


def extract_explanation(value: str | None) -> str | None:
    return _default_segmenter.extract_explanation(value)
