"""Detection of ``Speaker:`` markers in normalized chat text."""

from __future__ import annotations

import re

from chat_content.segmentation.models import Marker

# A label of up to 60 chars without colons or line breaks, the colon, optional
# horizontal whitespace (including non-breaking spaces), and message content
# right after it on the same line.
SPEAKER_TOKEN_RE = re.compile(r"([^:\n]{1,60}):[^\S\n]*(?=\S)")

_ASCII_LETTER_RE = re.compile(r"[A-Za-z]")


def find_chat_markers(text: str) -> list[Marker]:
    """Return the speaker markers of *text* in document order.

    A match only counts when it starts a line, which keeps mid-sentence
    colons (``... as follows: ...``) out. Labels without any ASCII letter,
    e.g. timestamps like ``12:``, are ignored as well.
    """
    markers: list[Marker] = []
    for match in SPEAKER_TOKEN_RE.finditer(text):
        idx = match.start()
        if idx != 0 and text[idx - 1] != "\n":
            continue

        speaker = match.group(1).strip()
        if not speaker or not _ASCII_LETTER_RE.search(speaker):
            continue

        markers.append(Marker(speaker=speaker, start=idx, end=match.end()))
    return markers
