"""Chat editor messages: classification of segments and serialization back to text.

Serialized form, one block per message separated by blank lines::

    Mentor: Why does this fail?
    TAKEAWAY: [TAKEAWAY:💡:Remember]: Lists are zero-indexed.
    FREEFORM: [FREEFORM_CANVAS]:{"shapes": []}
    ---
    Optional explanation text.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable

from chat_content.segmentation.extractor import (
    MIXED_CONTENT_SEPARATOR,
    ChatSegmenter,
    extract_chat_segments,
)
from chat_content.segmentation.models import ChatMessage, MessageType

# [TAKEAWAY:icon:title]: content
TAKEAWAY_PREFIX_RE = re.compile(r"^\[TAKEAWAY(?::([^:]*?))?(?::([^\]]*?))?\]:\s*")
FREEFORM_PREFIX_RE = re.compile(r"^\[FREEFORM_CANVAS\]:(.*)\Z")

TAKEAWAY_SPEAKER = "TAKEAWAY"
FREEFORM_SPEAKER = "FREEFORM"
DEFAULT_TAKEAWAY_ICON = "🧠"
DEFAULT_TAKEAWAY_TITLE = "One-Line Takeaway for Learners"


def _decode_freeform(payload: str) -> object:
    try:
        return json.loads(payload)
    except json.JSONDecodeError:
        return None


def parse_conversation(
    content: str | None,
    *,
    allow_single: bool = False,
    segmenter: ChatSegmenter | None = None,
) -> list[ChatMessage]:
    """Classify the turns of *content* into editor messages.

    Message IDs are derived from position so re-parsing the same content
    yields the same IDs.

    Args:
        content: Stored chat content.
        allow_single: Passed through to segmentation; the editor sets it so
            every line becomes a bubble, the read-only viewer does not.
        segmenter: Segmenter to use instead of the default one.

    Returns:
        Messages in document order.
    """
    messages: list[ChatMessage] = []

    if segmenter is not None:
        segments = segmenter.extract_segments(content, allow_single=allow_single)
    else:
        segments = extract_chat_segments(content, allow_single=allow_single)

    for index, segment in enumerate(segments):
        freeform_match = FREEFORM_PREFIX_RE.match(segment.content)
        if segment.speaker == FREEFORM_SPEAKER or freeform_match:
            payload = (freeform_match.group(1) if freeform_match else "") or segment.content
            messages.append(
                ChatMessage(
                    id=f"freeform-{index}",
                    speaker=FREEFORM_SPEAKER,
                    content=payload,
                    type=MessageType.FREEFORM,
                    freeform_data=_decode_freeform(payload),
                )
            )
            continue

        takeaway_match = TAKEAWAY_PREFIX_RE.match(segment.content)
        if segment.speaker == TAKEAWAY_SPEAKER or takeaway_match:
            icon = (takeaway_match.group(1) if takeaway_match else None) or DEFAULT_TAKEAWAY_ICON
            title = (takeaway_match.group(2) if takeaway_match else None) or DEFAULT_TAKEAWAY_TITLE
            body = (
                TAKEAWAY_PREFIX_RE.sub("", segment.content, count=1).strip()
                if takeaway_match
                else segment.content
            )
            messages.append(
                ChatMessage(
                    id=f"takeaway-{index}",
                    speaker=TAKEAWAY_SPEAKER,
                    content=body,
                    type=MessageType.TAKEAWAY,
                    takeaway_icon=icon,
                    takeaway_title=title,
                )
            )
            continue

        messages.append(
            ChatMessage(
                id=f"msg-{index}-{segment.speaker}",
                speaker=segment.speaker,
                content=segment.content,
            )
        )

    return [
        m
        for m in messages
        if m.speaker.strip() and (m.content.strip() or m.type is MessageType.FREEFORM)
    ]


def _serialize_message(message: ChatMessage) -> str:
    if message.type is MessageType.FREEFORM:
        payload = (
            json.dumps(message.freeform_data, separators=(",", ":"), ensure_ascii=False)
            if message.freeform_data is not None
            else "{}"
        )
        return f"{FREEFORM_SPEAKER}: [FREEFORM_CANVAS]:{payload}"
    if message.type is MessageType.TAKEAWAY:
        icon = message.takeaway_icon or DEFAULT_TAKEAWAY_ICON
        title = message.takeaway_title or DEFAULT_TAKEAWAY_TITLE
        return f"{TAKEAWAY_SPEAKER}: [TAKEAWAY:{icon}:{title}]: {message.content}"
    return f"{message.speaker}: {message.content}"


def serialize_messages(messages: Iterable[ChatMessage], explanation: str = "") -> str:
    """Render editor messages (and an optional explanation) as storable content."""
    chat_part = "\n\n".join(_serialize_message(m) for m in messages)
    if explanation.strip():
        return f"{chat_part}{MIXED_CONTENT_SEPARATOR}{explanation.strip()}"
    return chat_part
