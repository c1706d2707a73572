"""Data models for chat transcript segmentation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class SegmentKind(StrEnum):
    """What a segment carries: a dialogue turn or a structured content block."""

    DIALOGUE = "dialogue"
    TAKEAWAY = "takeaway"
    FREEFORM_CANVAS = "freeform_canvas"


class MessageType(StrEnum):
    """Message types rendered by the lesson chat editor and viewer."""

    MESSAGE = "message"
    TAKEAWAY = "takeaway"
    FREEFORM = "freeform"


class BubbleStatus(StrEnum):
    """Change status of a chat bubble between two content versions."""

    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"


@dataclass(frozen=True)
class Marker:
    """A ``Speaker:`` token found at the start of a line.

    ``end`` points just past the colon and any horizontal whitespace after it.
    """

    speaker: str
    start: int
    end: int


@dataclass(frozen=True)
class ChatSegment:
    """One reconstructed conversational turn."""

    speaker: str
    content: str
    kind: SegmentKind = SegmentKind.DIALOGUE

    def to_dict(self) -> dict[str, str]:
        return {"speaker": self.speaker, "content": self.content, "kind": str(self.kind)}


@dataclass
class ChatMessage:
    """A segment classified for the chat editor (message, takeaway or freeform canvas)."""

    id: str
    speaker: str
    content: str
    type: MessageType = MessageType.MESSAGE
    takeaway_icon: str | None = None
    takeaway_title: str | None = None
    freeform_data: Any = None


@dataclass
class CodeBlock:
    """A syntax-highlighted code block lifted out of explanation HTML."""

    code: str
    language: str


@dataclass
class BubbleChange:
    """A chat bubble paired with its change status against an older version."""

    bubble: ChatSegment
    status: BubbleStatus
    old_bubble: ChatSegment | None = None


class DiffType(StrEnum):
    """How two content versions were compared."""

    CHAT = "chat"
    RICH = "rich"


@dataclass
class WordChange:
    """A run of word-level diff tokens sharing one status (never ``modified``)."""

    text: str
    status: BubbleStatus


@dataclass
class VersionDiff:
    """Comparison of two content versions.

    Chat content fills ``bubbles``; anything else fills ``words``.
    """

    type: DiffType
    bubbles: list[BubbleChange] = field(default_factory=list)
    words: list[WordChange] = field(default_factory=list)
    is_first_version: bool = False
