"""Pydantic request/response schemas for the chat content API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from chat_content.segmentation.models import BubbleStatus, DiffType, MessageType, SegmentKind


class ContentRequest(BaseModel):
    """Request body carrying raw stored content."""

    content: str
    allow_single: bool = False


class SegmentOut(BaseModel):
    """A single speaker turn."""

    speaker: str
    content: str
    kind: SegmentKind = SegmentKind.DIALOGUE


class SegmentsResponse(BaseModel):
    """Response body for the /api/chat/segments endpoint."""

    is_transcript: bool
    segments: list[SegmentOut]
    explanation: str | None = None


class MessageModel(BaseModel):
    """A chat editor message."""

    id: str = ""
    speaker: str
    content: str
    type: MessageType = MessageType.MESSAGE
    takeaway_icon: str | None = None
    takeaway_title: str | None = None
    freeform_data: Any = None


class CodeBlockOut(BaseModel):
    """A code block lifted out of the explanation."""

    code: str
    language: str


class MessagesResponse(BaseModel):
    """Response body for the /api/chat/messages endpoint."""

    messages: list[MessageModel]
    explanation: str | None = None
    explanation_html: str | None = None
    code_blocks: list[CodeBlockOut] = []


class SerializeRequest(BaseModel):
    """Request body for the /api/chat/serialize endpoint."""

    messages: list[MessageModel]
    explanation: str = ""


class SerializeResponse(BaseModel):
    """Response body for the /api/chat/serialize endpoint."""

    content: str


class BubbleChangeOut(BaseModel):
    """A bubble with its change status between two versions."""

    bubble: SegmentOut
    status: BubbleStatus
    old_bubble: SegmentOut | None = None


class WordChangeOut(BaseModel):
    """A run of text with its change status in a word-level diff."""

    text: str
    status: BubbleStatus


class VersionDiffResponse(BaseModel):
    """Response body for the version comparison endpoint."""

    type: DiffType
    is_first_version: bool = False
    bubbles: list[BubbleChangeOut] = []
    words: list[WordChangeOut] = []
