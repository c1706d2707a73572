"""Chat content endpoints: segmentation, editor messages, and serialization."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter

from chat_content.api.models import (
    CodeBlockOut,
    ContentRequest,
    MessageModel,
    MessagesResponse,
    SegmentOut,
    SegmentsResponse,
    SerializeRequest,
    SerializeResponse,
)
from chat_content.config import settings
from chat_content.segmentation.code_blocks import extract_code_blocks
from chat_content.segmentation.converters import get_html_converter
from chat_content.segmentation.extractor import MIXED_CONTENT_SEPARATOR, ChatSegmenter, split_mixed_content
from chat_content.segmentation.messages import parse_conversation, serialize_messages
from chat_content.segmentation.models import ChatMessage

router = APIRouter()


def get_segmenter() -> ChatSegmenter:
    """Segmenter bound to the configured HTML converter."""
    return ChatSegmenter(get_html_converter(settings.html_converter))


def raw_explanation(content: str) -> str | None:
    """Explanation markup as stored, before any HTML-to-text conversion."""
    _, rest = split_mixed_content(content.replace("\r\n", "\n").replace("\r", "\n"))
    return MIXED_CONTENT_SEPARATOR.join(rest).strip() or None


def build_segments_response(content: str | None, allow_single: bool = False) -> SegmentsResponse:
    segmenter = get_segmenter()
    segments = segmenter.extract_segments(content, allow_single=allow_single)
    return SegmentsResponse(
        is_transcript=segmenter.is_transcript(content),
        segments=[SegmentOut(**s.to_dict()) for s in segments],
        explanation=segmenter.extract_explanation(content),
    )


@router.post("/api/chat/segments", response_model=SegmentsResponse)
async def segment_content(request: ContentRequest) -> SegmentsResponse:
    """Split raw content into speaker turns and the trailing explanation."""
    return build_segments_response(request.content, request.allow_single)


@router.post("/api/chat/messages", response_model=MessagesResponse)
async def content_messages(request: ContentRequest) -> MessagesResponse:
    """Classify content into editor messages; code blocks in the explanation are lifted out."""
    segmenter = get_segmenter()
    messages = parse_conversation(
        request.content, allow_single=request.allow_single, segmenter=segmenter
    )
    explanation = segmenter.extract_explanation(request.content)

    explanation_html: str | None = None
    code_blocks: list[CodeBlockOut] = []
    raw = raw_explanation(request.content)
    if raw:
        explanation_html, blocks = extract_code_blocks(raw)
        code_blocks = [CodeBlockOut(code=b.code, language=b.language) for b in blocks]

    return MessagesResponse(
        messages=[MessageModel(**asdict(m)) for m in messages],
        explanation=explanation,
        explanation_html=explanation_html,
        code_blocks=code_blocks,
    )


@router.post("/api/chat/serialize", response_model=SerializeResponse)
async def serialize_content(request: SerializeRequest) -> SerializeResponse:
    """Render editor messages back into storable content."""
    messages = [ChatMessage(**m.model_dump()) for m in request.messages]
    return SerializeResponse(content=serialize_messages(messages, request.explanation))
