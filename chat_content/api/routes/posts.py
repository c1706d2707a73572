"""Post endpoints: chat view of stored posts and version comparison."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query

from chat_content.api.models import (
    BubbleChangeOut,
    SegmentOut,
    SegmentsResponse,
    VersionDiffResponse,
    WordChangeOut,
)
from chat_content.api.routes.chat import build_segments_response, get_segmenter
from chat_content.segmentation.diff import compare_versions
from chat_content.storage import fetch_post, fetch_post_version, get_supabase_client

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/api/posts/{slug}/chat", response_model=SegmentsResponse)
async def post_chat(slug: str) -> SegmentsResponse:
    """Segment the stored content of a post."""
    try:
        client = get_supabase_client()
        post = fetch_post(client, slug)
    except Exception as exc:
        logger.exception("Failed to load post %s", slug)
        raise HTTPException(status_code=502, detail=f"Storage unavailable: {exc}") from exc

    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")

    return build_segments_response(post.get("content"))


@router.get("/api/posts/{post_id}/versions/compare", response_model=VersionDiffResponse)
async def compare_post_versions(
    post_id: str,
    to_version: Annotated[int, Query(ge=1)],
    from_version: Annotated[int | None, Query(ge=1)] = None,
) -> VersionDiffResponse:
    """Compare two stored versions of a post.

    Chat content is compared bubble by bubble, anything else word by word.
    Without ``from_version`` the target version is treated as the first one.
    """
    try:
        client = get_supabase_client()
        new_version = fetch_post_version(client, post_id, to_version)
        old_version = (
            fetch_post_version(client, post_id, from_version) if from_version is not None else None
        )
    except Exception as exc:
        logger.exception("Failed to load versions of post %s", post_id)
        raise HTTPException(status_code=502, detail=f"Storage unavailable: {exc}") from exc

    if new_version is None:
        raise HTTPException(status_code=404, detail="Version not found")
    if from_version is not None and old_version is None:
        raise HTTPException(status_code=404, detail="Version to compare against not found")

    old_content = old_version.get("content") if old_version else ""
    diff = compare_versions(old_content, new_version.get("content"), get_segmenter())

    return VersionDiffResponse(
        type=diff.type,
        is_first_version=diff.is_first_version,
        bubbles=[
            BubbleChangeOut(
                bubble=SegmentOut(**c.bubble.to_dict()),
                status=c.status,
                old_bubble=SegmentOut(**c.old_bubble.to_dict()) if c.old_bubble else None,
            )
            for c in diff.bubbles
        ],
        words=[WordChangeOut(text=w.text, status=w.status) for w in diff.words],
    )
