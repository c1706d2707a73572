"""Supabase read helpers for posts and their stored versions."""

from __future__ import annotations

from typing import Any

from supabase import Client, create_client

from chat_content.config import settings

POST_COLUMNS = "id, slug, title, content"
VERSION_COLUMNS = "id, post_id, version_number, content, created_at"


def get_supabase_client() -> Client:
    """Create and return a Supabase client from settings."""
    return create_client(settings.supabase_url, settings.supabase_key)


def fetch_post(client: Client, slug: str) -> dict[str, Any] | None:
    """Return the post row for *slug*, or None if there is no such post."""
    result = (
        client.table(settings.posts_table).select(POST_COLUMNS).eq("slug", slug).limit(1).execute()
    )
    if not result.data:
        return None
    return dict(result.data[0])


def fetch_post_version(client: Client, post_id: str, version_number: int) -> dict[str, Any] | None:
    """Return one stored version of a post, or None if it does not exist."""
    result = (
        client.table(settings.post_versions_table)
        .select(VERSION_COLUMNS)
        .eq("post_id", post_id)
        .eq("version_number", version_number)
        .limit(1)
        .execute()
    )
    if not result.data:
        return None
    return dict(result.data[0])
