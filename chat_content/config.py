from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings

from chat_content.segmentation.converters import HtmlConverterKind


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    posts_table: str = "posts"
    post_versions_table: str = "post_versions"

    # App config
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    # Segmentation
    html_converter: HtmlConverterKind = HtmlConverterKind.DOM

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()
