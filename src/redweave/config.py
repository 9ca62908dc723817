# redweave/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .types import PostRequestHook, PreRequestHook

DEFAULT_BASE_URL = "https://www.reddit.com"
OAUTH_BASE_URL = "https://oauth.reddit.com"
DEFAULT_USER_AGENT = "python:redweave:0.1.0"


class RedditSettings(BaseSettings):
    """
    Manages user-configurable settings for the redweave client, primarily
    loaded from environment variables (prefixed with ``REDWEAVE_``) or a
    ``.env``/``secrets.env`` file.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "secrets.env"),
        env_file_encoding="utf-8",
        env_prefix="REDWEAVE_",
        extra="ignore",
        case_sensitive=False,
        arbitrary_types_allowed=True,  # hook callables
    )

    # --- Transport ---
    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Root URL requests are sent to; use oauth.reddit.com with a token",
    )
    request_timeout: float = Field(
        default=30.0, description="Default request timeout in seconds"
    )
    max_retries: int = Field(
        default=3, description="Maximum number of retries for failed requests"
    )
    backoff_factor: float = Field(
        default=0.5, description="Backoff factor for retries (seconds)"
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent header; Reddit throttles generic agents aggressively",
    )
    access_token: str | None = Field(
        default=None, description="Bearer token sent with every request (optional)"
    )

    # --- Rate limiting ---
    enable_rate_limiting: bool = Field(
        default=True,
        description="Honour X-Ratelimit-Remaining/X-Ratelimit-Reset before sending",
    )
    rate_limit_retry_after_default: int = Field(
        default=60,
        description="Seconds to wait when the window is exhausted but no reset is known",
    )

    # --- Caching ---
    enable_caching: bool = Field(
        default=False, description="Cache successful GET responses client-side"
    )
    cache_ttl_seconds: int = Field(
        default=300, description="TTL for cache entries in seconds"
    )
    cache_max_size: int = Field(
        default=128, description="Maximum number of cached responses"
    )

    # --- Pagination ---
    default_page_limit: int = Field(
        default=25, description="Items requested per listing page when not given"
    )

    # --- Hooks ---
    pre_request_hooks: list[PreRequestHook] = Field(
        default_factory=list,
        description="Hooks called before a request is sent.",
    )
    post_request_hooks: list[PostRequestHook] = Field(
        default_factory=list,
        description="Hooks called after a response has been received and wrapped.",
    )


@lru_cache
def get_settings() -> RedditSettings:
    """
    Provides access to the redweave settings.

    Settings are loaded from environment variables or .env/secrets.env files.
    The instance is cached for performance.

    Returns:
        RedditSettings: The settings instance.
    """
    return RedditSettings()
