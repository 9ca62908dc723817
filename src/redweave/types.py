# redweave/types.py
"""Core type definitions shared across redweave.

Defines the request description handed to the transport, the hook type
aliases accepted by the settings, and the ``Transport`` protocol the
paginators depend on.
"""

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import httpx
from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from .models.registry import ModelRegistry
    from .response import RedditResponse


class RequestData(BaseModel):
    """Describes one HTTP request.

    ``url`` may be a path relative to the transport's base URL or an
    absolute URL.
    """

    method: str = "GET"
    url: str
    params: Mapping[str, Any] | None = None
    json_data: Any | None = None
    data: Mapping[str, Any] | None = None
    headers: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(extra="allow")

    def build_request(self, base_url: str = "") -> httpx.Request:
        """Builds an httpx.Request, resolving a relative ``url`` against ``base_url``."""
        url = self.url
        if base_url and not url.startswith(("http://", "https://")):
            url = f"{base_url.rstrip('/')}/{url.lstrip('/')}"
        return httpx.Request(
            method=self.method,
            url=url,
            params=self.params,
            json=self.json_data,
            data=self.data,
            headers=self.headers,
        )


@runtime_checkable
class Transport(Protocol):
    """What the paginators need from an HTTP client.

    ``redweave.client.RedditClient`` is the shipped implementation; tests use
    stubs. Retries, timeouts and cancellation belong to the transport.
    """

    registry: "ModelRegistry"

    async def execute(self, request: RequestData) -> "RedditResponse":
        """Sends ``request`` and wraps the completed response.

        Raises:
            NetworkError: The request could not be completed.
        """
        ...


PreRequestHook = Callable[[str, str, dict[str, Any] | None, httpx.Headers], None]
"""Type alias for a pre-request hook.

Args:
    method (str): The HTTP method of the request.
    url (str): The full URL of the request.
    params (dict[str, Any] | None): Mutable query parameters.
    headers (httpx.Headers): Mutable request headers.
"""

PostRequestHook = Callable[[httpx.Response, Any, int], None]
"""Type alias for a post-request hook.

Args:
    response (httpx.Response): The raw response.
    wrapped (RedditResponse): The response wrapped for decoding.
    attempts (int): Attempts represented by this call; hooks run once per
        successful attempt, so this is always 1.
"""
