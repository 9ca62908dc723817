from typing import Protocol

import httpx

from .exceptions import ConfigurationError
from .log_config import logger


class AuthStrategy(Protocol):
    """Protocol for objects that attach credentials to outgoing requests.

    Obtaining or refreshing tokens is the application's business; a strategy
    only decorates a request with what it was given.
    """

    async def async_authenticate(self, request: httpx.Request) -> None:
        """
        Modifies the request in place to add authentication information.

        Raises:
            ConfigurationError: If the strategy holds no usable credentials.
        """
        ...

    async def async_close(self) -> None:
        """Releases any resources held by the strategy. Must be idempotent."""
        ...


class NoAuth:
    """Sends requests anonymously, as Reddit's public ``.json`` endpoints allow."""

    async def async_authenticate(self, request: httpx.Request) -> None:
        logger.trace("Using NoAuth strategy, no authentication applied.")

    async def async_close(self) -> None:
        """No resources to close."""


class StaticTokenAuth:
    """Adds an already issued OAuth2 access token as ``Authorization: bearer <token>``.

    Attributes:
        _token: The access token.
    """

    def __init__(self, token: str | None):
        """Initializes StaticTokenAuth with the provided access token.

        Raises:
            ConfigurationError: If the token is None or empty.
        """
        if not token:
            raise ConfigurationError("StaticTokenAuth requires a non-empty 'token'.")
        self._token: str = token
        logger.debug("StaticTokenAuth initialized.")

    async def async_authenticate(self, request: httpx.Request) -> None:
        logger.trace("Authenticating request using StaticTokenAuth.")
        request.headers["Authorization"] = f"bearer {self._token}"

    async def async_close(self) -> None:
        """No resources to close."""


def resolve_auth(access_token: str | None) -> AuthStrategy:
    """Picks ``StaticTokenAuth`` when a token is configured, else ``NoAuth``."""
    if access_token:
        return StaticTokenAuth(access_token)
    return NoAuth()
