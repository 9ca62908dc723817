"""Asynchronous HTTP transport for the Reddit API.

:class:`RedditClient` sends :class:`~redweave.types.RequestData`, retries
transient failures, honours Reddit's rate-limit headers, optionally caches GET
responses, and hands back :class:`~redweave.response.RedditResponse` objects
ready for decoding. The decoding and pagination layers never retry; all retry
policy lives here.
"""

import asyncio
import hashlib
import json
import ssl
import time
from collections.abc import Mapping
from datetime import UTC, datetime as dt
from email.utils import parsedate_to_datetime
from http import HTTPStatus
from typing import Any, Self
from urllib.parse import quote

import certifi
import httpx
import tenacity
from cachetools import TTLCache  # type: ignore[import-untyped]
from tenacity import (
    AsyncRetrying,
    stop_after_attempt,
    wait_exponential,
)

from .auth import AuthStrategy, NoAuth, resolve_auth
from .config import DEFAULT_BASE_URL, OAUTH_BASE_URL, RedditSettings, get_settings
from .endpoints import Endpoints, endpoint_implementation
from .exceptions import (
    APIError,
    AuthError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    RedweaveError,
    RedweaveRequestError,
    TimeoutError,
)
from .log_config import logger
from .models.registry import ModelRegistry, default_registry
from .models.things import Account, LoggedInAccount, Subreddit, TrophyList
from .response import RedditResponse
from .types import RequestData


def _parse_float(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Could not parse rate limit header value '{value}'")
        return None


class RedditClient:
    """Asynchronous client for the Reddit API.

    Implements the :class:`~redweave.types.Transport` protocol consumed by the
    paginators.

    Typical usage:
    ```python
    async with RedditClient() as client:
        friends = ImportantUserPaginator(client, "friends")
        async for page in friends:
            ...
    ```

    Attributes:
        registry: Model registry every response is decoded with.
        _settings: Configuration settings for the client.
        _base_url: The base URL for API requests.
        _retryable_status_codes: HTTP status codes that trigger a retry.
        _cache: Optional TTL cache for GET responses.
        _auth_strategy: Authentication strategy instance.
        _http_client: The underlying httpx.AsyncClient.
        _should_close_client: Whether this instance owns ``_http_client``.
        _rate_limit_remaining: Requests left in the current window, as last reported.
        _rate_limit_reset_timestamp: Unix time at which the window resets.
        _rate_limit_lock: Lock guarding the rate limit state.
    """

    DEFAULT_RETRYABLE_STATUS_CODES: frozenset[int] = frozenset(
        [429, 500, 502, 503, 504]
    )
    """Default set of HTTP status codes considered retryable."""

    def __init__(
        self,
        settings: RedditSettings | None = None,
        auth_strategy: AuthStrategy | None = None,
        *,
        registry: ModelRegistry | None = None,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        retryable_status_codes: frozenset[int] = DEFAULT_RETRYABLE_STATUS_CODES,
    ):
        """Initialize the RedditClient.

        Args:
            settings: Client settings. Defaults to :func:`redweave.config.get_settings`.
            auth_strategy: Authentication strategy. Defaults to a bearer token
                from ``settings.access_token``, or no authentication.
            registry: Model registry. Defaults to :func:`default_registry`.
            base_url: Overrides ``settings.base_url``. When neither is set and
                requests are authenticated, ``oauth.reddit.com`` is used.
            http_client: Optional pre-configured httpx.AsyncClient instance.
            retryable_status_codes: Set of HTTP status codes to retry on.
        """
        self._settings = settings or get_settings()
        self.registry = registry or default_registry()
        self._retryable_status_codes: frozenset[int] = retryable_status_codes

        self._cache: TTLCache[str, RedditResponse] | None = None
        if self._settings.enable_caching and self._settings.cache_ttl_seconds > 0:
            logger.info(
                f"Client-side caching enabled. Max size: {self._settings.cache_max_size}, "
                f"TTL: {self._settings.cache_ttl_seconds}s"
            )
            self._cache = TTLCache(
                maxsize=self._settings.cache_max_size,
                ttl=self._settings.cache_ttl_seconds,
            )

        self._auth_strategy: AuthStrategy = auth_strategy or resolve_auth(
            self._settings.access_token
        )
        logger.info(
            f"Using authentication strategy: {type(self._auth_strategy).__name__}"
        )

        # Bearer tokens are only honoured on the OAuth host.
        if base_url is None and self._settings.base_url == DEFAULT_BASE_URL:
            if not isinstance(self._auth_strategy, NoAuth):
                base_url = OAUTH_BASE_URL
        self._base_url: str = (base_url or self._settings.base_url).rstrip("/")

        self._should_close_client = http_client is None
        self._http_client = http_client or self._create_default_http_client()

        self._rate_limit_remaining: float | None = None
        self._rate_limit_reset_timestamp: float | None = None
        self._rate_limit_lock = asyncio.Lock()

        logger.debug(f"RedditClient initialized for {self._base_url}")

    def _create_default_http_client(self) -> httpx.AsyncClient:
        """Create a default httpx.AsyncClient with configured settings."""
        try:
            verify_ssl: ssl.SSLContext | bool = ssl.create_default_context(
                cafile=certifi.where()
            )
        except (OSError, ssl.SSLError):
            verify_ssl = True
            logger.warning("certifi bundle failed to load. Using default SSL verification.")

        return httpx.AsyncClient(
            timeout=self._settings.request_timeout,
            verify=verify_ssl,
            headers={"User-Agent": self._settings.user_agent},
        )

    # --- Rate limiting ---

    async def _parse_rate_limit_headers(self, response: httpx.Response) -> float | None:
        """Record Reddit's rate limit headers.

        Reddit reports ``X-Ratelimit-Remaining`` as a float and
        ``X-Ratelimit-Reset`` as seconds until the window resets.

        Returns:
            float | None: The ``Retry-After`` duration in seconds, if present.
        """
        retry_after_seconds: float | None = None
        async with self._rate_limit_lock:
            remaining = _parse_float(response.headers.get("X-Ratelimit-Remaining"))
            if remaining is not None:
                self._rate_limit_remaining = remaining
                logger.debug(f"Parsed X-Ratelimit-Remaining: {remaining}")

            reset_in = _parse_float(response.headers.get("X-Ratelimit-Reset"))
            if reset_in is not None:
                self._rate_limit_reset_timestamp = time.time() + reset_in
                logger.debug(f"Parsed X-Ratelimit-Reset: {reset_in}s")

            retry_after_header = response.headers.get("Retry-After")
            if retry_after_header:
                if retry_after_header.isdigit():
                    retry_after_seconds = float(retry_after_header)
                else:
                    try:
                        retry_dt_obj = parsedate_to_datetime(retry_after_header)
                        if retry_dt_obj.tzinfo is None:
                            retry_dt_obj = retry_dt_obj.replace(tzinfo=UTC)
                        delta = retry_dt_obj - dt.now(UTC)
                        retry_after_seconds = max(0, delta.total_seconds())
                    except (TypeError, ValueError) as e:
                        logger.warning(
                            f"Could not parse Retry-After HTTP date '{retry_after_header}': {e}"
                        )
        return retry_after_seconds

    async def _wait_for_rate_limit(self) -> None:
        """Sleep until the rate limit window resets when no requests are left."""
        if not self._settings.enable_rate_limiting:
            return
        async with self._rate_limit_lock:
            if self._rate_limit_remaining is None or self._rate_limit_remaining >= 1:
                return
            if self._rate_limit_reset_timestamp is not None:
                wait_time = self._rate_limit_reset_timestamp - time.time()
            else:
                wait_time = float(self._settings.rate_limit_retry_after_default)
            if wait_time > 0:
                logger.info(
                    f"Rate limit exhausted. Waiting for {wait_time:.2f}s until reset."
                )
                await asyncio.sleep(wait_time)
            self._rate_limit_remaining = None

    # --- Request execution ---

    def _prepare(self, request_data: RequestData) -> RequestData:
        params: dict[str, Any] = {"raw_json": 1}
        if request_data.params:
            params.update(request_data.params)
        return request_data.model_copy(update={"params": params}, deep=True)

    async def _execute_single_request(
        self, request_data: RequestData
    ) -> tuple[httpx.Response, RedditResponse]:
        """Execute a single HTTP request attempt, run hooks, and wrap the response.

        Raises:
            RateLimitError: If the API rate limit is exceeded (429 status).
            NotFoundError: For 404 responses.
            APIError: For other HTTP error responses (4xx/5xx).
            TimeoutError: If the request times out.
            NetworkError: For network-related errors.
            RedweaveError: For other unexpected errors.
        """
        hook_params: dict[str, Any] | None = (
            dict(request_data.params) if request_data.params is not None else None
        )
        hook_headers = httpx.Headers(request_data.headers)
        if self._settings.pre_request_hooks:
            logger.debug(
                f"Executing {len(self._settings.pre_request_hooks)} pre-request hooks "
                f"for {request_data.method} {request_data.url}"
            )
            for hook in self._settings.pre_request_hooks:
                try:
                    hook(request_data.method, request_data.url, hook_params, hook_headers)
                except Exception as e:
                    logger.error(
                        f"Error executing pre-request hook {getattr(hook, '__name__', str(hook))}: {e}"
                    )
            request_data = request_data.model_copy(
                update={"params": hook_params, "headers": dict(hook_headers.items())}
            )

        request = request_data.build_request(self._base_url)
        response: httpx.Response | None = None

        try:
            await self._auth_strategy.async_authenticate(request)
            if not request.headers.get("User-Agent"):
                request.headers["User-Agent"] = self._settings.user_agent

            logger.debug(f"Sending request: {request.method} {request.url}")
            response = await self._http_client.send(request)
            retry_after = await self._parse_rate_limit_headers(response)
            logger.debug(f"Received response: {response.status_code} for {request.url}")

            if response.status_code >= HTTPStatus.BAD_REQUEST:
                if response.status_code == HTTPStatus.TOO_MANY_REQUESTS:
                    wait_hint = retry_after or self._settings.rate_limit_retry_after_default
                    logger.warning(
                        f"Rate limit hit (429) for {request.url}. Server hint: {wait_hint:.2f}s"
                    )
                    raise RateLimitError("API rate limit exceeded.", response=response)
                if response.status_code in (HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN):
                    raise AuthError(
                        f"Reddit refused the credentials ({response.status_code})",
                        response=response,
                    )
                if response.status_code == HTTPStatus.NOT_FOUND:
                    raise NotFoundError("Resource not found", response=response)
                raise APIError(
                    f"API request failed with status {response.status_code}",
                    response=response,
                )

            wrapped = RedditResponse(response, self.registry)

            if self._settings.post_request_hooks:
                for hook in self._settings.post_request_hooks:
                    try:
                        hook(response, wrapped, 1)
                    except Exception as e:
                        logger.error(
                            f"Error executing post-request hook {getattr(hook, '__name__', str(hook))}: {e}"
                        )

            return response, wrapped

        except httpx.TimeoutException as e:
            logger.error(f"Request timed out: {request.url}")
            raise TimeoutError("Request timed out", request=request) from e
        except httpx.NetworkError as e:
            logger.error(f"Network error occurred for {request.url}: {e}")
            raise NetworkError(
                f"Network error for {request.url}: {e}", request=request
            ) from e
        except httpx.RequestError as e:
            logger.error(f"HTTP request error for {request.url}: {e}")
            raise RedweaveRequestError(
                f"HTTP request error for {request.url}: {e}", request=request
            ) from e
        except RedweaveError:
            raise
        except Exception as e:
            logger.exception(f"Unexpected error during request to {request.url}: {e}")
            raise RedweaveError(
                f"An unexpected error occurred during request execution: {e}",
                request=request,
            ) from e

    def _should_retry_request(self, retry_state: tenacity.RetryCallState) -> bool:
        """Predicate for tenacity: should we retry this request?"""
        outcome = retry_state.outcome
        if not outcome or not outcome.failed:
            return False

        exc = outcome.exception()
        request = getattr(exc, "request", None)
        url = str(getattr(request, "url", "N/A")) if request else "N/A"

        if isinstance(exc, TimeoutError | NetworkError | RateLimitError):
            logger.warning(f"Retrying due to {type(exc).__name__} for {url}")
            return True

        if isinstance(exc, APIError) and exc.response is not None:
            if exc.response.status_code in self._retryable_status_codes:
                logger.warning(
                    f"Retrying due to status code {exc.response.status_code} for {url}"
                )
                return True
        return False

    async def _before_retry_sleep(self, retry_state: tenacity.RetryCallState) -> None:
        """Log details before tenacity sleeps between retries."""
        if not retry_state.outcome:
            return
        exc = retry_state.outcome.exception()
        sleep_time = (
            getattr(retry_state.next_action, "sleep", 0) if retry_state.next_action else 0
        )
        logger.info(
            f"Retrying request in {sleep_time:.2f} seconds after "
            f"{retry_state.attempt_number} attempt(s) due to: {type(exc).__name__} - {exc}"
        )

    async def _request_with_retry(
        self, request_data: RequestData
    ) -> tuple[httpx.Response, RedditResponse, int]:
        """Send a request, retrying transient failures.

        Returns:
            The raw response, the wrapped response and the number of attempts.
        """
        await self._wait_for_rate_limit()

        retry_strategy = AsyncRetrying(
            stop=stop_after_attempt(self._settings.max_retries + 1),
            wait=wait_exponential(multiplier=self._settings.backoff_factor),
            retry=self._should_retry_request,
            reraise=True,
            before_sleep=self._before_retry_sleep,
        )

        try:
            response, wrapped = await retry_strategy(
                self._execute_single_request, request_data
            )
        except Exception as e:
            logger.error(f"Request failed after retries: {e}")
            raise
        return response, wrapped, retry_strategy.statistics["attempt_number"]

    def _generate_cache_key(
        self, method: str, url: str, params: Mapping[str, Any] | None = None
    ) -> str:
        """Generate a cache key from the request method, URL, and parameters."""
        key_parts = [method.upper(), url]
        if params:
            key_parts.append(json.dumps(params, sort_keys=True, separators=(",", ":")))
        return hashlib.md5("|".join(key_parts).encode("utf-8")).hexdigest()

    async def execute(self, request: RequestData) -> RedditResponse:
        """Send ``request`` and return the wrapped response.

        Successful GET responses are served from and stored in the cache when
        caching is enabled.

        Raises:
            RedweaveError: Any transport failure after retries, or a response
                whose body cannot be parsed.
        """
        request_data = self._prepare(request)
        cache_key: str | None = None

        if self._cache is not None and request_data.method.upper() == "GET":
            cache_key = self._generate_cache_key(
                request_data.method, request_data.url, request_data.params
            )
            cached = self._cache.get(cache_key)
            if cached is not None:
                logger.debug(f"Cache hit for {request_data.method} {request_data.url}")
                return cached

        response, wrapped, attempts = await self._request_with_retry(request_data)
        logger.debug(
            f"{request_data.method} {request_data.url} completed after {attempts} attempt(s)"
        )

        if (
            cache_key is not None
            and self._cache is not None
            and HTTPStatus.OK <= response.status_code < HTTPStatus.MULTIPLE_CHOICES
        ):
            self._cache[cache_key] = wrapped
            logger.debug(f"Cached response for key: {cache_key}")

        return wrapped

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any | None = None,
        data: Mapping[str, Any] | None = None,
    ) -> RedditResponse:
        """Convenience wrapper around :meth:`execute`."""
        return await self.execute(
            RequestData(method=method, url=path, params=params, json_data=json, data=data)
        )

    # --- Single-object endpoints ---

    @endpoint_implementation(Endpoints.OAUTH_ME)
    async def me(self) -> LoggedInAccount:
        """Fetch the authenticated user's account."""
        response = await self.request("GET", "/api/v1/me")
        return response.as_model(LoggedInAccount)

    @endpoint_implementation(Endpoints.USER_USERNAME_ABOUT)
    async def user(self, username: str) -> Account:
        """Fetch a user's public profile."""
        response = await self.request("GET", f"/user/{quote(username, safe='')}/about")
        return response.as_model(Account)

    @endpoint_implementation(Endpoints.SUBREDDIT_ABOUT)
    async def subreddit(self, name: str) -> Subreddit:
        """Fetch a subreddit's description."""
        response = await self.request("GET", f"/r/{quote(name, safe='')}/about")
        return response.as_model(Subreddit)

    @endpoint_implementation(Endpoints.OAUTH_USER_USERNAME_TROPHIES)
    async def trophies(self, username: str) -> TrophyList:
        """Fetch the trophies shown on a user's profile."""
        response = await self.request(
            "GET", f"/api/v1/user/{quote(username, safe='')}/trophies"
        )
        return response.as_model(TrophyList)

    # --- Lifecycle ---

    async def aclose(self) -> None:
        """Close the underlying HTTP client (if owned) and the auth strategy."""
        if self._should_close_client and not self._http_client.is_closed:
            await self._http_client.aclose()
            logger.info("RedditClient internal HTTP client closed.")
        await self._auth_strategy.async_close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        await self.aclose()
