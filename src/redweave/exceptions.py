"""Custom exception classes for the redweave library."""

from typing import Any

import httpx


class RedweaveError(Exception):
    """Base exception class for all redweave errors."""

    def __init__(
        self,
        message: str,
        *,
        response: httpx.Response | None = None,
        request: httpx.Request | None = None,
    ):
        """Initializes the base exception.

        Args:
            message: The error message.
            response: Optional httpx.Response object associated with the error.
            request: Optional httpx.Request object associated with the error.
        """
        super().__init__(message)
        self.message = message
        self.response = response
        self.request = request

    def __str__(self) -> str:
        if self.response:
            url_info = getattr(getattr(self.response, "request", None), "url", "N/A")
            return (
                f"{self.message} (Status: {self.response.status_code}, URL: {url_info})"
            )
        if isinstance(self.request, httpx.Request):
            return f"{self.message} (URL: {self.request.url})"
        return self.message


# --- Decoding errors ---


class DecodingError(RedweaveError):
    """Base class for failures while turning JSON into models."""


class MalformedResponseError(DecodingError):
    """The body is not valid JSON, or a mandatory structural field is missing."""


class UnsupportedKindError(DecodingError):
    """The ``kind`` tag is absent, unknown, or resolves to the wrong model family."""

    def __init__(self, message: str, *, kind: str | None = None):
        super().__init__(message)
        self.kind = kind


class FieldError(DecodingError):
    """Base class for errors raised by a model field accessor."""

    def __init__(self, message: str, *, model: str, field: str):
        super().__init__(message)
        self.model = model
        self.field = field


class MissingFieldError(FieldError):
    """A non-nullable field is absent (or null) in the backing JSON."""

    def __init__(self, model: str, field: str):
        super().__init__(
            f"{model}.{field} is required but missing from the JSON data",
            model=model,
            field=field,
        )


class FieldTypeMismatchError(FieldError):
    """A field is present but cannot be coerced to its declared type."""

    def __init__(self, model: str, field: str, expected: str, value: Any):
        super().__init__(
            f"{model}.{field} expected {expected}, got {type(value).__name__}: {value!r}",
            model=model,
            field=field,
        )
        self.expected = expected
        self.value = value


# --- Caller errors ---


class ValidationError(RedweaveError):
    """Represents a request validation error.

    Raised for client-side validation issues before a request is sent.
    """


class InvalidParameterError(ValidationError):
    """A pagination parameter is outside the set of values the endpoint allows."""


class PaginationExhaustedError(RedweaveError):
    """The paginator has no cursor left in the requested direction."""


class ConfigurationError(RedweaveError):
    """Represents an error in the library's configuration."""

    def __init__(self, message: str):
        super().__init__(message, response=None)


class UnregisteredModelError(ConfigurationError):
    """No constructor is registered for the requested model type."""


# --- API-level errors ---


class ApiException(RedweaveError):
    """An error entry reported by Reddit inside an otherwise successful response.

    These are collected by :class:`redweave.response.RedditResponse` and are
    never raised automatically.
    """

    def __init__(self, reason: str, explanation: str, field: str | None = None):
        super().__init__(f"{reason}: {explanation}")
        self.reason = reason
        self.explanation = explanation
        self.field = field

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApiException):
            return NotImplemented
        return (self.reason, self.explanation, self.field) == (
            other.reason,
            other.explanation,
            other.field,
        )

    def __hash__(self) -> int:
        return hash((self.reason, self.explanation, self.field))

    def __repr__(self) -> str:
        return f"ApiException(reason={self.reason!r}, explanation={self.explanation!r})"


# --- Transport errors ---


class APIError(RedweaveError):
    """Represents a generic HTTP error returned by Reddit (non-specific 4xx/5xx)."""


class NotFoundError(APIError):
    """Represents a resource not found error (404 Not Found)."""


class RateLimitError(APIError):
    """Represents hitting the API rate limit (429 Too Many Requests)."""


class TimeoutError(RedweaveError):
    """Represents a request timeout error."""

    def __init__(self, message: str, *, request: httpx.Request | None = None):
        super().__init__(message, request=request, response=None)

    def __str__(self) -> str:
        if self.request:
            return f"{self.message} (URL: {self.request.url})"
        return self.message


class NetworkError(RedweaveError):
    """Represents a network connection error (e.g., DNS failure, connection refused)."""

    def __init__(self, message: str, *, request: httpx.Request | None = None):
        super().__init__(message, request=request, response=None)

    def __str__(self) -> str:
        if self.request:
            return f"{self.message} (URL: {self.request.url})"
        return self.message


class AuthError(APIError):
    """Represents rejected or missing credentials (401 Unauthorized, 403 Forbidden)."""


class RedweaveRequestError(RedweaveError):
    """Represents an error during the HTTP request process itself.

    Covers httpx request failures that are not timeouts or network errors.
    """
