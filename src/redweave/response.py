"""Wrappers around completed HTTP responses.

:class:`RestResponse` exposes the body of an ``httpx.Response`` as text and as
a parsed JSON tree. :class:`RedditResponse` adds Reddit's in-band error list
and the entry points into model and listing decoding.
"""

import json
from collections.abc import Mapping
from typing import Any, TypeVar

import httpx

from .exceptions import ApiException, MalformedResponseError
from .listing import Listing
from .log_config import logger
from .models.registry import ModelRegistry

T = TypeVar("T")

JSON_MEDIA_TYPE = "application/json"


class RestResponse:
    """A completed HTTP response with lazily parsed JSON.

    Attributes:
        response: The underlying ``httpx.Response``.
        content_type: Media type without parameters, lower-cased
            (e.g. ``application/json``), or an empty string.
        raw: The body decoded as text.
    """

    def __init__(self, response: httpx.Response):
        self.response = response
        self.content_type: str = (
            response.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
        )
        self.raw: str = response.text
        self._json: Any = None
        self._parsed = False

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self.response.headers

    @property
    def is_json(self) -> bool:
        return self.content_type == JSON_MEDIA_TYPE

    @property
    def json(self) -> Any:
        """The parsed body.

        Raises:
            MalformedResponseError: The body is not valid JSON.
        """
        if not self._parsed:
            try:
                self._json = json.loads(self.raw)
            except ValueError as e:
                raise MalformedResponseError(
                    f"Response body is not valid JSON: {e}", response=self.response
                ) from e
            self._parsed = True
        return self._json

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status_code}, type={self.content_type!r})"


class RedditResponse(RestResponse):
    """A Reddit response that knows about API errors and how to decode itself.

    Building a ``RedditResponse`` never raises an :class:`ApiException`; use
    :meth:`has_errors` / :meth:`get_errors`, or :meth:`raise_for_errors` when
    the caller wants errors to be fatal.
    """

    def __init__(self, response: httpx.Response, registry: ModelRegistry):
        super().__init__(response)
        self.registry = registry
        self._errors: tuple[ApiException, ...] = self._parse_errors()

    def _parse_errors(self) -> tuple[ApiException, ...]:
        if not self.is_json or not self.raw.strip():
            return ()

        root = self.json
        node = root.get("json") if isinstance(root, Mapping) else None
        errors = node.get("errors") if isinstance(node, Mapping) else None
        if errors is None:
            return ()
        if not isinstance(errors, list):
            raise MalformedResponseError(
                "'json.errors' must be an array", response=self.response
            )

        parsed = []
        for entry in errors:
            if not isinstance(entry, list) or len(entry) < 2:
                raise MalformedResponseError(
                    f"Malformed API error entry: {entry!r}", response=self.response
                )
            field = entry[2] if len(entry) > 2 and entry[2] is not None else None
            parsed.append(
                ApiException(
                    str(entry[0]),
                    str(entry[1]),
                    str(field) if field is not None else None,
                )
            )
        if parsed:
            logger.debug(
                f"Response carries {len(parsed)} API error(s): "
                f"{', '.join(e.reason for e in parsed)}"
            )
        return tuple(parsed)

    def has_errors(self) -> bool:
        """Whether Reddit reported any errors in ``json.errors``."""
        return bool(self._errors)

    def get_errors(self) -> list[ApiException]:
        """Returns fresh copies of the reported errors, in server order."""
        return [ApiException(e.reason, e.explanation, e.field) for e in self._errors]

    def raise_for_errors(self) -> None:
        """Raises the first reported :class:`ApiException`, if any."""
        if self._errors:
            first = self._errors[0]
            raise ApiException(first.reason, first.explanation, first.field)

    def as_model(self, target_type: type[T]) -> T:
        """Decodes the whole body as ``target_type``."""
        return self.registry.decode(self.json, target_type)

    def as_listing(self, item_type: type[T]) -> Listing[T]:
        """Decodes the body as a listing of ``item_type``.

        Some endpoints (comment pages, ``/prefs/friends``) answer with an
        array of listings; the first one is used.
        """
        root = self.json
        if isinstance(root, list):
            if not root:
                raise MalformedResponseError(
                    "Expected a listing, got an empty array", response=self.response
                )
            root = root[0]
        return Listing.from_json(root, item_type, self.registry)
