"""Cursor-driven iteration over Reddit listing endpoints.

A :class:`Paginator` walks a listing endpoint forwards (``after``) or
backwards (``before``), one page per :meth:`Paginator.get_listing` call. What
differs between endpoints (URI template, allowed ``where`` values, item type)
lives in a :class:`ListingEndpoint`; the subclasses at the bottom of this
module only bind one and shape their constructor arguments.

Example:
```python
async with RedditClient() as client:
    paginator = SubredditPaginator(client, "python", sorting="top", time_period="week")
    async for page in paginator:
        for submission in page:
            print(submission.title)
```
"""

import string
from collections.abc import AsyncIterator, Mapping
from enum import Enum
from typing import Any, ClassVar, Generic, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

from .config import get_settings
from .endpoints import Endpoints, endpoint_implementation
from .exceptions import ConfigurationError, InvalidParameterError, PaginationExhaustedError
from .listing import Listing
from .log_config import logger
from .models.things import Contribution, Submission, UserRecord
from .types import RequestData, Transport

T = TypeVar("T")

TIME_PERIODS = frozenset({"hour", "day", "week", "month", "year", "all"})


class PaginatorState(Enum):
    """Where a paginator is in its life cycle, for the direction last fetched."""

    FRESH = "fresh"
    HAS_DATA = "has_data"
    EXHAUSTED = "exhausted"


class WindowPolicy(Enum):
    """How fetched pages are combined into :attr:`Paginator.items`."""

    APPEND = "append"
    REPLACE = "replace"


class ListingEndpoint(BaseModel):
    """Fixed description of one paginated endpoint.

    Attributes:
        uri_template: Path with ``str.format`` placeholders, e.g. ``/prefs/{where}``.
        item_type: Model type (or family) every child is decoded to.
        where_values: Allowed values of the ``{where}`` placeholder. Empty when
            the template has none.
        time_periods: Allowed values of the ``t`` query parameter. Empty when
            the endpoint does not take one.
        endpoints: Catalog entries served by this template. Documentation only.
        max_limit: Largest page size the endpoint accepts.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    uri_template: str
    item_type: Any
    where_values: frozenset[str] = frozenset()
    time_periods: frozenset[str] = frozenset()
    endpoints: tuple[Endpoints, ...] = ()
    max_limit: int = Field(default=100, ge=1)

    @property
    def placeholders(self) -> frozenset[str]:
        """Names of the placeholders in :attr:`uri_template`."""
        return frozenset(
            name for _, name, _, _ in string.Formatter().parse(self.uri_template) if name
        )


class Paginator(Generic[T]):
    """Walks a listing endpoint page by page.

    All arguments are checked when the paginator is built, so a bad ``where``
    or ``limit`` fails with :class:`InvalidParameterError` before any request.

    State is only updated after a page has been fetched and decoded in full; a
    failing :meth:`get_listing` leaves cursors, window and counters as they
    were. A paginator must not be driven by more than one task at a time.

    Attributes:
        transport: Sends requests and wraps responses.
        endpoint: The endpoint being paginated.
        where: Value substituted for ``{where}``, if the template has one.
        limit: Page size sent with every request.
        time_period: Value of the ``t`` parameter, if any.
        window_policy: How pages are combined into :attr:`items`.
    """

    ENDPOINT: ClassVar[ListingEndpoint | None] = None

    def __init__(
        self,
        transport: Transport,
        endpoint: ListingEndpoint | None = None,
        *,
        where: str | None = None,
        path_params: Mapping[str, str] | None = None,
        limit: int | None = None,
        time_period: str | None = None,
        window_policy: WindowPolicy = WindowPolicy.APPEND,
    ):
        endpoint = endpoint or self.ENDPOINT
        if endpoint is None:
            raise ConfigurationError(
                f"{type(self).__name__} needs a ListingEndpoint to paginate"
            )
        self.transport = transport
        self.endpoint = endpoint
        self.where = where
        self.path_params: dict[str, str] = dict(path_params or {})
        self.limit: int = limit if limit is not None else get_settings().default_page_limit
        self.time_period = time_period
        self.window_policy = window_policy
        self._validate()

        self._before: str | None = None
        self._after: str | None = None
        self._exhausted: dict[bool, bool] = {True: False, False: False}
        self._forwards = True
        self._items: list[T] = []
        self._current: Listing[T] | None = None
        self._page_count = 0

        logger.debug(f"{type(self).__name__} created for {self._path()}")

    def _validate(self) -> None:
        endpoint = self.endpoint
        if endpoint.where_values:
            if self.where not in endpoint.where_values:
                raise InvalidParameterError(
                    f"Invalid 'where' value {self.where!r}; "
                    f"expected one of {sorted(endpoint.where_values)}"
                )
        elif self.where is not None:
            raise InvalidParameterError(
                f"{endpoint.uri_template} does not take a 'where' value"
            )

        if isinstance(self.limit, bool) or not isinstance(self.limit, int):
            raise InvalidParameterError(f"limit must be an integer, got {self.limit!r}")
        if not 1 <= self.limit <= endpoint.max_limit:
            raise InvalidParameterError(
                f"limit must be between 1 and {endpoint.max_limit}, got {self.limit}"
            )

        if self.time_period is not None and self.time_period not in endpoint.time_periods:
            raise InvalidParameterError(
                f"Invalid time period {self.time_period!r} for {endpoint.uri_template}"
            )

        missing = endpoint.placeholders - {"where"} - {
            k for k, v in self.path_params.items() if v
        }
        if missing:
            raise InvalidParameterError(
                f"Missing path parameter(s) for {endpoint.uri_template}: "
                f"{', '.join(sorted(missing))}"
            )

    def _path(self) -> str:
        values = {**self.path_params, "where": self.where}
        return self.endpoint.uri_template.format_map(
            {key: quote(value, safe="") for key, value in values.items() if value is not None}
        )

    def _build_request(self, forwards: bool) -> RequestData:
        params: dict[str, Any] = {"limit": self.limit}
        if forwards and self._after is not None:
            params["after"] = self._after
        elif not forwards and self._before is not None:
            params["before"] = self._before
        if self.time_period is not None:
            params["t"] = self.time_period
        return RequestData(method="GET", url=self._path(), params=params)

    # --- State ---

    @property
    def state(self) -> PaginatorState:
        if self._page_count == 0:
            return PaginatorState.FRESH
        if self._exhausted[self._forwards]:
            return PaginatorState.EXHAUSTED
        return PaginatorState.HAS_DATA

    @property
    def items(self) -> tuple[T, ...]:
        """Every item in the window, in server order."""
        return tuple(self._items)

    @property
    def current_listing(self) -> Listing[T] | None:
        """The most recently fetched page."""
        return self._current

    @property
    def page_count(self) -> int:
        """Number of pages fetched since creation or the last :meth:`reset`."""
        return self._page_count

    @property
    def before(self) -> str | None:
        return self._before

    @property
    def after(self) -> str | None:
        return self._after

    def has_next(self) -> bool:
        """Whether a forward fetch can succeed. Never performs I/O."""
        return self._page_count == 0 or not self._exhausted[True]

    def has_previous(self) -> bool:
        """Whether a backward fetch can succeed. Never performs I/O."""
        return self._page_count == 0 or not self._exhausted[False]

    def reset(self) -> None:
        """Forgets all fetched pages and returns to :attr:`PaginatorState.FRESH`."""
        self._before = None
        self._after = None
        self._exhausted = {True: False, False: False}
        self._forwards = True
        self._items = []
        self._current = None
        self._page_count = 0

    # --- Fetching ---

    async def get_listing(self, forwards: bool = True) -> Listing[T]:
        """Fetches the next page in the given direction.

        Args:
            forwards: Follow ``after`` when True, ``before`` when False.

        Returns:
            Listing[T]: The page just fetched.

        Raises:
            PaginationExhaustedError: The direction has no more pages. No
                request is sent.
            DecodingError: The response could not be decoded.
            RedweaveError: The transport failed.
        """
        if self._page_count and self._exhausted[forwards]:
            direction = "forward" if forwards else "backward"
            raise PaginationExhaustedError(
                f"{type(self).__name__} has no more pages going {direction}"
            )

        request = self._build_request(forwards)
        logger.debug(f"Fetching {request.url} with params {request.params}")
        response = await self.transport.execute(request)
        listing: Listing[T] = response.as_listing(self.endpoint.item_type)

        # Nothing below may raise; state changes all at once.
        # The cursors mark the edges of the window. Appending a page moves only
        # the edge it was appended to; the first page and a replaced window set both.
        both_edges = not self._page_count or self.window_policy is WindowPolicy.REPLACE
        before = listing.before if both_edges or not forwards else self._before
        after = listing.after if both_edges or forwards else self._after
        cursor = after if forwards else before
        exhausted = {forwards: not listing or cursor is None}
        if both_edges:
            exhausted[not forwards] = (before if forwards else after) is None
        else:
            exhausted[not forwards] = self._exhausted[not forwards]

        if self.window_policy is WindowPolicy.REPLACE:
            items = list(listing)
        elif forwards:
            items = self._items + list(listing)
        else:
            items = list(listing) + self._items

        self._before = before
        self._after = after
        self._exhausted = exhausted
        self._forwards = forwards
        self._items = items
        self._current = listing
        self._page_count += 1

        logger.debug(
            f"Page {self._page_count} of {request.url}: {len(listing)} item(s), "
            f"state={self.state.value}"
        )
        return listing

    async def next_listing(self) -> Listing[T]:
        return await self.get_listing(forwards=True)

    async def previous_listing(self) -> Listing[T]:
        return await self.get_listing(forwards=False)

    async def accumulate(self, max_pages: int | None = None) -> list[Listing[T]]:
        """Fetches forward until exhausted or ``max_pages`` pages were read."""
        pages: list[Listing[T]] = []
        while self.has_next() and (max_pages is None or len(pages) < max_pages):
            pages.append(await self.next_listing())
        logger.info(f"Accumulated {len(pages)} page(s) from {self._path()}")
        return pages

    async def accumulate_merged(self, max_pages: int | None = None) -> list[T]:
        """Like :meth:`accumulate`, with the pages flattened into one list."""
        return [item for page in await self.accumulate(max_pages) for item in page]

    async def __aiter__(self) -> AsyncIterator[Listing[T]]:
        while self.has_next():
            yield await self.next_listing()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(path={self._path()!r}, state={self.state.value}, "
            f"pages={self._page_count})"
        )


IMPORTANT_USERS = ListingEndpoint(
    uri_template="/prefs/{where}",
    item_type=UserRecord,
    where_values=frozenset({"friends", "blocked"}),
    endpoints=(
        Endpoints.PREFS_WHERE,
        Endpoints.PREFS_BLOCKED,
        Endpoints.PREFS_FRIENDS,
        Endpoints.OAUTH_ME_BLOCKED,
        Endpoints.OAUTH_ME_FRIENDS,
    ),
)

SORTINGS = frozenset({"hot", "new", "rising", "top", "controversial"})
TIMED_SORTINGS = frozenset({"top", "controversial"})

FRONT_PAGE = ListingEndpoint(
    uri_template="/{where}",
    item_type=Submission,
    where_values=SORTINGS,
    time_periods=TIME_PERIODS,
    endpoints=(
        Endpoints.HOT,
        Endpoints.NEW,
        Endpoints.RISING,
        Endpoints.TOP,
        Endpoints.CONTROVERSIAL,
    ),
)

SUBREDDIT_LISTING = ListingEndpoint(
    uri_template="/r/{subreddit}/{where}",
    item_type=Submission,
    where_values=SORTINGS,
    time_periods=TIME_PERIODS,
    endpoints=(
        Endpoints.SUBREDDIT_HOT,
        Endpoints.SUBREDDIT_NEW,
        Endpoints.SUBREDDIT_RISING,
        Endpoints.SUBREDDIT_TOP,
        Endpoints.SUBREDDIT_CONTROVERSIAL,
    ),
)

USER_CONTRIBUTIONS = ListingEndpoint(
    uri_template="/user/{username}/{where}",
    item_type=Contribution,
    where_values=frozenset(
        {"overview", "submitted", "comments", "gilded", "upvoted", "downvoted", "hidden", "saved"}
    ),
    endpoints=(
        Endpoints.USER_USERNAME_WHERE,
        Endpoints.USER_USERNAME_OVERVIEW,
        Endpoints.USER_USERNAME_SUBMITTED,
        Endpoints.USER_USERNAME_COMMENTS,
    ),
)

INBOX = ListingEndpoint(
    uri_template="/message/{where}",
    item_type=Contribution,
    where_values=frozenset(
        {"inbox", "unread", "messages", "sent", "moderator", "mentions", "selfreply", "comments"}
    ),
    endpoints=(
        Endpoints.MESSAGE_WHERE,
        Endpoints.MESSAGE_INBOX,
        Endpoints.MESSAGE_UNREAD,
        Endpoints.MESSAGE_SENT,
    ),
)


@endpoint_implementation(*IMPORTANT_USERS.endpoints)
class ImportantUserPaginator(Paginator[UserRecord]):
    """Paginates over the current user's friends or blocked users."""

    ENDPOINT = IMPORTANT_USERS

    def __init__(
        self,
        transport: Transport,
        where: str,
        *,
        limit: int | None = None,
        window_policy: WindowPolicy = WindowPolicy.APPEND,
    ):
        super().__init__(transport, where=where, limit=limit, window_policy=window_policy)


@endpoint_implementation(*FRONT_PAGE.endpoints, *SUBREDDIT_LISTING.endpoints)
class SubredditPaginator(Paginator[Submission]):
    """Paginates over a subreddit's submissions, or the front page when no subreddit is given.

    ``time_period`` is only accepted with the ``top`` and ``controversial``
    sortings.
    """

    def __init__(
        self,
        transport: Transport,
        subreddit: str | None = None,
        *,
        sorting: str = "hot",
        time_period: str | None = None,
        limit: int | None = None,
        window_policy: WindowPolicy = WindowPolicy.APPEND,
    ):
        if time_period is not None and sorting not in TIMED_SORTINGS:
            raise InvalidParameterError(
                f"time_period is only valid for {sorted(TIMED_SORTINGS)} sorting, not {sorting!r}"
            )
        if subreddit is None:
            endpoint, path_params = FRONT_PAGE, {}
        else:
            endpoint, path_params = SUBREDDIT_LISTING, {"subreddit": subreddit}
        super().__init__(
            transport,
            endpoint,
            where=sorting,
            path_params=path_params,
            limit=limit,
            time_period=time_period,
            window_policy=window_policy,
        )
        self.subreddit = subreddit


@endpoint_implementation(*USER_CONTRIBUTIONS.endpoints)
class UserContributionPaginator(Paginator[Contribution]):
    """Paginates over what a user has posted, commented, saved, and so on."""

    ENDPOINT = USER_CONTRIBUTIONS

    def __init__(
        self,
        transport: Transport,
        username: str,
        where: str = "overview",
        *,
        limit: int | None = None,
        window_policy: WindowPolicy = WindowPolicy.APPEND,
    ):
        super().__init__(
            transport,
            where=where,
            path_params={"username": username},
            limit=limit,
            window_policy=window_policy,
        )
        self.username = username


@endpoint_implementation(*INBOX.endpoints)
class InboxPaginator(Paginator[Contribution]):
    """Paginates over the current user's messages and comment replies."""

    ENDPOINT = INBOX

    def __init__(
        self,
        transport: Transport,
        where: str = "inbox",
        *,
        limit: int | None = None,
        window_policy: WindowPolicy = WindowPolicy.APPEND,
    ):
        super().__init__(transport, where=where, limit=limit, window_policy=window_policy)
