# The Endpoints enum below is the output of redweave.codegen.render_endpoints_module
# for ENDPOINT_CATEGORIES. Edit the categories, then regenerate the enum.
"""Catalog of the Reddit API endpoints redweave implements.

The catalog is documentation: paginators and client methods reference the
entries they call through :func:`endpoint_implementation`, which has no effect
on how requests are built.
"""

from collections.abc import Callable
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator

HTTP_VERBS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})

ENDPOINT_CATEGORIES: dict[str, tuple[str, ...]] = {
    "account": (
        "GET /api/v1/me",
        "GET /api/v1/me/karma",
        "GET /api/v1/me/prefs",
        "PATCH /api/v1/me/prefs",
        "GET /api/v1/me/trophies",
        "GET /api/me.json",
        "GET /prefs/{where}",
        "GET /prefs/friends",
        "GET /prefs/blocked",
        "GET /api/v1/me/friends",
        "GET /api/v1/me/blocked",
    ),
    "listings": (
        "GET /hot",
        "GET /new",
        "GET /rising",
        "GET /top",
        "GET /controversial",
        "GET /r/{subreddit}/hot",
        "GET /r/{subreddit}/new",
        "GET /r/{subreddit}/rising",
        "GET /r/{subreddit}/top",
        "GET /r/{subreddit}/controversial",
        "GET /by_id/{names}",
    ),
    "private messages": (
        "GET /message/inbox",
        "GET /message/unread",
        "GET /message/sent",
        "GET /message/{where}",
        "POST /api/compose",
        "POST /api/read_message",
    ),
    "subreddits": ("GET /r/{subreddit}/about",),
    "users": (
        "GET /user/{username}/about",
        "GET /user/{username}/{where}",
        "GET /user/{username}/overview",
        "GET /user/{username}/submitted",
        "GET /user/{username}/comments",
        "GET /api/v1/user/{username}/trophies",
        "POST /api/friend",
        "POST /api/unfriend",
    ),
}


class Endpoint(BaseModel):
    """One HTTP verb + URI template pair, e.g. ``GET /prefs/{where}``."""

    model_config = ConfigDict(frozen=True)

    verb: str
    uri: str
    category: str | None = None

    @field_validator("verb")
    @classmethod
    def check_verb(cls, v: str) -> str:
        verb = v.upper()
        if verb not in HTTP_VERBS:
            raise ValueError(f"Unsupported HTTP verb: {v}")
        return verb

    @field_validator("uri")
    @classmethod
    def check_uri(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError(f"Endpoint URI must start with '/': {v}")
        return v

    @classmethod
    def parse(cls, descriptor: str, category: str | None = None) -> "Endpoint":
        """Parses a ``"VERB /uri"`` request descriptor."""
        verb, _, uri = descriptor.strip().partition(" ")
        return cls(verb=verb, uri=uri.strip(), category=category)

    @property
    def request_descriptor(self) -> str:
        return f"{self.verb} {self.uri}"

    def __str__(self) -> str:
        return self.request_descriptor


class Endpoints(Enum):
    """Reddit API endpoints, grouped by category."""

    # --- account ---
    OAUTH_ME = "GET /api/v1/me"
    OAUTH_ME_KARMA = "GET /api/v1/me/karma"
    OAUTH_ME_PREFS_GET = "GET /api/v1/me/prefs"
    OAUTH_ME_PREFS_PATCH = "PATCH /api/v1/me/prefs"
    OAUTH_ME_TROPHIES = "GET /api/v1/me/trophies"
    ME = "GET /api/me.json"
    PREFS_WHERE = "GET /prefs/{where}"
    PREFS_FRIENDS = "GET /prefs/friends"
    PREFS_BLOCKED = "GET /prefs/blocked"
    OAUTH_ME_FRIENDS = "GET /api/v1/me/friends"
    OAUTH_ME_BLOCKED = "GET /api/v1/me/blocked"

    # --- listings ---
    HOT = "GET /hot"
    NEW = "GET /new"
    RISING = "GET /rising"
    TOP = "GET /top"
    CONTROVERSIAL = "GET /controversial"
    SUBREDDIT_HOT = "GET /r/{subreddit}/hot"
    SUBREDDIT_NEW = "GET /r/{subreddit}/new"
    SUBREDDIT_RISING = "GET /r/{subreddit}/rising"
    SUBREDDIT_TOP = "GET /r/{subreddit}/top"
    SUBREDDIT_CONTROVERSIAL = "GET /r/{subreddit}/controversial"
    BY_ID_NAMES = "GET /by_id/{names}"

    # --- private messages ---
    MESSAGE_INBOX = "GET /message/inbox"
    MESSAGE_UNREAD = "GET /message/unread"
    MESSAGE_SENT = "GET /message/sent"
    MESSAGE_WHERE = "GET /message/{where}"
    COMPOSE = "POST /api/compose"
    READ_MESSAGE = "POST /api/read_message"

    # --- subreddits ---
    SUBREDDIT_ABOUT = "GET /r/{subreddit}/about"

    # --- users ---
    USER_USERNAME_ABOUT = "GET /user/{username}/about"
    USER_USERNAME_WHERE = "GET /user/{username}/{where}"
    USER_USERNAME_OVERVIEW = "GET /user/{username}/overview"
    USER_USERNAME_SUBMITTED = "GET /user/{username}/submitted"
    USER_USERNAME_COMMENTS = "GET /user/{username}/comments"
    OAUTH_USER_USERNAME_TROPHIES = "GET /api/v1/user/{username}/trophies"
    FRIEND = "POST /api/friend"
    UNFRIEND = "POST /api/unfriend"

    @property
    def endpoint(self) -> Endpoint:
        return Endpoint.parse(self.value)

    def __str__(self) -> str:
        return self.value


F = TypeVar("F", bound=Callable[..., Any])


def endpoint_implementation(*endpoints: Endpoints) -> Callable[[F], F]:
    """Records which catalog entries a function or class implements.

    The entries are stored on ``__endpoints__``; the decorated object is
    returned unchanged.
    """

    def decorate(target: F) -> F:
        target.__endpoints__ = tuple(endpoints)  # type: ignore[union-attr]
        return target

    return decorate
