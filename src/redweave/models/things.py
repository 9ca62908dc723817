"""Concrete Reddit models.

Only the fields redweave itself relies on, plus the commonly used public
ones, are declared; everything else stays reachable through ``model.data``.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any

from ..listing import Listing
from .base import JsonModel, JsonProperty
from .kinds import Kind

if TYPE_CHECKING:
    from .registry import ModelRegistry


class RedditObject(JsonModel):
    """Root of every model that Reddit identifies by a fullname."""

    id = JsonProperty("id", str)

    @property
    def fullname(self) -> str:
        """``<kind>_<id>``, e.g. ``t3_abc``; the form cursors and API calls use."""
        if self.kind is None:
            return self.id
        return f"{self.kind.value}_{self.id}"


class Contribution(RedditObject):
    """Something a user wrote: a submission, a comment or a private message.

    This is a family type. It is never constructed directly; the ``kind`` tag
    selects the concrete class.
    """

    author = JsonProperty("author", str, nullable=True)
    created_utc = JsonProperty("created_utc", datetime, strict=False)


def _replies(raw: Any, registry: "ModelRegistry") -> Listing[RedditObject]:
    # Reddit sends "" instead of an empty listing for comments without replies
    if raw == "":
        return Listing()
    if not isinstance(raw, Mapping):
        raise TypeError("replies must be a listing object")
    return Listing.from_json(raw, RedditObject, registry)


class Submission(Contribution):
    """A link or self post."""

    kind = Kind.LINK

    title = JsonProperty("title", str)
    subreddit = JsonProperty("subreddit", str)
    permalink = JsonProperty("permalink", str)
    url = JsonProperty("url", str, nullable=True)
    selftext = JsonProperty("selftext", str, nullable=True)
    domain = JsonProperty("domain", str, nullable=True)
    is_self = JsonProperty("is_self", bool)
    over_18 = JsonProperty("over_18", bool)
    stickied = JsonProperty("stickied", bool, nullable=True)
    score = JsonProperty("score", int)
    num_comments = JsonProperty("num_comments", int)
    link_flair_text = JsonProperty("link_flair_text", str, nullable=True)

    def __repr__(self) -> str:
        return f"Submission({self.data.get('name')!r}, title={self.data.get('title')!r})"


class Comment(Contribution):
    kind = Kind.COMMENT

    body = JsonProperty("body", str)
    score = JsonProperty("score", int)
    link_id = JsonProperty("link_id", str)
    parent_id = JsonProperty("parent_id", str)
    subreddit = JsonProperty("subreddit", str)
    depth = JsonProperty("depth", int, nullable=True)
    is_submitter = JsonProperty("is_submitter", bool, nullable=True)
    replies = JsonProperty("replies", Listing, nullable=True, converter=_replies)


class PrivateMessage(Contribution):
    """A message in the inbox. Comment replies delivered to the inbox are t1."""

    kind = Kind.MESSAGE

    subject = JsonProperty("subject", str)
    body = JsonProperty("body", str)
    dest = JsonProperty("dest", str, nullable=True)
    new = JsonProperty("new", bool)
    was_comment = JsonProperty("was_comment", bool)
    parent_id = JsonProperty("parent_id", str, nullable=True)
    first_message_name = JsonProperty("first_message_name", str, nullable=True)


class Account(RedditObject):
    """A user's public profile."""

    kind = Kind.ACCOUNT

    name = JsonProperty("name", str)
    created_utc = JsonProperty("created_utc", datetime, strict=False)
    link_karma = JsonProperty("link_karma", int)
    comment_karma = JsonProperty("comment_karma", int)
    is_gold = JsonProperty("is_gold", bool)
    is_mod = JsonProperty("is_mod", bool)
    is_friend = JsonProperty("is_friend", bool, nullable=True)
    has_verified_email = JsonProperty("has_verified_email", bool, nullable=True)
    icon_img = JsonProperty("icon_img", str, nullable=True)


class LoggedInAccount(Account):
    """The authenticated user's own account, with fields only they can see.

    Registered by type only: ``t2`` objects in listings decode to
    :class:`Account`.
    """

    has_mail = JsonProperty("has_mail", bool, nullable=True)
    has_mod_mail = JsonProperty("has_mod_mail", bool, nullable=True)
    has_verified_email = JsonProperty("has_verified_email", bool)
    modhash = JsonProperty("modhash", str, nullable=True)
    inbox_count = JsonProperty("inbox_count", int, nullable=True)


class Subreddit(RedditObject):
    kind = Kind.SUBREDDIT

    display_name = JsonProperty("display_name", str)
    title = JsonProperty("title", str)
    url = JsonProperty("url", str)
    subreddit_type = JsonProperty("subreddit_type", str)
    created_utc = JsonProperty("created_utc", datetime, strict=False)
    public_description = JsonProperty("public_description", str, nullable=True)
    subscribers = JsonProperty("subscribers", int, nullable=True)
    over18 = JsonProperty("over18", bool, nullable=True)


class Trophy(RedditObject):
    kind = Kind.AWARD

    id = JsonProperty("id", str, nullable=True)
    name = JsonProperty("name", str)
    description = JsonProperty("description", str, nullable=True)
    icon_70 = JsonProperty("icon_70", str, nullable=True)
    award_id = JsonProperty("award_id", str, nullable=True)
    url = JsonProperty("url", str, nullable=True)


class TrophyList(JsonModel):
    kind = Kind.TROPHY_LIST

    trophies = JsonProperty("trophies", list[Trophy])


class MoreChildren(RedditObject):
    """Placeholder for comments that were left out of a comment tree."""

    kind = Kind.MORE

    count = JsonProperty("count", int)
    parent_id = JsonProperty("parent_id", str)
    depth = JsonProperty("depth", int, nullable=True)
    children = JsonProperty("children", list[str])


class UserRecord(JsonModel):
    """An entry of a friends or blocked list.

    Reddit sends these bare, without a ``kind`` envelope, inside a
    ``UserList``.
    """

    name = JsonProperty("name", str)
    id = JsonProperty("id", str)
    date = JsonProperty("date", datetime, strict=False)
    rel_id = JsonProperty("rel_id", str, nullable=True)
    note = JsonProperty("note", str, nullable=True)
