"""Typed, lazily decoded views over Reddit's JSON objects."""

from .base import FieldState, JsonModel, JsonProperty
from .kinds import Kind
from .registry import DEFAULT_KINDS, ModelRegistry, default_registry
from .things import (
    Account,
    Comment,
    Contribution,
    LoggedInAccount,
    MoreChildren,
    PrivateMessage,
    RedditObject,
    Submission,
    Subreddit,
    Trophy,
    TrophyList,
    UserRecord,
)

__all__ = [
    "DEFAULT_KINDS",
    "Account",
    "Comment",
    "Contribution",
    "FieldState",
    "JsonModel",
    "JsonProperty",
    "Kind",
    "LoggedInAccount",
    "ModelRegistry",
    "MoreChildren",
    "PrivateMessage",
    "RedditObject",
    "Submission",
    "Subreddit",
    "Trophy",
    "TrophyList",
    "UserRecord",
    "default_registry",
]
