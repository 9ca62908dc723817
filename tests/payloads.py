"""Builders for Reddit-shaped JSON used across the test suite."""

from typing import Any

import httpx

from redweave.models import ModelRegistry, default_registry
from redweave.response import RedditResponse
from redweave.types import RequestData

CREATED = 1700000000.0


def link(id_: str, **extra: Any) -> dict[str, Any]:
    data = {
        "id": id_,
        "name": f"t3_{id_}",
        "title": f"Post {id_}",
        "author": "spez",
        "subreddit": "python",
        "permalink": f"/r/python/comments/{id_}/",
        "url": f"https://example.com/{id_}",
        "domain": "example.com",
        "is_self": False,
        "over_18": False,
        "score": 42,
        "num_comments": 7,
        "created_utc": CREATED,
    }
    data.update(extra)
    return {"kind": "t3", "data": data}


def comment(id_: str, **extra: Any) -> dict[str, Any]:
    data = {
        "id": id_,
        "name": f"t1_{id_}",
        "author": "kn0thing",
        "body": f"Comment {id_}",
        "score": 3,
        "link_id": "t3_abc",
        "parent_id": "t3_abc",
        "subreddit": "python",
        "created_utc": CREATED,
        "replies": "",
    }
    data.update(extra)
    return {"kind": "t1", "data": data}


def message(id_: str, **extra: Any) -> dict[str, Any]:
    data = {
        "id": id_,
        "name": f"t4_{id_}",
        "author": "reddit",
        "subject": "Hello",
        "body": "Welcome!",
        "dest": "me",
        "new": True,
        "was_comment": False,
        "parent_id": None,
        "created_utc": CREATED,
    }
    data.update(extra)
    return {"kind": "t4", "data": data}


def account_data(name: str = "spez", **extra: Any) -> dict[str, Any]:
    data = {
        "id": "1w72",
        "name": name,
        "created_utc": 1118030400.0,
        "link_karma": 150000,
        "comment_karma": 750000,
        "is_gold": True,
        "is_mod": True,
        "has_verified_email": True,
    }
    data.update(extra)
    return data


def account(name: str = "spez", **extra: Any) -> dict[str, Any]:
    return {"kind": "t2", "data": account_data(name, **extra)}


def user_record(name: str, **extra: Any) -> dict[str, Any]:
    data = {"name": name, "id": f"t2_{name}", "date": CREATED, "rel_id": f"r9_{name}"}
    data.update(extra)
    return data


def listing(
    children: list[Any],
    *,
    after: str | None = None,
    before: str | None = None,
    kind: str = "Listing",
    **extra: Any,
) -> dict[str, Any]:
    data = {"children": children, "after": after, "before": before, "modhash": None}
    data.update(extra)
    return {"kind": kind, "data": data}


def json_response(payload: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code,
        json=payload,
        request=httpx.Request("GET", "https://www.reddit.com/test"),
    )


class StubTransport:
    """Transport double that replays canned payloads and records requests.

    A payload that is an exception instance is raised instead of returned.
    """

    def __init__(self, *payloads: Any, registry: ModelRegistry | None = None):
        self.registry = registry or default_registry()
        self.requests: list[RequestData] = []
        self._payloads = list(payloads)

    def queue(self, *payloads: Any) -> None:
        self._payloads.extend(payloads)

    async def execute(self, request: RequestData) -> RedditResponse:
        self.requests.append(request)
        if not self._payloads:
            raise AssertionError(f"Unexpected request to {request.url}")
        payload = self._payloads.pop(0)
        if isinstance(payload, Exception):
            raise payload
        return RedditResponse(json_response(payload), self.registry)
