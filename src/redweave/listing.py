"""One page of a Reddit listing.

Wire shape::

    {"kind": "Listing",
     "data": {"children": [{"kind": "t3", "data": {...}}, ...],
              "before": "t3_abc" | null,
              "after": "t3_xyz" | null,
              "modhash": "..." | null}}
"""

from collections.abc import Iterator, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Generic, TypeVar, overload

from .exceptions import MalformedResponseError
from .log_config import logger

if TYPE_CHECKING:
    from .models.registry import ModelRegistry

T = TypeVar("T")


def _cursor(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise MalformedResponseError(
            f"Listing cursor '{key}' must be a string or null, got {type(value).__name__}"
        )
    return value


class Listing(Sequence[T], Generic[T]):
    """An immutable page of decoded items plus the cursors around it.

    Items keep the order the server sent them in. ``before`` and ``after``
    are opaque; their only valid use is being echoed back to Reddit.

    Attributes:
        before: Cursor for the page preceding this one, or None.
        after: Cursor for the page following this one, or None.
        modhash: Per-session token for mutating requests, or None.
        dist: Number of children the server reports, when provided.
    """

    def __init__(
        self,
        children: Sequence[T] = (),
        *,
        before: str | None = None,
        after: str | None = None,
        modhash: str | None = None,
        dist: int | None = None,
    ):
        self._children: tuple[T, ...] = tuple(children)
        self.before = before
        self.after = after
        self.modhash = modhash
        self.dist = dist

    @classmethod
    def from_json(
        cls, node: Any, item_type: type[T], registry: "ModelRegistry"
    ) -> "Listing[T]":
        """Builds a listing from a ``{"kind": ..., "data": {...}}`` envelope.

        Args:
            node: The listing envelope.
            item_type: Model type (or family) every child must decode to.
            registry: Registry used to decode each child.

        Raises:
            MalformedResponseError: ``data`` or ``data.children`` is missing
                or has the wrong shape.
            DecodingError: Any child fails to decode. No partial listing is
                ever returned.
        """
        if not isinstance(node, Mapping) or not isinstance(node.get("data"), Mapping):
            raise MalformedResponseError("Listing JSON must contain a 'data' object")
        return cls.from_data(node["data"], item_type, registry)

    @classmethod
    def from_data(
        cls, data: Mapping[str, Any], item_type: type[T], registry: "ModelRegistry"
    ) -> "Listing[T]":
        """Builds a listing from the ``data`` object of a listing envelope."""
        children = data.get("children")
        if not isinstance(children, list):
            raise MalformedResponseError("Listing data must contain a 'children' array")

        items = [registry.decode_child(child, item_type) for child in children]
        dist = data.get("dist")
        listing = cls(
            items,
            before=_cursor(data, "before"),
            after=_cursor(data, "after"),
            modhash=_cursor(data, "modhash"),
            dist=dist if isinstance(dist, int) else None,
        )
        logger.debug(
            f"Built listing of {len(items)} {getattr(item_type, '__name__', item_type)} "
            f"(before={listing.before}, after={listing.after})"
        )
        return listing

    @property
    def children(self) -> tuple[T, ...]:
        return self._children

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[T, ...]: ...

    def __getitem__(self, index: int | slice) -> T | tuple[T, ...]:
        return self._children[index]

    def __len__(self) -> int:
        return len(self._children)

    def __iter__(self) -> Iterator[T]:
        return iter(self._children)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Listing):
            return NotImplemented
        return (self._children, self.before, self.after, self.modhash) == (
            other._children,
            other.before,
            other.after,
            other.modhash,
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Listing(size={len(self._children)}, before={self.before!r}, "
            f"after={self.after!r})"
        )
