"""Maps ``kind`` tags and model types to constructors.

The registry is an explicit, immutable table handed to every response and
model. It is checked for totality when it is built: every :class:`Kind` needs
a constructor, so a lookup miss at decode time can only mean malformed input.
"""

from collections.abc import Callable, Iterable, Mapping
from functools import lru_cache
from types import MappingProxyType
from typing import Any, TypeVar

from ..exceptions import (
    ConfigurationError,
    MalformedResponseError,
    UnregisteredModelError,
    UnsupportedKindError,
)
from ..listing import Listing
from ..log_config import logger
from .base import JsonModel
from .kinds import Kind
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

T = TypeVar("T")

Constructor = Callable[[Mapping[str, Any], "ModelRegistry"], Any]
"""Builds a model from the ``data`` object of a JSON envelope."""


class ModelRegistry:
    """Immutable lookup tables used to decode JSON into models.

    Args:
        kinds: Constructor and resulting type for each ``kind`` tag. Must
            cover every :class:`Kind` member.
        types: Extra model types decodable by type alone, without a
            discriminator (e.g. ``LoggedInAccount``, ``UserRecord``).
        families: Abstract types that may only be produced by dispatching on
            ``kind`` (e.g. ``Contribution``).

    Raises:
        ConfigurationError: A ``Kind`` has no constructor.
    """

    def __init__(
        self,
        kinds: Mapping[Kind, tuple[type, Constructor]],
        *,
        types: Iterable[type[JsonModel]] = (),
        families: Iterable[type] = (),
    ):
        missing = [kind.name for kind in Kind if kind not in kinds]
        if missing:
            raise ConfigurationError(
                f"No constructor registered for kind(s): {', '.join(missing)}"
            )

        constructors: dict[type, Constructor] = {}
        for model_type, constructor in kinds.values():
            constructors.setdefault(model_type, constructor)
        for model_type in types:
            constructors[model_type] = model_type

        self._kinds: Mapping[Kind, tuple[type, Constructor]] = MappingProxyType(dict(kinds))
        self._constructors: Mapping[type, Constructor] = MappingProxyType(constructors)
        self._families: frozenset[type] = frozenset(families)
        logger.debug(
            f"ModelRegistry built with {len(self._kinds)} kinds, "
            f"{len(self._constructors)} types, {len(self._families)} families"
        )

    def type_for_kind(self, kind: Kind) -> type:
        return self._kinds[kind][0]

    def is_family(self, target_type: type) -> bool:
        return target_type in self._families

    def decode_by_kind(self, node: Any, expected: type[T] = object) -> T:  # type: ignore[assignment]
        """Decodes a ``{"kind": ..., "data": {...}}`` envelope by its tag.

        Args:
            node: The JSON envelope.
            expected: Type the result must be an instance of. Passing a
                family such as ``Contribution`` rejects tags that map outside
                it instead of silently returning an unrelated model.

        Raises:
            MalformedResponseError: ``node`` is not an object or has no
                ``data`` object.
            UnsupportedKindError: ``kind`` is missing, unknown, or maps to a
                type that is not a subclass of ``expected``.
        """
        if not isinstance(node, Mapping):
            raise MalformedResponseError(
                f"Expected a JSON object with 'kind' and 'data', got {type(node).__name__}"
            )
        kind = Kind.from_value(node.get("kind"))
        model_type, constructor = self._kinds[kind]
        if not issubclass(model_type, expected):
            raise UnsupportedKindError(
                f"Model kind '{kind.value}' ({model_type.__name__}) is not applicable "
                f"for {expected.__name__}",
                kind=kind.value,
            )

        data = node.get("data")
        if not isinstance(data, Mapping):
            raise MalformedResponseError(
                f"JSON object of kind '{kind.value}' has no 'data' object"
            )
        return constructor(data, self)

    def decode(self, node: Any, target_type: type[T]) -> T:
        """Decodes ``node`` as ``target_type``.

        Families are resolved through :meth:`decode_by_kind`. Concrete types
        bypass the discriminator: a ``kind``/``data`` envelope is unwrapped
        and a bare object is used as the data itself.

        Raises:
            UnregisteredModelError: ``target_type`` is not registered.
            MalformedResponseError: ``node`` is not a JSON object.
        """
        if target_type in self._families:
            return self.decode_by_kind(node, target_type)

        try:
            constructor = self._constructors[target_type]
        except KeyError:
            raise UnregisteredModelError(
                f"No constructor registered for {getattr(target_type, '__name__', target_type)}"
            ) from None

        if not isinstance(node, Mapping):
            raise MalformedResponseError(
                f"Expected a JSON object for {target_type.__name__}, got {type(node).__name__}"
            )
        data = node["data"] if "kind" in node and isinstance(node.get("data"), Mapping) else node
        return constructor(data, self)

    def decode_child(self, node: Any, item_type: type[T]) -> T:
        """Decodes one listing child.

        Children are dispatched on their own ``kind``. Bare item types, which
        Reddit sends without an envelope, are decoded by type.
        """
        if (
            isinstance(item_type, type)
            and issubclass(item_type, JsonModel)
            and item_type.kind is None
            and item_type not in self._families
        ):
            return self.decode(node, item_type)
        return self.decode_by_kind(node, item_type)


DEFAULT_KINDS: Mapping[Kind, tuple[type, Constructor]] = MappingProxyType(
    {
        Kind.COMMENT: (Comment, Comment),
        Kind.ACCOUNT: (Account, Account),
        Kind.LINK: (Submission, Submission),
        Kind.MESSAGE: (PrivateMessage, PrivateMessage),
        Kind.SUBREDDIT: (Subreddit, Subreddit),
        Kind.AWARD: (Trophy, Trophy),
        Kind.MORE: (MoreChildren, MoreChildren),
        Kind.TROPHY_LIST: (TrophyList, TrophyList),
        Kind.LISTING: (
            Listing,
            lambda data, registry: Listing.from_data(data, RedditObject, registry),
        ),
        Kind.USER_LIST: (
            Listing,
            lambda data, registry: Listing.from_data(data, UserRecord, registry),
        ),
    }
)


@lru_cache
def default_registry() -> ModelRegistry:
    """Returns the registry covering every model redweave ships.

    Built on first use and shared afterwards; it is never mutated.
    """
    return ModelRegistry(
        DEFAULT_KINDS,
        types=(LoggedInAccount, UserRecord),
        families=(RedditObject, Contribution),
    )
