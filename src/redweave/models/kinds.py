"""The closed set of ``kind`` discriminator tags Reddit puts on JSON objects."""

from enum import Enum

from ..exceptions import UnsupportedKindError


class Kind(Enum):
    """Discriminator values found in the ``kind`` field of a Reddit object.

    The ``t*`` prefixes double as the type prefix of a fullname, e.g. a
    submission with id ``abc`` has the fullname ``t3_abc``.
    """

    COMMENT = "t1"
    ACCOUNT = "t2"
    LINK = "t3"
    MESSAGE = "t4"
    SUBREDDIT = "t5"
    AWARD = "t6"
    LISTING = "Listing"
    MORE = "more"
    USER_LIST = "UserList"
    TROPHY_LIST = "TrophyList"

    @classmethod
    def from_value(cls, value: object) -> "Kind":
        """Resolves a raw ``kind`` value.

        Raises:
            UnsupportedKindError: ``value`` is missing or not a known tag.
        """
        if value is None:
            raise UnsupportedKindError("JSON object has no 'kind' field")
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedKindError(
                f"Unknown model kind {value!r}", kind=str(value)
            ) from None
