"""Tests for kind-dispatched decoding in redweave.models.registry."""

import pytest
from payloads import account, account_data, comment, link, listing, message, user_record

from redweave.exceptions import (
    ConfigurationError,
    MalformedResponseError,
    UnregisteredModelError,
    UnsupportedKindError,
)
from redweave.listing import Listing
from redweave.models import (
    DEFAULT_KINDS,
    Account,
    Comment,
    Contribution,
    JsonModel,
    Kind,
    LoggedInAccount,
    ModelRegistry,
    PrivateMessage,
    RedditObject,
    Submission,
    UserRecord,
    default_registry,
)


def test_kind_from_value():
    assert Kind.from_value("t3") is Kind.LINK
    assert Kind.from_value("UserList") is Kind.USER_LIST


@pytest.mark.parametrize(
    "node, expected",
    [
        (link("abc"), Submission),
        (comment("c1"), Comment),
        (message("m1"), PrivateMessage),
        (account(), Account),
    ],
)
def test_decode_by_kind_dispatches_on_tag(registry, node, expected):
    assert type(registry.decode_by_kind(node)) is expected


def test_decode_by_kind_unknown_kind(registry):
    with pytest.raises(UnsupportedKindError) as exc_info:
        registry.decode_by_kind({"kind": "t9", "data": {}})
    assert exc_info.value.kind == "t9"


def test_decode_by_kind_missing_kind(registry):
    with pytest.raises(UnsupportedKindError):
        registry.decode_by_kind({"data": {"id": "abc"}})


def test_decode_by_kind_missing_data(registry):
    with pytest.raises(MalformedResponseError):
        registry.decode_by_kind({"kind": "t3"})
    with pytest.raises(MalformedResponseError):
        registry.decode_by_kind({"kind": "t3", "data": "abc"})


def test_decode_by_kind_rejects_non_objects(registry):
    with pytest.raises(MalformedResponseError):
        registry.decode_by_kind(["t3"])


def test_decode_by_kind_checks_expected_family(registry):
    """Test that a tag outside the expected family is rejected, not cast."""
    with pytest.raises(UnsupportedKindError) as exc_info:
        registry.decode_by_kind(account(), Contribution)
    assert "Account" in str(exc_info.value)


def test_decode_family_goes_through_kind(registry):
    assert isinstance(registry.decode(comment("c1"), Contribution), Comment)
    assert isinstance(registry.decode(account(), RedditObject), Account)


def test_decode_concrete_type_from_bare_object(registry):
    """Test that OAuth's bare /api/v1/me object decodes by type."""
    me = registry.decode(account_data(has_mail=False, inbox_count=2), LoggedInAccount)

    assert isinstance(me, LoggedInAccount)
    assert me.name == "spez"
    assert me.inbox_count == 2
    assert me.has_mod_mail is None


def test_decode_concrete_type_unwraps_envelope(registry):
    me = registry.decode(account(), LoggedInAccount)
    assert isinstance(me, LoggedInAccount)
    assert me.link_karma == 150000


def test_decode_bare_user_record(registry):
    record = registry.decode(user_record("alice"), UserRecord)
    assert record.name == "alice"
    assert record.note is None


def test_decode_unregistered_type(registry):
    class Unknown(JsonModel):
        pass

    with pytest.raises(UnregisteredModelError) as exc_info:
        registry.decode({"id": "x"}, Unknown)
    assert isinstance(exc_info.value, ConfigurationError)


def test_user_list_kind_decodes_to_listing_of_records(registry):
    users = registry.decode_by_kind(
        listing([user_record("alice"), user_record("bob")], kind="UserList")
    )

    assert isinstance(users, Listing)
    assert [u.name for u in users] == ["alice", "bob"]


def test_registry_must_cover_every_kind():
    partial = {k: v for k, v in DEFAULT_KINDS.items() if k is not Kind.MORE}
    with pytest.raises(ConfigurationError, match="MORE"):
        ModelRegistry(partial)


def test_registry_introspection(registry):
    assert registry.type_for_kind(Kind.LINK) is Submission
    assert registry.is_family(Contribution)
    assert not registry.is_family(Submission)


def test_default_registry_is_shared():
    assert default_registry() is default_registry()
