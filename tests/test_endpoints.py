"""Tests for the endpoint catalog and enum name generation."""

import pydantic
import pytest

from redweave.codegen import (
    find_duplicate_uris,
    generate_enum_name,
    generate_names,
    parse_categories,
    render_endpoints_module,
)
from redweave.endpoints import (
    ENDPOINT_CATEGORIES,
    Endpoint,
    Endpoints,
    endpoint_implementation,
)
from redweave.exceptions import ConfigurationError


@pytest.mark.parametrize(
    "descriptor, expected",
    [
        ("GET /api/v1/me", "OAUTH_ME"),
        ("GET /api/me.json", "ME"),
        ("GET /r/{subreddit}/hot", "SUBREDDIT_HOT"),
        ("GET /prefs/{where}", "PREFS_WHERE"),
        ("GET /hot", "HOT"),
        ("GET /by_id/{names}", "BY_ID_NAMES"),
        ("GET /api/v1/user/{username}/trophies", "OAUTH_USER_USERNAME_TROPHIES"),
        ("POST /api/read_message", "READ_MESSAGE"),
        ("GET /api/multi/{multipath}/r/{srname}", "MULTI_MULTIPATH_R_SRNAME"),
        ("GET /api/v1/me/prefs", "OAUTH_ME_PREFS"),
    ],
)
def test_generate_enum_name(descriptor, expected):
    assert generate_enum_name(Endpoint.parse(descriptor), is_duplicate=False) == expected


def test_duplicate_uris_get_verb_suffix():
    """Test that two endpoints sharing a URI in one category are told apart by verb."""
    categories = parse_categories({"misc": ["GET /api/foo", "POST /api/foo", "GET /api/bar"]})

    assert find_duplicate_uris(categories) == {"misc": ["/api/foo"]}
    names = generate_names(categories)["misc"]
    assert list(names) == ["FOO_GET", "FOO_POST", "BAR"]
    assert names["FOO_POST"].verb == "POST"


def test_same_uri_in_different_categories_is_not_a_duplicate():
    categories = parse_categories({"a": ["GET /api/foo"], "b": ["POST /api/bar"]})
    assert find_duplicate_uris(categories) == {"a": [], "b": []}


def test_repeated_endpoint_is_emitted_once():
    names = generate_names(parse_categories({"misc": ["GET /api/foo", "GET /api/foo"]}))
    assert list(names["misc"]) == ["FOO_GET"]


def test_name_collision_raises():
    categories = parse_categories({"a": ["GET /api/foo"], "b": ["GET /foo"]})
    with pytest.raises(ConfigurationError, match="FOO"):
        generate_names(categories)


def test_catalog_matches_generated_names():
    """Test that the committed enum is what the generator produces."""
    generated = {
        name: endpoint.request_descriptor
        for members in generate_names(parse_categories(ENDPOINT_CATEGORIES)).values()
        for name, endpoint in members.items()
    }
    assert generated == {member.name: member.value for member in Endpoints}


def test_render_endpoints_module():
    source = render_endpoints_module({"misc": ["GET /api/foo", "PATCH /api/foo"]})

    assert "class Endpoints(Enum):" in source
    assert "    # --- misc ---" in source
    assert '    FOO_GET = "GET /api/foo"' in source
    assert '    FOO_PATCH = "PATCH /api/foo"' in source
    assert source.endswith("\n")


def test_endpoint_parse():
    endpoint = Endpoint.parse("  patch /api/v1/me/prefs ", category="account")

    assert endpoint.verb == "PATCH"
    assert endpoint.uri == "/api/v1/me/prefs"
    assert endpoint.category == "account"
    assert str(endpoint) == "PATCH /api/v1/me/prefs"


@pytest.mark.parametrize("descriptor", ["FETCH /api/foo", "GET api/foo", "GET"])
def test_endpoint_parse_rejects_bad_descriptors(descriptor):
    with pytest.raises(pydantic.ValidationError):
        Endpoint.parse(descriptor)


def test_endpoints_member_exposes_endpoint():
    assert Endpoints.OAUTH_ME_PREFS_PATCH.endpoint == Endpoint(
        verb="PATCH", uri="/api/v1/me/prefs"
    )
    assert str(Endpoints.PREFS_FRIENDS) == "GET /prefs/friends"


def test_endpoint_implementation_records_metadata():
    def fetch_friends():
        return "friends"

    decorated = endpoint_implementation(Endpoints.PREFS_FRIENDS, Endpoints.OAUTH_ME_FRIENDS)(
        fetch_friends
    )

    assert decorated is fetch_friends
    assert decorated.__endpoints__ == (Endpoints.PREFS_FRIENDS, Endpoints.OAUTH_ME_FRIENDS)
    assert decorated() == "friends"
