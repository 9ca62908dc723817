"""Tests for the lazy JSON models in redweave.models."""

from datetime import UTC, datetime

import pytest
from payloads import comment, link, listing

from redweave.exceptions import (
    FieldTypeMismatchError,
    MalformedResponseError,
    MissingFieldError,
    UnsupportedKindError,
)
from redweave.listing import Listing
from redweave.models import (
    Comment,
    FieldState,
    JsonModel,
    JsonProperty,
    MoreChildren,
    Submission,
    TrophyList,
)


class Tagged(JsonModel):
    """Throwaway model for field-contract tests."""

    tags = JsonProperty("tags", list[str], nullable=True)
    label = JsonProperty("label", str, nullable=True)
    count = JsonProperty("count", int)
    loose_count = JsonProperty("loose_count", int, strict=False)
    shout = JsonProperty("shout", str, converter=lambda raw, registry: str(raw).upper())


def test_submission_reads_fields(registry):
    """Test that declared fields are extracted and coerced from the data."""
    post = registry.decode_by_kind(link("abc"))

    assert isinstance(post, Submission)
    assert post.title == "Post abc"
    assert post.score == 42
    assert post.is_self is False
    assert post.fullname == "t3_abc"
    assert post.created_utc == datetime.fromtimestamp(1700000000, tz=UTC)


def test_fields_are_read_lazily_from_backing_data(registry):
    """Test that nothing is memoized: accessors see the current backing data."""
    node = link("abc")
    post = registry.decode_by_kind(node)

    node["data"]["title"] = "Edited"

    assert post.title == "Edited"


def test_nullable_field_absent_or_null_reads_none(registry):
    post = registry.decode_by_kind(link("abc", link_flair_text=None))
    assert post.link_flair_text is None
    assert post.stickied is None  # absent


def test_nullable_list_field_reads_empty_list(registry):
    assert Tagged({"count": 1}, registry).tags == []
    assert Tagged({"tags": None, "count": 1}, registry).tags == []
    assert Tagged({"tags": ["a", "b"], "count": 1}, registry).tags == ["a", "b"]


def test_missing_required_field_raises(registry):
    """Test that a non-nullable field that is absent raises MissingFieldError."""
    node = link("abc")
    del node["data"]["title"]
    post = registry.decode_by_kind(node)

    with pytest.raises(MissingFieldError) as exc_info:
        _ = post.title

    assert exc_info.value.model == "Submission"
    assert exc_info.value.field == "title"


def test_null_required_field_raises(registry):
    post = registry.decode_by_kind(link("abc", score=None))
    with pytest.raises(MissingFieldError):
        _ = post.score


def test_strict_field_rejects_coercible_string(registry):
    """Test that strict fields do not turn "12" into 12."""
    post = registry.decode_by_kind(link("abc", score="12"))

    with pytest.raises(FieldTypeMismatchError) as exc_info:
        _ = post.score

    assert exc_info.value.field == "score"
    assert exc_info.value.value == "12"


def test_lax_field_accepts_coercible_string(registry):
    model = Tagged({"count": 1, "loose_count": "12"}, registry)
    assert model.loose_count == 12


def test_custom_converter_is_used(registry):
    assert Tagged({"shout": "hi"}, registry).shout == "HI"


def test_fields_are_read_only(registry):
    post = registry.decode_by_kind(link("abc"))
    with pytest.raises(AttributeError):
        post.title = "nope"


def test_lookup_tags_field_state():
    prop = Tagged.json_properties["label"]
    assert prop.lookup({"label": "x"}) == (FieldState.PRESENT, "x")
    assert prop.lookup({"label": None}) == (FieldState.NULL, None)
    assert prop.lookup({}) == (FieldState.ABSENT, None)


def test_json_properties_include_inherited_fields():
    assert {"id", "author", "created_utc", "title"} <= set(Submission.json_properties)


def test_validate_raises_first_bad_field(registry):
    with pytest.raises(MissingFieldError):
        Tagged({}, registry).validate()
    Tagged({"count": 1, "loose_count": 2, "shout": "x"}, registry).validate()


def test_model_requires_mapping(registry):
    with pytest.raises(MalformedResponseError):
        Tagged(["not", "an", "object"], registry)  # type: ignore[arg-type]


def test_models_compare_by_type_and_data(registry):
    a = registry.decode_by_kind(link("abc"))
    b = registry.decode_by_kind(link("abc"))
    c = registry.decode_by_kind(link("xyz"))

    assert a == b
    assert hash(a) == hash(b)
    assert a != c


def test_comment_without_replies_has_empty_listing(registry):
    reply_less = registry.decode_by_kind(comment("c1"))
    assert isinstance(reply_less, Comment)
    assert reply_less.replies == Listing()


def test_comment_replies_decode_nested_listing(registry):
    parent = registry.decode_by_kind(
        comment("c1", replies=listing([comment("c2", parent_id="t1_c1")]))
    )

    replies = parent.replies
    assert len(replies) == 1
    assert replies[0].body == "Comment c2"
    assert replies[0].replies == Listing()


def test_comment_replies_with_wrong_kind_propagate(registry):
    parent = registry.decode_by_kind(
        comment("c1", replies=listing([{"kind": "t9", "data": {}}]))
    )
    with pytest.raises(UnsupportedKindError):
        _ = parent.replies


def test_more_children(registry):
    more = registry.decode_by_kind(
        {
            "kind": "more",
            "data": {"id": "c9", "count": 4, "parent_id": "t1_c1", "children": ["c9", "c10"]},
        }
    )
    assert isinstance(more, MoreChildren)
    assert more.children == ["c9", "c10"]
    assert more.depth is None


def test_trophy_list_decodes_nested_trophies(registry):
    trophies = registry.decode_by_kind(
        {
            "kind": "TrophyList",
            "data": {
                "trophies": [
                    {"kind": "t6", "data": {"id": None, "name": "Verified Email"}},
                    {"kind": "t6", "data": {"id": "1q", "name": "Ten-Year Club"}},
                ]
            },
        }
    )

    assert isinstance(trophies, TrophyList)
    assert [t.name for t in trophies.trophies] == ["Verified Email", "Ten-Year Club"]
    assert trophies.trophies[0].id is None


def test_trophy_list_with_bad_entries_raises(registry):
    trophies = registry.decode_by_kind({"kind": "TrophyList", "data": {"trophies": "none"}})
    with pytest.raises(FieldTypeMismatchError):
        _ = trophies.trophies
