"""
Property-based tests for response framing.
"""

import json

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from gerritclient.envelope import (
    MAGIC_PREFIX,
    FramingError,
    RequestSpec,
    ResponseEnvelope,
    decode_framed,
    encode_body,
    strip_framing,
)

json_values = st.recursive(
    st.one_of(
        st.none(),
        st.booleans(),
        st.integers(min_value=-(2**31), max_value=2**31),
        st.text(max_size=30, alphabet=st.characters(blacklist_categories=("Cs",))),
    ),
    lambda children: st.one_of(
        st.lists(children, max_size=4),
        st.dictionaries(st.text(min_size=1, max_size=10), children, max_size=4),
    ),
    max_leaves=15,
)


@given(document=json_values)
@settings(max_examples=100)
def test_framed_document_decodes_to_original(document: object) -> None:
    """Whatever follows the magic line is parsed as the JSON document."""
    body = f"{MAGIC_PREFIX}\n{json.dumps(document)}"

    assert decode_framed(body) == document


def test_decode_simple_object() -> None:
    assert decode_framed(")]}'\n{\"a\":1}") == {"a": 1}


def test_null_and_false_stay_distinct() -> None:
    decoded = decode_framed(")]}'\n{\"absent\": null, \"flag\": false}")

    assert decoded["absent"] is None
    assert decoded["flag"] is False


def test_crlf_after_marker_is_accepted() -> None:
    assert decode_framed(")]}'\r\n[1, 2]") == [1, 2]


def test_missing_marker_raises() -> None:
    with pytest.raises(FramingError):
        decode_framed('{"a": 1}')


def test_marker_must_be_a_whole_line() -> None:
    with pytest.raises(FramingError):
        strip_framing("xx)]}'\n{}")


def test_invalid_json_after_marker_raises() -> None:
    with pytest.raises(FramingError):
        decode_framed(")]}'\n{not json")


def test_only_content_after_marker_is_returned() -> None:
    assert strip_framing(")]}'\n[\"x\"]\n") == "[\"x\"]\n"


def test_encode_body_is_utf8_json_with_exact_fields() -> None:
    body = encode_body({"topic": "café"})

    assert body == '{"topic":"café"}'.encode("utf-8")
    assert encode_body(None) is None


def test_request_spec_json_round_trip() -> None:
    spec = RequestSpec.json("PUT", "/changes/1/topic", {"topic": "foo"})

    assert spec.payload() == {"topic": "foo"}
    assert RequestSpec("GET", "/changes/1").payload() is None


class TestResponseEnvelope:
    """Tests for ResponseEnvelope helpers."""

    def test_ok_range(self) -> None:
        assert ResponseEnvelope(status=200).ok
        assert ResponseEnvelope(status=201).ok
        assert not ResponseEnvelope(status=302).ok
        assert not ResponseEnvelope(status=404).ok

    def test_no_content_has_no_document(self) -> None:
        assert not ResponseEnvelope(status=204, raw_body="").has_document
        assert ResponseEnvelope(status=200, raw_body=")]}'\n{}").has_document

    @pytest.mark.parametrize("raw_body", ["", "  \n"])
    def test_empty_success_body_still_needs_framing(self, raw_body: str) -> None:
        envelope = ResponseEnvelope(status=200, raw_body=raw_body)

        assert envelope.has_document
        with pytest.raises(FramingError):
            envelope.decode()
