#!/usr/bin/env python3
"""Tests for the NDEF helpers"""

import ndef
import pytest

from ndef_decoder import (
    URI_PRE_HTTP_WWW,
    URI_PRE_HTTPS,
    URI_PRE_HTTPS_WWW,
    URI_PRE_NONE,
    decode_uri_payload,
    describe_records,
    encode_ndef_message,
    parse_ndef_message,
    resolve_uri_to_prefix,
)


@pytest.mark.parametrize(
    "uri, code, content",
    [
        ("https://www.google.com", URI_PRE_HTTPS_WWW, "google.com"),
        ("http://www.taptrack.com", URI_PRE_HTTP_WWW, "taptrack.com"),
        ("https://example.org/a", URI_PRE_HTTPS, "example.org/a"),
        ("urn:epc:id:sgtin:1", 0x1E, "sgtin:1"),
        ("custom-scheme:thing", URI_PRE_NONE, "custom-scheme:thing"),
        ("", URI_PRE_NONE, ""),
    ],
)
def test_resolve_uri_to_prefix(uri, code, content):
    parsed = resolve_uri_to_prefix(uri)
    assert parsed.prefix_code == code
    assert parsed.content == content


def test_decode_uri_payload():
    assert decode_uri_payload(b"\x02google.com") == "https://www.google.com"
    assert decode_uri_payload(b"") == ""


def test_parse_ndef_message():
    data = encode_ndef_message([ndef.TextRecord("TEST", "en")])

    records = parse_ndef_message(data)

    assert len(records) == 1
    assert records[0].text == "TEST"
    assert records[0].language == "en"


def test_parse_ndef_message_rejects_malformed_bytes():
    with pytest.raises(ndef.DecodeError):
        parse_ndef_message([0x33, 0x12])


def test_parse_ndef_message_rejects_undecodable_record_type():
    # Absolute URI record whose type bytes are not ASCII
    with pytest.raises(ndef.DecodeError):
        parse_ndef_message(bytes.fromhex("b30304c28673b855b78693d2"))


def test_describe_records():
    records = [ndef.UriRecord("https://www.google.com"), ndef.TextRecord("hi", "en")]

    lines = describe_records(records)

    assert lines == [
        "Record 1: URI https://www.google.com",
        "Record 2: Text [en] hi",
    ]
