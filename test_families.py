#!/usr/bin/env python3
"""Tests for the system and basic NFC command family payloads"""

import pytest

import basic_nfc_family as nfc
import system_family as sysfam
from tappy_errors import PayloadError
from tcmp import RawTcmpMessage


def test_scan_tag_payload():
    command = nfc.ScanTag(0x00, nfc.PollingMode.GENERAL)
    assert command.command_family == b"\x00\x01"
    assert command.payload == bytes([0x00, nfc.PollingMode.GENERAL])


def test_write_uri_payload():
    command = nfc.WriteNdefUri(0x00, True, "google.com", 0x02)
    assert command.payload == b"\x00\x01\x02google.com"


def test_write_text_parses_unicode():
    raw = RawTcmpMessage.copy_of(nfc.WriteNdefText(0x00, False, "こんにちは世界"))

    command = nfc.Resolver().resolve_command(raw)

    assert isinstance(command, nfc.WriteNdefText)
    assert command.text == "こんにちは世界"
    assert command.lock is False


def test_lock_tag_without_uid_has_empty_tag_code():
    command = nfc.LockTag()
    assert command.timeout == 0
    assert command.tag_code == b""
    assert command.payload == b"\x00"


def test_ndef_found_payload_layout():
    response = nfc.NdefFound(b"\x04\x50\x51", 20, b"\xd1\x01")
    assert response.payload == b"\x14\x03\x04\x50\x51\xd1\x01"

    parsed = nfc.NdefFound.from_payload(response.payload)
    assert parsed.tag_code == b"\x04\x50\x51"
    assert parsed.message == b"\xd1\x01"


def test_ndef_found_rejects_truncated_tag_code():
    with pytest.raises(PayloadError):
        nfc.NdefFound.from_payload(b"\x14\x07\x04")


def test_tag_found_rejects_empty_payload():
    with pytest.raises(PayloadError):
        nfc.TagFound.from_payload(b"")


def test_application_error_message():
    raw = RawTcmpMessage.copy_of(nfc.ApplicationError(0x01, 0x02, 0x03, "Bad tag"))

    resolved = nfc.Resolver().resolve_response(raw)

    assert isinstance(resolved, nfc.ApplicationError)
    assert resolved.error_message == "Bad tag"
    assert resolved.error_code == 0x01


def test_system_error_is_not_application_error():
    error = sysfam.SystemError(0x01, 0x00, 0x00, "oops")
    assert sysfam.SystemError.is_type_of(error)
    assert not nfc.ApplicationError.is_type_of(error)


def test_unknown_response_code_raises():
    with pytest.raises(PayloadError, match="Unrecognized response code 0x55"):
        sysfam.Resolver().resolve_response(RawTcmpMessage(b"\x00\x00", 0x55))


def test_resolver_rejects_other_family():
    with pytest.raises(PayloadError):
        sysfam.Resolver().resolve_response(RawTcmpMessage.copy_of(nfc.Stop()))


def test_is_type_of_compares_family_and_code():
    assert nfc.Stop.is_type_of(RawTcmpMessage(b"\x00\x01", 0x00))
    assert not nfc.Stop.is_type_of(RawTcmpMessage(b"\x00\x00", 0x00))
