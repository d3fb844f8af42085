#!/usr/bin/env python3
"""Tests for routing resolution across command families"""

import pytest

import basic_nfc_family as nfc
import system_family as sysfam
from resolver_mux import ResolverMux
from tappy_errors import UnsupportedFamilyError
from tcmp import RawTcmpMessage


class RecordingResolver:
    """Resolver double that claims one family and records calls"""

    def __init__(self, family: bytes, name: str):
        self.family = family
        self.name = name
        self.calls = []

    def check_family(self, message) -> bool:
        return bytes(message.command_family) == self.family

    def resolve_command(self, message):
        self.calls.append("command")
        return self.name

    def resolve_response(self, message):
        self.calls.append("response")
        return self.name


@pytest.fixture
def mux():
    return ResolverMux([nfc.Resolver(), sysfam.Resolver()])


def test_check_family(mux):
    assert mux.check_family(RawTcmpMessage(b"\x00\x01", 0x01))
    assert mux.check_family(RawTcmpMessage(b"\x00\x00", 0xFD))
    assert not mux.check_family(RawTcmpMessage(b"\x00\x05", 0x01))


def test_resolves_response_in_matching_family(mux):
    raw = RawTcmpMessage.copy_of(nfc.TagFound(b"\x04\x50", 20))

    resolved = mux.resolve_response(raw)

    assert isinstance(resolved, nfc.TagFound)
    assert resolved.tag_code == b"\x04\x50"
    assert resolved.tag_type == 20


def test_resolves_command_in_matching_family(mux):
    resolved = mux.resolve_command(RawTcmpMessage.copy_of(sysfam.PingCommand()))
    assert isinstance(resolved, sysfam.PingCommand)


def test_unsupported_family_raises(mux):
    raw = RawTcmpMessage(b"\x00\x09", 0x01)

    with pytest.raises(UnsupportedFamilyError, match="Unsupported response type"):
        mux.resolve_response(raw)
    with pytest.raises(UnsupportedFamilyError, match="Unsupported command type"):
        mux.resolve_command(raw)


def test_first_matching_resolver_wins():
    first = RecordingResolver(b"\x00\x01", "first")
    second = RecordingResolver(b"\x00\x01", "second")
    mux = ResolverMux([first, second])

    assert mux.resolve_response(RawTcmpMessage(b"\x00\x01", 0x01)) == "first"
    assert first.calls == ["response"]
    assert second.calls == []


def test_each_call_scans_again():
    resolver = RecordingResolver(b"\x00\x01", "only")
    mux = ResolverMux([resolver])
    raw = RawTcmpMessage(b"\x00\x01", 0x01)

    mux.resolve_response(raw)
    mux.resolve_response(raw)

    assert resolver.calls == ["response", "response"]
