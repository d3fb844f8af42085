#!/usr/bin/python3
"""Basic NFC command family: tag detection, NDEF writing and tag locking"""

from enum import IntEnum
from typing import Optional

from tcmp import ErrorResponse, FamilyResolver, TcmpMessage, to_bytes

COMMAND_FAMILY = b"\x00\x01"


class PollingMode(IntEnum):
    GENERAL = 0x01
    TYPE1 = 0x02


class BasicNfcMessage(TcmpMessage):
    COMMAND_FAMILY = COMMAND_FAMILY


# Commands


class Stop(BasicNfcMessage):
    """Stop whatever operation the Tappy is currently running"""

    COMMAND_CODE = 0x00


class _PollingCommand(BasicNfcMessage):
    """Command with a timeout (0 = no timeout) and a polling mode"""

    def __init__(self, timeout: int = 0x00, polling_mode: int = PollingMode.GENERAL):
        self.timeout = timeout
        self.polling_mode = polling_mode

    @property
    def payload(self) -> bytes:
        return bytes([self.timeout, self.polling_mode])

    def parse_payload(self, payload: bytes) -> None:
        self.timeout = payload[0]
        self.polling_mode = PollingMode(payload[1])


class StreamTags(_PollingCommand):
    COMMAND_CODE = 0x01


class ScanTag(_PollingCommand):
    COMMAND_CODE = 0x02


class StreamNdef(_PollingCommand):
    COMMAND_CODE = 0x03


class ScanNdef(_PollingCommand):
    COMMAND_CODE = 0x04


class _WriteCommand(BasicNfcMessage):
    """Write command layout: timeout, lock flag, then command content"""

    def __init__(self, timeout: int = 0x00, lock: bool = False):
        self.timeout = timeout
        self.lock = lock

    def _header(self) -> bytes:
        return bytes([self.timeout, 0x01 if self.lock else 0x00])

    def _parse_header(self, payload: bytes) -> bytes:
        self.timeout = payload[0]
        self.lock = payload[1] == 0x01
        return payload[2:]


class WriteNdefUri(_WriteCommand):
    COMMAND_CODE = 0x05

    def __init__(
        self,
        timeout: int = 0x00,
        lock: bool = False,
        uri: str = "",
        uri_code: int = 0x00,
    ):
        super().__init__(timeout, lock)
        self.uri = uri
        self.uri_code = uri_code

    @property
    def payload(self) -> bytes:
        return self._header() + bytes([self.uri_code]) + self.uri.encode("utf-8")

    def parse_payload(self, payload: bytes) -> None:
        content = self._parse_header(payload)
        self.uri_code = content[0]
        self.uri = content[1:].decode("utf-8")


class WriteNdefText(_WriteCommand):
    COMMAND_CODE = 0x06

    def __init__(self, timeout: int = 0x00, lock: bool = False, text: str = ""):
        super().__init__(timeout, lock)
        self.text = text

    @property
    def payload(self) -> bytes:
        return self._header() + self.text.encode("utf-8")

    def parse_payload(self, payload: bytes) -> None:
        self.text = self._parse_header(payload).decode("utf-8")


class WriteNdefCustom(_WriteCommand):
    COMMAND_CODE = 0x07

    def __init__(self, timeout: int = 0x00, lock: bool = False, message=b""):
        super().__init__(timeout, lock)
        self.message = to_bytes(message)

    @property
    def payload(self) -> bytes:
        return self._header() + self.message

    def parse_payload(self, payload: bytes) -> None:
        self.message = self._parse_header(payload)


class LockTag(BasicNfcMessage):
    """Lock the next tag presented, optionally only the one with a given UID"""

    COMMAND_CODE = 0x08

    def __init__(self, timeout: int = 0x00, tag_code: Optional[bytes] = None):
        self.timeout = timeout
        self.tag_code = to_bytes(tag_code)

    @property
    def payload(self) -> bytes:
        return bytes([self.timeout]) + self.tag_code

    def parse_payload(self, payload: bytes) -> None:
        self.timeout = payload[0]
        self.tag_code = payload[1:]


# Responses


class _TagResponse(BasicNfcMessage):
    """Response layout: tag type, then the tag's UID"""

    def __init__(self, tag_code=b"", tag_type: int = 0x00):
        self.tag_code = to_bytes(tag_code)
        self.tag_type = tag_type

    @property
    def payload(self) -> bytes:
        return bytes([self.tag_type]) + self.tag_code

    def parse_payload(self, payload: bytes) -> None:
        self.tag_type = payload[0]
        self.tag_code = payload[1:]


class TagFound(_TagResponse):
    COMMAND_CODE = 0x01


class NdefFound(_TagResponse):
    """Response layout: tag type, UID length, UID, then the raw NDEF message"""

    COMMAND_CODE = 0x02

    def __init__(self, tag_code=b"", tag_type: int = 0x00, message=b""):
        super().__init__(tag_code, tag_type)
        self.message = to_bytes(message)

    @property
    def payload(self) -> bytes:
        return (
            bytes([self.tag_type, len(self.tag_code)]) + self.tag_code + self.message
        )

    def parse_payload(self, payload: bytes) -> None:
        self.tag_type = payload[0]
        code_length = payload[1]
        if len(payload) < 2 + code_length:
            raise ValueError("tag code length exceeds payload")
        self.tag_code = payload[2 : 2 + code_length]
        self.message = payload[2 + code_length :]


class ScanTimeout(BasicNfcMessage):
    COMMAND_CODE = 0x03


class TagWritten(_TagResponse):
    COMMAND_CODE = 0x05


class TagLocked(_TagResponse):
    COMMAND_CODE = 0x06


class ApplicationError(ErrorResponse):
    COMMAND_FAMILY = COMMAND_FAMILY
    COMMAND_CODE = 0x7F


class Resolver(FamilyResolver):
    """Resolver for the basic NFC command family"""

    COMMAND_FAMILY = COMMAND_FAMILY
    COMMANDS = {
        cls.COMMAND_CODE: cls
        for cls in (
            Stop,
            StreamTags,
            ScanTag,
            StreamNdef,
            ScanNdef,
            WriteNdefUri,
            WriteNdefText,
            WriteNdefCustom,
            LockTag,
        )
    }
    RESPONSES = {
        cls.COMMAND_CODE: cls
        for cls in (
            TagFound,
            NdefFound,
            ScanTimeout,
            TagWritten,
            TagLocked,
            ApplicationError,
        )
    }
