#!/usr/bin/python3
"""Base types for TCMP command and response messages.

A TCMP message is addressed by a two byte command family and a one byte
command code, followed by a family specific payload. Framing and checksums
are handled by the Tappy driver; the classes here only deal with the
payload carried inside a frame.
"""

import logging
from typing import Dict, Optional, Type

from tappy_errors import PayloadError

logger = logging.getLogger(__name__)


def to_bytes(data) -> bytes:
    """Coerce bytes-like data or a list of ints to bytes"""
    if data is None:
        return b""
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


class TcmpMessage:
    """A command or response belonging to a command family"""

    COMMAND_FAMILY: bytes = b"\x00\x00"
    COMMAND_CODE: int = 0x00

    @property
    def command_family(self) -> bytes:
        return self.COMMAND_FAMILY

    @property
    def command_code(self) -> int:
        return self.COMMAND_CODE

    @property
    def payload(self) -> bytes:
        return b""

    def parse_payload(self, payload: bytes) -> None:
        """Populate this message's fields from a payload"""

    @classmethod
    def is_type_of(cls, message) -> bool:
        """Check if a message has this class's family and command code"""
        return (
            bytes(message.command_family) == cls.COMMAND_FAMILY
            and message.command_code == cls.COMMAND_CODE
        )

    @classmethod
    def from_payload(cls, payload: bytes) -> "TcmpMessage":
        message = cls()
        try:
            message.parse_payload(to_bytes(payload))
        except (IndexError, ValueError) as e:
            raise PayloadError(
                f"Invalid payload for {cls.__name__}: {e}"
            ) from e
        return message

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(family={self.command_family.hex()}, "
            f"code=0x{self.command_code:02X}, payload={self.payload.hex()})"
        )


class RawTcmpMessage(TcmpMessage):
    """An unresolved message as delivered by the driver"""

    def __init__(self, command_family: bytes, command_code: int, payload=b""):
        self._command_family = to_bytes(command_family)
        self._command_code = command_code
        self._payload = to_bytes(payload)

    @property
    def command_family(self) -> bytes:
        return self._command_family

    @property
    def command_code(self) -> int:
        return self._command_code

    @property
    def payload(self) -> bytes:
        return self._payload

    @classmethod
    def copy_of(cls, message) -> "RawTcmpMessage":
        return cls(message.command_family, message.command_code, message.payload)


class FamilyResolver:
    """Resolves raw messages of one command family into concrete types"""

    COMMAND_FAMILY: bytes = b""
    COMMANDS: Dict[int, Type[TcmpMessage]] = {}
    RESPONSES: Dict[int, Type[TcmpMessage]] = {}

    def check_family(self, message) -> bool:
        """Check if a message belongs to this resolver's family"""
        return bytes(message.command_family) == self.COMMAND_FAMILY

    def resolve_command(self, message) -> TcmpMessage:
        return self._resolve(message, self.COMMANDS, "command")

    def resolve_response(self, message) -> TcmpMessage:
        return self._resolve(message, self.RESPONSES, "response")

    def _resolve(
        self, message, table: Dict[int, Type[TcmpMessage]], kind: str
    ) -> TcmpMessage:
        if not self.check_family(message):
            raise PayloadError(
                f"Message family {bytes(message.command_family).hex()} "
                f"is not {self.COMMAND_FAMILY.hex()}"
            )

        message_class: Optional[Type[TcmpMessage]] = table.get(message.command_code)
        if message_class is None:
            raise PayloadError(
                f"Unrecognized {kind} code 0x{message.command_code:02X}"
            )

        logger.debug(
            "Resolving %s 0x%02X as %s",
            kind,
            message.command_code,
            message_class.__name__,
        )
        return message_class.from_payload(message.payload)


class ErrorResponse(TcmpMessage):
    """Error response layout shared by the system and basic NFC families"""

    def __init__(
        self,
        error_code: int = 0,
        internal_error_code: int = 0,
        reader_status: int = 0,
        error_message: str = "",
    ):
        self.error_code = error_code
        self.internal_error_code = internal_error_code
        self.reader_status = reader_status
        self.error_message = error_message

    @property
    def payload(self) -> bytes:
        return (
            bytes([self.error_code, self.internal_error_code, self.reader_status])
            + self.error_message.encode("utf-8")
        )

    def parse_payload(self, payload: bytes) -> None:
        if len(payload) < 3:
            raise ValueError("error response needs at least 3 bytes")
        self.error_code = payload[0]
        self.internal_error_code = payload[1]
        self.reader_status = payload[2]
        self.error_message = payload[3:].decode("utf-8")
