#!/usr/bin/python3
"""Event payloads published by the Tappy wrapper, one type per topic group"""

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from tappy_driver import TagType


@dataclass
class ConnectionEvent:
    """Published on 'connect' and 'disconnect' with the driver callback's arguments"""

    args: Tuple[Any, ...]


@dataclass
class MessageEvent:
    """Published on 'sent' and 'received' with the raw message"""

    message: Any


@dataclass
class InvalidMessageEvent:
    """Published on 'invalid_message' when a known family's payload doesn't parse"""

    message: Any
    error: Exception


@dataclass
class ErrorMessageEvent:
    """Published on 'error_message' when the Tappy reports an error"""

    message: Any
    resolved: Any
    description: str


@dataclass
class TagEvent:
    """Published on 'tag_found', 'tag_written' and 'tag_locked'"""

    message: Any
    resolved: Any
    tag_type_code: int
    tag_type: Optional[TagType]
    tag_code: bytes
    tag_code_str: str


@dataclass
class NdefEvent(TagEvent):
    """Published on 'ndef_found' with the NDEF message parsed into records"""

    raw_ndef: bytes
    ndef: List[Any]


@dataclass
class InvalidNdefEvent(TagEvent):
    """Published on 'invalid_ndef' when the NDEF message doesn't parse"""

    raw_ndef: bytes
    error: Exception


@dataclass
class DriverErrorEvent:
    """Published on 'driver_error' when the driver reports a transport error"""

    error_type: int
    data: Any
    description: str
