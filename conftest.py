#!/usr/bin/env python3
"""Shared pytest fixtures: a no-op Tappy driver double"""

from typing import Any, Callable, List, Optional

import pytest

from event_bus import Topic
from tappy_driver import TagType
from tappy_wrapper import TappyWrapper
from tcmp import RawTcmpMessage

TAG_TYPES = {
    6: TagType(6, "MIFARE DESFire EV1 4K", 4, 4096),
    20: TagType(20, "NTAG 216", 2, 888),
}


class NoOpTappy:
    """Driver double that records what it is sent and replays replies"""

    def __init__(self, **params):
        self.params = params
        self.connected = False
        self.sent: List[Any] = []
        self.message_listener: Callable[[Any], None] = lambda message: None
        self.error_listener: Callable[[int, Any], None] = lambda error_type, data: None

    def connect(self, callback: Optional[Callable[..., Any]] = None):
        if callback is not None:
            callback()
        self.connected = True

    def disconnect(self, callback: Optional[Callable[..., Any]] = None):
        if callback is not None:
            callback()
        self.connected = False

    def is_connected(self) -> bool:
        return self.connected

    def send_message(self, message) -> None:
        self.sent.append(message)

    def set_message_listener(self, listener) -> None:
        self.message_listener = listener

    def set_error_listener(self, listener) -> None:
        self.error_listener = listener

    @staticmethod
    def resolve_tag_type(code: int) -> Optional[TagType]:
        return TAG_TYPES.get(code)

    def reply(self, message) -> None:
        """Deliver a message the way the driver would, as an unresolved frame"""
        self.message_listener(RawTcmpMessage.copy_of(message))

    def error(self, error_type: int, data: Any = None) -> None:
        self.error_listener(error_type, data)


@pytest.fixture
def fake_tappy():
    return NoOpTappy()


@pytest.fixture
def wrapper(fake_tappy):
    return TappyWrapper(tappy=fake_tappy)


@pytest.fixture
def events(wrapper):
    """Record every published event as (topic, payload) pairs"""
    recorded: List[Any] = []
    for topic in Topic:
        wrapper.on(topic, lambda payload, topic=topic: recorded.append((topic, payload)))
    return recorded
