#!/usr/bin/python3
"""Single-subscriber publish/subscribe event bus"""

import logging
from enum import Enum
from typing import Any, Callable, Dict

logger = logging.getLogger(__name__)


class Topic(str, Enum):
    """Topics published by the Tappy wrapper"""

    CONNECT = "connect"
    DISCONNECT = "disconnect"
    SENT = "sent"
    RECEIVED = "received"
    ERROR_MESSAGE = "error_message"
    TAG_WRITTEN = "tag_written"
    TAG_FOUND = "tag_found"
    NDEF_FOUND = "ndef_found"
    TAG_LOCKED = "tag_locked"
    INVALID_MESSAGE = "invalid_message"
    INVALID_NDEF = "invalid_ndef"
    DRIVER_ERROR = "driver_error"

    def __str__(self) -> str:
        return self.value


class EventBus:
    """Basic publish/subscribe event bus.

    Each topic has at most one subscriber; setting a new one replaces the
    old. A subscriber that wants to fan out to several consumers has to do
    that itself.
    """

    def __init__(self):
        self.subscribers: Dict[str, Callable[[Any], Any]] = {}

    def publish(self, payload: Any, *topics: str) -> None:
        """Publish a payload to the subscriber of each topic, in order"""
        if payload is None:
            raise ValueError("Must specify a payload to publish")
        if not topics:
            raise ValueError("Must specify one payload and one or more topics")

        for topic in topics:
            if not isinstance(topic, str):
                raise TypeError("Invalid topic specified, must be a string")

            subscriber = self.subscribers.get(_key(topic))
            if subscriber is None:
                logger.debug("No subscriber for %s", topic)
                continue
            subscriber(payload)

    def set_subscriber(self, topic: str, subscriber: Callable[[Any], Any]) -> None:
        """Set the subscriber for a topic, replacing any previous one"""
        if not callable(subscriber):
            raise TypeError("Subscriber must be callable")
        if not isinstance(topic, str):
            raise TypeError("Must subscribe to a string topic")

        if _key(topic) in self.subscribers:
            logger.debug("Replacing subscriber for %s", topic)
        self.subscribers[_key(topic)] = subscriber

    def clear_subscriber(self, topic: str) -> None:
        """Remove the subscriber for a topic, if any"""
        self.subscribers.pop(_key(topic), None)

    def has_subscriber(self, topic: str) -> bool:
        """Check if a topic has a subscriber"""
        return _key(topic) in self.subscribers


def _key(topic: str) -> str:
    # Topic members and their plain string values share one slot
    return topic.value if isinstance(topic, Topic) else topic
