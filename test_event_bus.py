#!/usr/bin/env python3
"""Tests for the single-subscriber event bus"""

import pytest

from event_bus import EventBus, Topic


def test_publish_without_subscriber_is_noop():
    bus = EventBus()
    bus.publish({"value": 1}, "nobody_listens")


def test_publish_calls_subscriber_with_payload():
    bus = EventBus()
    received = []
    bus.set_subscriber("tag_found", received.append)

    bus.publish("payload", "tag_found")

    assert received == ["payload"]


def test_second_subscriber_replaces_first():
    bus = EventBus()
    first, second = [], []
    bus.set_subscriber("sent", first.append)
    bus.set_subscriber("sent", second.append)

    bus.publish("msg", "sent")

    assert first == []
    assert second == ["msg"]


def test_publish_to_several_topics_in_order():
    bus = EventBus()
    calls = []
    bus.set_subscriber("a", lambda payload: calls.append(("a", payload)))
    bus.set_subscriber("b", lambda payload: calls.append(("b", payload)))

    bus.publish(1, "b", "missing", "a")

    assert calls == [("b", 1), ("a", 1)]


def test_topic_enum_and_string_share_subscriber():
    bus = EventBus()
    received = []
    bus.set_subscriber(Topic.NDEF_FOUND, received.append)

    bus.publish("x", "ndef_found")
    bus.publish("y", Topic.NDEF_FOUND)

    assert received == ["x", "y"]
    assert bus.has_subscriber("ndef_found")


def test_clear_subscriber():
    bus = EventBus()
    received = []
    bus.set_subscriber("sent", received.append)
    bus.clear_subscriber("sent")

    bus.publish("msg", "sent")

    assert received == []
    assert not bus.has_subscriber("sent")


def test_publish_requires_payload():
    with pytest.raises(ValueError):
        EventBus().publish(None, "sent")


def test_publish_requires_topic():
    with pytest.raises(ValueError):
        EventBus().publish("payload")


def test_publish_rejects_non_string_topic():
    with pytest.raises(TypeError):
        EventBus().publish("payload", 5)


def test_set_subscriber_rejects_non_callable():
    with pytest.raises(TypeError):
        EventBus().set_subscriber("sent", "not a function")


def test_set_subscriber_rejects_non_string_topic():
    with pytest.raises(TypeError):
        EventBus().set_subscriber(3, print)


def test_clear_subscriber_without_subscriber():
    bus = EventBus()

    bus.clear_subscriber("sent")

    assert not bus.has_subscriber("sent")
