#!/usr/bin/python3
"""Wrapper around a Tappy driver for common NFC workflows.

Inbound messages are resolved and republished as events on a fixed set
of topics; outbound convenience methods build the matching basic NFC
commands. Each topic has a single subscriber, set with ``on()``:

    'connect'          when the Tappy connects
    'disconnect'       when the Tappy disconnects
    'sent'             when any message is sent to the Tappy
    'received'         when any message is received from the Tappy
    'error_message'    when a known error message is received
    'tag_written'      when a tag is written
    'tag_found'        when a tag is found (not sent when NDEF found)
    'ndef_found'       when an NDEF tag is found
    'tag_locked'       when a tag is locked
    'invalid_message'  when a valid frame is received, but the payload is wrong
    'invalid_ndef'     when an NDEF tag is found, but the message doesn't parse
    'driver_error'     when the Tappy driver encounters an error
"""

import logging
from typing import Any, Callable, Optional

import ndef

import basic_nfc_family as nfc
import system_family as sysfam
from event_bus import EventBus, Topic
from ndef_decoder import encode_ndef_message, parse_ndef_message, resolve_uri_to_prefix
from resolver_mux import ResolverMux
from tappy_driver import DriverErrorType, TappyDriver, load_driver
from tappy_errors import TappyWrapperError
from tappy_events import (
    ConnectionEvent,
    DriverErrorEvent,
    ErrorMessageEvent,
    InvalidMessageEvent,
    InvalidNdefEvent,
    MessageEvent,
    NdefEvent,
    TagEvent,
)

logger = logging.getLogger(__name__)

TAG_TOPICS = (
    (nfc.TagFound, Topic.TAG_FOUND),
    (nfc.TagWritten, Topic.TAG_WRITTEN),
    (nfc.TagLocked, Topic.TAG_LOCKED),
)

# Responses whose description is the error message they carry
ERROR_RESPONSES = (nfc.ApplicationError, sysfam.SystemError)

SYSTEM_ERROR_DESCRIPTIONS = (
    (sysfam.LcsMismatch, "LCS Mismatch"),
    (sysfam.LengthMismatch, "Message length mismatch"),
    (sysfam.ImproperMessageFormat, "Improper message format"),
    (sysfam.CrcMismatch, "CRC mismatch"),
)

DRIVER_ERROR_DESCRIPTIONS = {
    DriverErrorType.NOT_CONNECTED: "Tappy not connected",
    DriverErrorType.CONNECTION_ERROR: "Connection error",
    DriverErrorType.INVALID_HDLC: "Received invalid frame",
    DriverErrorType.INVALID_TCMP: "Received invalid packet",
}


class TappyWrapper:
    """Wraps a Tappy driver behind a topic based event surface.

    Pass ``tappy=`` to wrap an existing driver; otherwise the keyword
    parameters are used to construct one with ``load_driver``.
    """

    def __init__(self, tappy: Optional[TappyDriver] = None, **params):
        if tappy is not None:
            self.tappy = tappy
        else:
            self.tappy = load_driver(**params)

        self.eb = EventBus()
        self.resolver_mux = ResolverMux([nfc.Resolver(), sysfam.Resolver()])
        self._message_listener: Optional[Callable[[Any], Any]] = None
        self._error_listener: Optional[Callable[[int, Any], Any]] = None

        self.tappy.set_message_listener(self._on_message)
        self.tappy.set_error_listener(self._on_error)

    def _on_message(self, message) -> None:
        if self._message_listener is not None:
            self._message_listener(message)
        self.eb.publish(MessageEvent(message), Topic.RECEIVED)

        if not self.resolver_mux.check_family(message):
            return

        try:
            resolved = self.resolver_mux.resolve_response(message)
        except TappyWrapperError as e:
            logger.warning("Received message that doesn't resolve: %s", e)
            self.eb.publish(InvalidMessageEvent(message, e), Topic.INVALID_MESSAGE)
            return

        for response_type, topic in TAG_TOPICS:
            if response_type.is_type_of(resolved):
                event = TagEvent(message, resolved, **self._tag_fields(resolved))
                self.eb.publish(event, topic)
                return

        if nfc.NdefFound.is_type_of(resolved):
            self._publish_ndef(message, resolved)
            return

        if any(response_type.is_type_of(resolved) for response_type in ERROR_RESPONSES):
            self._publish_error(message, resolved, resolved.error_message)
            return

        for response_type, description in SYSTEM_ERROR_DESCRIPTIONS:
            if response_type.is_type_of(resolved):
                self._publish_error(message, resolved, description)
                return

        logger.debug("No topic for %s", type(resolved).__name__)

    def _tag_fields(self, resolved) -> dict:
        tag_code = bytes(resolved.tag_code)
        return {
            "tag_type_code": resolved.tag_type,
            "tag_type": self.tappy.resolve_tag_type(resolved.tag_type),
            "tag_code": tag_code,
            "tag_code_str": tag_code.hex().upper(),
        }

    def _publish_ndef(self, message, resolved) -> None:
        raw_ndef = bytes(resolved.message)
        tag_fields = self._tag_fields(resolved)
        try:
            records = parse_ndef_message(raw_ndef)
        except ndef.DecodeError as e:
            logger.warning("Found NDEF tag with invalid message: %s", e)
            event = InvalidNdefEvent(
                message, resolved, **tag_fields, raw_ndef=raw_ndef, error=e
            )
            self.eb.publish(event, Topic.INVALID_NDEF)
            return

        event = NdefEvent(
            message, resolved, **tag_fields, raw_ndef=raw_ndef, ndef=records
        )
        self.eb.publish(event, Topic.NDEF_FOUND)

    def _publish_error(self, message, resolved, description: str) -> None:
        logger.info("Tappy reported error: %s", description)
        event = ErrorMessageEvent(message, resolved, description)
        self.eb.publish(event, Topic.ERROR_MESSAGE)

    def _on_error(self, error_type: int, data: Any = None) -> None:
        description = DRIVER_ERROR_DESCRIPTIONS.get(error_type, "Unknown error")
        logger.error("Tappy driver error %s: %s", error_type, description)

        if self._error_listener is not None:
            self._error_listener(error_type, data)
        event = DriverErrorEvent(error_type, data, description)
        self.eb.publish(event, Topic.DRIVER_ERROR)

    def is_connected(self) -> bool:
        """Check if the Tappy is connected"""
        return self.tappy.is_connected()

    def connect(self, callback: Optional[Callable[..., Any]] = None) -> Any:
        """Connect to the Tappy, calling callback once connected"""

        def on_connect(*args):
            if callback is not None:
                callback(*args)
            self.eb.publish(ConnectionEvent(args), Topic.CONNECT)

        return self.tappy.connect(on_connect)

    def disconnect(self, callback: Optional[Callable[..., Any]] = None) -> Any:
        """Disconnect from the Tappy, calling callback once disconnected"""

        def on_disconnect(*args):
            if callback is not None:
                callback(*args)
            self.eb.publish(ConnectionEvent(args), Topic.DISCONNECT)

        return self.tappy.disconnect(on_disconnect)

    def send_message(self, message) -> None:
        """Send a message through the driver and publish it on 'sent'"""
        logger.debug("Sending %r", message)
        self.tappy.send_message(message)
        self.eb.publish(MessageEvent(message), Topic.SENT)

    def detect_tag(self, continuous: bool = False) -> None:
        """Scan for tags, continuing after the first one if continuous"""
        command = nfc.StreamTags if continuous else nfc.ScanTag
        self.send_message(command(0x00, nfc.PollingMode.GENERAL))

    def detect_ndef(self, continuous: bool = False) -> None:
        """Scan for NDEF tags, continuing after the first one if continuous"""
        command = nfc.StreamNdef if continuous else nfc.ScanNdef
        self.send_message(command(0x00, nfc.PollingMode.GENERAL))

    def write_uri(self, uri: str = "", lock: bool = False) -> None:
        """Write a single URI record to the next tag, locking it if requested"""
        parsed = resolve_uri_to_prefix(uri)
        command = nfc.WriteNdefUri(0x00, lock, parsed.content, parsed.prefix_code)
        self.send_message(command)

    write_url = write_uri

    def write_text(self, text: str = "", lock: bool = False) -> None:
        """Write a single text record to the next tag, locking it if requested"""
        self.send_message(nfc.WriteNdefText(0x00, lock, text))

    def write_ndef(self, data, lock: bool = False) -> None:
        """Write a custom NDEF message to the next tag.

        data is either the encoded message or a list of ndef records.
        """
        if data is not None and not isinstance(data, (bytes, bytearray, str)):
            data = list(data)
        if data and all(isinstance(record, ndef.Record) for record in data):
            data = encode_ndef_message(data)
        self.send_message(nfc.WriteNdefCustom(0x00, lock, data))

    def lock_tag(self, uid=None) -> None:
        """Lock the next tag presented, or only the tag with the given uid.

        Without a uid the Tappy keeps locking every lockable tag that enters
        its range until it is stopped.
        """
        self.send_message(nfc.LockTag(0x00, uid))

    def stop(self) -> None:
        """Stop whatever the Tappy is currently doing.

        Issue this before disconnecting, otherwise the Tappy carries on with
        its last command until power cycled.
        """
        self.send_message(nfc.Stop())

    def on(self, topic: str, callback: Callable[[Any], Any]) -> None:
        """Set the single subscriber for a topic"""
        self.eb.set_subscriber(topic, callback)

    def set_message_listener(self, listener: Optional[Callable[[Any], Any]]) -> None:
        """Receive every raw message from the driver"""
        self._message_listener = listener

    def set_error_listener(self, listener: Optional[Callable[[int, Any], Any]]) -> None:
        """Receive every raw (error_type, data) pair from the driver"""
        self._error_listener = listener
