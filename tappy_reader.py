#!/usr/bin/python3
"""Stream NDEF tags from a Tappy, log them and forward them to MQTT"""

import atexit
import logging
import os
import signal
import sys
import time
from typing import Optional

from event_bus import Topic
from mqtt_handler import MQTTHandler
from ndef_decoder import describe_records
from tappy_errors import DriverConfigurationError
from tappy_events import (
    DriverErrorEvent,
    ErrorMessageEvent,
    InvalidNdefEvent,
    NdefEvent,
    TagEvent,
)
from tappy_wrapper import TappyWrapper

# Seconds without a tag before the tag is reported absent, 0 to never clear
TAG_CLEAR_SECONDS = float(os.getenv("TAG_CLEAR_SECONDS", "5"))

# Configure logging
logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)

# Global variables for resource cleanup
_wrapper: Optional[TappyWrapper] = None
_mqtt_handler: Optional[MQTTHandler] = None


class TagReporter:
    """Subscribes to wrapper events and reports tags to the log and MQTT"""

    def __init__(self, mqtt_handler: Optional[MQTTHandler] = None):
        self.tags_processed = 0
        self.last_seen: Optional[float] = None
        self.mqtt_handler = mqtt_handler

    def attach(self, wrapper: TappyWrapper) -> None:
        wrapper.on(Topic.CONNECT, lambda _event: self._on_connect(wrapper))
        wrapper.on(Topic.TAG_FOUND, self.on_tag_found)
        wrapper.on(Topic.NDEF_FOUND, self.on_ndef_found)
        wrapper.on(Topic.INVALID_NDEF, self.on_invalid_ndef)
        wrapper.on(Topic.ERROR_MESSAGE, self.on_error_message)
        wrapper.on(Topic.DRIVER_ERROR, self.on_driver_error)

    def _on_connect(self, wrapper: TappyWrapper) -> None:
        logger.info("Tappy connected - streaming NDEF tags")
        wrapper.detect_ndef(continuous=True)

    def on_tag_found(self, event: TagEvent) -> None:
        logger.info("Tag found: %s (type %d)", event.tag_code_str, event.tag_type_code)
        self._report(event)

    def on_ndef_found(self, event: NdefEvent) -> None:
        logger.info(
            "NDEF tag found: %s (type %d)", event.tag_code_str, event.tag_type_code
        )
        logger.debug(
            "Raw NDEF data (%d bytes): %s", len(event.raw_ndef), event.raw_ndef.hex()
        )
        for line in describe_records(event.ndef):
            logger.info("  %s", line)
        self._report(event)

    def on_invalid_ndef(self, event: InvalidNdefEvent) -> None:
        logger.warning(
            "Tag %s has an unreadable NDEF message: %s", event.tag_code_str, event.error
        )

    def on_error_message(self, event: ErrorMessageEvent) -> None:
        logger.error("Tappy error: %s", event.description)

    def on_driver_error(self, event: DriverErrorEvent) -> None:
        logger.error("Driver error %s: %s", event.error_type, event.description)

    def _report(self, event: TagEvent) -> None:
        self.tags_processed += 1
        self.last_seen = time.monotonic()
        if self.mqtt_handler:
            self.mqtt_handler.publish_tag_event(event)
        logger.info("--- Tag read completed --- (Total: %d)", self.tags_processed)

    def clear_if_stale(self, now: float) -> bool:
        """Report the tag absent once it hasn't been seen for TAG_CLEAR_SECONDS"""
        if TAG_CLEAR_SECONDS <= 0 or self.last_seen is None:
            return False
        if now - self.last_seen < TAG_CLEAR_SECONDS:
            return False

        self.last_seen = None
        logger.info("Tag removed")
        if self.mqtt_handler:
            self.mqtt_handler.publish_tag_state(None)
        return True


def cleanup_resources() -> None:
    """Cleanup function to be called on exit"""
    global _wrapper, _mqtt_handler  # pylint: disable=global-statement

    if _wrapper:
        try:
            if _wrapper.is_connected():
                # Otherwise the Tappy keeps streaming until power cycled
                _wrapper.stop()
                _wrapper.disconnect()
                logger.info("Tappy disconnected")
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.warning("Error disconnecting Tappy: %s", e)
        finally:
            _wrapper = None

    if _mqtt_handler:
        _mqtt_handler.cleanup()
        _mqtt_handler = None


def signal_handler(signum: int, _frame) -> None:
    """Handle termination signals"""
    signal_name = (
        "SIGTERM"
        if signum == signal.SIGTERM
        else "SIGINT" if signum == signal.SIGINT else f"signal {signum}"
    )
    logger.info("Received %s, cleaning up...", signal_name)
    cleanup_resources()
    sys.exit(128 + signum)


def setup_signal_handlers() -> None:
    """Setup signal handlers for proper cleanup"""
    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)
    atexit.register(cleanup_resources)


def main() -> int:
    """Main function - connects the Tappy and streams NDEF tags"""
    global _wrapper, _mqtt_handler  # pylint: disable=global-statement

    logger.info("Tappy reader starting up...")
    setup_signal_handlers()

    try:
        _wrapper = TappyWrapper()
    except DriverConfigurationError as e:
        logger.error("Cannot create Tappy driver: %s", e)
        return 1

    # MQTT is optional - the reader can work without it
    _mqtt_handler = MQTTHandler()
    _mqtt_handler.setup()

    reporter = TagReporter(_mqtt_handler)
    reporter.attach(_wrapper)

    try:
        _wrapper.connect()

        logger.info("Tappy reader started - waiting for tags...")
        logger.info("Press Ctrl+C to stop")

        loop_count = 0
        while True:
            time.sleep(1)
            reporter.clear_if_stale(time.monotonic())
            loop_count += 1
            if loop_count % 60 == 0:
                logger.debug("Still streaming... (%ds elapsed)", loop_count)

    except KeyboardInterrupt:
        logger.info("Shutting down... Processed %d tags.", reporter.tags_processed)
        return 0
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.error("Unexpected error in main loop: %s", e)
        logger.debug("Exception details:", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
