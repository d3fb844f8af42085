#!/usr/bin/python3
"""MQTT bridge publishing Tappy tag events to Home Assistant"""

import json
import logging
import os
import time
from typing import Any, Dict, Optional

import ndef
import paho.mqtt.client as mqtt
from paho.mqtt.enums import CallbackAPIVersion
from paho.mqtt.properties import Properties
from paho.mqtt.reasoncodes import ReasonCode

from tappy_events import NdefEvent, TagEvent

# MQTT Configuration
MQTT_BROKER = os.getenv("MQTT_BROKER", "localhost")
MQTT_PORT = int(os.getenv("MQTT_PORT", "1883"))
MQTT_USERNAME = os.getenv("MQTT_USERNAME")
MQTT_PASSWORD = os.getenv("MQTT_PASSWORD")
MQTT_CLIENT_ID = os.getenv("MQTT_CLIENT_ID", "tappy_tag_reader")
MQTT_TOPIC_PREFIX = os.getenv("MQTT_TOPIC_PREFIX", "homeassistant/sensor/tappy_reader")
MQTT_DISCOVERY_TOPIC = f"{MQTT_TOPIC_PREFIX}/config"
MQTT_STATE_TOPIC = f"{MQTT_TOPIC_PREFIX}/state"

HA_TAG_PREFIX = "https://www.home-assistant.io/tag/"

logger = logging.getLogger(__name__)


def tag_id_for_event(event: TagEvent) -> str:
    """Get the Home Assistant tag id for a tag event.

    A URI record under the Home Assistant tag prefix names the tag; any
    other tag is identified by its hex UID.
    """
    if isinstance(event, NdefEvent):
        for record in event.ndef:
            if not isinstance(record, ndef.UriRecord):
                continue
            if record.iri.startswith(HA_TAG_PREFIX):
                return record.iri[len(HA_TAG_PREFIX) :]
    return f"uid_{event.tag_code_str}"


def tag_attributes(event: TagEvent) -> Dict[str, Any]:
    attributes: Dict[str, Any] = {
        "uid": event.tag_code_str,
        "tag_type_code": event.tag_type_code,
    }
    if event.tag_type is not None:
        attributes["tag_type"] = event.tag_type.description
    return attributes


class MQTTHandler:
    """Handle MQTT communication for Home Assistant integration"""

    def __init__(self):
        self.client: Optional[mqtt.Client] = None
        self.current_tag_id: Optional[str] = None
        self.connected = False

    def setup(self) -> bool:
        """Setup MQTT client and publish Home Assistant discovery configuration"""
        if not MQTT_BROKER:
            logger.warning("MQTT_BROKER not configured, skipping MQTT setup")
            return False

        try:
            self.client = mqtt.Client(
                callback_api_version=CallbackAPIVersion.VERSION2,
                client_id=MQTT_CLIENT_ID,
            )

            if MQTT_USERNAME and MQTT_PASSWORD:
                self.client.username_pw_set(MQTT_USERNAME, MQTT_PASSWORD)

            self.client.on_connect = self._on_connect
            self.client.on_disconnect = self._on_disconnect
            self.client.on_publish = self._on_publish

            logger.info("Connecting to MQTT broker: %s:%d", MQTT_BROKER, MQTT_PORT)
            self.client.connect(MQTT_BROKER, MQTT_PORT, 60)

            # Network loop runs in paho's own thread
            self.client.loop_start()

            return True

        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Failed to setup MQTT: %s", e)
            return False

    def _on_connect(
        self,
        client: mqtt.Client,
        userdata: Any,
        flags: mqtt.ConnectFlags,
        rc: ReasonCode,
        properties: Optional[Properties],
    ) -> None:
        """Callback for when MQTT client connects"""
        if rc.value == 0:
            self.connected = True
            logger.info("Connected to MQTT broker")
            self._publish_ha_discovery()
            self.publish_tag_state(None)
        else:
            self.connected = False
            logger.error("Failed to connect to MQTT broker, return code %d", rc.value)

    def _on_disconnect(
        self,
        client: mqtt.Client,
        userdata: Any,
        flags: mqtt.DisconnectFlags,
        rc: ReasonCode,
        properties: Optional[Properties],
    ) -> None:
        """Callback for when MQTT client disconnects"""
        self.connected = False
        if rc.value != 0:
            logger.warning("Unexpected MQTT disconnection")
        else:
            logger.info("MQTT client disconnected")

    def _on_publish(
        self,
        client: mqtt.Client,
        userdata: Any,
        mid: int,
        reason_code: ReasonCode,
        properties: Properties,
    ) -> None:
        logger.debug("MQTT message published, mid: %d", mid)

    def _publish_ha_discovery(self):
        """Publish Home Assistant MQTT discovery configuration"""
        if not self.client or not self.connected:
            logger.debug("Skipping HA discovery publish - MQTT not connected")
            return

        discovery_config = {
            "name": "Tappy Reader Current Tag",
            "unique_id": "tappy_reader_current_tag",
            "state_topic": MQTT_STATE_TOPIC,
            "value_template": "{{ value_json.tag_id }}",
            "json_attributes_topic": MQTT_STATE_TOPIC,
            "device": {
                "identifiers": ["tappy_tag_reader"],
                "name": "Tappy Tag Reader",
                "model": "TapTrack Tappy",
                "manufacturer": "TapTrack",
            },
            "icon": "mdi:nfc-variant",
        }

        try:
            payload = json.dumps(discovery_config)
            result = self.client.publish(MQTT_DISCOVERY_TOPIC, payload, retain=True)
            if result.rc == mqtt.MQTT_ERR_SUCCESS:
                logger.info("Published Home Assistant discovery configuration")
            else:
                logger.error(
                    "Failed to publish discovery configuration, rc: %d", result.rc
                )
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error publishing discovery configuration: %s", e)

    def publish_tag_event(self, event: TagEvent) -> None:
        """Publish the tag from a tag_found or ndef_found event"""
        self.publish_tag_state(tag_id_for_event(event), tag_attributes(event))

    def publish_tag_state(
        self, tag_id: Optional[str], attributes: Optional[Dict[str, Any]] = None
    ):
        """Publish current tag state to MQTT"""
        if not self.client or not self.connected:
            logger.debug(
                "Skipping tag state publish - MQTT not connected (tag_id: %s)", tag_id
            )
            return

        self.current_tag_id = tag_id

        state_data: Dict[str, Any] = {
            "tag_id": tag_id,
            "present": tag_id is not None,
            "timestamp": time.time(),
        }
        if attributes:
            state_data.update(attributes)

        try:
            payload = json.dumps(state_data)
            result = self.client.publish(MQTT_STATE_TOPIC, payload, retain=True)
            if result.rc == mqtt.MQTT_ERR_SUCCESS:
                logger.info(
                    "Published tag state: %s", "present" if tag_id else "absent"
                )
                if tag_id:
                    logger.info("Current tag ID: %s", tag_id)
            else:
                logger.error("Failed to publish tag state, rc: %d", result.rc)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error publishing tag state: %s", e)

    def cleanup(self):
        """Cleanup MQTT client"""
        if self.client:
            try:
                self.client.loop_stop()
                self.client.disconnect()
                logger.info("MQTT client disconnected and cleaned up")
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.warning("Error cleaning up MQTT: %s", e)
            finally:
                self.client = None
                self.connected = False
