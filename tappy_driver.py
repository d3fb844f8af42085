#!/usr/bin/python3
"""Contract for the Tappy device driver consumed by the wrapper"""

import importlib
import logging
import os
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Optional, Protocol

from tappy_errors import DriverConfigurationError

# Driver configuration
TAPPY_DRIVER = os.getenv("TAPPY_DRIVER")
TAPPY_DEVICE = os.getenv("TAPPY_DEVICE", "/dev/ttyUSB0")

logger = logging.getLogger(__name__)


class DriverErrorType(IntEnum):
    """Error codes a driver passes to its error listener"""

    NOT_CONNECTED = 0x00
    CONNECTION_ERROR = 0x01
    INVALID_HDLC = 0x02
    INVALID_TCMP = 0x03


@dataclass(frozen=True)
class TagType:
    """Metadata the driver knows about a Tappy tag type code"""

    code: int
    description: str
    forum_type: int
    max_capacity: int


class TappyDriver(Protocol):
    """What the wrapper needs from a Tappy driver"""

    def connect(self, callback: Optional[Callable[..., Any]] = None) -> Any: ...

    def disconnect(self, callback: Optional[Callable[..., Any]] = None) -> Any: ...

    def is_connected(self) -> bool: ...

    def send_message(self, message) -> None: ...

    def set_message_listener(self, listener: Callable[[Any], None]) -> None: ...

    def set_error_listener(self, listener: Callable[[int, Any], None]) -> None: ...

    def resolve_tag_type(self, code: int) -> Optional[TagType]: ...


def load_driver(driver_path: Optional[str] = None, **params) -> TappyDriver:
    """Instantiate the driver class named by a "module:Class" path.

    Falls back to the TAPPY_DRIVER setting when no path is given. When no
    device is among the parameters, TAPPY_DEVICE is passed as ``device``.
    """
    driver_path = driver_path or TAPPY_DRIVER
    if not driver_path:
        raise DriverConfigurationError(
            "No Tappy driver configured, pass tappy= or set TAPPY_DRIVER"
        )

    module_name, _, class_name = driver_path.partition(":")
    if not module_name or not class_name:
        raise DriverConfigurationError(
            f"Driver path must look like 'module:Class', got {driver_path!r}"
        )

    try:
        module = importlib.import_module(module_name)
        driver_class = getattr(module, class_name)
    except (ImportError, AttributeError) as e:
        raise DriverConfigurationError(
            f"Cannot load Tappy driver {driver_path}: {e}"
        ) from e

    params.setdefault("device", TAPPY_DEVICE)
    logger.info("Creating Tappy driver %s for %s", driver_path, params["device"])
    return driver_class(**params)
