#!/usr/bin/python3
"""Exceptions raised by the Tappy wrapper and its command families"""


class TappyWrapperError(Exception):
    """Base exception for all wrapper errors"""


class UnsupportedFamilyError(TappyWrapperError):
    """Raised when no resolver claims a message's command family"""


class PayloadError(TappyWrapperError):
    """Raised when a message payload cannot be parsed into its concrete type"""


class DriverConfigurationError(TappyWrapperError):
    """Raised when a Tappy driver cannot be loaded from configuration"""
