#!/usr/bin/python3
"""System command family: device housekeeping and transport error reports"""

from tcmp import ErrorResponse, FamilyResolver, TcmpMessage

COMMAND_FAMILY = b"\x00\x00"


class SystemMessage(TcmpMessage):
    COMMAND_FAMILY = COMMAND_FAMILY


# Commands


class PingCommand(SystemMessage):
    COMMAND_CODE = 0xFD


# Responses


class ImproperMessageFormat(SystemMessage):
    """The Tappy could not make sense of the last frame's structure"""

    COMMAND_CODE = 0x01


class CrcMismatch(SystemMessage):
    COMMAND_CODE = 0x02


class LcsMismatch(SystemMessage):
    COMMAND_CODE = 0x03


class LengthMismatch(SystemMessage):
    COMMAND_CODE = 0x04


class SystemError(ErrorResponse):  # pylint: disable=redefined-builtin
    COMMAND_FAMILY = COMMAND_FAMILY
    COMMAND_CODE = 0x7F


class PingResponse(SystemMessage):
    COMMAND_CODE = 0xFD


class Resolver(FamilyResolver):
    """Resolver for the system command family"""

    COMMAND_FAMILY = COMMAND_FAMILY
    COMMANDS = {
        PingCommand.COMMAND_CODE: PingCommand,
    }
    RESPONSES = {
        cls.COMMAND_CODE: cls
        for cls in (
            ImproperMessageFormat,
            CrcMismatch,
            LcsMismatch,
            LengthMismatch,
            SystemError,
            PingResponse,
        )
    }
