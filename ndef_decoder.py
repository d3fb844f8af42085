#!/usr/bin/python3
"""NDEF helpers: URI prefix compression and message parsing"""

import logging
from typing import Dict, List, NamedTuple

import ndef

logger = logging.getLogger(__name__)

URI_PRE_NONE = 0x00
URI_PRE_HTTP_WWW = 0x01
URI_PRE_HTTPS_WWW = 0x02
URI_PRE_HTTP = 0x03
URI_PRE_HTTPS = 0x04
URI_PRE_TEL = 0x05
URI_PRE_MAILTO = 0x06

URI_PREFIXES: Dict[int, str] = {
    URI_PRE_NONE: "",
    URI_PRE_HTTP_WWW: "http://www.",
    URI_PRE_HTTPS_WWW: "https://www.",
    URI_PRE_HTTP: "http://",
    URI_PRE_HTTPS: "https://",
    URI_PRE_TEL: "tel:",
    URI_PRE_MAILTO: "mailto:",
    0x07: "ftp://anonymous:anonymous@",
    0x08: "ftp://ftp.",
    0x09: "ftps://",
    0x0A: "sftp://",
    0x0B: "smb://",
    0x0C: "nfs://",
    0x0D: "ftp://",
    0x0E: "dav://",
    0x0F: "news:",
    0x10: "telnet://",
    0x11: "imap:",
    0x12: "rtsp://",
    0x13: "urn:",
    0x14: "pop:",
    0x15: "sip:",
    0x16: "sips:",
    0x17: "tftp:",
    0x18: "btspp://",
    0x19: "btl2cap://",
    0x1A: "btgoep://",
    0x1B: "tcpobex://",
    0x1C: "irdaobex://",
    0x1D: "file://",
    0x1E: "urn:epc:id:",
    0x1F: "urn:epc:tag:",
    0x20: "urn:epc:pat:",
    0x21: "urn:epc:raw:",
    0x22: "urn:epc:",
    0x23: "urn:nfc:",
}


class UriPrefix(NamedTuple):
    """A URI split into its NDEF prefix code and the remaining content"""

    prefix_code: int
    content: str


def resolve_uri_to_prefix(uri: str) -> UriPrefix:
    """Split a URI into the longest matching prefix code and the rest"""
    best_code = URI_PRE_NONE
    best_prefix = ""
    for code, prefix in URI_PREFIXES.items():
        if prefix and uri.startswith(prefix) and len(prefix) > len(best_prefix):
            best_code = code
            best_prefix = prefix

    return UriPrefix(best_code, uri[len(best_prefix) :])


def decode_uri_payload(payload: bytes) -> str:
    """Decode URI record payload"""
    if not payload:
        return ""

    # First byte is URI identifier code
    uri_code = payload[0]
    prefix = URI_PREFIXES.get(uri_code, f"[Unknown prefix {uri_code:02X}]")
    uri_suffix = payload[1:].decode("utf-8", errors="ignore")

    return prefix + uri_suffix


def parse_ndef_message(data) -> List[ndef.Record]:
    """Parse raw bytes into a list of NDEF records.

    Raises ndef.DecodeError if the data is not a well-formed NDEF message.
    """
    try:
        records = list(ndef.message_decoder(bytes(data), errors="strict"))
    except ndef.DecodeError:
        raise
    except ValueError as e:
        # ndeflib lets some text decoding errors through unwrapped
        raise ndef.DecodeError(f"invalid NDEF message: {e}") from e
    logger.debug("Parsed %d NDEF record(s) from %d bytes", len(records), len(data))
    return records


def encode_ndef_message(records: List[ndef.Record]) -> bytes:
    """Encode NDEF records into the raw bytes of one message"""
    return b"".join(ndef.message_encoder(records))


def describe_records(records: List[ndef.Record]) -> List[str]:
    """Get human-readable descriptions of NDEF records for logging"""
    lines: List[str] = []
    for i, record in enumerate(records):
        if isinstance(record, ndef.UriRecord):
            lines.append(f"Record {i + 1}: URI {record.iri}")
        elif isinstance(record, ndef.TextRecord):
            lines.append(f"Record {i + 1}: Text [{record.language}] {record.text}")
        else:
            lines.append(
                f"Record {i + 1}: {record.type} ({len(record.data)} bytes)"
            )
    return lines
