"""Conversion between user-entered text and the bytes sent over a port."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class DataFormat(Enum):
    """How payloads are entered and displayed."""

    BINARY = 0
    HEX = 1
    UTF8 = 2
    TEXT = 3

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    DataFormat.BINARY: "Binary",
    DataFormat.HEX: "Hex",
    DataFormat.UTF8: "UTF-8",
    DataFormat.TEXT: "Text",
}


class PayloadError(ValueError):
    """The entered text cannot be turned into bytes in the chosen format."""


def split_tokens(text: str, delimiter: str) -> list[str]:
    """Split ``text`` on the first character of ``delimiter``, keeping empty pieces."""
    if not delimiter:
        raise ValueError("delimiter must not be empty")
    return text.split("\0", 1)[0].split(delimiter[0])


def _encode_binary(text: str) -> bytes:
    digits = text.replace(" ", "")
    if not digits:
        raise PayloadError("no binary data entered")
    if len(digits) % 8:
        raise PayloadError("binary input length must be a multiple of 8")
    if any(ch not in "01" for ch in digits):
        raise PayloadError("binary input may only contain 0 and 1")
    return bytes(int(digits[i : i + 8], 2) for i in range(0, len(digits), 8))


def _encode_hex(text: str) -> bytes:
    out = bytearray()
    for raw in split_tokens(text, " "):
        token = raw.strip()
        if not token:
            continue
        if len(token) > 2:
            raise PayloadError("each hex byte may have at most 2 digits")
        if any(ch not in _HEX_DIGITS for ch in token):
            raise PayloadError("input contains an invalid hex character")
        out.append(int(token, 16))
    if not out:
        raise PayloadError("no hex data to send")
    return bytes(out)


def encode_payload(text: str, fmt: DataFormat) -> bytes:
    """Turn entered ``text`` into bytes; surrounding whitespace is ignored.

    Empty text in the text formats yields no bytes; malformed binary or hex
    input raises :class:`PayloadError`.
    """
    text = text.strip()
    if fmt is DataFormat.BINARY:
        return _encode_binary(text)
    if fmt is DataFormat.HEX:
        return _encode_hex(text)
    return text.encode("utf-8", errors="replace")


def decode_payload(data: bytes, fmt: DataFormat) -> str:
    """Render received bytes for display in the chosen format."""
    data = bytes(data)
    if fmt is DataFormat.HEX:
        return " ".join(f"{byte:02X}" for byte in data)
    if fmt is DataFormat.BINARY:
        return " ".join(f"{byte:08b}" for byte in data)
    return data.decode("utf-8", errors="replace")


def format_log_entry(
    timestamp: datetime, direction: str, fmt: DataFormat, text: str
) -> str:
    """One line of the traffic log, ending in CR LF."""
    return f"{timestamp.strftime(_TIMESTAMP_FORMAT)}({direction})({fmt.label}): {text}\r\n"