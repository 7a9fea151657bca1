"""Small text helpers for port names and hex dumps."""

from __future__ import annotations


def truncate_name(name: str, count: int) -> str:
    """Return ``name`` cut at the first NUL and to at most ``count - 1`` characters."""
    if count < 1:
        raise ValueError("count must be at least 1")
    return name.split("\0", 1)[0][: count - 1]


def to_hex_str(data: bytes) -> str:
    """Render bytes as upper-case hex digits, two per byte, without separators."""
    return bytes(data).hex().upper()