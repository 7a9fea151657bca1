"""Fixed-size byte ring buffer using a mirror bit to tell full from empty."""

from __future__ import annotations

_MAX_POWER = 1 << 30
_DEFAULT_SIZE = 4096


def next_power_of_2(num: int) -> int:
    """Smallest power of two not below ``num``; 0 or values above 2**30 give 4096."""
    if num == 0 or num > _MAX_POWER:
        return _DEFAULT_SIZE
    return 1 << (num - 1).bit_length()


def _is_power_of_2(num: int) -> bool:
    return num > 0 and num & (num - 1) == 0


class RingBuffer:
    """Byte ring buffer that overwrites the oldest data when full."""

    def __init__(self, max_buffer_size: int = _DEFAULT_SIZE) -> None:
        if _is_power_of_2(max_buffer_size):
            self._size = max_buffer_size
        else:
            self._size = next_power_of_2(max_buffer_size)
        self._mirror_mask = 2 * self._size - 1
        self._index_mask = self._size - 1
        self._buffer = bytearray(self._size)
        self._head = 0
        self._tail = 0

    def write(self, data: bytes) -> int:
        """Append ``data``, dropping the oldest bytes on overflow; return its length."""
        for byte in bytes(data):
            self._buffer[self._tail & self._index_mask] = byte
            if self.is_full():
                self._head = (self._head + 1) & self._mirror_mask
            self._tail = (self._tail + 1) & self._mirror_mask
        return len(data)

    def read(self, size: int) -> bytes:
        """Remove and return up to ``size`` of the stored bytes, oldest first."""
        count = min(size, self._size, self.used_len())
        out = bytearray()
        for _ in range(count):
            out.append(self._buffer[self._head & self._index_mask])
            self._head = (self._head + 1) & self._mirror_mask
        return bytes(out)

    def is_full(self) -> bool:
        return self._tail == (self._head ^ self._size)

    def is_empty(self) -> bool:
        return self._tail == self._head

    def used_len(self) -> int:
        if self._tail >= self._head:
            return self._tail - self._head
        return self._tail + 2 * self._size - self._head

    def unused_len(self) -> int:
        return self._size - self.used_len()

    def buffer_size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self.used_len()