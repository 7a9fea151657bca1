"""A serial terminal session: open/close a port, send typed data, log traffic."""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Callable, Optional

from serialterm.codec import DataFormat, decode_payload, encode_payload, format_log_entry
from serialterm.port import SerialPort, SerialPortException, SerialPortListener
from serialterm.settings import PortSettings, SerialPortError

Clock = Callable[[], datetime]
EntryCallback = Callable[[str], None]


class SerialTerminal(SerialPortListener):
    """Keeps a traffic log for one serial port.

    Sent data is encoded in ``send_format``; received data is shown in
    ``receive_format``. Every new log entry is also handed to ``on_entry``
    when one is given. Received data may arrive from a background thread.
    """

    def __init__(
        self,
        port: Optional[SerialPort] = None,
        *,
        send_format: DataFormat = DataFormat.TEXT,
        receive_format: DataFormat = DataFormat.TEXT,
        clock: Optional[Clock] = None,
        on_entry: Optional[EntryCallback] = None,
    ) -> None:
        self.port = port if port is not None else SerialPort()
        self.send_format = send_format
        self.receive_format = receive_format
        self._clock: Clock = clock if clock is not None else datetime.now
        self._on_entry = on_entry
        self._entries: list[str] = []
        self._lock = threading.Lock()

    def toggle(self, settings: PortSettings) -> bool:
        """Open the port with ``settings`` if closed, otherwise close it.

        Returns whether the port is open afterwards; a failed open raises
        :class:`SerialPortException`.
        """
        if self.port.is_open():
            self.port.close()
            return False
        self.port.connect_read_event(self)
        self.port.settings = settings
        self.port.open()
        return True

    def send(self, text: str, fmt: Optional[DataFormat] = None) -> int:
        """Encode and send ``text``; return the number of bytes written.

        Empty input sends nothing. Malformed binary or hex input raises
        :class:`~serialterm.codec.PayloadError`.
        """
        if fmt is None:
            fmt = self.send_format
        if not self.port.is_open():
            raise SerialPortException(
                SerialPortError.NOT_OPEN, "the port must be opened first"
            )
        if not text:
            return 0
        payload = encode_payload(text, fmt)
        if not payload:
            return 0
        self.port.write_data(payload)
        self._append(format_log_entry(self._clock(), "send", fmt, text.strip()))
        return len(payload)

    def on_read_event(self, port_name: str, read_buffer_len: int) -> None:
        """Fetch the waiting bytes from the port and log them."""
        if read_buffer_len <= 0:
            return
        try:
            data = self.port.read_data(read_buffer_len)
        except SerialPortException:
            return
        if data:
            self.display_received(data)

    def display_received(self, data: bytes, fmt: Optional[DataFormat] = None) -> str:
        """Log received ``data`` in ``fmt`` (the receive format by default); return the entry."""
        if fmt is None:
            fmt = self.receive_format
        entry = format_log_entry(self._clock(), "receive", fmt, decode_payload(data, fmt))
        self._append(entry)
        return entry

    def clear(self) -> None:
        """Empty the traffic log."""
        with self._lock:
            self._entries.clear()

    def log(self) -> str:
        """The whole traffic log as one string."""
        with self._lock:
            return "".join(self._entries)

    def _append(self, entry: str) -> None:
        with self._lock:
            self._entries.append(entry)
        if self._on_entry is not None:
            self._on_entry(entry)