"""Listing of the serial ports present on the system."""

from __future__ import annotations

from serial.tools import list_ports

from serialterm.settings import SerialPortInfo
from serialterm.textutils import truncate_name

_FIELD_MAX_LEN = 256


def available_port_infos() -> list[SerialPortInfo]:
    """Return a description of every serial port currently available."""
    return [
        SerialPortInfo(
            port_name=truncate_name(port.device or "", _FIELD_MAX_LEN),
            description=truncate_name(port.description or "", _FIELD_MAX_LEN),
            hardware_id=truncate_name(port.hwid or "", _FIELD_MAX_LEN),
        )
        for port in list_ports.comports()
    ]