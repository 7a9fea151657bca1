"""Serial port parameters, enumerations and label parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, IntEnum

VERSION = "4.3.0.230215"
DEFAULT_READ_BUFFER_SIZE = 4096


class OperateMode(Enum):
    """How reads and writes are carried out."""

    ASYNCHRONOUS = 0
    SYNCHRONOUS = 1


class BaudRate(IntEnum):
    """Common baud rates; any positive integer is accepted where a rate is expected."""

    B110 = 110
    B300 = 300
    B600 = 600
    B1200 = 1200
    B2400 = 2400
    B4800 = 4800
    B9600 = 9600
    B14400 = 14400
    B19200 = 19200
    B38400 = 38400
    B56000 = 56000
    B57600 = 57600
    B115200 = 115200
    B921600 = 921600


class DataBits(IntEnum):
    """Number of data bits per character."""

    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8


class Parity(IntEnum):
    """Parity checking mode."""

    NONE = 0
    ODD = 1
    EVEN = 2
    MARK = 3
    SPACE = 4


class StopBits(IntEnum):
    """Number of stop bits; one and a half is only meaningful on some platforms."""

    ONE = 0
    ONE_AND_HALF = 1
    TWO = 2


class FlowControl(IntEnum):
    """Flow control method."""

    NONE = 0
    HARDWARE = 1
    SOFTWARE = 2


class SerialPortError(IntEnum):
    """Error codes a port can report."""

    SYSTEM = -1
    NO_ERROR = 0
    DEVICE_NOT_FOUND = 1
    PERMISSION = 2
    OPEN = 3
    PARITY = 4
    FRAMING = 5
    BREAK_CONDITION = 6
    WRITE = 7
    READ = 8
    RESOURCE = 9
    UNSUPPORTED_OPERATION = 10
    UNKNOWN = 11
    TIMEOUT = 12
    NOT_OPEN = 13
    INVALID_PARAMETER = 14


@dataclass(frozen=True)
class SerialPortInfo:
    """Description of a serial port found on the system."""

    port_name: str
    description: str = ""
    hardware_id: str = ""


@dataclass(frozen=True)
class PortSettings:
    """Everything needed to open a serial port."""

    port_name: str
    baud_rate: int = BaudRate.B9600
    parity: Parity = Parity.NONE
    data_bits: DataBits = DataBits.EIGHT
    stop_bits: StopBits = StopBits.ONE
    flow_control: FlowControl = FlowControl.NONE
    read_buffer_size: int = DEFAULT_READ_BUFFER_SIZE


_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

_PARITY_LABELS = {
    "NONE": Parity.NONE,
    "ODD": Parity.ODD,
    "EVEN": Parity.EVEN,
}

_DATA_BITS_LABELS = {
    "5 bit": DataBits.FIVE,
    "6 bit": DataBits.SIX,
    "7 bit": DataBits.SEVEN,
    "8 bit": DataBits.EIGHT,
}

_STOP_BITS_LABELS = {
    "1 bit": StopBits.ONE,
    "1.5 bit": StopBits.ONE_AND_HALF,
    "2 bit": StopBits.TWO,
}


def parse_baud_rate(text: str) -> int:
    """Read the leading integer of ``text``; text without one gives 0."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def parse_parity(label: str) -> Parity:
    """Map a parity label such as ``"ODD"``; unknown labels mean no parity."""
    return _PARITY_LABELS.get(label, Parity.NONE)


def parse_data_bits(label: str) -> DataBits:
    """Map a label such as ``"7 bit"``; unknown labels mean eight bits."""
    return _DATA_BITS_LABELS.get(label, DataBits.EIGHT)


def parse_stop_bits(label: str) -> StopBits:
    """Map a label such as ``"1.5 bit"``; unknown labels mean one stop bit."""
    return _STOP_BITS_LABELS.get(label, StopBits.ONE)


def settings_from_labels(
    port: str, baud_rate: str, parity: str, data_bits: str, stop_bits: str
) -> PortSettings:
    """Build port settings from the textual choices a user made."""
    return PortSettings(
        port_name=port,
        baud_rate=parse_baud_rate(baud_rate),
        parity=parse_parity(parity),
        data_bits=parse_data_bits(data_bits),
        stop_bits=parse_stop_bits(stop_bits),
        flow_control=FlowControl.NONE,
        read_buffer_size=DEFAULT_READ_BUFFER_SIZE,
    )