"""Serial port with a background reader, a receive buffer and read notifications."""

from __future__ import annotations

import abc
import errno
import threading
from typing import Optional

import serial

from serialterm.ringbuffer import RingBuffer
from serialterm.settings import (
    VERSION,
    BaudRate,
    DataBits,
    FlowControl,
    OperateMode,
    Parity,
    PortSettings,
    SerialPortError,
    StopBits,
    DEFAULT_READ_BUFFER_SIZE,
)
from serialterm.timer import OneShotTimer

DEFAULT_READ_INTERVAL_TIMEOUT_MS = 50
DEFAULT_MIN_BYTE_READ_NOTIFY = 2

_POLL_INTERVAL_S = 0.05

_PARITY = {
    Parity.NONE: serial.PARITY_NONE,
    Parity.ODD: serial.PARITY_ODD,
    Parity.EVEN: serial.PARITY_EVEN,
    Parity.MARK: serial.PARITY_MARK,
    Parity.SPACE: serial.PARITY_SPACE,
}

_STOP_BITS = {
    StopBits.ONE: serial.STOPBITS_ONE,
    StopBits.ONE_AND_HALF: serial.STOPBITS_ONE_POINT_FIVE,
    StopBits.TWO: serial.STOPBITS_TWO,
}

_NOT_FOUND_ERRNOS = {errno.ENOENT, errno.ENODEV, errno.ENXIO}
_PERMISSION_ERRNOS = {errno.EACCES, errno.EPERM}


class SerialPortListener(abc.ABC):
    """Receives notice that data is waiting in a port's read buffer."""

    @abc.abstractmethod
    def on_read_event(self, port_name: str, read_buffer_len: int) -> None:
        """Called with the port name and the number of bytes ready to be read."""


class SerialPortException(Exception):
    """A port operation failed; ``error`` tells how."""

    def __init__(self, error: SerialPortError, message: str = "") -> None:
        super().__init__(message or error.name.lower().replace("_", " "))
        self.error = error


def _configure(ser: serial.SerialBase, settings: PortSettings) -> None:
    flow = FlowControl(settings.flow_control)
    ser.baudrate = int(settings.baud_rate)
    ser.bytesize = int(DataBits(settings.data_bits))
    ser.parity = _PARITY[Parity(settings.parity)]
    ser.stopbits = _STOP_BITS[StopBits(settings.stop_bits)]
    ser.rtscts = flow is FlowControl.HARDWARE
    ser.xonxoff = flow is FlowControl.SOFTWARE


def _open_error(exc: Exception) -> SerialPortError:
    code = getattr(exc, "errno", None)
    if code in _NOT_FOUND_ERRNOS:
        return SerialPortError.DEVICE_NOT_FOUND
    if code in _PERMISSION_ERRNOS:
        return SerialPortError.PERMISSION
    return SerialPortError.OPEN


class SerialPort:
    """A serial port that buffers incoming data and notifies a listener.

    In asynchronous mode a background thread moves received bytes into a
    ring buffer and notifies the connected listener, either as soon as at
    least ``min_byte_read_notify`` bytes wait (read interval 0) or once the
    read interval has passed after data arrived. In synchronous mode reads go
    straight to the device. Changes of port name take effect at the next open.
    """

    def __init__(
        self,
        port_name: str = "",
        *,
        operate_mode: OperateMode = OperateMode.ASYNCHRONOUS,
    ) -> None:
        self._settings = PortSettings(port_name=port_name)
        self.operate_mode = operate_mode
        self._read_interval_timeout_ms = DEFAULT_READ_INTERVAL_TIMEOUT_MS
        self._min_byte_read_notify = DEFAULT_MIN_BYTE_READ_NOTIFY
        self._last_error = SerialPortError.NO_ERROR
        self._listener: Optional[SerialPortListener] = None
        self._timer = OneShotTimer()
        self._lock = threading.Lock()
        self._buffer = RingBuffer(self._settings.read_buffer_size)
        self._serial: Optional[serial.SerialBase] = None
        self._reader: Optional[threading.Thread] = None
        self._stop_reading = threading.Event()
        self._dtr: Optional[bool] = None
        self._rts: Optional[bool] = None

    # configuration

    @property
    def settings(self) -> PortSettings:
        """The parameters the port is, or will be, opened with."""
        return self._settings

    @settings.setter
    def settings(self, value: PortSettings) -> None:
        if value.read_buffer_size != self._settings.read_buffer_size:
            with self._lock:
                self._buffer = RingBuffer(value.read_buffer_size)
        self._settings = value
        if self.is_open():
            try:
                _configure(self._serial, value)
            except (ValueError, KeyError) as exc:
                raise self._error(SerialPortError.INVALID_PARAMETER, str(exc)) from exc
            except serial.SerialException as exc:
                raise self._error(SerialPortError.UNSUPPORTED_OPERATION, str(exc)) from exc

    @property
    def port_name(self) -> str:
        return self._settings.port_name

    @property
    def read_interval_timeout(self) -> int:
        """Milliseconds to wait after data arrives before notifying; 0 notifies at once."""
        return self._read_interval_timeout_ms

    @property
    def min_byte_read_notify(self) -> int:
        """Bytes that must wait before an immediate notification is sent."""
        return self._min_byte_read_notify

    def init(
        self,
        port_name: str,
        baud_rate: int = BaudRate.B9600,
        parity: Parity = Parity.NONE,
        data_bits: DataBits = DataBits.EIGHT,
        stop_bits: StopBits = StopBits.ONE,
        flow_control: FlowControl = FlowControl.NONE,
        read_buffer_size: int = DEFAULT_READ_BUFFER_SIZE,
    ) -> None:
        """Set every port parameter at once."""
        self.settings = PortSettings(
            port_name=port_name,
            baud_rate=baud_rate,
            parity=parity,
            data_bits=data_bits,
            stop_bits=stop_bits,
            flow_control=flow_control,
            read_buffer_size=read_buffer_size,
        )

    def set_read_interval_timeout(self, msecs: int) -> None:
        if msecs < 0:
            raise self._error(SerialPortError.INVALID_PARAMETER, "timeout must not be negative")
        self._read_interval_timeout_ms = msecs

    def set_min_byte_read_notify(self, min_bytes: int = DEFAULT_MIN_BYTE_READ_NOTIFY) -> None:
        if min_bytes < 0:
            raise self._error(SerialPortError.INVALID_PARAMETER, "byte count must not be negative")
        self._min_byte_read_notify = min_bytes

    # opening and closing

    def open(self) -> None:
        """Open the port with the current settings; raise on failure."""
        if self.is_open():
            return
        settings = self._settings
        if not settings.port_name:
            raise self._error(SerialPortError.INVALID_PARAMETER, "no port name given")
        try:
            ser = serial.serial_for_url(settings.port_name, do_not_open=True)
            _configure(ser, settings)
            ser.timeout = _POLL_INTERVAL_S
            if self._dtr is not None:
                ser.dtr = self._dtr
            if self._rts is not None:
                ser.rts = self._rts
            ser.open()
        except (ValueError, KeyError) as exc:
            raise self._error(SerialPortError.INVALID_PARAMETER, str(exc)) from exc
        except (serial.SerialException, OSError) as exc:
            raise self._error(_open_error(exc), str(exc)) from exc

        self._serial = ser
        self._last_error = SerialPortError.NO_ERROR
        if self.operate_mode is OperateMode.ASYNCHRONOUS:
            self._stop_reading = threading.Event()
            self._reader = threading.Thread(
                target=self._read_loop,
                args=(ser, self._stop_reading),
                name="serial-reader",
                daemon=True,
            )
            self._reader.start()

    def close(self) -> None:
        """Stop the reader and close the port; closing a closed port does nothing."""
        ser = self._serial
        if ser is None:
            return
        self._stop_reading.set()
        reader = self._reader
        if reader is not None and reader is not threading.current_thread():
            reader.join()
        self._timer.stop()
        ser.close()
        self._serial = None
        self._reader = None

    def is_open(self) -> bool:
        return self._serial is not None and bool(self._serial.is_open)

    def __enter__(self) -> "SerialPort":
        self.open()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # notifications

    def connect_read_event(self, listener: SerialPortListener) -> None:
        if listener is None:
            raise self._error(SerialPortError.INVALID_PARAMETER, "listener must not be None")
        self._listener = listener

    def disconnect_read_event(self) -> None:
        self._listener = None

    # data transfer

    def read_buffer_used_len(self) -> int:
        """Number of received bytes waiting to be read."""
        if self.is_open() and self._reader is None:
            return self._serial.in_waiting
        with self._lock:
            return self._buffer.used_len()

    def read_data(self, size: int) -> bytes:
        """Read up to ``size`` waiting bytes, oldest first."""
        if size < 0:
            raise self._error(SerialPortError.INVALID_PARAMETER, "size must not be negative")
        ser = self._require_open()
        if self._reader is None:
            try:
                return bytes(ser.read(size))
            except (serial.SerialException, OSError) as exc:
                raise self._error(SerialPortError.READ, str(exc)) from exc
        with self._lock:
            return self._buffer.read(size)

    def read_all_data(self) -> bytes:
        """Read everything currently waiting."""
        self._require_open()
        return self.read_data(self.read_buffer_used_len())

    def write_data(self, data: bytes) -> int:
        """Send ``data``; return the number of bytes written."""
        ser = self._require_open()
        payload = bytes(data)
        try:
            written = ser.write(payload)
        except (serial.SerialException, OSError) as exc:
            raise self._error(SerialPortError.WRITE, str(exc)) from exc
        return len(payload) if written is None else written

    def flush_buffers(self) -> None:
        """Wait until all written data has been sent."""
        ser = self._require_open()
        self._call(ser.flush)

    def flush_read_buffers(self) -> None:
        """Discard all received data, both on the device and in the buffer."""
        ser = self._require_open()
        self._call(ser.reset_input_buffer)
        with self._lock:
            self._buffer.read(self._buffer.used_len())

    def flush_write_buffers(self) -> None:
        """Discard data written but not yet sent."""
        ser = self._require_open()
        self._call(ser.reset_output_buffer)

    def set_dtr(self, value: bool = True) -> None:
        self._dtr = bool(value)
        if self.is_open():
            self._call(lambda: setattr(self._serial, "dtr", self._dtr))

    def set_rts(self, value: bool = True) -> None:
        self._rts = bool(value)
        if self.is_open():
            self._call(lambda: setattr(self._serial, "rts", self._rts))

    # errors

    def last_error(self) -> SerialPortError:
        return self._last_error

    def clear_error(self) -> None:
        self._last_error = SerialPortError.NO_ERROR

    def version(self) -> str:
        return VERSION

    # internals

    def _error(self, error: SerialPortError, message: str) -> SerialPortException:
        self._last_error = error
        return SerialPortException(error, message)

    def _require_open(self) -> serial.SerialBase:
        if not self.is_open():
            raise self._error(SerialPortError.NOT_OPEN, "port is not open")
        return self._serial

    def _call(self, action) -> None:
        try:
            action()
        except (serial.SerialException, OSError, ValueError) as exc:
            raise self._error(SerialPortError.UNSUPPORTED_OPERATION, str(exc)) from exc

    def _read_loop(self, ser: serial.SerialBase, stop: threading.Event) -> None:
        while not stop.is_set():
            try:
                chunk = ser.read(max(1, ser.in_waiting))
            except (serial.SerialException, OSError, TypeError, AttributeError):
                if not stop.is_set():
                    self._last_error = SerialPortError.READ
                return
            if chunk:
                self._handle_incoming(bytes(chunk))

    def _handle_incoming(self, chunk: bytes) -> None:
        with self._lock:
            self._buffer.write(chunk)
            used = self._buffer.used_len()
        listener = self._listener
        if listener is None:
            return
        if self._read_interval_timeout_ms > 0:
            self._timer.start_once(
                self._read_interval_timeout_ms, self._notify_after_interval, self.port_name, used
            )
        elif used >= self._min_byte_read_notify:
            listener.on_read_event(self.port_name, used)

    def _notify_after_interval(self, port_name: str, _read_buffer_len: int) -> None:
        listener = self._listener
        with self._lock:
            used = self._buffer.used_len()
        if listener is not None and used:
            listener.on_read_event(port_name, used)