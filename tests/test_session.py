import time
from datetime import datetime

import pytest

from serialterm.codec import DataFormat, PayloadError, format_log_entry
from serialterm.port import SerialPort, SerialPortException
from serialterm.session import SerialTerminal
from serialterm.settings import PortSettings, SerialPortError

FIXED = datetime(2024, 1, 2, 3, 4, 5)


def _clock():
    return FIXED


def _wait_for(predicate, timeout=3.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.02)
    return predicate()


@pytest.fixture
def terminal():
    term = SerialTerminal(clock=_clock)
    yield term
    if term.port.is_open():
        term.port.close()


def test_send_requires_open_port(terminal):
    with pytest.raises(SerialPortException) as info:
        terminal.send("hello")
    assert info.value.error is SerialPortError.NOT_OPEN


def test_toggle_opens_and_closes(terminal):
    settings = PortSettings(port_name="loop://")
    assert terminal.toggle(settings) is True
    assert terminal.port.is_open()
    assert terminal.toggle(settings) is False
    assert not terminal.port.is_open()


def test_toggle_bad_port_raises(terminal):
    with pytest.raises(SerialPortException):
        terminal.toggle(PortSettings(port_name="/nonexistent/serial-device"))
    assert not terminal.port.is_open()


def test_send_hex_logs_entry(terminal):
    terminal.toggle(PortSettings(port_name="loop://"))
    terminal.receive_format = DataFormat.HEX
    sent = terminal.send("  01 ab  ", DataFormat.HEX)
    assert sent == 2
    expected = format_log_entry(FIXED, "send", DataFormat.HEX, "01 ab")
    assert terminal.log().startswith(expected)


def test_send_uses_default_format(terminal):
    terminal.toggle(PortSettings(port_name="loop://"))
    terminal.send_format = DataFormat.BINARY
    assert terminal.send("00000001 11111111") == 2
    assert "(send)(Binary): 00000001 11111111" in terminal.log()


def test_send_invalid_binary_raises_and_logs_nothing(terminal):
    terminal.toggle(PortSettings(port_name="loop://"))
    with pytest.raises(PayloadError):
        terminal.send("0101", DataFormat.BINARY)
    assert terminal.log() == ""


def test_send_empty_text_sends_nothing(terminal):
    terminal.toggle(PortSettings(port_name="loop://"))
    assert terminal.send("", DataFormat.TEXT) == 0
    assert terminal.send("   ", DataFormat.TEXT) == 0
    assert terminal.log() == ""


def test_loopback_round_trip(terminal):
    terminal.toggle(PortSettings(port_name="loop://"))
    terminal.send("hello", DataFormat.TEXT)
    assert _wait_for(lambda: "(receive)" in terminal.log())
    assert "(receive)(Text): hello\r\n" in terminal.log()


def test_display_received_hex_and_binary(terminal):
    entry = terminal.display_received(b"\x01\xab", DataFormat.HEX)
    assert entry == format_log_entry(FIXED, "receive", DataFormat.HEX, "01 AB")
    entry = terminal.display_received(b"\x05", DataFormat.BINARY)
    assert entry.endswith("(receive)(Binary): 00000101\r\n")
    assert terminal.log().count("(receive)") == 2


def test_display_received_uses_receive_format(terminal):
    terminal.receive_format = DataFormat.UTF8
    entry = terminal.display_received("中文".encode("utf-8"))
    assert entry.endswith("(receive)(UTF-8): 中文\r\n")


def test_on_read_event_reads_waiting_bytes():
    port = SerialPort("loop://")
    term = SerialTerminal(port, clock=_clock)
    port.open()
    try:
        port.write_data(b"abc")
        assert _wait_for(lambda: port.read_buffer_used_len() == 3)
        term.on_read_event("loop://", 3)
        assert term.log() == format_log_entry(FIXED, "receive", DataFormat.TEXT, "abc")
        assert port.read_buffer_used_len() == 0
    finally:
        port.close()


def test_on_read_event_ignores_closed_port(terminal):
    terminal.on_read_event("loop://", 4)
    assert terminal.log() == ""


def test_clear_empties_log(terminal):
    terminal.display_received(b"x")
    assert terminal.log() != ""
    terminal.clear()
    assert terminal.log() == ""


def test_on_entry_receives_each_entry():
    seen = []
    term = SerialTerminal(clock=_clock, on_entry=seen.append)
    term.display_received(b"one")
    term.display_received(b"two")
    assert "".join(seen) == term.log()
    assert len(seen) == 2