import threading
import time

from serialterm.timer import PORT_NAME_MAX_LEN, OneShotTimer


def _wait_until(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


def test_fires_once_with_arguments():
    calls = []
    fired = threading.Event()

    def callback(name, length):
        calls.append((name, length))
        fired.set()

    timer = OneShotTimer()
    timer.start_once(10, callback, "COM3", 12)
    assert fired.wait(2.0)
    _wait_until(lambda: not timer.is_running())
    assert timer.is_running() is False
    assert calls == [("COM3", 12)]


def test_is_running_while_waiting():
    timer = OneShotTimer()
    timer.start_once(5000, lambda n, l: None, "COM1", 1)
    try:
        assert timer.is_running() is True
    finally:
        timer.stop()
    assert timer.is_running() is False


def test_stop_prevents_callback():
    calls = []
    timer = OneShotTimer()
    timer.start_once(300, lambda n, l: calls.append((n, l)), "COM1", 4)
    timer.stop()
    time.sleep(0.4)
    assert calls == []
    assert timer.is_running() is False


def test_restart_while_running_updates_parameters_and_fires_once():
    calls = []
    fired = threading.Event()

    def callback(name, length):
        calls.append((name, length))
        fired.set()

    timer = OneShotTimer()
    timer.start_once(100, callback, "COM1", 1)
    timer.start_once(100, callback, "COM2", 2)
    assert timer.is_running() is True
    assert fired.wait(2.0)
    _wait_until(lambda: not timer.is_running())
    time.sleep(0.15)
    assert timer.is_running() is False
    assert calls == [("COM2", 2)]


def test_can_be_started_again_after_firing():
    calls = []
    timer = OneShotTimer()
    timer.start_once(5, lambda n, l: calls.append(l), "COM1", 1)
    _wait_until(lambda: calls == [1] and not timer.is_running())
    assert timer.is_running() is False
    timer.start_once(5, lambda n, l: calls.append(l), "COM1", 2)
    _wait_until(lambda: calls == [1, 2] and not timer.is_running())
    assert timer.is_running() is False
    assert calls == [1, 2]


def test_long_port_name_is_truncated():
    names = []
    fired = threading.Event()

    def callback(name, length):
        names.append(name)
        fired.set()

    timer = OneShotTimer()
    timer.start_once(5, callback, "x" * 400, 0)
    assert fired.wait(2.0)
    _wait_until(lambda: not timer.is_running())
    assert timer.is_running() is False
    assert names == ["x" * (PORT_NAME_MAX_LEN - 1)]


def test_stop_when_idle_leaves_timer_idle():
    timer = OneShotTimer()
    timer.stop()
    assert timer.is_running() is False