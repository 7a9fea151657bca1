"""One-shot timer that reports buffered read data after a quiet period."""

from __future__ import annotations

import threading
from typing import Callable, Optional

from serialterm.textutils import truncate_name

PORT_NAME_MAX_LEN = 256

ReadCallback = Callable[[str, int], None]


class OneShotTimer:
    """Calls a read callback once after a timeout unless stopped first.

    Starting the timer again while it is running does not restart it, but the
    callback, port name and buffer length it will report are replaced.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._running = False
        self._try_stop = False
        self._thread: Optional[threading.Thread] = None
        self._timeout_ms = 0
        self._callback: Optional[ReadCallback] = None
        self._port_name = ""
        self._read_buffer_len = 0

    def is_running(self) -> bool:
        """Whether the timer is waiting to fire."""
        with self._cond:
            return self._running

    def start_once(
        self,
        timeout_ms: int,
        callback: ReadCallback,
        port_name: str,
        read_buffer_len: int,
    ) -> None:
        """Arrange for ``callback(port_name, read_buffer_len)`` after ``timeout_ms``."""
        with self._cond:
            self._timeout_ms = timeout_ms
            self._callback = callback
            self._port_name = truncate_name(port_name, PORT_NAME_MAX_LEN)
            self._read_buffer_len = read_buffer_len
            if self._running:
                return
            self._running = True
            previous = self._thread

        if previous is not None and previous is not threading.current_thread():
            previous.join()

        thread = threading.Thread(target=self._run, name="serial-read-timer", daemon=True)
        with self._cond:
            self._thread = thread
        thread.start()

    def stop(self) -> None:
        """Cancel a pending firing and wait until the timer thread has finished."""
        with self._cond:
            if not self._running or self._try_stop:
                return
            if threading.current_thread() is self._thread:
                return
            self._try_stop = True
            self._cond.notify_all()
            self._cond.wait_for(lambda: not self._running)
            self._try_stop = False

    def _run(self) -> None:
        try:
            with self._cond:
                stopped = self._cond.wait_for(
                    lambda: self._try_stop, self._timeout_ms / 1000
                )
                callback = self._callback
                port_name = self._port_name
                read_buffer_len = self._read_buffer_len
            if not stopped and callback is not None:
                callback(port_name, read_buffer_len)
        finally:
            with self._cond:
                self._running = False
                self._cond.notify_all()