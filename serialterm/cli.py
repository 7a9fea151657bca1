"""Command-line serial terminal."""

from __future__ import annotations

import argparse
import sys
import time
from typing import Optional, Sequence

from serialterm.codec import DataFormat, PayloadError
from serialterm.port import SerialPortException
from serialterm.portinfo import available_port_infos
from serialterm.session import SerialTerminal
from serialterm.settings import settings_from_labels

_FORMATS = {
    "binary": DataFormat.BINARY,
    "hex": DataFormat.HEX,
    "utf8": DataFormat.UTF8,
    "text": DataFormat.TEXT,
}

_BAUD_RATES = [
    "110", "300", "600", "1200", "2400", "4800", "9600", "14400",
    "19200", "38400", "56000", "57600", "115200", "921600",
]

_HELP = (
    "commands: :send FORMAT, :recv FORMAT, :clear, :quit; "
    "formats: " + ", ".join(_FORMATS)
)


def build_parser() -> argparse.ArgumentParser:
    """The argument parser for the terminal command."""
    parser = argparse.ArgumentParser(
        prog="serialterm",
        description="Send and receive data over a serial port. "
        "Each input line is sent; " + _HELP + ".",
    )
    parser.add_argument("-p", "--port", help="port name or URL, e.g. COM1, /dev/ttyS0, loop://")
    parser.add_argument("-b", "--baud", default="9600", help="baud rate (default 9600)")
    parser.add_argument("--parity", default="NONE", choices=["NONE", "ODD", "EVEN"])
    parser.add_argument("--data-bits", default="8", choices=["5", "6", "7", "8"])
    parser.add_argument("--stop-bits", default="1", choices=["1", "1.5", "2"])
    parser.add_argument("--send-format", default="text", choices=list(_FORMATS))
    parser.add_argument("--receive-format", default="text", choices=list(_FORMATS))
    parser.add_argument(
        "--wait",
        type=float,
        default=0.0,
        help="seconds to keep listening after input ends",
    )
    parser.add_argument("-l", "--list", action="store_true", help="list available ports and exit")
    return parser


def _print_entry(entry: str) -> None:
    print(entry.rstrip("\r\n"), flush=True)


def _list_ports() -> int:
    for info in available_port_infos():
        print(f"{info.port_name}\t{info.description}\t{info.hardware_id}")
    return 0


def _command(terminal: SerialTerminal, line: str) -> bool:
    """Run a ':' command; return False when the session should end."""
    name, _, argument = line[1:].strip().partition(" ")
    argument = argument.strip().lower()
    if name == "quit":
        return False
    if name == "clear":
        terminal.clear()
        print("log cleared", flush=True)
    elif name in ("send", "recv") and argument in _FORMATS:
        if name == "send":
            terminal.send_format = _FORMATS[argument]
        else:
            terminal.receive_format = _FORMATS[argument]
    else:
        print(f"error: unknown command {line!r}; {_HELP}", file=sys.stderr, flush=True)
    return True


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the terminal; return the exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.list:
        return _list_ports()
    if not args.port:
        parser.error("a port is required (use --port), or --list to see the ports")

    settings = settings_from_labels(
        args.port,
        args.baud,
        args.parity,
        f"{args.data_bits} bit",
        f"{args.stop_bits} bit",
    )
    terminal = SerialTerminal(
        send_format=_FORMATS[args.send_format],
        receive_format=_FORMATS[args.receive_format],
        on_entry=_print_entry,
    )
    try:
        terminal.toggle(settings)
    except SerialPortException as exc:
        print(f"failed to open {args.port}: {exc}", file=sys.stderr)
        return 1
    print(f"opened {args.port}", flush=True)

    try:
        for raw in sys.stdin:
            line = raw.rstrip("\r\n")
            if line.startswith(":"):
                if not _command(terminal, line):
                    break
                continue
            try:
                terminal.send(line)
            except (PayloadError, SerialPortException) as exc:
                print(f"error: {exc}", file=sys.stderr, flush=True)
        if args.wait > 0:
            time.sleep(args.wait)
    except KeyboardInterrupt:
        pass
    finally:
        if terminal.port.is_open():
            terminal.toggle(settings)
    print(f"closed {args.port}", flush=True)
    return 0