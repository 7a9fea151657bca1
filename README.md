# serialterm

A small serial port terminal for the console. It opens a serial port with the
usual line settings and sends payloads that you type as plain text, UTF-8,
hexadecimal bytes or binary digits. It keeps a timestamped log of everything
sent and received, and shows received data in whichever of those formats you
choose.

## Installation

```
pip install serialterm
```

It uses `pyserial` to talk to ports. Installing the package also installs
`pyserial`.

## Command line

List the serial ports on the system:

```
serialterm --list
```

Open a port and start a session:

```
serialterm --port /dev/ttyUSB0 --baud 115200 --parity NONE --data-bits 8 --stop-bits 1
```

Options:

| Option | Meaning |
|--------|---------|
| `-p`, `--port` | Port name or pyserial URL, such as `COM1`, `/dev/ttyS0` or `loop://`. |
| `-b`, `--baud` | Baud rate. The default is `9600`. |
| `--parity` | `NONE`, `ODD` or `EVEN`. |
| `--data-bits` | `5`, `6`, `7` or `8`. |
| `--stop-bits` | `1`, `1.5` or `2`. |
| `--send-format` | `binary`, `hex`, `utf8` or `text`. The default is `text`. |
| `--receive-format` | `binary`, `hex`, `utf8` or `text`. The default is `text`. |
| `--wait` | Seconds to keep listening after standard input ends. |
| `-l`, `--list` | Print the available ports (name, description, hardware id) and exit. |

When the session starts, each line read from standard input is encoded in the
send format and written to the port. Each log entry, sent or received, is
printed as it happens, for example:

```
2024-01-01 12:00:00(send)(Text): hello
2024-01-01 12:00:00(receive)(Text): hello
```

Lines that begin with `:` are commands:

- `:send FORMAT` changes the send format.
- `:recv FORMAT` changes the receive format.
- `:clear` empties the log.
- `:quit` closes the port and exits.

Malformed input, such as an invalid hex token, is reported on standard error,
and the session carries on. The command exits with status 1 if the port cannot
be opened.

## Payload formats

| Format | When sending | When receiving |
|--------|--------------|----------------|
| Binary | groups of eight `0`/`1` digits; spaces are ignored | each byte shown as eight binary digits, separated by spaces |
| Hex    | tokens separated by spaces, one or two hex digits each | bytes shown as `XX`, separated by spaces |
| UTF-8  | text encoded as UTF-8 | bytes decoded as UTF-8 |
| Text   | same as UTF-8 | same as UTF-8 |

`serialterm.codec.encode_payload` raises `PayloadError` when input is
malformed. That happens when binary input is empty, when it is not a multiple
of eight digits, or when it contains anything other than `0` and `1`. It also
happens when a hex token is longer than two digits, when a token holds a
character that is not a hex digit, or when there are no hex tokens at all.

## Library use

```python
from serialterm.codec import DataFormat, encode_payload, decode_payload
from serialterm.settings import settings_from_labels
from serialterm.session import SerialTerminal

encode_payload("01 a ff", DataFormat.HEX)       # b"\x01\x0a\xff"
decode_payload(b"\x01\xff", DataFormat.BINARY)  # "00000001 11111111"

settings = settings_from_labels("loop://", "9600", "NONE", "8 bit", "1 bit")
terminal = SerialTerminal(on_entry=print)
terminal.toggle(settings)                # opens the port, returns True
terminal.send("hello", DataFormat.TEXT)  # returns the number of bytes written
print(terminal.log())
terminal.toggle(settings)                # closes it again, returns False
```

`settings_from_labels` accepts the labels `NONE`/`ODD`/`EVEN`, `5 bit` to
`8 bit`, and `1 bit`/`1.5 bit`/`2 bit`. An unknown label falls back to no
parity, eight data bits or one stop bit.

Lower-level building blocks are also available:

- `serialterm.port.SerialPort` is a port object that can be used as a context
  manager. In asynchronous mode a background thread fills a ring buffer and
  notifies a connected `SerialPortListener`. By default it sends that notice
  50 ms after data arrives. After `set_read_interval_timeout(0)` it notifies
  as soon as at least `min_byte_read_notify` bytes are waiting. A failed
  operation raises `SerialPortException`, whose `error` attribute holds a
  `SerialPortError`.
- `serialterm.settings` holds the `BaudRate`, `DataBits`, `Parity`,
  `StopBits`, `FlowControl` and `OperateMode` enumerations and the
  `PortSettings` dataclass.
- `serialterm.ringbuffer.RingBuffer` is a fixed-size byte ring buffer whose
  capacity is a power of two. When it is full, new writes overwrite the oldest
  bytes.
- `serialterm.timer.OneShotTimer` calls a callback once after a timeout unless
  it is stopped first.
- `serialterm.portinfo.available_port_infos()` lists the serial ports present
  on the system.

## What it does not do

- There is no graphical window. The terminal is a console command and a
  library.
- It handles serial ports only. It has no network (TCP or UDP) communication.
- There is no line-oriented read. Data is read as raw bytes, either by count
  or everything that is waiting.