"""Serial port terminal: port settings, a buffered serial port, payload codecs and a logging session."""

__version__ = "0.1.0"