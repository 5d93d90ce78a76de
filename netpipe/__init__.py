"""A bounded byte stream, a socket-to-terminal relay, and small TCP and HTTP tools."""

__version__ = "0.1.0"