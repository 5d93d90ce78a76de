"""Connect to, or accept one connection on, a TCP address and relay it to stdin/stdout."""

from __future__ import annotations

import os
import socket
import sys
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from .streamcopy import bidirectional_stream_copy


@dataclass(frozen=True)
class Options:
    """What the command line asked for."""

    server_mode: bool
    host: str
    port: str


def parse_args(argv: Sequence[str]) -> Options:
    """Parse ``[-l] <host> <port>`` (without the program name).

    Raises ValueError when required arguments are missing.
    """
    args = list(argv)
    if len(args) < 2:
        raise ValueError("required arguments are missing")
    if args[0] == "-l":
        if len(args) < 3:
            raise ValueError("required arguments are missing")
        return Options(server_mode=True, host=args[1], port=args[2])
    return Options(server_mode=False, host=args[0], port=args[1])


def _resolve(host: str, port: str) -> tuple[str, int]:
    info = socket.getaddrinfo(host, port, socket.AF_INET, socket.SOCK_STREAM)
    address = info[0][4]
    return address[0], address[1]


def _format(address: tuple[str, int]) -> str:
    return f"{address[0]}:{address[1]}"


def open_socket(
    options: Options,
    log: Optional[Callable[[str], object]] = None,
) -> socket.socket:
    """Return a connected TCP socket.

    In client mode connect to the given address; in server mode listen on it
    and accept exactly one connection.
    """
    emit = log if log is not None else sys.stderr.write
    address = _resolve(options.host, options.port)

    if options.server_mode:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as listener:
            listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            listener.bind(address)
            listener.listen()
            emit("DEBUG: Listening for incoming connection...\n")
            connected, peer = listener.accept()
        emit(f"DEBUG: New connection from {_format(peer)}.\n")
        return connected

    connecting = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    emit(f"DEBUG: Connecting to {_format(address)}... ")
    try:
        connecting.connect(address)
    except BaseException:
        connecting.close()
        raise
    emit(f"DEBUG: Successfully connected to {_format(connecting.getpeername())}.\n")
    return connecting


def _usage(prog: str) -> str:
    return (
        f"Usage: {prog} [-l] <host> <port>\n\n"
        "  -l specifies listen mode; <host>:<port> is the listening address.\n"
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command entry point: ``tcp_native [-l] <host> <port>``."""
    prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "tcp_native"
    args = list(sys.argv[1:] if argv is None else argv)

    try:
        options = parse_args(args)
    except ValueError:
        sys.stderr.write(_usage(prog))
        return 1

    try:
        with open_socket(options) as sock:
            peer = _format(sock.getpeername())
            bidirectional_stream_copy(sock, peer)
    except Exception as exc:  # report any failure and exit unsuccessfully
        sys.stderr.write(f"Exception: {exc}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())