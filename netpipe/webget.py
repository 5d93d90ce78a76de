"""Fetch a page over HTTP/1.1 with a raw TCP connection and print the response."""

from __future__ import annotations

import os
import socket
import sys
from typing import BinaryIO, Optional, Sequence

HTTP_PORT = 80
_CHUNK = 65536


def build_request(host: str, path: str) -> bytes:
    """Return the bytes of a GET request for ``path`` on ``host`` that asks the server to close."""
    return f"GET {path} HTTP/1.1\r\nHost: {host}\r\nConnection: close\r\n\r\n".encode()


def get_url(
    host: str,
    path: str,
    out: Optional[BinaryIO] = None,
    port: int = HTTP_PORT,
) -> None:
    """Request ``path`` from ``host`` and copy the whole response to ``out``.

    ``out`` defaults to standard output. Reading stops when the server closes
    the connection.
    """
    sink = out if out is not None else sys.stdout.buffer
    with socket.create_connection((host, port)) as conn:
        conn.sendall(build_request(host, path))
        while chunk := conn.recv(_CHUNK):
            sink.write(chunk)
    sink.flush()


def _usage(prog: str) -> str:
    return f"Usage: {prog} HOST PATH\n\tExample: {prog} stanford.edu /class/cs144\n"


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command entry point: ``webget HOST PATH``."""
    prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "webget"
    args = list(sys.argv[1:] if argv is None else argv)

    if len(args) != 2:
        sys.stderr.write(_usage(prog))
        return 1

    host, path = args
    try:
        get_url(host, path)
    except Exception as exc:  # report any failure and exit unsuccessfully
        sys.stderr.write(f"{exc}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())