"""Copy data between a socket and a pair of file descriptors until both directions finish."""

from __future__ import annotations

import os
import selectors
import socket
import sys
from dataclasses import dataclass
from typing import Callable, Optional, Union

from .bytestream import ByteStream

BUFFER_SIZE = 1_048_576

FileLike = Union[int, "object"]


@dataclass
class _Rule:
    name: str
    fd: int
    events: int
    callback: Callable[[], None]
    interest: Callable[[], bool]
    cancel: Callable[[], None]
    error: Callable[[], None]
    at_end: Callable[[], bool]
    active: bool = True


def _fileno(obj: FileLike) -> int:
    return obj if isinstance(obj, int) else obj.fileno()  # type: ignore[union-attr]


def _run_rules(rules: list[_Rule]) -> None:
    """Serve the rules until none of them is interested in its descriptor."""
    while True:
        live = [rule for rule in rules if rule.active and rule.interest()]
        if not live:
            return

        masks: dict[int, int] = {}
        for rule in live:
            masks[rule.fd] = masks.get(rule.fd, 0) | rule.events
        with selectors.DefaultSelector() as selector:
            for fd, mask in masks.items():
                selector.register(fd, mask)
            ready = {key.fd: mask for key, mask in selector.select()}

        for rule in live:
            if not rule.active or not ready.get(rule.fd, 0) & rule.events:
                continue
            if not rule.interest():
                continue
            try:
                rule.callback()
            except OSError:
                rule.active = False
                rule.error()
                continue
            if rule.at_end():
                rule.active = False
                rule.cancel()


def bidirectional_stream_copy(
    sock: socket.socket,
    peer_name: str,
    input_fd: Optional[FileLike] = None,
    output_fd: Optional[FileLike] = None,
    log: Optional[Callable[[str], object]] = None,
) -> None:
    """Copy ``input_fd`` into ``sock`` and ``sock`` into ``output_fd`` until both are done.

    The input defaults to standard input and the output to standard output.
    When the input ends, the socket's sending side is shut down; when the
    socket ends, the output descriptor is closed.
    """
    in_fd = _fileno(sys.stdin if input_fd is None else input_fd)
    out_fd = _fileno(sys.stdout if output_fd is None else output_fd)
    emit = log if log is not None else sys.stderr.write

    outbound = ByteStream(BUFFER_SIZE)
    inbound = ByteStream(BUFFER_SIZE)
    state = {
        "input_eof": False,
        "socket_eof": False,
        "outbound_shutdown": False,
        "inbound_shutdown": False,
    }

    def fail(message: str) -> Callable[[], None]:
        def handler() -> None:
            emit(message)
            outbound.set_error()
            inbound.set_error()

        return handler

    # rule 1: input descriptor into the outbound stream
    def read_input() -> None:
        try:
            data = os.read(in_fd, outbound.available_capacity())
        except (BlockingIOError, InterruptedError):
            return
        if data:
            outbound.push(data)
        else:
            state["input_eof"] = True
            outbound.close()

    # rule 2: outbound stream into the socket
    def write_socket() -> None:
        if outbound.bytes_buffered():
            try:
                sent = sock.send(outbound.peek())
            except (BlockingIOError, InterruptedError):
                sent = 0
            outbound.pop(sent)
        if outbound.is_finished():
            sock.shutdown(socket.SHUT_WR)
            state["outbound_shutdown"] = True
            emit(f"DEBUG: Outbound stream to {peer_name} finished.\n")

    # rule 3: socket into the inbound stream
    def read_socket() -> None:
        try:
            data = sock.recv(inbound.available_capacity())
        except (BlockingIOError, InterruptedError):
            return
        if data:
            inbound.push(data)
        else:
            state["socket_eof"] = True
            inbound.close()

    # rule 4: inbound stream into the output descriptor
    def write_output() -> None:
        if inbound.bytes_buffered():
            try:
                written = os.write(out_fd, inbound.peek())
            except (BlockingIOError, InterruptedError):
                written = 0
            inbound.pop(written)
        if inbound.is_finished():
            os.close(out_fd)
            state["inbound_shutdown"] = True
            ending = " uncleanly.\n" if inbound.has_error() else ".\n"
            emit(f"DEBUG: Inbound stream from {peer_name} finished{ending}")

    rules = [
        _Rule(
            "read from stdin into outbound byte stream",
            in_fd,
            selectors.EVENT_READ,
            read_input,
            lambda: not outbound.has_error()
            and not inbound.has_error()
            and outbound.available_capacity() > 0
            and not outbound.is_closed(),
            outbound.close,
            fail("DEBUG: Outbound stream had error from source.\n"),
            lambda: state["input_eof"],
        ),
        _Rule(
            "read from outbound byte stream into socket",
            sock.fileno(),
            selectors.EVENT_WRITE,
            write_socket,
            lambda: bool(outbound.bytes_buffered())
            or (outbound.is_finished() and not state["outbound_shutdown"]),
            outbound.close,
            fail("DEBUG: Outbound stream had error from destination.\n"),
            lambda: False,
        ),
        _Rule(
            "read from socket into inbound byte stream",
            sock.fileno(),
            selectors.EVENT_READ,
            read_socket,
            lambda: not inbound.has_error()
            and not outbound.has_error()
            and inbound.available_capacity() > 0
            and not inbound.is_closed(),
            inbound.close,
            fail("DEBUG: Inbound stream had error from source.\n"),
            lambda: state["socket_eof"],
        ),
        _Rule(
            "read from inbound byte stream into stdout",
            out_fd,
            selectors.EVENT_WRITE,
            write_output,
            lambda: bool(inbound.bytes_buffered())
            or (inbound.is_finished() and not state["inbound_shutdown"]),
            inbound.close,
            fail("DEBUG: Inbound stream had error from destination.\n"),
            lambda: state["inbound_shutdown"],
        ),
    ]

    socket_blocking = sock.getblocking()
    input_blocking = os.get_blocking(in_fd)
    output_blocking = os.get_blocking(out_fd)
    sock.setblocking(False)
    os.set_blocking(in_fd, False)
    os.set_blocking(out_fd, False)
    try:
        _run_rules(rules)
    finally:
        if sock.fileno() != -1:
            sock.setblocking(socket_blocking)
        for fd, blocking in ((in_fd, input_blocking), (out_fd, output_blocking)):
            if fd == out_fd and state["inbound_shutdown"]:
                continue
            try:
                os.set_blocking(fd, blocking)
            except OSError:
                pass