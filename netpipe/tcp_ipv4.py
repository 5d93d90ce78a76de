"""Command-line options for a user-space TCP connection carried over a TUN device."""

from __future__ import annotations

import random
import re
import socket
from dataclasses import dataclass, field
from typing import Optional, Sequence

TUN_DEFAULT = "tun144"
LOCAL_ADDRESS_DEFAULT = "169.254.144.9"

_INT_PREFIX = re.compile(r"\s*([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)")
_FLOAT_PREFIX = re.compile(
    r"\s*[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


class UsageError(Exception):
    """The command line could not be understood."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class HelpRequested(Exception):
    """The command line asked for the usage message."""


@dataclass
class TCPOptions:
    """Settings for the connection, the packet filter and the TUN device.

    ``recv_capacity`` and ``rt_timeout`` are ``None`` when the stack's own
    defaults should apply. Loss rates are fractions in 0..1.
    """

    isn: int = field(default_factory=lambda: random.getrandbits(32))
    recv_capacity: Optional[int] = None
    rt_timeout: Optional[int] = None
    loss_rate_up: float = 0.0
    loss_rate_dn: float = 0.0
    listen: bool = False
    source: tuple[str, str] = (LOCAL_ADDRESS_DEFAULT, "0")
    destination: Optional[tuple[str, str]] = None
    tun_device: str = TUN_DEFAULT


def usage(prog: str, message: Optional[str] = None) -> str:
    """Return the usage text, followed by ``message`` when one is given."""
    text = (
        f"Usage: {prog} [options] <host> <port>\n\n"
        "   Option                                                          Default\n"
        "   --                                                              --\n\n"
        "   -l              Server (listen) mode.                           (client mode)\n"
        "                   In server mode, <host>:<port> is the address to bind.\n\n"
        f"   -a <addr>       Set source address (client mode only)           {LOCAL_ADDRESS_DEFAULT}\n"
        "   -s <port>       Set source port (client mode only)              (random)\n\n"
        "   -w <winsz>      Use a window of <winsz> bytes                   (stack default)\n\n"
        "   -t <tmout>      Set rt_timeout to tmout                         (stack default)\n\n"
        f"   -d <tundev>     Connect to tun <tundev>                         {TUN_DEFAULT}\n\n"
        "   -Lu <loss>      Set uplink loss to <rate> (float in 0..1)       (no loss)\n"
        "   -Ld <loss>      Set downlink loss to <rate> (float in 0..1)     (no loss)\n\n"
        "   -h              Show this message.\n\n"
    )
    if message is not None:
        text += message
    return text + "\n"


def _strtol(text: str) -> int:
    """Read a leading integer the way C's strtol does with base 0; 0 if there is none."""
    match = _INT_PREFIX.match(text)
    if match is None:
        return 0
    sign, digits = match.groups()
    if digits[:2].lower() == "0x":
        value = int(digits[2:], 16)
    elif digits.startswith("0"):
        value = int(digits, 8)
    else:
        value = int(digits)
    return -value if sign == "-" else value


def _strtof(text: str) -> float:
    """Read a leading floating-point number; 0.0 if there is none."""
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(0)) if match else 0.0


def _port_number(port: str) -> int:
    if port.isdigit():
        return int(port)
    try:
        return socket.getservbyname(port, "tcp")
    except OSError as exc:
        raise UsageError(f"ERROR: unknown port {port!r}") from exc


def parse_options(argv: Sequence[str]) -> TCPOptions:
    """Parse ``[options] <host> <port>`` (without the program name).

    Raises UsageError for a malformed command line and HelpRequested for ``-h``.
    """
    args = list(argv)
    count = len(args)
    if count < 2:
        raise UsageError("ERROR: required arguments are missing.")

    options = TCPOptions()
    source_address = LOCAL_ADDRESS_DEFAULT
    source_port = str(random.getrandbits(16))

    def argument(error: str) -> str:
        if curr + 3 >= count + 1:
            raise UsageError(error)
        return args[curr + 1]

    curr = 0
    while count - curr > 2:
        flag = args[curr][:3]
        if flag == "-l":
            options.listen = True
            curr += 1
            continue
        if flag == "-a":
            source_address = argument("ERROR: -a requires one argument.")
        elif flag == "-s":
            source_port = argument("ERROR: -s requires one argument.")
        elif flag == "-w":
            options.recv_capacity = _strtol(argument("ERROR: -w requires one argument."))
        elif flag == "-t":
            options.rt_timeout = _strtol(argument("ERROR: -t requires one argument."))
        elif flag == "-d":
            options.tun_device = argument("ERROR: -t requires one argument.")
        elif flag == "-Lu":
            options.loss_rate_up = _strtof(argument("ERROR: -Lu requires one argument."))
        elif flag == "-Ld":
            options.loss_rate_dn = _strtof(argument("ERROR: -Lu requires one argument."))
        elif flag == "-h":
            raise HelpRequested()
        else:
            raise UsageError(f"ERROR: unrecognized option {args[curr]}")
        curr += 2

    host, port = args[curr], args[curr + 1]
    if options.listen:
        options.source = ("0", port)
        if _port_number(port) == 0:
            raise UsageError("ERROR: listen port cannot be zero in server mode.")
    else:
        options.destination = (host, port)
        options.source = (source_address, source_port)
    return options