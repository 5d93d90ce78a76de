"""Addresses, routing layout and command line for an end-to-end run through a small router."""

from __future__ import annotations

import ipaddress
import os
from dataclasses import dataclass, field
from typing import Optional, Sequence

ETHERNET_ADDRESS_LENGTH = 6


class UsageError(Exception):
    """The command line could not be understood."""


@dataclass(frozen=True)
class EndToEndOptions:
    """What the command line asked for."""

    is_client: bool
    bounce_host: str
    bounce_port: str
    debug: bool = False


@dataclass(frozen=True)
class Route:
    """One routing-table entry: a prefix, its length, an optional next hop and an interface index."""

    prefix: str
    prefix_length: int
    next_hop: Optional[str]
    interface: int

    def __post_init__(self) -> None:
        if not 0 <= self.prefix_length <= 32:
            raise ValueError(f"prefix length {self.prefix_length} is out of range")
        ipaddress.IPv4Address(self.prefix)
        if self.next_hop is not None:
            ipaddress.IPv4Address(self.next_hop)

    @property
    def prefix_numeric(self) -> int:
        """The route prefix as a 32-bit integer."""
        return int(ipaddress.IPv4Address(self.prefix))

    def matches(self, address: str) -> bool:
        """True if ``address`` falls under this route's prefix."""
        if self.prefix_length == 0:
            return True
        shift = 32 - self.prefix_length
        return int(ipaddress.IPv4Address(address)) >> shift == self.prefix_numeric >> shift


@dataclass(frozen=True)
class InterfaceSpec:
    """A router interface: its name, IP address and Ethernet address."""

    name: str
    ip_address: str
    ethernet_address: bytes = field(default_factory=lambda: random_router_ethernet_address())


@dataclass(frozen=True)
class RouterLayout:
    """The router's interfaces and routes, with the indices of its two sides."""

    interfaces: tuple[InterfaceSpec, ...]
    routes: tuple[Route, ...]
    host_side: int
    internet_side: int


def random_host_ethernet_address() -> bytes:
    """A random, locally administered, unicast Ethernet address."""
    addr = bytearray(os.urandom(ETHERNET_ADDRESS_LENGTH))
    addr[0] |= 0x02  # locally administered
    addr[0] &= 0xFE  # unicast
    return bytes(addr)


def random_router_ethernet_address() -> bytes:
    """A random Ethernet address starting with 02:00:00."""
    addr = bytearray(os.urandom(ETHERNET_ADDRESS_LENGTH))
    addr[0] = 0x02
    addr[1] = 0
    addr[2] = 0
    return bytes(addr)


def format_ethernet_address(address: bytes) -> str:
    """Render an Ethernet address as colon-separated lower-case hex."""
    if len(address) != ETHERNET_ADDRESS_LENGTH:
        raise ValueError(f"an Ethernet address has {ETHERNET_ADDRESS_LENGTH} bytes, not {len(address)}")
    return ":".join(f"{byte:02x}" for byte in address)


def router_layout(is_client: bool) -> RouterLayout:
    """The router configuration used on the client or on the server side."""
    host_side, internet_side = 0, 1
    if is_client:
        interfaces = (
            InterfaceSpec("host_side", "192.168.0.1"),
            InterfaceSpec("internet side", "10.0.0.192"),
        )
        routes = (
            Route("192.168.0.0", 16, None, host_side),
            Route("10.0.0.0", 8, None, internet_side),
            Route("172.16.0.0", 12, "10.0.0.172", internet_side),
        )
    else:
        interfaces = (
            InterfaceSpec("host_side", "172.16.0.1"),
            InterfaceSpec("internet side", "10.0.0.172"),
        )
        routes = (
            Route("172.16.0.0", 12, None, host_side),
            Route("10.0.0.0", 8, None, internet_side),
            Route("192.168.0.0", 16, "10.0.0.192", internet_side),
        )
    return RouterLayout(interfaces, routes, host_side, internet_side)


def host_addresses(is_client: bool) -> tuple[str, str]:
    """The host's own IP address and its next hop (the router's host-side address)."""
    if is_client:
        return "192.168.0.50", "192.168.0.1"
    return "172.16.0.100", "172.16.0.1"


def usage(prog: str) -> str:
    """Return the usage text."""
    return f"Usage: {prog} client HOST PORT [debug]\nor     {prog} server HOST PORT [debug]\n"


def parse_args(argv: Sequence[str]) -> EndToEndOptions:
    """Parse ``client|server HOST PORT [debug]`` (without the program name).

    Raises UsageError for any other shape of command line.
    """
    args = list(argv)
    if len(args) not in (3, 4):
        raise UsageError("expected client|server HOST PORT [debug]")
    mode = args[0]
    if mode not in ("client", "server"):
        raise UsageError(f"unknown mode {mode!r}")
    return EndToEndOptions(
        is_client=mode == "client",
        bounce_host=args[1],
        bounce_port=args[2],
        debug=len(args) == 4,
    )