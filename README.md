# netpipe

Small networking building blocks and two command-line tools built on them.

- `netpipe.bytestream.ByteStream`: a bounded, in-order byte stream with a
  writing side (`push`, `close`, `available_capacity`, `bytes_pushed`,
  `is_closed`), a reading side (`peek`, `pop`, `bytes_buffered`,
  `bytes_popped`, `is_finished`) and an error flag (`set_error`,
  `has_error`).
- `netpipe.streamcopy.bidirectional_stream_copy`: relays a connected socket to
  an input and an output file descriptor (standard input and output by
  default) in both directions until both directions have finished, buffering
  each direction through a `ByteStream`.
- `netpipe-webget` (`netpipe.webget`): fetches one page over HTTP/1.1 and
  prints the response.
- `netpipe-tcp-native` (`netpipe.tcp_native`): a netcat-like tool that
  connects to, or accepts one connection on, a TCP address and copies data
  between it and the terminal.
- Option parsing for a TUN-based TCP client (`netpipe.tcp_ipv4`) and the
  command line, addresses and routing layout of a routed end-to-end setup
  (`netpipe.endtoend`).

Requires Python 3.10 or later on a POSIX system. There are no third-party
dependencies.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Command-line tools

### netpipe-webget

```
netpipe-webget HOST PATH
```

Connects to `HOST` on port 80, sends `GET PATH` with `Host: HOST` and
`Connection: close`, and writes everything the server sends back to standard
output until the server closes the connection. For example:

```
netpipe-webget example.com /index.html
```

With the wrong number of arguments it prints a usage message to standard
error and exits with status 1; any error during the request is printed and
also gives status 1.

From Python, `netpipe.webget.get_url(host, path, out=None, port=80)` does the
same, writing to any binary file object, and `build_request(host, path)`
returns the request bytes.

### netpipe-tcp-native

```
netpipe-tcp-native HOST PORT
netpipe-tcp-native -l HOST PORT
```

The first form connects to `HOST:PORT`. The second form binds to `HOST:PORT`
(with `SO_REUSEADDR`), waits for exactly one incoming connection and accepts
it. Then whatever arrives on standard input is sent to the peer and whatever
the peer sends is written to standard output, until both directions have been
closed. Progress messages go to standard error. Missing arguments print a
usage message and exit with status 1.

Two terminals on one machine make a quick chat:

```
netpipe-tcp-native -l 127.0.0.1 9090
netpipe-tcp-native 127.0.0.1 9090
```

From Python, `parse_args` turns an argument list into an `Options` value
(raising `ValueError` when arguments are missing) and `open_socket` returns
the connected socket.

## Using the byte stream

```python
from netpipe.bytestream import ByteStream

stream = ByteStream(2)
assert stream.push(b"cat") == 2   # only as much as fits is accepted
assert stream.bytes_pushed() == 2
assert stream.peek() == b"ca"

stream.pop(1)
assert stream.available_capacity() == 1

stream.close()
stream.pop(stream.bytes_buffered())
assert stream.is_finished()
```

`peek` returns every byte currently buffered without removing it. `pop`
raises `ValueError` when asked for more bytes than are buffered or for a
negative count. Bytes pushed after `close` are discarded. A stream is
finished once it has been closed and every pushed byte has been popped.

## The relay

```python
bidirectional_stream_copy(sock, peer_name, input_fd=None, output_fd=None, log=None)
```

`input_fd` and `output_fd` may be descriptor numbers or objects with a
`fileno()` method. The descriptors and the socket are switched to
non-blocking mode for the duration of the copy. When the input reaches end of
file and everything has been sent, the socket's sending side is shut down;
when the socket reaches end of file and everything has been written, the
output descriptor is closed. Debug messages go to `log` (standard error by
default).

## Option and layout helpers

- `netpipe.tcp_ipv4.parse_options` accepts `-l`, `-a ADDR`, `-s PORT`,
  `-w WINSZ`, `-t TMOUT`, `-d TUNDEV`, `-Lu RATE`, `-Ld RATE` and `-h`,
  followed by `HOST PORT`, and returns a `TCPOptions`. It raises
  `UsageError` for a malformed command line and `HelpRequested` for `-h`;
  `usage(prog, message)` returns the help text.
- `netpipe.endtoend.parse_args` accepts `client|server HOST PORT [debug]` and
  returns an `EndToEndOptions`, raising `UsageError` otherwise.
  `router_layout(is_client)` returns a `RouterLayout` of `InterfaceSpec`s and
  `Route`s (with `Route.matches(address)` for prefix tests), and
  `host_addresses(is_client)` returns the host's own address and next hop.
  `random_host_ethernet_address`, `random_router_ethernet_address` and
  `format_ethernet_address` produce and print Ethernet addresses.

## What this package does not do

There is no user-space TCP implementation, TUN device access, network
interface, ARP handling or router in this package. `netpipe.tcp_ipv4` and
`netpipe.endtoend` only parse command lines and describe configuration; they
have no command that opens a connection over a TUN device or runs traffic
through a router.