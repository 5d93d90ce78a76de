"""A bounded in-memory byte stream with a writing end and a reading end."""

from __future__ import annotations


class ByteStream:
    """A FIFO of bytes that holds at most ``capacity`` bytes at a time.

    The writer pushes bytes and eventually closes the stream; the reader
    peeks at and pops buffered bytes. Either side may flag an error.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self._capacity = capacity
        self._buffer = bytearray()
        self._pushed = 0
        self._popped = 0
        self._closed = False
        self._error = False

    def __repr__(self) -> str:
        return (
            f"ByteStream(capacity={self._capacity}, buffered={self.bytes_buffered()}, "
            f"closed={self._closed}, error={self._error})"
        )

    # writer side

    def push(self, data: bytes) -> int:
        """Append as much of ``data`` as fits; return the number of bytes accepted.

        Data pushed after the stream is closed is discarded.
        """
        if self._closed:
            return 0
        accepted = bytes(data[: self.available_capacity()])
        self._buffer += accepted
        self._pushed += len(accepted)
        return len(accepted)

    def close(self) -> None:
        """Signal that no more bytes will be pushed."""
        self._closed = True

    def available_capacity(self) -> int:
        """How many more bytes the stream can take right now."""
        return self._capacity - len(self._buffer)

    def bytes_pushed(self) -> int:
        """Total number of bytes accepted by ``push`` so far."""
        return self._pushed

    def is_closed(self) -> bool:
        return self._closed

    # reader side

    def peek(self) -> bytes:
        """Return the bytes currently buffered, without removing them."""
        return bytes(self._buffer)

    def pop(self, length: int) -> None:
        """Remove ``length`` bytes from the front of the buffer."""
        if length < 0:
            raise ValueError("cannot pop a negative number of bytes")
        if length > len(self._buffer):
            raise ValueError(
                f"cannot pop {length} bytes with only {len(self._buffer)} buffered"
            )
        del self._buffer[:length]
        self._popped += length

    def bytes_popped(self) -> int:
        """Total number of bytes removed by ``pop`` so far."""
        return self._popped

    def bytes_buffered(self) -> int:
        """Number of bytes pushed but not yet popped."""
        return len(self._buffer)

    def is_finished(self) -> bool:
        """True once the stream is closed and every byte has been popped."""
        return self._closed and not self._buffer

    # both sides

    def set_error(self) -> None:
        """Flag that the stream suffered an error."""
        self._error = True

    def has_error(self) -> bool:
        return self._error