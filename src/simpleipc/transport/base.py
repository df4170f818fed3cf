"""Transport interface.

This is the (small) contract that both socket transports follow. The framing
and waiting logic in :mod:`simpleipc.channel` only ever talks to this
interface, never to a socket directly.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Optional, Union

import zmq


# Transport agnostic exceptions

class ConfigurationError(ValueError):
    """An option value was not recognized or is malformed."""


class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportTimeout(TransportError):
    """A read did not complete before its deadline."""


class FrameTimeout(TransportTimeout):
    """The deadline passed after part of a frame had been read."""


class TransportStateError(TransportError):
    """I/O was attempted on a transport that is not open."""


class TransportIOError(TransportError):
    """An operating system read, write or close failed."""


class FramingError(TransportError):
    """A frame was malformed, or too large to put on the wire."""


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""


class ConnectionRefused(TransportConnectionError):
    """The endpoint exists but nothing is accepting connections there."""


class EndpointNotFound(TransportConnectionError):
    """There is no endpoint at the requested address."""


class TransportPortError(TransportError):
    """The requested address could not be bound."""


class AddressInUse(TransportPortError):
    """The requested address is already bound by someone else."""


class _WouldBlock:
    """ Type of the :data:`WOULD_BLOCK` sentinel. There is only ever one
        instance.
    """

    def __repr__(self):
        return 'WOULD_BLOCK'

    def __bool__(self):
        return False


# Returned by read_exactly_nonblocking() instead of bytes when no data is
# ready. Always compare by identity.

WOULD_BLOCK = _WouldBlock()


class Transport(ABC):
    """Minimal contract for a point-to-point socket transport."""

    kind = None

    # True for byte streams, where bytes of an abandoned frame stay queued
    # in front of the next one.

    stream = False

    def __init__(self, config):
        self.config = config
        self.socket = None
        self.closed = False

    def __repr__(self):
        state = 'closed' if self.closed else ('open' if self.is_open else 'idle')
        return f"<{type(self).__name__} {self.address!r} {state}>"

    @property
    @abstractmethod
    def address(self):
        """The address this transport connects or binds to."""

    @property
    def is_open(self) -> bool:
        """Whether the transport has been connected or is listening."""
        return False

    @abstractmethod
    def connect(self) -> bool:
        """Establish the client side. Return False if already open."""

    @abstractmethod
    def listen(self) -> None:
        """Establish the server side."""

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Write the entire buffer."""

    @abstractmethod
    def read_exactly(self, n: int, deadline: Optional[float] = None) -> bytes:
        """Read exactly *n* bytes, optionally giving up at *deadline*."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying socket(s)."""

    def read_exactly_nonblocking(self, n: int) -> Union[bytes, _WouldBlock]:
        """ Return :data:`WOULD_BLOCK` if nothing is waiting to be read.
            Once any data is available the read runs to completion, partial
            reads are never handed back to the caller.
        """

        if not self.readable(0):
            return WOULD_BLOCK

        return self.read_exactly(n)

    def readable(self, timeout: Optional[float]) -> bool:
        """ Wait up to *timeout* seconds for the active socket to become
            readable. A *timeout* of None waits forever, zero does not wait.
        """

        sock = self._active_socket()

        poller = zmq.Poller()
        poller.register(sock, zmq.POLLIN)

        if timeout is None:
            events = poller.poll()
        else:
            milliseconds = max(0, int(timeout * 1000))
            events = poller.poll(milliseconds)

        return len(events) > 0

    def wait(self, deadline: Optional[float]) -> None:
        """ Block until the active socket is readable. Raise
            :class:`TransportTimeout` if *deadline*, a :func:`time.monotonic`
            value, passes first. A *deadline* of None never expires.
        """

        if deadline is None:
            return

        remaining = deadline - time.monotonic()
        if remaining <= 0 or not self.readable(remaining):
            raise TransportTimeout(f"{self.address!r}: no data before deadline")

    def _active_socket(self):
        """ Return the socket used for I/O, raising
            :class:`TransportStateError` if there isn't one.
        """

        if self.closed:
            raise TransportStateError(f"{self.address!r}: transport is closed")
        if not self.is_open or self.socket is None:
            raise TransportStateError(f"{self.address!r}: transport is not open, call connect() or listen() first")

        return self.socket

    def __del__(self):
        try:
            self.close()
        except Exception:
            pass


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
