"""Connectionless transport over a UDP socket.

Every :func:`UDPTransport.write` is exactly one datagram on the wire, and
every :func:`UDPTransport.read_exactly` consumes exactly one datagram. The
framing layer depends on this: the length prefix and the payload travel as
two separate datagrams, in order.
"""

from __future__ import annotations

import errno
import logging
import socket
from typing import Optional

from .base import (
    Transport,
    TransportConnectionError,
    TransportIOError,
    TransportPortError,
    TransportStateError,
    FramingError,
    AddressInUse,
    ConnectionRefused,
)


logger = logging.getLogger(__name__)


class UDPTransport(Transport):
    """ Datagram transport. The socket is allocated immediately; :func:`connect`
        only records the remote (host, port) pair with the kernel, and
        :func:`listen` binds the wildcard address on the configured port.
    """

    kind = 'udp'

    # Largest payload that fits in a single IPv4 UDP datagram.

    maximum_datagram = 65507

    def __init__(self, config):
        Transport.__init__(self, config)

        self.host = config.host
        self.port = config.port
        self.connected = False
        self.bound = False

        self.socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)

    @property
    def address(self):
        return (self.host, self.port)

    @property
    def is_open(self) -> bool:
        return (self.connected or self.bound) and not self.closed

    def connect(self) -> bool:
        if self.connected and not self.closed:
            return False

        self._check_closed()

        try:
            self.socket.connect((self.host, self.port))
        except OSError as exc:
            raise TransportConnectionError(f"cannot address {self.host}:{self.port}: {exc}") from exc

        logger.debug("addressed datagrams to %s:%d", self.host, self.port)
        self.connected = True
        return True

    def listen(self) -> None:
        if self.bound and not self.closed:
            return

        self._check_closed()

        try:
            self.socket.bind(('', self.port))
        except OSError as exc:
            if exc.errno == errno.EADDRINUSE:
                raise AddressInUse(f"port already in use: {self.port}") from exc
            raise TransportPortError(f"cannot bind port {self.port}: {exc}") from exc

        logger.debug("listening for datagrams on port %d", self.port)
        self.bound = True

    def write(self, data: bytes) -> None:
        sock = self._active_socket()

        if len(data) > self.maximum_datagram:
            raise FramingError(f"{len(data)} bytes will not fit in one datagram (maximum {self.maximum_datagram})")

        try:
            sent = sock.send(data)
        except ConnectionRefusedError as exc:
            # An ICMP port-unreachable from an earlier datagram, reported
            # on this send.
            raise ConnectionRefused(f"nothing listening on {self.host}:{self.port}") from exc
        except OSError as exc:
            raise TransportIOError(f"send of {len(data)} bytes to {self.host}:{self.port} failed: {exc}") from exc

        if sent != len(data):
            raise TransportIOError(f"short datagram to {self.host}:{self.port}: {sent} of {len(data)} bytes")

    def read_exactly(self, n: int, deadline: Optional[float] = None) -> bytes:
        """ Return the leading *n* bytes of the next datagram. A datagram is
            consumed even when *n* is zero; anything beyond *n* bytes in
            that datagram is discarded by the kernel.
        """

        if n > self.maximum_datagram:
            raise FramingError(f"{n} bytes will not fit in one datagram (maximum {self.maximum_datagram})")

        sock = self._active_socket()

        while True:
            self.wait(deadline)

            try:
                data, _sender = sock.recvfrom(n)
            except InterruptedError:
                continue
            except ConnectionRefusedError as exc:
                raise ConnectionRefused(f"nothing listening on {self.host}:{self.port}") from exc
            except OSError as exc:
                raise TransportIOError(f"read failed on port {self.port}: {exc}") from exc

            return data

    def close(self) -> None:
        if self.closed:
            return

        self.closed = True
        self.connected = False
        self.bound = False

        try:
            self.socket.close()
        except OSError as exc:
            raise TransportIOError(f"close failed on port {self.port}: {exc}") from exc

        logger.debug("closed datagram socket for port %d", self.port)

    def _check_closed(self) -> None:
        if self.closed:
            raise TransportStateError(f"{self.address!r}: transport is closed")


# end of class UDPTransport


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
