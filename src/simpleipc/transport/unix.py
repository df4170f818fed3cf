"""Connection-oriented transport over a local (AF_UNIX) stream socket.

The server side binds a filesystem path, accepts exactly one peer, and
uses that accepted connection for all further I/O. The path is owned by
the :class:`UnixTransport` that bound it, and is removed when it closes.
"""

from __future__ import annotations

import errno
import logging
import os
import socket
from typing import Optional

from .base import (
    Transport,
    TransportConnectionError,
    TransportIOError,
    TransportStateError,
    TransportTimeout,
    FrameTimeout,
    AddressInUse,
    ConnectionRefused,
    EndpointNotFound,
)


logger = logging.getLogger(__name__)


class UnixTransport(Transport):
    """ Stream transport bound to, or connecting to, the socket path
        found in the configuration. No OS resources are allocated until
        :func:`connect` or :func:`listen` is invoked.
    """

    kind = 'unix'
    stream = True

    # Upper bound for a single recv(), so that a bogus length prefix
    # does not allocate a buffer of that size up front.

    chunk_size = 65536

    def __init__(self, config):
        Transport.__init__(self, config)

        self.path = config.path
        self.listener = None
        self.owns_path = False

    @property
    def address(self):
        return self.path

    @property
    def is_open(self) -> bool:
        return self.socket is not None and not self.closed

    def connect(self) -> bool:
        if self.is_open:
            return False

        self._check_closed()

        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)

        try:
            sock.connect(self.path)
        except FileNotFoundError as exc:
            sock.close()
            raise EndpointNotFound(f"no socket at {self.path}") from exc
        except ConnectionRefusedError as exc:
            sock.close()
            raise ConnectionRefused(f"nothing listening at {self.path}") from exc
        except OSError as exc:
            sock.close()
            raise TransportConnectionError(f"cannot connect to {self.path}: {exc}") from exc

        logger.debug("connected to %s", self.path)
        self.socket = sock
        return True

    def listen(self) -> None:
        if self.is_open:
            return

        self._check_closed()

        listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)

        try:
            self._bind(listener)
            listener.listen(1)
        except BaseException:
            listener.close()
            raise

        self.listener = listener
        self.owns_path = True
        logger.debug("listening on %s", self.path)

        try:
            connection, _peer = listener.accept()
        except OSError as exc:
            raise TransportConnectionError(f"accept failed on {self.path}: {exc}") from exc

        # Single peer only; the listening socket has no further purpose,
        # but the path stays on disk until close().

        listener.close()
        self.listener = None

        logger.debug("accepted connection on %s", self.path)
        self.socket = connection

    def _bind(self, listener) -> None:
        """ Bind the socket path. A leftover socket file from a previous
            run shows up as EADDRINUSE; if *force_cleanup* is set, remove
            it and try exactly once more.
        """

        try:
            listener.bind(self.path)
        except OSError as exc:
            if exc.errno != errno.EADDRINUSE:
                raise TransportIOError(f"cannot bind {self.path}: {exc}") from exc
            if not self.config.force_cleanup:
                raise AddressInUse(f"socket path already in use: {self.path}") from exc
        else:
            return

        logger.warning("removing stale socket file %s", self.path)
        self._remove_path()

        try:
            listener.bind(self.path)
        except OSError as exc:
            if exc.errno == errno.EADDRINUSE:
                raise AddressInUse(f"socket path already in use: {self.path}") from exc
            raise TransportIOError(f"cannot bind {self.path}: {exc}") from exc

    def write(self, data: bytes) -> None:
        sock = self._active_socket()

        try:
            sock.sendall(data)
        except (BrokenPipeError, ConnectionResetError) as exc:
            raise TransportConnectionError(f"peer went away on {self.path}") from exc
        except OSError as exc:
            raise TransportIOError(f"write failed on {self.path}: {exc}") from exc

    def read_exactly(self, n: int, deadline: Optional[float] = None) -> bytes:
        sock = self._active_socket()

        received = 0
        chunks = []

        while received < n:
            try:
                self.wait(deadline)
            except TransportTimeout:
                if received:
                    raise FrameTimeout(f"{self.path}: deadline passed after {received} of {n} bytes") from None
                raise

            try:
                chunk = sock.recv(min(n - received, self.chunk_size))
            except InterruptedError:
                continue
            except ConnectionResetError as exc:
                raise TransportConnectionError(f"peer went away on {self.path}") from exc
            except OSError as exc:
                raise TransportIOError(f"read failed on {self.path}: {exc}") from exc

            if not chunk:
                raise TransportConnectionError(f"connection closed on {self.path} after {received} of {n} bytes")

            chunks.append(chunk)
            received += len(chunk)

        return b''.join(chunks)

    def close(self) -> None:
        if self.closed:
            return

        self.closed = True

        for sock in (self.socket, self.listener):
            if sock is None:
                continue
            try:
                sock.close()
            except OSError as exc:
                raise TransportIOError(f"close failed on {self.path}: {exc}") from exc

        self.socket = None
        self.listener = None

        if self.owns_path:
            self.owns_path = False
            self._remove_path()

        logger.debug("closed %s", self.path)

    def _check_closed(self) -> None:
        if self.closed:
            raise TransportStateError(f"{self.path}: transport is closed")

    def _remove_path(self) -> None:
        try:
            os.unlink(self.path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise TransportIOError(f"cannot remove {self.path}: {exc}") from exc


# end of class UnixTransport


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
