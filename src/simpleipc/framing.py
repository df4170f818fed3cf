"""Length-prefix framing for channel messages.

Wire format, one frame per message:
    [length: 4-byte unsigned, big-endian][payload: length bytes]

There is no version byte and no checksum. The prefix and payload are always
written separately; for the datagram transport that makes each frame two
datagrams.
"""

from __future__ import annotations

import struct
from typing import Optional, Tuple

from .transport.base import (
    FramingError,
    FrameTimeout,
    Transport,
    TransportTimeout,
    WOULD_BLOCK,
)


_PREFIX = struct.Struct("!I")

PREFIX_SIZE = _PREFIX.size
MAXIMUM_LENGTH = 2 ** 32 - 1


def pack_prefix(payload: bytes) -> bytes:
    """Return the length prefix for *payload*."""

    length = len(payload)
    if length > MAXIMUM_LENGTH:
        raise FramingError(f"payload of {length} bytes exceeds the {MAXIMUM_LENGTH} byte frame limit")

    return _PREFIX.pack(length)


def unpack_prefix(prefix: bytes) -> int:
    """Return the payload length encoded in *prefix*."""

    if len(prefix) != PREFIX_SIZE:
        raise FramingError(f"length prefix is {len(prefix)} bytes, expected {PREFIX_SIZE}")

    return _PREFIX.unpack(prefix)[0]


def to_frame(payload: bytes) -> Tuple[bytes, bytes]:
    """Return (prefix, payload), to be written as two separate writes."""

    return pack_prefix(payload), payload


def write_frame(transport: Transport, payload: bytes) -> None:
    prefix, payload = to_frame(payload)
    transport.write(prefix)
    transport.write(payload)


def read_frame(transport: Transport, deadline: Optional[float] = None) -> bytes:
    """ Read one complete frame and return its payload. With a *deadline*
        the whole frame must arrive before it passes, otherwise
        :class:`simpleipc.transport.TransportTimeout` is raised, or
        :class:`simpleipc.transport.FrameTimeout` if part of the frame had
        already been consumed.
    """

    prefix = transport.read_exactly(PREFIX_SIZE, deadline)
    length = unpack_prefix(prefix)

    try:
        return _read_payload(transport, length, deadline)
    except FrameTimeout:
        raise
    except TransportTimeout as exc:
        raise FrameTimeout(f"deadline passed before the {length} byte payload arrived") from exc


def read_frame_nonblocking(transport: Transport):
    """ Read one complete frame if one has started to arrive, otherwise
        return :data:`simpleipc.transport.WOULD_BLOCK`.
    """

    prefix = transport.read_exactly_nonblocking(PREFIX_SIZE)
    if prefix is WOULD_BLOCK:
        return WOULD_BLOCK

    length = unpack_prefix(prefix)
    return _read_payload(transport, length, None)


def _read_payload(transport: Transport, length: int, deadline: Optional[float]) -> bytes:
    payload = transport.read_exactly(length, deadline)

    # A datagram shorter than the advertised length is a broken frame.
    if len(payload) != length:
        raise FramingError(f"payload is {len(payload)} bytes, prefix promised {length}")

    return payload


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
