"""Transport layer implementations."""

from .base import (
    ConfigurationError,
    TransportError,
    TransportTimeout,
    TransportStateError,
    TransportIOError,
    FrameTimeout,
    FramingError,
    TransportConnectionError,
    ConnectionRefused,
    EndpointNotFound,
    TransportPortError,
    AddressInUse,
    Transport,
    WOULD_BLOCK,
)

from .unix import UnixTransport
from .udp import UDPTransport


variants = {
    UnixTransport.kind: UnixTransport,
    UDPTransport.kind: UDPTransport,
}


def create(config):
    """ Return a new, unopened :class:`Transport` of the kind named in the
        supplied :class:`simpleipc.config.Configuration`.
    """

    try:
        variant = variants[config.kind]
    except KeyError:
        raise ConfigurationError(f"unknown transport kind: {config.kind!r}") from None

    return variant(config)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
