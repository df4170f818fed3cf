""" Python implementation of simpleipc: minimal point-to-point messaging
    between processes, over either a local stream socket or UDP, with
    length-prefixed frames and a pluggable payload codec.
"""

# Utility components.

from . import json

# Submodules used by multiple other components.

from . import transport
from . import config
from . import framing

# Primary public-facing interfaces.

from .channel import IPC, ABSENT
from .config import Configuration

from .transport import (
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
    WOULD_BLOCK,
)

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
