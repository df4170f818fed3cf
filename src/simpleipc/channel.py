""" The :class:`IPC` channel turns a byte-oriented transport into discrete,
    serialized messages. One side calls :func:`IPC.connect` (or just
    :func:`IPC.send`), the other calls :func:`IPC.listen` and then
    :func:`IPC.receive` as many times as it likes.
"""

import logging
import time

from . import framing
from .config import Configuration
from . import transport as transports
from .transport import FrameTimeout, TransportTimeout, WOULD_BLOCK


logger = logging.getLogger(__name__)


class _Absent:
    """ Type of the :data:`ABSENT` sentinel. There is only ever one instance.
    """

    def __repr__(self):
        return 'ABSENT'

    def __bool__(self):
        return False

    def __reduce__(self):
        return 'ABSENT'


# Returned by IPC.receive() when no message was available under the active
# waiting discipline. A received None, 0, '' or [] is a real message; always
# test with 'is ABSENT'.

ABSENT = _Absent()


class IPC:
    """ A point-to-point message channel. Keyword arguments are the options
        described in :mod:`simpleipc.config`; alternatively, a complete
        :class:`simpleipc.config.Configuration` can be passed as *config*,
        in which case any further keyword arguments override it.

        How :func:`receive` waits depends on the configuration:

        * *nonblocking* set: never wait; return :data:`ABSENT` if no
          message has started to arrive. *timeout* is ignored.
        * *timeout* greater than zero: wait at most *timeout* seconds for a
          complete message, return :data:`ABSENT` otherwise.
        * neither: wait as long as it takes.

        Each :class:`IPC` owns exactly one transport, created here and
        closed by :func:`close`.
    """

    def __init__(self, config=None, **options):

        if config is None:
            config = Configuration(**options)
        elif options:
            config = config.replace(**options)

        self.config = config
        self.codec = config.codec
        self.transport = transports.create(config)


    def __repr__(self):
        return '<IPC %s %s>' % (self.config.waiting, repr(self.transport))


    def __enter__(self):
        return self


    def __exit__(self, *exc_info):
        self.close()


    @property
    def closed(self):
        return self.transport.closed


    def connect(self):
        """ Establish the client side of the channel. Returns False if the
            channel was already connected; calling it again is harmless.
        """

        return self.transport.connect()


    def listen(self):
        """ Establish the server side of the channel. For a connection-oriented
            channel this blocks until a client connects.
        """

        self.transport.listen()


    def close(self):
        """ Close the underlying transport. Closing twice is a no-op.
        """

        self.transport.close()


    def send(self, thing, encoder=None):
        """ Serialize *thing* and send it as a single frame. If *encoder* is
            provided it is used in place of the default codec; it must accept
            one argument and return bytes (a str is UTF-8 encoded). The
            channel is connected first if it is not already.

            Returns the serialized payload, without the length prefix.
        """

        if encoder is None:
            payload = self.codec.dumps(thing)
        else:
            payload = encoder(thing)

        if isinstance(payload, str):
            payload = payload.encode('utf-8')
        elif isinstance(payload, (bytearray, memoryview)):
            payload = bytes(payload)
        elif not isinstance(payload, bytes):
            raise TypeError('encoder must return bytes or str, not ' + type(payload).__name__)

        self.transport.connect()
        framing.write_frame(self.transport, payload)

        logger.debug("sent %d byte frame to %r", len(payload), self.transport.address)
        return payload


    def receive(self, decoder=None):
        """ Receive one message and return the decoded result, or
            :data:`ABSENT` if no message arrived under the configured waiting
            discipline. If *decoder* is provided it is called with the raw
            payload bytes in place of the default codec.
        """

        payload = self._receive_payload()

        if payload is ABSENT:
            return ABSENT

        logger.debug("received %d byte frame on %r", len(payload), self.transport.address)

        if decoder is None:
            return self.codec.loads(payload)
        else:
            return decoder(payload)


    get = receive


    def _receive_payload(self):

        if self.config.nonblocking:
            payload = framing.read_frame_nonblocking(self.transport)
            if payload is WOULD_BLOCK:
                return ABSENT
            return payload

        if self.config.timeout > 0:
            deadline = time.monotonic() + self.config.timeout
            try:
                return framing.read_frame(self.transport, deadline)
            except FrameTimeout:
                # The rest of an abandoned frame would be read as the next
                # prefix on a stream; the channel cannot recover from that.
                if self.transport.stream:
                    logger.warning("timed out partway through a frame on %r, closing", self.transport.address)
                    self.transport.close()
                return ABSENT
            except TransportTimeout:
                return ABSENT

        return framing.read_frame(self.transport)


# end of class IPC


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
