import os
import pytest
import socket
import tempfile
import threading
import time
import uuid

import simpleipc


@pytest.fixture
def socket_path():
    """ A unique, short socket path. AF_UNIX paths are limited to a little
        over one hundred bytes, which rules out the usual pytest tmp_path.
    """

    path = os.path.join(tempfile.gettempdir(), 'simpleipc-test-%s.sock' % (uuid.uuid4().hex[:12]))

    yield path

    if os.path.lexists(path):
        os.unlink(path)


@pytest.fixture
def udp_port():
    """ A UDP port that was free a moment ago.
    """

    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(('', 0))
    port = sock.getsockname()[1]
    sock.close()

    return port


def connect_when_ready(channel, timeout=5):
    """ Connect *channel*, retrying while the listening side is still
        getting its socket bound.
    """

    expiration = time.monotonic() + timeout

    while True:
        try:
            return channel.connect()
        except (simpleipc.EndpointNotFound, simpleipc.ConnectionRefused):
            if time.monotonic() > expiration:
                raise
            time.sleep(0.01)


@pytest.fixture
def connect():
    return connect_when_ready


@pytest.fixture
def pair(socket_path, udp_port):
    """ Factory returning a connected (client, server) pair of
        :class:`simpleipc.IPC` instances of the requested kind. Options
        apply to both sides unless prefixed by 'server_'.
    """

    opened = list()

    def make_pair(kind, **options):

        server_options = dict()
        for key in list(options):
            if key.startswith('server_'):
                server_options[key[7:]] = options.pop(key)

        options['kind'] = kind
        options['path'] = socket_path
        options['port'] = udp_port

        client = simpleipc.IPC(**options)
        server = simpleipc.IPC(**dict(options, **server_options))
        opened.append(client)
        opened.append(server)

        if client.config.kind == 'udp':
            server.listen()
            client.connect()
            return client, server

        # Stream listen() blocks until the client shows up.

        listener = threading.Thread(target=server.listen)
        listener.daemon = True
        listener.start()

        connect_when_ready(client)
        listener.join(5)
        assert server.transport.is_open

        return client, server

    yield make_pair

    for channel in opened:
        channel.close()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
