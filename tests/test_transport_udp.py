import pytest
import socket
import time

import simpleipc
from simpleipc import transport


def make(port, **options):
    config = simpleipc.Configuration(kind='udp', port=port, **options)
    return transport.create(config)


def open_pair(port):
    server = make(port)
    server.listen()

    client = make(port)
    assert client.connect() == True

    return client, server


def test_construct_allocates(udp_port):

    udp = make(udp_port)

    assert isinstance(udp, transport.UDPTransport)
    assert udp.socket is not None
    assert udp.is_open == False
    assert udp.address == ('127.0.0.1', udp_port)

    udp.close()


def test_io_before_open(udp_port):

    udp = make(udp_port)

    with pytest.raises(simpleipc.TransportStateError):
        udp.write(b'nope')

    with pytest.raises(simpleipc.TransportStateError):
        udp.read_exactly(4)

    udp.close()


def test_one_datagram_per_write(udp_port):

    client, server = open_pair(udp_port)

    client.write(b'\x00\x00\x00\x05')
    client.write(b'hello')

    # Reading fewer bytes than a datagram holds still consumes it whole.

    assert server.read_exactly(2) == b'\x00\x00'
    assert server.read_exactly(5) == b'hello'

    client.close()
    server.close()


def test_empty_datagram(udp_port):

    client, server = open_pair(udp_port)

    client.write(b'')
    client.write(b'next')

    deadline = time.monotonic() + 2
    assert server.read_exactly(0, deadline) == b''
    assert server.read_exactly(4, deadline) == b'next'

    client.close()
    server.close()


def test_connect_idempotent(udp_port):

    client, server = open_pair(udp_port)

    assert client.connect() == False
    assert client.connect() == False

    client.close()
    server.close()


def test_deadline(udp_port):

    client, server = open_pair(udp_port)

    start = time.monotonic()
    with pytest.raises(simpleipc.TransportTimeout):
        server.read_exactly(4, start + 0.2)

    assert time.monotonic() - start >= 0.15

    client.close()
    server.close()


def test_nonblocking(udp_port):

    client, server = open_pair(udp_port)

    start = time.monotonic()
    assert server.read_exactly_nonblocking(4) is simpleipc.WOULD_BLOCK
    assert time.monotonic() - start < 0.1

    client.write(b'data')
    server.wait(time.monotonic() + 2)
    assert server.read_exactly_nonblocking(4) == b'data'

    client.close()
    server.close()


def test_address_in_use(udp_port):

    squatter = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    squatter.bind(('', udp_port))

    server = make(udp_port)

    try:
        with pytest.raises(simpleipc.AddressInUse):
            server.listen()
    finally:
        squatter.close()
        server.close()


def test_oversized_datagram(udp_port):

    client, server = open_pair(udp_port)

    with pytest.raises(simpleipc.FramingError):
        client.write(b'x' * (transport.UDPTransport.maximum_datagram + 1))

    client.close()
    server.close()


def test_close_idempotent(udp_port):

    client, server = open_pair(udp_port)

    client.close()
    client.close()
    server.close()
    server.close()

    assert client.is_open == False

    with pytest.raises(simpleipc.TransportStateError):
        client.write(b'late')

    with pytest.raises(simpleipc.TransportStateError):
        server.listen()


def test_oversized_read(udp_port):
    """ No datagram can be longer than the maximum, so a longer read is a
        corrupt length prefix, refused before any buffer is allocated.
    """

    client, server = open_pair(udp_port)

    with pytest.raises(simpleipc.FramingError):
        server.read_exactly(transport.UDPTransport.maximum_datagram + 1)

    with pytest.raises(simpleipc.FramingError):
        server.read_exactly(2 ** 32 - 1, time.monotonic() + 1)

    # Nothing was consumed along the way.

    client.write(b'fine')
    assert server.read_exactly(4, time.monotonic() + 2) == b'fine'

    client.close()
    server.close()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
