""" Demonstration client and server. Run the server in one terminal and the
    client in another::

        simpleipc-demo server --kind udp
        simpleipc-demo client --kind udp

    The client sends a list, a dictionary, and finally the string 'stop';
    the server polls without blocking, prints whatever arrives, and exits
    when it sees 'stop'.
"""

import argparse
import sys
import time

from .channel import IPC, ABSENT
from . import config


messages = ([1, 2, 3, 'test'], {'a': 'test', 'b': 'prova'}, 'stop')
sentinel = 'stop'


def server(interval=0.01, output=None, ready=None, **options):
    """ Poll for messages until the 'stop' sentinel arrives. Returns the
        list of messages received, sentinel included. If *ready* is provided
        it is set once the server is listening.
    """

    options['nonblocking'] = True
    received = list()

    with IPC(**options) as channel:
        channel.listen()
        if ready is not None:
            ready.set()

        while True:
            message = channel.receive()
            if message is ABSENT:
                time.sleep(interval)
                continue

            received.append(message)
            if output is not None:
                print(repr(message), file=output)
            if message == sentinel:
                break

    return received


def client(**options):
    """ Send the demonstration messages. Returns the serialized payloads.
    """

    sent = list()

    with IPC(**options) as channel:
        channel.connect()
        for message in messages:
            sent.append(channel.send(message))

    return sent


def arguments(argv=None):

    parser = argparse.ArgumentParser(description='simpleipc demonstration client and server')
    parser.add_argument('role', choices=('server', 'client'))
    parser.add_argument('--kind', default=config.defaults['kind'],
                        help="transport kind, 'unix' or 'udp' (default: %(default)s)")
    parser.add_argument('--host', default=config.defaults['host'],
                        help='remote host for udp (default: %(default)s)')
    parser.add_argument('--port', type=int, default=config.defaults['port'],
                        help='udp port (default: %(default)s)')
    parser.add_argument('--path', default=None,
                        help='unix socket path (default: derived from the program name)')
    parser.add_argument('--no-cleanup', dest='force_cleanup', action='store_false',
                        help='fail instead of removing a stale socket file')

    return parser.parse_args(argv)


def main(argv=None):

    args = arguments(argv)

    options = dict()
    options['kind'] = args.kind
    options['host'] = args.host
    options['port'] = args.port
    options['path'] = args.path
    options['force_cleanup'] = args.force_cleanup

    if args.role == 'server':
        server(output=sys.stdout, **options)
    else:
        client(**options)

    return 0


if __name__ == '__main__':
    sys.exit(main())

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
