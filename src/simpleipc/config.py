""" Configuration handling for :class:`simpleipc.IPC` instances. A
    :class:`Configuration` is the fully resolved, immutable set of options
    for one channel: the module-level :data:`defaults` with any caller
    overrides applied on top, once, at construction time.
"""

import numbers
import os
import sys
import tempfile

from .transport.base import ConfigurationError


UNIX = 'unix'
UDP = 'udp'

LOCALHOST = '127.0.0.1'

defaults = dict()
defaults['kind'] = UNIX
defaults['host'] = LOCALHOST
defaults['port'] = 5000
defaults['timeout'] = 0
defaults['nonblocking'] = False
defaults['force_cleanup'] = True
defaults['path'] = None
defaults['codec'] = None

# Alternate spellings accepted for the 'kind' option.

kind_aliases = dict()
kind_aliases['unix'] = UNIX
kind_aliases['stream'] = UNIX
kind_aliases['local'] = UNIX
kind_aliases['udp'] = UDP
kind_aliases['datagram'] = UDP
kind_aliases['dgram'] = UDP


def default_path(program=None):
    """ Return the socket path used by a connection-oriented transport when
        none is configured. The path is derived from the name of the running
        program, so that a client and server launched from the same script
        agree on it without further coordination.
    """

    if program is None:
        try:
            program = sys.argv[0]
        except IndexError:
            program = ''

    program = os.path.basename(program)
    program = os.path.splitext(program)[0]

    if program == '' or program == '-c':
        program = 'python'

    return os.path.join(tempfile.gettempdir(), program + '.sock')


def normalize_kind(value):
    """ Return the canonical transport kind for *value*, raising
        :class:`ConfigurationError` if it is not recognized.
    """

    try:
        return kind_aliases[value.lower()]
    except (AttributeError, KeyError):
        raise ConfigurationError('unknown transport kind: ' + repr(value)) from None


class Configuration:
    """ Immutable options for a single channel and its transport. Values are
        available both as attributes and as items::

            config = Configuration(kind='udp', port=5001)
            config.port == config['port']

        Keyword arguments that are not recognized options are ignored.
    """

    __slots__ = ('_values',)

    def __init__(self, **overrides):

        values = dict(defaults)

        for key in defaults:
            try:
                value = overrides[key]
            except KeyError:
                continue
            values[key] = value

        values['kind'] = normalize_kind(values['kind'])
        values['port'] = self._validate_port(values['port'])
        values['timeout'] = self._validate_timeout(values['timeout'])
        values['nonblocking'] = bool(values['nonblocking'])
        values['force_cleanup'] = bool(values['force_cleanup'])

        host = values['host']
        if not isinstance(host, str) or host == '':
            raise ConfigurationError('host must be a non-empty string: ' + repr(host))

        path = values['path']
        if path is None:
            path = default_path()
        else:
            try:
                path = os.fspath(path)
            except TypeError:
                raise ConfigurationError('path must be a filesystem path: ' + repr(path)) from None
        values['path'] = path

        codec = values['codec']
        if codec is None:
            from . import json
            codec = json
        elif not (callable(getattr(codec, 'dumps', None)) and callable(getattr(codec, 'loads', None))):
            raise ConfigurationError('codec must provide dumps() and loads(): ' + repr(codec))
        values['codec'] = codec

        object.__setattr__(self, '_values', values)


    @staticmethod
    def _validate_port(port):

        if isinstance(port, bool) or not isinstance(port, numbers.Integral):
            try:
                port = int(port, 10)
            except (TypeError, ValueError):
                raise ConfigurationError('port must be an integer: ' + repr(port)) from None

        port = int(port)
        if port < 0 or port > 65535:
            raise ConfigurationError('port out of range: ' + str(port))

        return port


    @staticmethod
    def _validate_timeout(timeout):

        if timeout is None:
            return 0

        if isinstance(timeout, bool) or not isinstance(timeout, numbers.Real):
            raise ConfigurationError('timeout must be a number of seconds: ' + repr(timeout))

        if timeout < 0:
            raise ConfigurationError('timeout cannot be negative: ' + str(timeout))

        return timeout


    def __getattr__(self, name):
        if name == '_values':
            raise AttributeError(name)
        try:
            return self._values[name]
        except KeyError:
            raise AttributeError(name) from None


    def __setattr__(self, name, value):
        raise AttributeError('Configuration instances are immutable')


    def __delattr__(self, name):
        raise AttributeError('Configuration instances are immutable')


    def __getitem__(self, key):
        return self._values[key]


    def __contains__(self, key):
        return key in self._values


    def __iter__(self):
        return iter(self._values)


    def __len__(self):
        return len(self._values)


    def __eq__(self, other):
        if not isinstance(other, Configuration):
            return NotImplemented
        return self._values == other._values


    def __hash__(self):
        return hash(tuple(sorted(self._values.items(), key=lambda pair: pair[0])))


    def __repr__(self):
        pairs = ('%s=%r' % (key, value) for key, value in self._values.items() if key != 'codec')
        return 'Configuration(' + ', '.join(pairs) + ')'


    @property
    def waiting(self):
        """ The waiting discipline for receives: 'nonblocking', 'timeout',
            or 'blocking'.
        """

        if self.nonblocking:
            return 'nonblocking'
        if self.timeout > 0:
            return 'timeout'
        return 'blocking'


    def as_dict(self):
        """ Return a copy of the resolved options as a plain dictionary.
        """

        return dict(self._values)


    def replace(self, **overrides):
        """ Return a new :class:`Configuration` with the supplied options
            changed; this instance is left untouched.
        """

        values = self.as_dict()
        values.update(overrides)
        return Configuration(**values)


# end of class Configuration


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
