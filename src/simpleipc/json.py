''' Wrapper module to select the most performant available library to handle
    the equivalent of :func:`json.loads` and :func:`json.dumps`. This is the
    default payload codec for :class:`simpleipc.IPC`; any object providing
    the same two functions can be substituted.
'''

# msgspec is an optional accelerator; orjson is always installed.

msgspec = None

try:
    import msgspec
except ImportError:
    pass

import orjson


# The msgspec 'encode' operation returns bytes, as does orjson.dumps. Both
# 'loads' methods accept either bytes or str.

if msgspec is not None:
    encoder = msgspec.json.Encoder()
    decoder = msgspec.json.Decoder()
    dumps = encoder.encode
    loads = decoder.decode
else:
    dumps = orjson.dumps
    loads = orjson.loads

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
