import json
import simpleipc


def test_json_encode_and_decode():
    encode_and_decode(json.dumps, json.loads, dump_is_bytes=False)


def test_simpleipc_encode_and_decode():
    encode_and_decode(simpleipc.json.dumps, simpleipc.json.loads)


def test_default_codec():
    """ Channels use the local json wrapper unless told otherwise.
    """

    config = simpleipc.Configuration()
    assert config.codec is simpleipc.json


def encode_and_decode(dumps, loads, dump_is_bytes=True):

    input_dictionary = dict()
    input_dictionary['list'] = [1, 2, 3, 'a', 'b', None, 'c', 'z']
    input_dictionary['dict'] = {'one': 1, 'two': 2}
    input_dictionary['none'] = None
    input_dictionary['true'] = True
    input_dictionary['false'] = False
    input_dictionary['float'] = 35.5
    input_dictionary['tuple'] = (1, 2, 3)

    encoded = dumps(input_dictionary)

    if dump_is_bytes:
        assert isinstance(encoded, bytes)
    else:
        assert isinstance(encoded, str)

    decoded = loads(encoded)
    assert isinstance(decoded, dict)

    # JSON has no tuples; they come back as lists. So the decoded result
    # should not match the original input dictionary.

    assert decoded != input_dictionary

    # If we fix that one item it should match.

    assert decoded['tuple'] == [1, 2, 3]
    decoded['tuple'] = tuple(decoded['tuple'])
    assert decoded == input_dictionary


def test_scalars():

    for value in (44, True, None, 35.5, 'string', '', [], {}):
        assert simpleipc.json.loads(simpleipc.json.dumps(value)) == value


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
