import json

import jointpub


def test_json_encode_and_decode():
    encode_and_decode(json.dumps, json.loads, dump_is_bytes=False)


def test_jointpub_encode_and_decode():
    encode_and_decode(jointpub.json.dumps, jointpub.json.loads)


def test_decode_error():

    try:
        jointpub.json.loads(b'{"truncated": ')
    except jointpub.json.DecodeError:
        pass
    else:
        raise AssertionError('truncated JSON was accepted')


def encode_and_decode(dumps, loads, dump_is_bytes=True):

    input_dictionary = dict()
    input_dictionary['list'] = [1, 2, 3, 'a', 'b', None, 'c', 'z']
    input_dictionary['dict'] = {'one': 1, 'two': 2.5}
    input_dictionary['none'] = None
    input_dictionary['true'] = True
    input_dictionary['false'] = False
    input_dictionary['big'] = 2 ** 64 - 1
    input_dictionary['float'] = 0.1 + 0.2

    encoded = dumps(input_dictionary)

    if dump_is_bytes:
        assert isinstance(encoded, bytes)
    else:
        assert isinstance(encoded, str)

    # It won't do to compare the encoded JSON against a pre-set notion of
    # what the encoded output should look like, as there is variance in
    # the handling of whitespace between the different JSON libraries.

    decoded = loads(encoded)
    assert isinstance(decoded, dict)
    assert decoded == input_dictionary
    assert isinstance(decoded['big'], int)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
