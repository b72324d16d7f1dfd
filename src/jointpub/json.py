''' Wrapper module to select the most performant available library to handle
    the equivalent of :func:`json.loads` and :func:`json.dumps`.
'''

# msgspec is preferred when it is installed; orjson is always available as
# a declared dependency. Both emit bytes from dumps(), and both parse bytes
# or str in loads().

msgspec = None

try:
    import msgspec
except ImportError:
    pass

import orjson


if msgspec is not None:
    encoder = msgspec.json.Encoder()
    decoder = msgspec.json.Decoder()
    dumps = encoder.encode
    loads = decoder.decode
    DecodeError = msgspec.DecodeError
    EncodeError = (msgspec.EncodeError, TypeError, OverflowError)
else:
    dumps = orjson.dumps
    loads = orjson.loads
    DecodeError = orjson.JSONDecodeError
    EncodeError = orjson.JSONEncodeError


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
