"""Transport layer implementations."""

from .base import (
    TransportError,
    BindError,
    ConnectError,
    State,
)

from . import zmq
