"""Transport interface.

This is the (small) contract that transport implementations should follow.
It lives outside :mod:`jointpub.protocol` so the protocol remains
transport-agnostic.
"""

from __future__ import annotations

import enum
import re
from abc import ABC, abstractmethod
from typing import Optional, Tuple


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class BindError(TransportError):
    """The publish endpoint could not be bound."""


class ConnectError(TransportError):
    """The subscribe endpoint is malformed and cannot be dialed."""


class State(enum.Enum):
    """Lifecycle of a transport endpoint."""

    UNBOUND = "unbound"
    BOUND = "bound"
    PUBLISHING = "publishing"
    UNCONNECTED = "unconnected"
    CONNECTED = "connected"
    RECEIVING = "receiving"
    CLOSED = "closed"


_schemes = ("tcp", "ipc", "inproc", "pgm", "epgm", "ws", "wss")
_tcp_endpoint = re.compile(r"^(?P<host>\[[^\]]+\]|[^:/\[\]]+):(?P<port>\*|\d+)$")


def check_endpoint(address: str) -> Tuple[str, str]:
    """Return (scheme, location) for *address*, raising ValueError if it is
    not a well-formed transport endpoint such as ``tcp://host:5555``.
    """

    if not isinstance(address, str) or not address:
        raise ValueError("endpoint must be a non-empty string")

    scheme, sep, location = address.partition("://")
    if not sep or not location:
        raise ValueError(f"endpoint {address!r} is missing a scheme:// prefix")

    if scheme not in _schemes:
        raise ValueError(f"endpoint {address!r} has unsupported scheme {scheme!r}")

    if scheme == "tcp":
        match = _tcp_endpoint.match(location)
        if match is None:
            raise ValueError(f"endpoint {address!r} must be tcp://host:port")

        port = match.group("port")
        if port != "*" and not 0 < int(port) < 65536:
            raise ValueError(f"endpoint {address!r} has port out of range")

    return scheme, location


class Transport(ABC):
    """Minimal contract for a wire-level transport endpoint."""

    state: State = State.CLOSED

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying socket."""

    @property
    def is_open(self) -> bool:
        """Whether the transport currently owns a live socket."""
        return self.state not in (State.UNBOUND, State.UNCONNECTED, State.CLOSED)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> Optional[bool]:
        self.close()
        return None
