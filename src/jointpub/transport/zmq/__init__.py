"""ZeroMQ transport backend."""

from . import framing
from . import publish
