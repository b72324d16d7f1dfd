""" Python implementation of jointpub: periodic robot joint telemetry from
    one publisher to any number of subscribers over ZeroMQ PUB/SUB. Delivery
    is best-effort and at-most-once; a late or slow subscriber simply misses
    what it was not there to receive.
"""

# Utility components.

from . import json
from . import schedule

# Submodules used by multiple other components.

from . import protocol
from . import config
from . import transport

# Primary public-facing interfaces.

from .protocol import JointState, RobotState
from .protocol import CodecError, EncodeError, DecodeError, encode, decode
from .transport import TransportError, BindError, ConnectError
from .generator import JointGenerator
from .config import PublisherConfig, SubscriberConfig
from .publisher import Publisher
from .subscriber import Subscriber

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
