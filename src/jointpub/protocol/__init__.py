from . import fields
from . import message
from . import codec

from .message import JointState, RobotState
from .codec import CodecError, EncodeError, DecodeError, encode, decode


"""
jointpub Protocol Layer
=======================

This package defines the transport-agnostic telemetry messages published by
jointpub, and the codec that puts them on the wire.

The protocol layer MUST NOT depend on any transport implementation
(e.g. ZeroMQ).

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

Generator (jointpub.generator)
    Produces one RobotState per tick

    │
    ▼
Codec (codec.py)
    RobotState <-> self-describing JSON bytes
    - encode()
    - decode()
    Pure, no I/O

    │
    ▼
Message Model (message.py)
    Immutable protocol data structures
    - JointState
    - RobotState
    Validated on construction

    │
    ▼
Field Vocabulary (fields.py)
    Canonical names for payload keys and the joint schema
    Prevents string drift across system

---------------------------------------------------------------------

Below the Protocol Layer (for context)
--------------------------------------

Publisher / Subscriber
    Drive the publish and receive loops

Framing Layer
    Maps (topic, payload) <-> wire frames

Transport Layer
    Moves bytes
    - ZeroMQ PUB/SUB

---------------------------------------------------------------------
"""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
