"""ZMQ multipart framing for telemetry messages.

Publish (PUB/SUB)
    topic, payload_json

The topic frame is raw UTF-8 text. ZeroMQ subscriptions match on a byte
prefix of the first frame, which is exactly the topic-prefix filter rule;
there is no trailing separator appended to the topic.

For interoperability with older single-frame publishers, a lone frame of
the form ``b"<topic> <payload_json>"`` is also accepted on receipt.
"""

from __future__ import annotations

from typing import Sequence, Tuple

from ...protocol.codec import DecodeError


_LEGACY_SEP = b" "


def to_pub_frames(topic: str, payload: bytes) -> Tuple[bytes, bytes]:
    """Encode a topic label and an encoded payload for PUB/SUB sockets."""

    if not isinstance(topic, str):
        raise TypeError("topic must be a string")

    return (topic.encode(), bytes(payload))


def from_pub_frames(parts: Sequence[bytes]) -> Tuple[str, bytes]:
    """Split received multipart *parts* into (topic, payload)."""

    if len(parts) == 2:
        topic_b, payload = parts
    elif len(parts) == 1 and _LEGACY_SEP in parts[0]:
        topic_b, payload = parts[0].split(_LEGACY_SEP, 1)
    else:
        raise DecodeError(f"invalid PUB message: {len(parts)} frame(s)")

    try:
        topic = bytes(topic_b).decode()
    except UnicodeDecodeError as exc:
        raise DecodeError("topic frame is not valid UTF-8") from exc

    return topic, bytes(payload)


def matches(topic: str, topic_filter: str) -> bool:
    """Prefix filter: True if *topic* begins with *topic_filter*. The empty
    filter matches every topic.
    """

    return topic.startswith(topic_filter)
