"""Wire codec for :class:`RobotState` payloads.

The payload is a compact JSON object with named fields::

    {"robot_id": "robot_arm_001",
     "timestamp": 42,
     "joints": [{"name": "shoulder_pan",
                 "angle_rad": 0.24,
                 "velocity_rad_s": 0.097,
                 "torque_nm": 2.3}, ...]}

There is no I/O here; :func:`encode` and :func:`decode` are pure.
"""

from __future__ import annotations

from typing import Any, Dict

from .. import json
from . import fields
from .message import JointState, RobotState


class CodecError(ValueError):
    """Base class for payload encoding/decoding errors."""


class EncodeError(CodecError):
    """A RobotState could not be put on the wire."""


class DecodeError(CodecError):
    """Received bytes are not a well-formed RobotState payload."""


def to_dict(state: RobotState) -> Dict[str, Any]:
    joints = []
    for joint in state.joints:
        joints.append({
            fields.NAME: joint.name,
            fields.ANGLE: joint.angle_rad,
            fields.VELOCITY: joint.velocity_rad_s,
            fields.TORQUE: joint.torque_nm,
        })

    return {
        fields.ROBOT_ID: state.robot_id,
        fields.TIMESTAMP: state.timestamp,
        fields.JOINTS: joints,
    }


def encode(state: RobotState) -> bytes:
    """Return the JSON payload for *state*."""

    if not isinstance(state, RobotState):
        raise EncodeError(f"expected a RobotState, got {type(state).__name__}")

    # RobotState validates on construction, but a frozen dataclass can still
    # be doctored with object.__setattr__. Re-check before anything leaves.
    try:
        RobotState(state.robot_id, state.timestamp, state.joints)
        for joint in state.joints:
            JointState(joint.name, joint.angle_rad, joint.velocity_rad_s, joint.torque_nm)
    except ValueError as exc:
        raise EncodeError(str(exc)) from exc

    try:
        return json.dumps(to_dict(state))
    except json.EncodeError as exc:
        raise EncodeError(str(exc)) from exc


def _require(block: Dict[str, Any], key: str, where: str) -> Any:
    try:
        return block[key]
    except KeyError:
        raise DecodeError(f"{where}: missing field {key!r}") from None


def _joint_from_dict(block: Any, position: int) -> JointState:
    where = f"joints[{position}]"

    if not isinstance(block, dict):
        raise DecodeError(f"{where}: expected an object, got {type(block).__name__}")

    name = _require(block, fields.NAME, where)
    angle = _require(block, fields.ANGLE, where)
    velocity = _require(block, fields.VELOCITY, where)
    torque = _require(block, fields.TORQUE, where)

    try:
        return JointState(name, angle, velocity, torque)
    except ValueError as exc:
        raise DecodeError(f"{where}: {exc}") from exc


def from_dict(block: Any) -> RobotState:
    """Build a RobotState from an already-parsed JSON object.

    Unknown extra fields are ignored; missing or malformed fields are not
    repaired.
    """

    if not isinstance(block, dict):
        raise DecodeError(f"payload must be a JSON object, got {type(block).__name__}")

    robot_id = _require(block, fields.ROBOT_ID, "payload")
    timestamp = _require(block, fields.TIMESTAMP, "payload")
    joints = _require(block, fields.JOINTS, "payload")

    if not isinstance(joints, list):
        raise DecodeError(f"payload: {fields.JOINTS!r} must be a list")

    if len(joints) != fields.JOINT_COUNT:
        raise DecodeError(
            f"payload: expected {fields.JOINT_COUNT} joints, got {len(joints)}"
        )

    joints = tuple(_joint_from_dict(joint, position) for position, joint in enumerate(joints))

    try:
        return RobotState(robot_id, timestamp, joints)
    except ValueError as exc:
        raise DecodeError(f"payload: {exc}") from exc


def decode(data: bytes) -> RobotState:
    """Parse *data* into a RobotState, raising DecodeError if it is not a
    well-formed payload.
    """

    if not data:
        raise DecodeError("empty payload")

    try:
        block = json.loads(data)
    except json.DecodeError as exc:
        raise DecodeError(f"payload is not valid JSON: {exc}") from exc

    return from_dict(block)
