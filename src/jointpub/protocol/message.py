""" Class representations of the jointpub telemetry messages. Both classes
    are immutable values; an instance that exists is an instance that
    satisfies the robot joint schema.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from . import fields


def _finite(owner, label, value):
    """ Return *value* as a float, raising ValueError if it is not a finite
        real number. Booleans are rejected even though Python considers
        them integers.
    """

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError('%s.%s must be a number, got %r' % (owner, label, value))

    value = float(value)

    if math.isfinite(value):
        pass
    else:
        raise ValueError('%s.%s must be finite, got %r' % (owner, label, value))

    return value



@dataclass(frozen=True)
class JointState:
    """ One sensed/actuated joint sample. The *name* must be one of
        :data:`jointpub.protocol.fields.JOINT_NAMES`; the remaining fields
        are finite floating point values in radians, radians per second,
        and newton-meters, respectively.
    """

    name: str
    angle_rad: float
    velocity_rad_s: float
    torque_nm: float

    def __post_init__(self):

        if not isinstance(self.name, str) or self.name == '':
            raise ValueError('JointState.name must be a non-empty string')

        if self.name not in fields.JOINT_NAMES:
            raise ValueError('unknown joint name: ' + repr(self.name))

        # The dataclass is frozen; object.__setattr__ is the sanctioned way
        # to normalize values inside __post_init__.

        for label in (fields.ANGLE, fields.VELOCITY, fields.TORQUE):
            value = _finite('JointState', label, getattr(self, label))
            object.__setattr__(self, label, value)


    @property
    def degrees(self) -> float:
        return math.degrees(self.angle_rad)


# end of class JointState



@dataclass(frozen=True)
class RobotState:
    """ One published snapshot of the full robot. The *timestamp* is a
        logical tick counter, not wall-clock time: it is an unsigned 64-bit
        integer that a publisher increments exactly once per tick. The
        *joints* are always six :class:`JointState` instances, in the order
        established by :data:`jointpub.protocol.fields.JOINT_NAMES`.
    """

    robot_id: str
    timestamp: int
    joints: Tuple[JointState, ...]

    def __post_init__(self):

        if not isinstance(self.robot_id, str) or self.robot_id == '':
            raise ValueError('RobotState.robot_id must be a non-empty string')

        timestamp = self.timestamp
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            raise ValueError('RobotState.timestamp must be an integer, got %r' % (timestamp,))

        if timestamp < 0 or timestamp > fields.TIMESTAMP_MAX:
            raise ValueError('RobotState.timestamp out of unsigned 64-bit range: %d' % (timestamp))

        joints = tuple(self.joints)

        if len(joints) != fields.JOINT_COUNT:
            raise ValueError('RobotState requires %d joints, got %d' % (fields.JOINT_COUNT, len(joints)))

        for position, joint in enumerate(joints):
            if not isinstance(joint, JointState):
                raise ValueError('RobotState.joints[%d] is not a JointState' % (position))

            expected = fields.JOINT_NAMES[position]
            if joint.name != expected:
                raise ValueError('RobotState.joints[%d] must be %r, got %r' % (position, expected, joint.name))

        object.__setattr__(self, 'joints', joints)


    def joint(self, name: str) -> JointState:
        """ Return the :class:`JointState` for the joint called *name*.
        """

        try:
            position = fields.JOINT_NAMES.index(name)
        except ValueError:
            raise KeyError('unknown joint name: ' + repr(name))

        return self.joints[position]


# end of class RobotState


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
