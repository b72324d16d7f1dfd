""" Synthetic joint telemetry. A :class:`JointGenerator` produces the
    :class:`jointpub.protocol.RobotState` for any given tick; there is no
    hidden state beyond the tick counter itself, so replaying a tick always
    yields the same state.
"""

import itertools
import math

from .protocol import fields
from .protocol.message import JointState, RobotState


# Waveform constants. Each joint follows the same phase-shifted waveform,
# offset by its index in the joint schema.

phase_rate = 0.01
phase_scale = 0.5
angle_amplitude = 1.5
velocity_amplitude = 0.1
torque_amplitude = 5.0


class JointGenerator:
    """ Produce :class:`RobotState` instances for the robot identified by
        *robot_id*. The joint names, in order, are available as the
        :attr:`names` attribute.
    """

    def __init__(self, robot_id=fields.DEFAULT_ROBOT_ID):

        robot_id = str(robot_id)

        if robot_id == '':
            raise ValueError('the robot_id must be a non-empty string')

        self.robot_id = robot_id
        self.names = fields.JOINT_NAMES


    def joint(self, tick, index):
        """ Return the :class:`JointState` for the joint at position *index*
            on the specified *tick*. All three values are bounded by their
            amplitudes.
        """

        phase = (tick * phase_rate + index) * phase_scale

        angle = math.sin(phase) * angle_amplitude
        velocity = math.cos(phase) * velocity_amplitude
        torque = math.sin(phase * 2.0) * torque_amplitude

        return JointState(self.names[index], angle, velocity, torque)


    def next(self, tick):
        """ Return the :class:`RobotState` for *tick*. The tick is also the
            timestamp of the returned state; tick zero is valid.
        """

        if isinstance(tick, bool) or not isinstance(tick, int):
            raise TypeError('tick must be an integer, got ' + repr(tick))

        if tick < 0 or tick > fields.TIMESTAMP_MAX:
            raise ValueError('tick out of unsigned 64-bit range: ' + str(tick))

        joints = tuple(self.joint(tick, index) for index in range(len(self.names)))
        return RobotState(self.robot_id, tick, joints)


    def states(self, start=1):
        """ Iterate over successive states from a fresh counter, beginning
            with *start*. A publisher uses this to get timestamps 1, 2, 3...
        """

        for tick in itertools.count(start):
            yield self.next(tick)


# end of class JointGenerator


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
