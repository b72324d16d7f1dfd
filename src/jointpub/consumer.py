""" Consumers for received :class:`jointpub.protocol.RobotState` values. A
    consumer is any callable accepting a single state; it runs inline in the
    receive loop, so it should return promptly.
"""

import logging
import threading

logger = logging.getLogger(__name__)


def log_state(state):
    """ Default consumer: log the robot id, timestamp, and every joint.
    """

    logger.info("Received state %d from %s with %d joints",
                state.timestamp, state.robot_id, len(state.joints))

    for joint in state.joints:
        logger.info("  %-13s %7.3f rad (%7.1f deg)  vel %7.3f rad/s  torque %6.2f N*m",
                    joint.name, joint.angle_rad, joint.degrees,
                    joint.velocity_rad_s, joint.torque_nm)



class Recorder:
    """ Consumer that keeps every state it receives, in arrival order. The
        :func:`wait` method blocks until a given number of states have
        arrived, which is mostly useful for tests and scripts.
    """

    def __init__(self):
        self.states = list()
        self.arrived = threading.Condition()


    def __call__(self, state):
        with self.arrived:
            self.states.append(state)
            self.arrived.notify_all()


    def __len__(self):
        return len(self.states)


    @property
    def timestamps(self):
        return [state.timestamp for state in self.states]


    def wait(self, count, timeout=None):
        """ Block until at least *count* states have been recorded, or until
            *timeout* seconds have elapsed. Returns True if the count was
            reached.
        """

        with self.arrived:
            return self.arrived.wait_for(lambda: len(self.states) >= count, timeout)


    def wait_for(self, predicate, timeout=None):
        """ Block until *predicate*, called with the list of recorded
            states, returns True.
        """

        with self.arrived:
            return self.arrived.wait_for(lambda: predicate(self.states), timeout)


# end of class Recorder


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
