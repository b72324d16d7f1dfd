""" Fixed-rate cadence for the publish loop. The :class:`Ticker` keeps a
    schedule against the monotonic clock: each boundary is the previous
    boundary plus the interval, regardless of how long the work between
    boundaries took, so the cadence does not drift.
"""

import threading
import time


class Ticker:
    """ Wait for successive tick boundaries *interval* seconds apart. The
        wait is an :class:`threading.Event` wait, so a call to :func:`stop`
        from another thread interrupts it immediately. An existing *alarm*
        event can be shared with the caller so that one event cancels both
        the ticker and anything else waiting on it.

        If the caller falls more than a full interval behind, the missed
        boundaries are skipped rather than fired back-to-back; one tick fires
        immediately and the ticker then resumes on the original grid.
    """

    def __init__(self, interval, clock=time.monotonic, alarm=None):

        interval = float(interval)

        if interval <= 0:
            raise ValueError('the tick interval must be positive')

        self.interval = interval
        self.clock = clock
        self.next = None
        self.skipped = 0

        if alarm is None:
            alarm = threading.Event()

        self.alarm = alarm


    @property
    def stopped(self):
        return self.alarm.is_set()


    def start(self):
        """ Establish the first boundary as 'now'. The first :func:`wait`
            returns once one interval has elapsed.
        """

        self.next = self.clock() + self.interval


    def wait(self):
        """ Block until the next boundary. Returns False if the ticker was
            stopped while waiting, True otherwise.
        """

        if self.next is None:
            self.start()

        now = self.clock()
        delay = self.next - now

        if delay < -self.interval:
            # Ideally the period is constant, but if we are this far behind
            # there is no point in firing a burst of stale ticks. Jump to
            # the most recent boundary that has already passed.

            missed = int(-delay // self.interval)
            self.skipped += missed
            self.next += missed * self.interval
            delay = self.next - now

        if delay > 0:
            self.alarm.wait(delay)

        self.next += self.interval
        return not self.stopped


    def stop(self):
        self.alarm.set()


# end of class Ticker


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
