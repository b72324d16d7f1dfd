""" The publishing half of jointpub. A :class:`Publisher` owns a bound PUB
    socket and a :class:`jointpub.generator.JointGenerator`; on every tick
    it encodes the next :class:`jointpub.protocol.RobotState`, tags it with
    the configured topic, and sends it without waiting on anybody.
"""

import logging
import threading

from . import protocol
from .config import PublisherConfig
from .generator import JointGenerator
from .schedule import Ticker
from .transport import State
from .transport.zmq import publish

logger = logging.getLogger(__name__)


class Publisher:
    """ Publish one :class:`RobotState` per tick at a fixed rate. The
        *config* is a :class:`jointpub.config.PublisherConfig`; if it is not
        provided one will be built from any keyword *options*. A custom
        *generator* may be supplied, otherwise a :class:`JointGenerator` is
        created for the configured robot_id.

        The socket is owned exclusively by this instance and is released
        when :func:`run` exits, whether that exit is a normal return, an
        exception, or a call to :func:`stop`.

        :ivar tick: The timestamp of the most recently published state.
        :ivar published: Number of states handed to the socket.
        :ivar dropped: Number of states dropped due to a saturated buffer.
    """

    def __init__(self, config=None, generator=None, **options):

        if config is None:
            config = PublisherConfig(**options)
        elif options:
            raise TypeError('specify either a config or keyword options, not both')

        if generator is None:
            generator = JointGenerator(config.robot_id)

        self.config = config
        self.generator = generator
        self.server = publish.Server(config.bind, config.high_water_mark)

        self.tick = 0
        self.published = 0
        self.dropped = 0

        self.error = None
        self.thread = None
        self.shutdown = threading.Event()


    def __enter__(self):
        return self


    def __exit__(self, *exc_info):
        self.stop()
        self.join()
        self.close()


    @property
    def endpoint(self):
        """ The concrete endpoint the socket is bound to, or None if it is
            not bound. Useful when binding with a wildcard port.
        """

        return self.server.endpoint


    @property
    def state(self):
        return self.server.state


    def bind(self):
        """ Bind the PUB socket. Raises :class:`jointpub.transport.BindError`
            if the address is unusable or already in use; there is no retry.
        """

        self.server.bind()
        logger.info("Publisher bound to %s", self.server.endpoint)
        return self.server.endpoint


    def step(self):
        """ Publish exactly one tick: generate, encode, frame, and send the
            next state. Returns the state that was generated, regardless of
            whether the transport accepted it. An
            :class:`jointpub.protocol.EncodeError` is not caught here; it
            indicates a generator/schema mismatch.
        """

        if self.server.socket is None:
            raise RuntimeError('publisher is not bound')

        tick = self.tick + 1
        state = self.generator.next(tick)
        payload = protocol.encode(state)

        self.tick = tick

        if self.server.send(self.config.topic, payload):
            self.published += 1
            logger.info("Published state %d for %s with %d joints",
                        state.timestamp, state.robot_id, len(state.joints))
        else:
            self.dropped += 1
            logger.warning("Outbound buffer full, dropped state %d", state.timestamp)

        return state


    def run(self, ticks=None):
        """ Run the publish loop in the calling thread. The socket is bound
            if that has not happened already. After the configured warmup
            pause, one state is published per interval until :func:`stop`
            is called or, if *ticks* is specified, until that many states
            have been published.
        """

        if ticks is not None and ticks < 1:
            raise ValueError('ticks must be a positive integer or None')

        if self.server.state is State.CLOSED:
            raise RuntimeError('publisher is closed')

        try:
            if self.server.state is State.UNBOUND:
                self.bind()

            self.server.state = State.PUBLISHING
            ticker = Ticker(self.config.interval, alarm=self.shutdown)

            warmup = self.config.warmup
            if warmup > 0:
                logger.info("Waiting %.2f seconds for subscribers to connect", warmup)
                if self.shutdown.wait(warmup):
                    return

            logger.info("Publishing on topic %r every %.3f seconds",
                        self.config.topic, self.config.interval)

            ticker.start()
            count = 0

            while not self.shutdown.is_set():
                self.step()
                count += 1

                if ticks is not None and count >= ticks:
                    break

                if not ticker.wait():
                    break

            if ticker.skipped:
                logger.warning("Publish loop fell behind, skipped %d tick boundaries", ticker.skipped)

        finally:
            self.close()


    def _run_background(self, ticks):
        try:
            self.run(ticks)
        except Exception as exc:
            self.error = exc
            logger.exception("Publish loop terminated")


    def start(self, ticks=None):
        """ Run :func:`run` in a background daemon thread. Any exception
            that terminates the loop is logged and retained as the
            :attr:`error` attribute.
        """

        if self.thread is not None:
            raise RuntimeError('publisher already started')

        self.thread = threading.Thread(target=self._run_background, args=(ticks,))
        self.thread.daemon = True
        self.thread.start()


    def stop(self):
        """ Request the publish loop to exit. Safe to call from any thread,
            and safe to call more than once.
        """

        self.shutdown.set()


    def join(self, timeout=None):
        """ Wait for a background loop started with :func:`start` to exit.
            Returns True if the loop is no longer running.
        """

        if self.thread is None:
            return True

        self.thread.join(timeout)
        return not self.thread.is_alive()


    def close(self):
        if self.server.state is not State.CLOSED and self.server.state is not State.UNBOUND:
            logger.info("Publisher closing after %d states (%d dropped)", self.tick, self.dropped)
        self.server.close()


# end of class Publisher


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
