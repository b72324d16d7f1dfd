""" The receiving half of jointpub. A :class:`Subscriber` owns a SUB socket
    connected to a publisher, discards anything whose topic does not match
    its prefix filter, decodes the rest, and hands each valid
    :class:`jointpub.protocol.RobotState` to a consumer callback.
"""

import logging
import threading

from . import consumer
from . import protocol
from .config import SubscriberConfig
from .transport import State
from .transport.zmq import publish
from .transport.zmq.framing import matches

logger = logging.getLogger(__name__)


class Subscriber:
    """ Receive :class:`RobotState` broadcasts. The *config* is a
        :class:`jointpub.config.SubscriberConfig`; if it is not provided one
        will be built from any keyword *options*.

        Malformed frames, filtered-out topics, payloads that fail to decode,
        and states no newer than the last one seen from the same robot are
        dropped; none of them interrupt the receive loop.

        :ivar received: Number of states delivered to the consumer.
        :ivar filtered: Number of messages discarded by the topic filter.
        :ivar malformed: Number of messages discarded as undecodable.
        :ivar stale: Number of states discarded because their timestamp was
            not newer than the last state delivered for the same robot.
    """

    def __init__(self, config=None, **options):

        if config is None:
            config = SubscriberConfig(**options)
        elif options:
            raise TypeError('specify either a config or keyword options, not both')

        self.config = config
        self.client = publish.Client(config.connect, config.topic,
                                     config.reconnect_interval,
                                     config.reconnect_interval_max)

        self.received = 0
        self.filtered = 0
        self.malformed = 0
        self.stale = 0
        self.latest = dict()

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
    def state(self):
        return self.client.state


    def connect(self):
        """ Connect the SUB socket and apply the topic filter. Raises
            :class:`jointpub.transport.ConnectError` only if the address is
            malformed; the publisher does not need to be reachable yet.
        """

        self.client.connect()
        logger.info("Subscriber connected to %s, topic filter %r",
                    self.config.connect, self.config.topic)


    def handle(self, topic, payload, on_message):
        """ Process one received message. Returns the decoded state if it
            was delivered to *on_message*, otherwise None.
        """

        # The prefix test is cheap; do it before spending time on decode.

        if not matches(topic, self.config.topic):
            self.filtered += 1
            logger.debug("Ignoring message on topic %r", topic)
            return None

        try:
            state = protocol.decode(payload)
        except protocol.DecodeError as exc:
            self.malformed += 1
            logger.warning("Dropping malformed message on topic %r: %s", topic, exc)
            return None

        # Only deliver newer data for each robot; a duplicate or reordered
        # state is never handed to the consumer.

        previous = self.latest.get(state.robot_id)
        if previous is not None and state.timestamp <= previous:
            self.stale += 1
            logger.debug("Ignoring stale state %d from %s (latest %d)",
                         state.timestamp, state.robot_id, previous)
            return None

        self.latest[state.robot_id] = state.timestamp
        self.received += 1

        try:
            on_message(state)
        except Exception:
            logger.exception("Consumer failed on state %d", state.timestamp)

        return state


    def receive_loop(self, on_message=None, count=None):
        """ Run the receive loop in the calling thread, invoking *on_message*
            once per valid state. The default consumer logs each state. The
            loop exits when :func:`stop` is called or, if *count* is
            specified, after that many states have been delivered.
        """

        if on_message is None:
            on_message = consumer.log_state

        if count is not None and count < 1:
            raise ValueError('count must be a positive integer or None')

        timeout = self.config.poll_timeout
        delivered = 0

        if self.client.state is State.CLOSED:
            raise RuntimeError('subscriber is closed')

        try:
            if self.client.state is State.UNCONNECTED:
                self.connect()

            self.client.state = State.RECEIVING

            while not self.shutdown.is_set():
                try:
                    received = self.client.recv(timeout)
                except protocol.DecodeError as exc:
                    self.malformed += 1
                    logger.warning("Dropping malformed frames: %s", exc)
                    continue

                if received is None:
                    continue

                topic, payload = received
                if self.handle(topic, payload, on_message) is None:
                    continue

                delivered += 1
                if count is not None and delivered >= count:
                    break

        finally:
            self.close()


    def _run_background(self, on_message, count):
        try:
            self.receive_loop(on_message, count)
        except Exception as exc:
            self.error = exc
            logger.exception("Receive loop terminated")


    def start(self, on_message=None, count=None):
        """ Run :func:`receive_loop` in a background daemon thread. The
            socket is connected before this method returns, so a
            :class:`ConnectError` is raised here rather than in the thread.
        """

        if self.thread is not None:
            raise RuntimeError('subscriber already started')

        if self.client.state is State.UNCONNECTED:
            self.connect()

        self.thread = threading.Thread(target=self._run_background, args=(on_message, count))
        self.thread.daemon = True
        self.thread.start()


    def stop(self):
        """ Request the receive loop to exit; it will do so within one poll
            timeout.
        """

        self.shutdown.set()


    def join(self, timeout=None):
        if self.thread is None:
            return True

        self.thread.join(timeout)
        return not self.thread.is_alive()


    def close(self):
        if self.client.state is not State.CLOSED and self.client.state is not State.UNCONNECTED:
            logger.info("Subscriber closing after %d states (%d filtered, %d malformed, %d stale)",
                        self.received, self.filtered, self.malformed, self.stale)
        self.client.close()


# end of class Subscriber


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
