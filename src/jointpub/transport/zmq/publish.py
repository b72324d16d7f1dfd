"""ZeroMQ publish/subscribe transport."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import zmq

from ..base import BindError, ConnectError, State, Transport, check_endpoint
from .framing import from_pub_frames, to_pub_frames

logger = logging.getLogger(__name__)

zmq_context = zmq.Context()


class Server(Transport):
    """PUB server.

    Sends are fire-and-forget. A PUB socket never waits for subscribers:
    with nobody attached the message is discarded. Once any subscriber's
    queue reaches the high-water mark, :func:`send` reports the newest
    message as dropped until that subscriber catches up.
    """

    def __init__(self, address: str, high_water_mark: int = 1000):
        self.address = address
        self.high_water_mark = int(high_water_mark)
        self.endpoint: Optional[str] = None
        self.socket: Optional[zmq.Socket] = None
        self.state = State.UNBOUND

    def bind(self) -> None:
        if self.state is not State.UNBOUND:
            raise RuntimeError(f"cannot bind a server in state {self.state.value}")

        try:
            check_endpoint(self.address)
        except ValueError as exc:
            raise BindError(str(exc)) from exc

        socket = zmq_context.socket(zmq.PUB)
        socket.setsockopt(zmq.LINGER, 0)
        socket.setsockopt(zmq.SNDHWM, self.high_water_mark)
        # Without NODROP a PUB socket at the high-water mark discards silently;
        # with it, a NOBLOCK send raises zmq.Again instead.
        socket.setsockopt(zmq.XPUB_NODROP, 1)

        try:
            socket.bind(self.address)
        except zmq.ZMQError as exc:
            socket.close()
            raise BindError(f"cannot bind {self.address}: {exc}") from exc

        self.socket = socket
        self.endpoint = socket.getsockopt_string(zmq.LAST_ENDPOINT)
        self.state = State.BOUND
        logger.debug("PUB socket bound to %s", self.endpoint)

    def send(self, topic: str, payload: bytes) -> bool:
        """Send one topic-framed message. Returns False if the message was
        dropped because the outbound buffer is saturated.
        """

        if self.socket is None:
            raise RuntimeError("server is not bound")

        frames = to_pub_frames(topic, payload)
        try:
            self.socket.send_multipart(frames, flags=zmq.NOBLOCK)
        except zmq.Again:
            return False
        return True

    def close(self) -> None:
        if self.socket is not None:
            self.socket.close()
            self.socket = None
            logger.debug("PUB socket closed: %s", self.endpoint)
        self.state = State.CLOSED


class Client(Transport):
    """SUB client.

    ZeroMQ connects asynchronously: a publisher does not need to be up when
    :func:`connect` is called, and if the connection drops the socket keeps
    re-dialing with a backoff between *reconnect_interval* and
    *reconnect_interval_max* seconds. The subscription survives reconnects.
    """

    def __init__(self, address: str, topic_filter: str = "",
                 reconnect_interval: float = 0.1,
                 reconnect_interval_max: float = 5.0):
        self.address = address
        self.topic_filter = topic_filter
        self.reconnect_interval = reconnect_interval
        self.reconnect_interval_max = reconnect_interval_max
        self.socket: Optional[zmq.Socket] = None
        self.poller: Optional[zmq.Poller] = None
        self.state = State.UNCONNECTED

    def connect(self) -> None:
        if self.state is not State.UNCONNECTED:
            raise RuntimeError(f"cannot connect a client in state {self.state.value}")

        if not isinstance(self.topic_filter, str):
            raise ConnectError("topic filter must be a string")

        try:
            check_endpoint(self.address)
        except ValueError as exc:
            raise ConnectError(str(exc)) from exc

        socket = zmq_context.socket(zmq.SUB)
        socket.setsockopt(zmq.LINGER, 0)
        socket.setsockopt(zmq.RECONNECT_IVL, int(self.reconnect_interval * 1000))
        socket.setsockopt(zmq.RECONNECT_IVL_MAX, int(self.reconnect_interval_max * 1000))
        socket.setsockopt(zmq.SUBSCRIBE, self.topic_filter.encode())

        try:
            socket.connect(self.address)
        except zmq.ZMQError as exc:
            socket.close()
            raise ConnectError(f"cannot connect {self.address}: {exc}") from exc

        self.socket = socket
        self.poller = zmq.Poller()
        self.poller.register(socket, zmq.POLLIN)
        self._poll_flush()

        self.state = State.CONNECTED
        logger.debug("SUB socket connected to %s, filter %r", self.address, self.topic_filter)

    def _poll_flush(self, timeout: float = 0.01) -> None:
        # Poll once so the subscription is on its way before we proceed.
        # Not deterministic, but it avoids odd PUB/SUB subscription misses.
        poller = zmq.Poller()
        poller.register(self.socket, zmq.POLLIN | zmq.POLLOUT)
        poller.poll(timeout * 1000)

    def recv_frames(self, timeout: Optional[float] = None) -> Optional[List[bytes]]:
        """Wait up to *timeout* seconds for the next multipart message.
        Returns None on timeout; a *timeout* of None waits indefinitely.
        """

        if self.socket is None:
            raise RuntimeError("client is not connected")

        milliseconds = None if timeout is None else timeout * 1000
        for active, _flag in self.poller.poll(milliseconds):
            if active == self.socket:
                return self.socket.recv_multipart(flags=zmq.NOBLOCK)
        return None

    def recv(self, timeout: Optional[float] = None) -> Optional[Tuple[str, bytes]]:
        """Like :func:`recv_frames`, but split into (topic, payload). Raises
        DecodeError on a malformed frame sequence.
        """

        parts = self.recv_frames(timeout)
        if parts is None:
            return None
        return from_pub_frames(parts)

    def close(self) -> None:
        if self.socket is not None:
            if self.poller is not None:
                self.poller.unregister(self.socket)
                self.poller = None
            self.socket.close()
            self.socket = None
            logger.debug("SUB socket closed: %s", self.address)
        self.state = State.CLOSED
