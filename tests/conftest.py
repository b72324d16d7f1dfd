import pytest
import zmq

import jointpub
from jointpub.transport.zmq import publish


LOOPBACK = 'tcp://127.0.0.1:*'


@pytest.fixture
def state():
    return jointpub.JointGenerator('robot_arm_001').next(7)


@pytest.fixture
def publisher():

    # Bind to an ephemeral loopback port; the concrete endpoint is available
    # as publisher.endpoint once the fixture yields.

    instance = jointpub.Publisher(bind=LOOPBACK, interval=0.05, warmup=0)
    instance.bind()

    yield instance

    instance.stop()
    instance.join(2)
    instance.close()


@pytest.fixture
def subscribe(publisher):
    """ Factory for subscribers connected to the publisher fixture. Every
        subscriber handed out is stopped and closed after the test.
    """

    created = list()

    def factory(topic='robot_joints', **options):
        subscriber = jointpub.Subscriber(connect=publisher.endpoint, topic=topic, **options)
        created.append(subscriber)
        return subscriber

    yield factory

    for subscriber in created:
        subscriber.stop()
        subscriber.join(2)
        subscriber.close()


@pytest.fixture
def stalled():
    """ Factory for raw SUB sockets with a one-message receive queue. The
        test reads from them only when it chooses to, so the publisher side
        backs up quickly.
    """

    sockets = list()

    def factory(endpoint, topic=b''):
        socket = publish.zmq_context.socket(zmq.SUB)
        socket.setsockopt(zmq.LINGER, 0)
        socket.setsockopt(zmq.RCVHWM, 1)
        socket.setsockopt(zmq.SUBSCRIBE, topic)
        socket.connect(endpoint)
        sockets.append(socket)
        return socket

    yield factory

    for socket in sockets:
        socket.close()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
