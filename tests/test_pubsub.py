import logging
import threading
import time

import pytest

import jointpub
from jointpub.consumer import Recorder
from jointpub.transport import State
from jointpub.transport.zmq import publish


def wait_connected(publisher, recorder, timeout=5):
    """ PUB/SUB subscriptions propagate asynchronously. Publish single
        ticks until the subscriber sees one, and return that first timestamp.
    """

    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        publisher.step()
        if recorder.wait(1, timeout=0.05):
            return recorder.timestamps[0]

    raise AssertionError('subscriber never received a message')


def contiguous(timestamps):
    if not timestamps:
        return True
    return timestamps == list(range(timestamps[0], timestamps[0] + len(timestamps)))


def test_end_to_end():

    publisher = jointpub.Publisher(bind='tcp://127.0.0.1:*', interval=0.05,
                                   robot_id='robot_arm_001', warmup=0.5)
    publisher.bind()

    recorder = Recorder()
    subscriber = jointpub.Subscriber(connect=publisher.endpoint, topic='robot_joints')

    try:
        subscriber.start(recorder)
        publisher.run(ticks=5)

        assert publisher.state is State.CLOSED
        assert publisher.tick == 5

        recorder.wait_for(lambda states: states and states[-1].timestamp == 5, timeout=2)
    finally:
        subscriber.stop()
        subscriber.join(2)
        subscriber.close()

    timestamps = recorder.timestamps
    assert timestamps
    assert set(timestamps) <= set(range(1, 6))
    assert contiguous(timestamps)

    for state in recorder.states:
        assert state.robot_id == 'robot_arm_001'
        assert len(state.joints) == 6
        assert state == jointpub.JointGenerator('robot_arm_001').next(state.timestamp)

    assert subscriber.state is State.CLOSED


def test_late_joiner(publisher, subscribe):
    """ Messages sent before a subscriber connects are simply gone. There
        is no replay, and what does arrive is strictly increasing.
    """

    for tick in range(10):
        publisher.step()

    assert publisher.tick == 10
    assert publisher.published == 10

    recorder = Recorder()
    subscriber = subscribe()
    subscriber.start(recorder)

    first = wait_connected(publisher, recorder)
    assert first > 10

    for tick in range(5):
        publisher.step()

    assert recorder.wait_for(lambda states: states[-1].timestamp == publisher.tick, timeout=2)

    timestamps = recorder.timestamps
    assert min(timestamps) > 10
    assert timestamps == sorted(set(timestamps))


def test_topic_prefix(publisher, subscribe):

    matching = Recorder()
    everything = Recorder()
    other = Recorder()

    publisher.config.topic = 'robot_joints_arm1'

    subscribe('robot_joints').start(matching)
    subscribe('').start(everything)
    other_subscriber = subscribe('other_topic')
    other_subscriber.start(other)

    wait_connected(publisher, matching)
    wait_connected(publisher, everything)

    assert other.wait(1, timeout=0.2) == False
    assert len(other) == 0
    assert other_subscriber.received == 0


def test_filter_before_decode(publisher, subscribe):
    """ Undecodable payloads on a non-matching topic are never decoded, so
        they are counted as filtered rather than malformed.
    """

    recorder = Recorder()
    subscriber = subscribe('robot_joints')

    # Exercise the receive path directly; ZeroMQ itself filters on the
    # subscription, so a non-matching message would never reach the loop.

    assert subscriber.handle('other_topic', b'garbage', recorder) is None
    assert subscriber.filtered == 1
    assert subscriber.malformed == 0

    assert subscriber.handle('robot_joints', b'garbage', recorder) is None
    assert subscriber.filtered == 1
    assert subscriber.malformed == 1

    state = jointpub.JointGenerator().next(3)
    assert subscriber.handle('robot_joints_arm1', jointpub.encode(state), recorder) == state
    assert recorder.states == [state]


def test_malformed_does_not_stop(publisher, subscribe, caplog):

    recorder = Recorder()
    subscriber = subscribe()
    subscriber.start(recorder)

    first = wait_connected(publisher, recorder)

    socket = publisher.server.socket
    socket.send_multipart((b'robot_joints', b'{"robot_id": "x"}'))
    socket.send_multipart((b'robot_joints', b'not json at all'))
    socket.send_multipart((b'robot_joints', b'a', b'three frame message'))

    publisher.step()

    assert recorder.wait_for(lambda states: states[-1].timestamp == publisher.tick, timeout=2)
    assert subscriber.malformed == 3
    assert "Dropping malformed" in caplog.text
    assert recorder.timestamps[-1] > first
    assert subscriber.thread.is_alive()


def test_consumer_failure_does_not_stop(publisher, subscribe):

    calls = list()
    arrived = threading.Event()

    def fragile(state):
        calls.append(state.timestamp)
        arrived.set()
        if len(calls) == 1:
            raise RuntimeError('consumer blew up')

    subscriber = subscribe()
    subscriber.start(fragile)

    deadline = time.monotonic() + 5
    while len(calls) < 3 and time.monotonic() < deadline:
        publisher.step()
        arrived.wait(0.05)
        arrived.clear()

    assert len(calls) >= 3
    assert subscriber.thread.is_alive()
    assert subscriber.error is None


def test_count_and_close(publisher, subscribe):

    recorder = Recorder()
    subscriber = subscribe()
    subscriber.start(recorder, count=2)

    deadline = time.monotonic() + 5
    while subscriber.thread.is_alive() and time.monotonic() < deadline:
        publisher.step()
        time.sleep(0.02)

    assert subscriber.join(2) == True
    assert len(recorder) == 2
    assert subscriber.state is State.CLOSED
    assert subscriber.client.socket is None


def test_background_publisher():

    recorder = Recorder()

    with jointpub.Publisher(bind='tcp://127.0.0.1:*', interval=0.01, warmup=0) as publisher:
        publisher.bind()

        with jointpub.Subscriber(connect=publisher.endpoint) as subscriber:
            subscriber.start(recorder)
            publisher.start()

            assert recorder.wait(5, timeout=5)

            publisher.stop()
            assert publisher.join(2) == True
            assert publisher.state is State.CLOSED
            assert publisher.error is None

    assert contiguous(recorder.timestamps)


def test_stop_before_first_tick():

    publisher = jointpub.Publisher(bind='tcp://127.0.0.1:*', interval=0.05, warmup=30)
    publisher.start()

    time.sleep(0.05)
    publisher.stop()

    assert publisher.join(2) == True
    assert publisher.tick == 0
    assert publisher.state is State.CLOSED


def test_bind_error_in_run():

    holder = publish.Server('tcp://127.0.0.1:*')
    holder.bind()

    try:
        publisher = jointpub.Publisher(bind=holder.endpoint, warmup=0)
        with pytest.raises(jointpub.BindError):
            publisher.run(ticks=1)
        assert publisher.state is State.CLOSED
    finally:
        holder.close()


def test_encode_error_propagates(publisher):

    class Broken(jointpub.JointGenerator):
        def next(self, tick):
            state = jointpub.JointGenerator.next(self, tick)
            object.__setattr__(state, 'joints', state.joints[:5])
            return state

    publisher.generator = Broken()

    with pytest.raises(jointpub.EncodeError):
        publisher.step()

    assert publisher.tick == 0
    assert publisher.published == 0


def test_options_or_config():

    config = jointpub.PublisherConfig(bind='tcp://127.0.0.1:*')

    with pytest.raises(TypeError):
        jointpub.Publisher(config, interval=1)

    with pytest.raises(TypeError):
        jointpub.Subscriber(jointpub.SubscriberConfig(), topic='x')


def test_saturated_buffer(stalled, caplog):
    """ A subscriber that stops reading backs up the outbound buffer. The
        publisher keeps its cadence, counts each state it could not send,
        and never reuses the timestamp of a dropped state.
    """

    publisher = jointpub.Publisher(bind='inproc://jointpub-saturated',
                                   high_water_mark=1, warmup=0)
    publisher.bind()

    try:
        reader = stalled(publisher.endpoint)

        deadline = time.monotonic() + 5
        while True:
            publisher.step()
            if reader.poll(10):
                reader.recv_multipart()
                break
            assert time.monotonic() < deadline

        while reader.poll(50):
            reader.recv_multipart()

        before = publisher.tick

        with caplog.at_level(logging.WARNING, logger='jointpub.publisher'):
            for tick in range(50):
                publisher.step()

        assert publisher.tick == before + 50
        assert publisher.dropped > 0
        assert publisher.published + publisher.dropped == publisher.tick
        assert 'dropped state' in caplog.text

        # Drain the backlog, then publish until one state is accepted again.

        while reader.poll(50):
            reader.recv_multipart()

        published = publisher.published
        while publisher.published == published:
            state = publisher.step()
            time.sleep(0.001)
            assert time.monotonic() < deadline + 5

        assert reader.poll(1000)
        topic, payload = reader.recv_multipart()
        assert jointpub.decode(payload).timestamp == state.timestamp == publisher.tick
        assert publisher.tick > publisher.published
    finally:
        publisher.close()


def test_stale_states_ignored(subscribe):

    recorder = Recorder()
    subscriber = subscribe()
    generator = jointpub.JointGenerator('robot_arm_001')

    for tick in (3, 5, 5, 4, 6):
        subscriber.handle('robot_joints', jointpub.encode(generator.next(tick)), recorder)

    assert recorder.timestamps == [3, 5, 6]
    assert subscriber.stale == 2
    assert subscriber.received == 3

    # Each robot is tracked on its own.

    other = jointpub.JointGenerator('robot_arm_002').next(1)
    assert subscriber.handle('robot_joints', jointpub.encode(other), recorder) == other
    assert subscriber.stale == 2


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
