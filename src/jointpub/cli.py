""" Command-line front end. Two subcommands share one entry point::

        jointpub publisher [-b BIND] [-i INTERVAL_MS] [-t TOPIC] [-r ROBOT_ID] [-n TICKS]
        jointpub subscriber [-c CONNECT] [-t TOPIC]

    Options given on the command line take precedence over ``JOINTPUB_*``
    environment variables, which take precedence over an optional JSON
    ``--config`` file, which takes precedence over the built-in defaults.
"""

import argparse
import logging
import sys

from .config import PublisherConfig, SubscriberConfig
from .logger import setup_root_logger
from .publisher import Publisher
from .subscriber import Subscriber
from .transport import BindError, ConnectError

logger = logging.getLogger(__name__)


def build_parser():

    parser = argparse.ArgumentParser(prog='jointpub',
                                     description='Robot joint telemetry over ZeroMQ PUB/SUB')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='log at DEBUG level')

    commands = parser.add_subparsers(dest='command', metavar='command')
    commands.required = True

    pub = commands.add_parser('publisher', help='publish robot joint states')
    pub.add_argument('-b', '--bind', help='endpoint to bind (default: tcp://*:5555)')
    pub.add_argument('-i', '--interval', type=int, metavar='MS',
                     help='publishing interval in milliseconds (default: 100)')
    pub.add_argument('-t', '--topic', help='topic label for every message (default: robot_joints)')
    pub.add_argument('-r', '--robot-id', dest='robot_id',
                     help='robot identifier (default: robot_arm_001)')
    pub.add_argument('-n', '--ticks', type=int,
                     help='stop after this many states (default: run forever)')
    pub.add_argument('--config', metavar='FILE', help='JSON file of publisher options')

    sub = commands.add_parser('subscriber', help='receive and log robot joint states')
    sub.add_argument('-c', '--connect', help='endpoint to dial (default: tcp://localhost:5555)')
    sub.add_argument('-t', '--topic', help='topic prefix filter (default: robot_joints)')
    sub.add_argument('--config', metavar='FILE', help='JSON file of subscriber options')

    return parser



def _options(arguments, names):
    """ Collect the explicitly specified command-line options.
    """

    options = dict()

    for name in names:
        value = getattr(arguments, name, None)
        if value is not None:
            options[name] = value

    return options



def configure(arguments):
    """ Return the :class:`PublisherConfig` or :class:`SubscriberConfig`
        described by the parsed *arguments*. Raises ValueError if the
        combination of sources yields an unusable configuration.
    """

    if arguments.command == 'publisher':
        options = _options(arguments, ('bind', 'topic', 'robot_id'))

        if arguments.interval is not None:
            options['interval'] = arguments.interval / 1000.0

        if arguments.ticks is not None and arguments.ticks < 1:
            raise ValueError('the tick count must be positive')

        return PublisherConfig.resolve(arguments.config, **options)

    options = _options(arguments, ('connect', 'topic'))
    return SubscriberConfig.resolve(arguments.config, **options)



def run_publisher(configuration, ticks=None):

    publisher = Publisher(configuration)

    try:
        publisher.run(ticks=ticks)
    except KeyboardInterrupt:
        publisher.stop()
    finally:
        publisher.close()



def run_subscriber(configuration):

    subscriber = Subscriber(configuration)

    try:
        subscriber.receive_loop()
    except KeyboardInterrupt:
        subscriber.stop()
    finally:
        subscriber.close()



def main(argv=None):

    parser = build_parser()
    arguments = parser.parse_args(argv)

    if arguments.verbose:
        setup_root_logger(logging.DEBUG)
    else:
        setup_root_logger(logging.INFO)

    try:
        configuration = configure(arguments)
    except (OSError, TypeError, ValueError) as exc:
        logger.error("invalid configuration: %s", exc)
        return 2

    try:
        if arguments.command == 'publisher':
            run_publisher(configuration, arguments.ticks)
        else:
            run_subscriber(configuration)
    except (BindError, ConnectError) as exc:
        logger.error("%s", exc)
        return 1

    return 0



if __name__ == '__main__':
    sys.exit(main())


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
