""" Publisher and subscriber configuration. Every option has a default
    matching the historical command-line defaults. In increasing order of
    precedence, the defaults can be overridden by a JSON file, by
    ``JOINTPUB_*`` environment variables, and by keyword arguments.
"""

import os

from . import json
from .protocol import fields


class Configuration:
    """ Common behavior for the :class:`PublisherConfig` and
        :class:`SubscriberConfig` classes. Subclasses declare their options
        in the *defaults* dictionary, and the environment variable that can
        override each option in the *environment* dictionary.
    """

    defaults = dict()
    environment = dict()

    def __init__(self, **options):

        for key in options:
            if key in self.defaults:
                pass
            else:
                raise TypeError('unrecognized %s option: %s' % (self.__class__.__name__, key))

        for key, default in self.defaults.items():
            value = options.get(key, default)
            setattr(self, key, value)

        self.validate()


    def __repr__(self):
        options = ', '.join('%s=%r' % (key, getattr(self, key)) for key in self.defaults)
        return '%s(%s)' % (self.__class__.__name__, options)


    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.to_dict() == other.to_dict()


    def to_dict(self):
        return dict((key, getattr(self, key)) for key in self.defaults)


    def validate(self):
        """ Raise ValueError if any option is unusable. Subclasses extend
            this with their own checks.
        """

        for key, default in self.defaults.items():
            value = getattr(self, key)

            if isinstance(default, float):
                try:
                    value = float(value)
                except (TypeError, ValueError):
                    raise ValueError('%s must be a number, got %r' % (key, value))
                setattr(self, key, value)

            elif isinstance(default, int):
                try:
                    value = int(value)
                except (TypeError, ValueError):
                    raise ValueError('%s must be an integer, got %r' % (key, value))
                setattr(self, key, value)

            elif isinstance(default, str):
                if isinstance(value, str):
                    pass
                else:
                    raise ValueError('%s must be a string, got %r' % (key, value))


    @classmethod
    def read(cls, filename):
        """ Return the dictionary of options stored as a JSON object in
            *filename*. Nothing is validated beyond the JSON structure.
        """

        with open(filename, 'rb') as reader:
            raw_json = reader.read()

        try:
            loaded = json.loads(raw_json)
        except json.DecodeError as exc:
            raise ValueError('%s is not valid JSON: %s' % (filename, exc)) from exc

        if isinstance(loaded, dict):
            pass
        else:
            raise ValueError('%s must contain a JSON object' % (filename))

        return loaded


    @classmethod
    def load(cls, filename, **options):
        """ Return a new instance from the JSON object stored in *filename*.
            Explicit *options* take precedence over the file contents.
        """

        loaded = cls.read(filename)
        loaded.update(options)
        return cls(**loaded)


    @classmethod
    def from_environment(cls, environ=None, **options):
        """ Return a new instance using any ``JOINTPUB_*`` variables present
            in *environ* (default: :data:`os.environ`). Explicit *options*
            take precedence over the environment.
        """

        return cls.resolve(environ=environ, **options)


    @classmethod
    def resolve(cls, filename=None, environ=None, **options):
        """ Return a new instance combining every configuration source. In
            increasing order of precedence: the class defaults, the JSON
            *filename* (if any), the environment, and the explicit *options*.
        """

        if environ is None:
            environ = os.environ

        merged = dict()

        if filename:
            merged.update(cls.read(filename))

        for key, variable in cls.environment.items():
            try:
                merged[key] = environ[variable]
            except KeyError:
                continue

        merged.update(options)
        return cls(**merged)



# end of class Configuration



class PublisherConfig(Configuration):
    """ Options consumed by :class:`jointpub.publisher.Publisher`:

        * *bind*: socket endpoint to listen on.
        * *interval*: tick period in seconds.
        * *topic*: label attached to every outgoing message.
        * *robot_id*: identifier carried in every published state.
        * *warmup*: seconds to pause after binding, before the first tick,
          so that subscribers have a chance to connect.
        * *high_water_mark*: outbound queue depth per subscriber.
    """

    defaults = dict(
        bind='tcp://*:5555',
        interval=0.1,
        topic=fields.DEFAULT_TOPIC,
        robot_id=fields.DEFAULT_ROBOT_ID,
        warmup=0.5,
        high_water_mark=1000,
    )

    environment = dict(
        bind='JOINTPUB_BIND',
        interval='JOINTPUB_INTERVAL',
        topic='JOINTPUB_TOPIC',
        robot_id='JOINTPUB_ROBOT_ID',
    )

    def validate(self):
        Configuration.validate(self)

        if self.bind == '':
            raise ValueError('the bind endpoint must be specified')

        if self.interval <= 0:
            raise ValueError('the publish interval must be positive')

        if self.warmup < 0:
            raise ValueError('the warmup delay cannot be negative')

        if self.robot_id == '':
            raise ValueError('the robot_id must be a non-empty string')

        if self.high_water_mark < 0:
            raise ValueError('the high water mark cannot be negative')


# end of class PublisherConfig



class SubscriberConfig(Configuration):
    """ Options consumed by :class:`jointpub.subscriber.Subscriber`:

        * *connect*: socket endpoint to dial.
        * *topic*: prefix filter applied to incoming messages.
        * *reconnect_interval*, *reconnect_interval_max*: bounds, in
          seconds, of the backoff between reconnection attempts.
        * *poll_timeout*: how long, in seconds, the receive loop waits for
          a frame before checking whether it has been asked to stop.
    """

    defaults = dict(
        connect='tcp://localhost:5555',
        topic=fields.DEFAULT_TOPIC,
        reconnect_interval=0.1,
        reconnect_interval_max=5.0,
        poll_timeout=0.1,
    )

    environment = dict(
        connect='JOINTPUB_CONNECT',
        topic='JOINTPUB_FILTER',
    )

    def validate(self):
        Configuration.validate(self)

        if self.connect == '':
            raise ValueError('the connect endpoint must be specified')

        if self.reconnect_interval <= 0 or self.poll_timeout <= 0:
            raise ValueError('reconnect and poll intervals must be positive')

        if self.reconnect_interval_max < self.reconnect_interval:
            raise ValueError('reconnect_interval_max cannot be less than reconnect_interval')


# end of class SubscriberConfig


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
