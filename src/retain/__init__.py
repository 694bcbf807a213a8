"""retain: SM-2 spaced-repetition scheduling engine."""

from retain.consts import VERSION

__version__ = VERSION
