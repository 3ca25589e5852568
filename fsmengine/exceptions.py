"""
Exceptions raised by the FSM engine.

All engine errors derive from FSMError so callers can catch them in one place.
Each also derives from the closest built-in exception, which keeps
``except ValueError`` / ``except KeyError`` handlers in calling code working.
"""

from typing import Hashable


class FSMError(Exception):
    """Base class for every error raised by fsmengine."""


class ConfigurationError(FSMError, ValueError):
    """The configuration is missing, malformed, or fails validation."""


class InvalidStateError(FSMError, ValueError):
    """
    A state identifier is not declared in the configuration.

    Args:
        state: The offending state identifier.
    """

    def __init__(self, state: Hashable):
        self.state = state
        super().__init__(f"Unknown state {state!r}: not declared in configuration")


class UnknownTransitionError(FSMError, KeyError):
    """
    The current state has no transition rule for an event.

    Args:
        state: The state the event was triggered from.
        event: The event that has no rule.
    """

    def __init__(self, state: Hashable, event: Hashable):
        self.state = state
        self.event = event
        super().__init__(f"No transition for event {event!r} from state {state!r}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.args[0]
