"""
Helper utilities for building state machines.

Provides convenience functions and decorators that reduce boilerplate
when defining configurations and tracing transitions.
"""

import logging
from functools import wraps
from typing import Dict, Hashable, List, Mapping, Union

from fsmengine.exceptions import ConfigurationError
from fsmengine.types import Configuration, StateDef

logger = logging.getLogger(__name__)


def build_config(
    initial: Hashable,
    table: Mapping[Hashable, Mapping[Hashable, Hashable]],
) -> Configuration:
    """
    Build a Configuration from a compact transition table.

    Each state maps straight to its ``{event: target}`` dict instead of a
    verbose ``{"transitions": {...}}`` wrapper or StateDef() call.

    Args:
        initial: The starting state. Must be a key of ``table``.
        table: Mapping of state -> {event: target}. States with no
               outgoing transitions map to an empty dict.

    Returns:
        A Configuration preserving the declared order of ``table``.

    Raises:
        ConfigurationError: If ``initial`` is not a key of ``table``.

    Example:
        config = build_config("idle", {
            "idle":    {"start": "running"},
            "running": {"stop": "idle", "pause": "paused"},
            "paused":  {"resume": "running"},
        })
    """
    if initial not in table:
        raise ConfigurationError(f"Initial state {initial!r} missing from transition table")
    states: Dict[Hashable, StateDef] = {
        state: StateDef(transitions=transitions) for state, transitions in table.items()
    }
    return Configuration(initial=initial, states=states)


def validate_config(config: Union[Configuration, Mapping]) -> List[str]:
    """
    Collect every problem in a configuration without raising.

    Args:
        config: A Configuration or a plain mapping accepted by
                ``Configuration.from_dict``.

    Returns:
        Human-readable problems; an empty list means the configuration
        is fully consistent.
    """
    if not isinstance(config, Configuration):
        try:
            config = Configuration.from_dict(config)
        except ConfigurationError as e:
            return [str(e)]
    return config.find_problems()


def log_transition(func):
    """
    Decorator that adds entry/exit logging to FSM methods that may move state.

    Logs the method name, its arguments, and the resulting state change at
    DEBUG level without manual logger calls inside every method.

    Usage:
        @log_transition
        def trigger(self, event):
            ...
    """

    @wraps(func)
    def wrapper(self, *args, **kwargs):
        name = func.__name__
        before = self.get_state()
        logger.debug(f"{name}{args!r}: starting in {before!r}")
        result = func(self, *args, **kwargs)
        after = self.get_state()
        if after != before:
            logger.debug(f"{name}: {before!r} → {after!r}")
        else:
            logger.debug(f"{name}: stayed in {before!r}")
        return result

    return wrapper
