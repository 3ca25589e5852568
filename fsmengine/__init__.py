"""
fsmengine
~~~~~~~~~

A small, data-driven finite state machine engine with undo/redo history.

Quick start:
    from fsmengine import FSM, Configuration, build_config
    from fsmengine import InvalidStateError, UnknownTransitionError
"""

from fsmengine.exceptions import (
    ConfigurationError,
    FSMError,
    InvalidStateError,
    UnknownTransitionError,
)
from fsmengine.types import Configuration, FSMSnapshot, StateDef
from fsmengine.helpers import build_config, log_transition, validate_config
from fsmengine.machine import FSM

__all__ = [
    "FSM",
    "Configuration",
    "StateDef",
    "FSMSnapshot",
    "FSMError",
    "ConfigurationError",
    "InvalidStateError",
    "UnknownTransitionError",
    "build_config",
    "validate_config",
    "log_transition",
]
