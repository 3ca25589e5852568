"""
FSM — a generic, data-driven finite state machine engine.

Features:
- Declarative configuration: an initial state plus a state -> {event: target} table
- Event-driven transitions via ``trigger()`` or direct moves via ``change_state()``
- Undo/redo stacks; any fresh transition invalidates the redo path
- Atomic operations: a failed call leaves state and both stacks untouched
- Optional eager validation (``strict=True``) and bounded history (``max_history``)

Usage:
    from fsmengine import FSM

    fsm = FSM({
        "initial": "idle",
        "states": {
            "idle":    {"transitions": {"start": "running"}},
            "running": {"transitions": {"stop": "idle", "pause": "paused"}},
            "paused":  {"transitions": {"resume": "running"}},
        },
    })
    fsm.trigger("start")    # idle -> running
    fsm.undo()              # back to idle
    fsm.redo()              # running again
"""

import logging
from collections import deque
from typing import Hashable, List, Mapping, Optional, Union

from fsmengine.exceptions import (
    ConfigurationError,
    InvalidStateError,
    UnknownTransitionError,
)
from fsmengine.helpers import log_transition
from fsmengine.types import Configuration, FSMSnapshot

logger = logging.getLogger(__name__)


class FSM:
    """
    Finite state machine over a static Configuration.

    Args:
        config: A Configuration, or a plain mapping accepted by
                ``Configuration.from_dict``.
        strict: Validate the initial state and every transition target up
                front instead of failing lazily when one is reached.
        max_history: Upper bound on the undo stack. The oldest entry is
                     dropped when full. None means unbounded.

    Raises:
        ConfigurationError: If no configuration is supplied, it is
                            malformed, or strict validation fails.

    Attributes:
        DEFAULT_MAX_HISTORY: Undo stack bound used when ``max_history`` is
                             not given (default: None = unbounded).
    """

    DEFAULT_MAX_HISTORY: Optional[int] = None

    def __init__(
        self,
        config: Union[Configuration, Mapping, None],
        strict: bool = False,
        max_history: Optional[int] = None,
    ):
        if config is None or (isinstance(config, Mapping) and not config):
            raise ConfigurationError("No configuration supplied")
        if isinstance(config, Mapping):
            config = Configuration.from_dict(config)
        elif not isinstance(config, Configuration):
            raise ConfigurationError(
                f"Expected Configuration or mapping, got {type(config).__name__}"
            )
        if strict:
            config.validate()

        if max_history is None:
            max_history = self.DEFAULT_MAX_HISTORY
        if max_history is not None and max_history < 1:
            raise ConfigurationError(f"max_history must be >= 1 or None, got {max_history}")

        self._config: Configuration = config
        self._current_state: Hashable = config.initial
        self._history: deque = deque(maxlen=max_history)
        self._redo_stack: List[Hashable] = []

        logger.info(
            f"FSM initialised: {len(config.states)} states, "
            f"starting at {config.initial!r}"
        )

    @property
    def config(self) -> Configuration:
        """The Configuration this machine was built from."""
        return self._config

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def get_state(self) -> Hashable:
        """Return the current state."""
        return self._current_state

    @log_transition
    def change_state(self, state: Hashable) -> None:
        """
        Move directly to ``state``.

        Moving to the current state is a no-op: history and the redo stack
        are left alone.

        Raises:
            InvalidStateError: If ``state`` is not declared.
        """
        self._apply(state)

    @log_transition
    def trigger(self, event: Hashable) -> None:
        """
        Fire ``event`` from the current state.

        Raises:
            UnknownTransitionError: If the current state has no rule for
                                    ``event``.
            InvalidStateError: If the rule targets an undeclared state, or
                               the current state is itself undeclared.
        """
        state_def = self._config.states.get(self._current_state)
        if state_def is None:
            raise InvalidStateError(self._current_state)
        if event not in state_def.transitions:
            raise UnknownTransitionError(self._current_state, event)
        self._apply(state_def.transitions[event])

    @log_transition
    def reset(self) -> None:
        """Return to the initial state, recorded in history like any move."""
        before = self._current_state
        self._apply(self._config.initial)
        if self._current_state != before:
            logger.info(f"Reset to {self._current_state!r}")

    def _apply(self, target: Hashable) -> None:
        """Validate then perform a manual transition."""
        if target not in self._config.states:
            raise InvalidStateError(target)

        if target == self._current_state:
            logger.debug(f"Already in {target!r}, ignoring self-transition")
            return

        self._push_history(self._current_state)
        logger.info(f"Transition: {self._current_state!r} → {target!r}")
        self._current_state = target
        self._redo_stack.clear()

    def _push_history(self, state: Hashable) -> None:
        maxlen = self._history.maxlen
        if maxlen is not None and len(self._history) == maxlen:
            logger.warning(
                f"History full ({maxlen} entries), discarding oldest {self._history[0]!r}"
            )
        self._history.append(state)

    # ------------------------------------------------------------------
    # Undo / redo
    # ------------------------------------------------------------------

    @log_transition
    def undo(self) -> bool:
        """
        Go back to the previous state.

        Returns:
            True if a state was restored, False if history is empty.
        """
        if not self._history:
            logger.debug("Nothing to undo")
            return False
        self._redo_stack.append(self._current_state)
        self._current_state = self._history.pop()
        logger.info(f"Undo: back to {self._current_state!r}")
        return True

    @log_transition
    def redo(self) -> bool:
        """
        Re-apply the most recently undone state.

        Returns:
            True if a state was restored, False if the redo stack is empty.
        """
        if not self._redo_stack:
            logger.debug("Nothing to redo")
            return False
        self._push_history(self._current_state)
        self._current_state = self._redo_stack.pop()
        logger.info(f"Redo: forward to {self._current_state!r}")
        return True

    def clear_history(self) -> None:
        """Empty both the undo and redo stacks. The current state is kept."""
        self._history.clear()
        self._redo_stack.clear()
        logger.info("History cleared")

    def can_undo(self) -> bool:
        return bool(self._history)

    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def get_states(self, event: Optional[Hashable] = None) -> List[Hashable]:
        """
        Return declared states, in configuration order.

        Args:
            event: If provided, return only states that have a transition
                   rule for this event (possibly none).
        """
        if event is None:
            return list(self._config.states)
        return [
            state
            for state, state_def in self._config.states.items()
            if event in state_def.transitions
        ]

    def get_events(self, state: Optional[Hashable] = None) -> List[Hashable]:
        """
        Return the events that have a rule from ``state``.

        Args:
            state: State to inspect (default: the current state).

        Raises:
            InvalidStateError: If ``state`` is not declared.
        """
        if state is None:
            state = self._current_state
        state_def = self._config.states.get(state)
        if state_def is None:
            raise InvalidStateError(state)
        return list(state_def.transitions)

    def get_history(self, last_n: Optional[int] = None) -> List[Hashable]:
        """
        Return the undo stack, oldest first.

        Args:
            last_n: If provided, return only the last N entries (0 gives none).

        Raises:
            ValueError: If last_n is negative.
        """
        if last_n is not None and last_n < 0:
            raise ValueError(f"last_n must be >= 0, got {last_n}")
        history = list(self._history)
        if last_n is None:
            return history
        return history[-last_n:] if last_n else []

    def get_redo_stack(self) -> List[Hashable]:
        """Return the redo stack, bottom first (last element is redone next)."""
        return list(self._redo_stack)

    def snapshot(self) -> FSMSnapshot:
        """Return an immutable copy of the current state and both stacks."""
        return FSMSnapshot(
            state=self._current_state,
            history=tuple(self._history),
            redo_stack=tuple(self._redo_stack),
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(state={self._current_state!r}, "
            f"history={len(self._history)}, redo={len(self._redo_stack)})"
        )
