"""
FSM data types and structures.

Defines the core types used by the engine:
- StateDef: A single state's event -> target transition table
- Configuration: Initial state plus the full state table
- FSMSnapshot: Point-in-time copy of an engine's state and stacks

Configurations are plain data. States and events are opaque hashable
identifiers (strings, Enum members, ...), not objects with behaviour.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Hashable, List, Mapping, Tuple

from fsmengine.exceptions import ConfigurationError


def _plain(identifier: Hashable) -> Any:
    """Enum members serialise by name, everything else as-is."""
    return identifier.name if isinstance(identifier, Enum) else identifier


@dataclass(frozen=True)
class StateDef:
    """
    Definition of a single state.

    Args:
        transitions: Mapping of event identifier -> target state identifier.
                     Copied on construction and exposed read-only.

    Raises:
        ConfigurationError: If transitions is not a mapping.
    """

    transitions: Mapping[Hashable, Hashable] = field(default_factory=dict)

    # read-only mappings are unhashable
    __hash__ = None

    def __post_init__(self):
        if not isinstance(self.transitions, Mapping):
            raise ConfigurationError(
                f"transitions must be a mapping, got {type(self.transitions).__name__}"
            )
        object.__setattr__(self, "transitions", MappingProxyType(dict(self.transitions)))

    def to_dict(self) -> dict:
        """Serialise to a plain dictionary."""
        return {
            "transitions": {_plain(e): _plain(t) for e, t in self.transitions.items()}
        }


@dataclass(frozen=True)
class Configuration:
    """
    Static description of a state machine.

    ``states`` values may be StateDef instances or plain mappings of the
    form ``{"transitions": {...}}``; the latter are converted. Declared
    order of ``states`` is preserved.

    Args:
        initial: The state a fresh engine starts in.
        states: Mapping of state identifier -> StateDef.

    Raises:
        ConfigurationError: If states (or any transitions) is not a mapping.
    """

    initial: Hashable
    states: Mapping[Hashable, StateDef]

    __hash__ = None

    def __post_init__(self):
        if not isinstance(self.states, Mapping):
            raise ConfigurationError(
                f"states must be a mapping, got {type(self.states).__name__}"
            )
        table: Dict[Hashable, StateDef] = {}
        for state, definition in self.states.items():
            if isinstance(definition, StateDef):
                table[state] = definition
            elif isinstance(definition, Mapping):
                table[state] = StateDef(transitions=definition.get("transitions", {}))
            else:
                raise ConfigurationError(
                    f"State {state!r} definition must be a StateDef or mapping, "
                    f"got {type(definition).__name__}"
                )
        object.__setattr__(self, "states", MappingProxyType(table))

    @classmethod
    def from_dict(cls, data: Mapping) -> "Configuration":
        """
        Build a Configuration from a plain nested structure.

        Example:
            Configuration.from_dict({
                "initial": "idle",
                "states": {
                    "idle": {"transitions": {"start": "running"}},
                    "running": {"transitions": {"stop": "idle"}},
                },
            })

        Raises:
            ConfigurationError: If data is not a mapping or lacks
                                ``initial`` / ``states``.
        """
        if not isinstance(data, Mapping):
            raise ConfigurationError(
                f"Configuration must be a mapping, got {type(data).__name__}"
            )
        for key in ("initial", "states"):
            if key not in data:
                raise ConfigurationError(f"Configuration missing required '{key}' field")
        return cls(initial=data["initial"], states=data["states"])

    def to_dict(self) -> dict:
        """Serialise to a plain dictionary accepted by ``from_dict``."""
        return {
            "initial": _plain(self.initial),
            "states": {_plain(s): d.to_dict() for s, d in self.states.items()},
        }

    def find_problems(self) -> List[str]:
        """
        Check referential integrity without raising.

        Returns:
            Human-readable problem descriptions, empty if the initial state
            and every transition target are declared.
        """
        problems = []
        if self.initial not in self.states:
            problems.append(f"Initial state {self.initial!r} not found in states")
        for state, definition in self.states.items():
            for event, target in definition.transitions.items():
                if target not in self.states:
                    problems.append(
                        f"Transition {state!r} --{event!r}--> {target!r} "
                        f"targets an undeclared state"
                    )
        return problems

    def validate(self) -> None:
        """Raise ConfigurationError on the first integrity problem found."""
        problems = self.find_problems()
        if problems:
            raise ConfigurationError(problems[0])


@dataclass(frozen=True)
class FSMSnapshot:
    """
    Point-in-time copy of an engine's mutable fields.

    Stacks are ordered bottom first, so the last element of ``history`` is
    the state ``undo()`` would return to.
    """

    state: Hashable
    history: Tuple[Hashable, ...] = ()
    redo_stack: Tuple[Hashable, ...] = ()

    def to_dict(self) -> dict:
        """Serialise to a plain dictionary."""
        return {
            "state": _plain(self.state),
            "history": [_plain(s) for s in self.history],
            "redo_stack": [_plain(s) for s in self.redo_stack],
        }
