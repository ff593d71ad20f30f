"""Shared type aliases and errors for tick-machine."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Union

if TYPE_CHECKING:
    from tick_machine.machine import Machine
    from tick_machine.state import State

# A state is referenced either by the State object or by its registered name.
StateRef = Union["State", str]

StateCallback = Callable[[Any, "Machine", "State"], None]
UpdateCallback = Callable[[Any, "Machine", "State", float], None]


class MachineError(Exception):
    """Base class for errors raised by a strict Machine."""


class UnregisteredEntityError(MachineError, KeyError):
    """Raised when operating on an entity that was never added."""

    def __init__(self, entity: Any, message: str) -> None:
        self.entity = entity
        super().__init__(message)


class InactiveEntityError(MachineError):
    """Raised when stopping an entity that is not active."""

    def __init__(self, entity: Any, message: str) -> None:
        self.entity = entity
        super().__init__(message)


class UnknownStateError(MachineError, KeyError):
    """Raised when a state reference does not resolve against the registry."""

    def __init__(self, state: Any, message: str) -> None:
        self.state = state
        super().__init__(message)


class StateInUseError(MachineError):
    """Raised when removing the initial state or a state entities are in."""

    def __init__(self, state: Any, message: str) -> None:
        self.state = state
        super().__init__(message)
