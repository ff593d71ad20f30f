"""tick-machine - Entity finite state machines for the tick engine."""
from __future__ import annotations

from tick_machine.config import CreationInfo, StateInfo
from tick_machine.machine import DEFAULT_STATE_NAME, Machine
from tick_machine.state import State
from tick_machine.systems import make_machine_system
from tick_machine.types import (
    InactiveEntityError,
    MachineError,
    StateInUseError,
    UnknownStateError,
    UnregisteredEntityError,
)

__all__ = [
    "Machine",
    "State",
    "StateInfo",
    "CreationInfo",
    "DEFAULT_STATE_NAME",
    "make_machine_system",
    "MachineError",
    "UnregisteredEntityError",
    "InactiveEntityError",
    "UnknownStateError",
    "StateInUseError",
]
