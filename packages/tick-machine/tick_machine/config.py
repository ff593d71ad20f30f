"""Configuration records for states and machines."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from tick_machine.types import StateCallback, UpdateCallback


@dataclass(frozen=True)
class StateInfo:
    """Immutable description of a State.

    Attributes:
        name: Registry key. Auto-generated when None.
        enter: Called as ``(entity, machine, state)`` when an entity enters.
        exit: Called as ``(entity, machine, state)`` when an entity exits.
        update: Called as ``(entity, machine, state, dt)`` once per tick.
    """

    name: str | None = None
    enter: StateCallback | None = None
    exit: StateCallback | None = None
    update: UpdateCallback | None = None


@dataclass(frozen=True)
class CreationInfo:
    """Immutable description of a Machine.

    Attributes:
        entities: Handles registered in the initial state, none active.
        states: States to index by name. Non-State entries are dropped.
        initial_state: State for entities added without one. Defaults to
            the first valid entry of ``states``, else a fresh default State.
        strict: Raise typed errors instead of logging warnings.
    """

    entities: Sequence[Any] = ()
    states: Sequence[Any] = ()
    initial_state: Any = None
    strict: bool = False
