"""State - a named behaviour mode shared by many entities."""
from __future__ import annotations

import itertools
from typing import TYPE_CHECKING, Any

from tick_signal import Connection, Signal

from tick_machine.config import StateInfo
from tick_machine.types import StateCallback, UpdateCallback

if TYPE_CHECKING:
    from tick_machine.machine import Machine

# Process-wide, never reset, so auto-generated names are never reused.
_name_counter = itertools.count(1)


def _nop(*args: Any) -> None:
    pass


class State:
    """Named behaviour with enter/exit/update callbacks.

    ``entered`` and ``exited`` are connected to ``on_enter`` and ``on_exit``
    once, here, and the Machine only ever fires the signals. Other
    listeners connected to the same signals therefore observe transitions
    exactly as the state's own callbacks do. Both bindings are pinned, so
    ``disconnect_all`` on either signal leaves them in place.

    Attributes are read-only. Two states are equal only if they are the
    same object.
    """

    __slots__ = (
        "_name",
        "_on_enter",
        "_on_exit",
        "_on_update",
        "_entered",
        "_exited",
        "_enter_conn",
        "_exit_conn",
    )

    def __init__(
        self,
        name: str | None = None,
        on_enter: StateCallback | None = None,
        on_exit: StateCallback | None = None,
        on_update: UpdateCallback | None = None,
    ) -> None:
        self._name = name if name is not None else str(next(_name_counter))
        self._on_enter = on_enter or _nop
        self._on_exit = on_exit or _nop
        self._on_update = on_update or _nop
        self._entered = Signal()
        self._exited = Signal()
        self._enter_conn: Connection = self._entered.connect(self._on_enter, pinned=True)
        self._exit_conn: Connection = self._exited.connect(self._on_exit, pinned=True)

    @classmethod
    def from_info(cls, info: StateInfo) -> State:
        return cls(
            name=info.name,
            on_enter=info.enter,
            on_exit=info.exit,
            on_update=info.update,
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def on_enter(self) -> StateCallback:
        return self._on_enter

    @property
    def on_exit(self) -> StateCallback:
        return self._on_exit

    @property
    def on_update(self) -> UpdateCallback:
        return self._on_update

    @property
    def entered(self) -> Signal:
        """Fired as ``(entity, machine, state)`` when an entity enters."""
        return self._entered

    @property
    def exited(self) -> Signal:
        """Fired as ``(entity, machine, state)`` when an entity exits."""
        return self._exited

    def update(self, entity: Any, machine: Machine, dt: float) -> None:
        self._on_update(entity, machine, self, dt)

    def __repr__(self) -> str:
        return f"State({self._name!r})"
