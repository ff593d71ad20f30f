"""System factory for driving a Machine from the tick engine."""
from __future__ import annotations

from typing import Any, Callable, Protocol

from tick_machine.machine import Machine


class TickLike(Protocol):
    """The part of a tick context the machine system reads."""

    @property
    def dt(self) -> float: ...


def make_machine_system(machine: Machine) -> Callable[[Any, TickLike], None]:
    """Return a system that updates ``machine`` once per tick with ``ctx.dt``.

    The signature matches tick engine systems, ``(world, ctx)``. The world
    is not used.
    """

    def machine_system(world: Any, ctx: TickLike) -> None:
        machine.update(ctx.dt)

    return machine_system
