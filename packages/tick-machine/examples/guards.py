"""Castle guards -- one Machine driving several entities.

Demonstrates:
- Building states from StateInfo records
- Changing state from inside update callbacks
- Listening to entered/exited signals alongside the states' own callbacks
- Removing an entity from an exit listener mid-transition
- Reported (logged) errors for invalid requests

Run from packages/tick-machine/ (with tick-machine installed, e.g.
``pip install -e .`` at the repository root): python -m examples.guards
"""

import logging
from dataclasses import dataclass

from tick_machine import Machine, State, StateInfo

DT = 0.25


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class Guard:
    name: str
    stamina: float
    shifts_left: int


# ---------------------------------------------------------------------------
# State callbacks
# ---------------------------------------------------------------------------

def rest_enter(guard: Guard, machine: Machine, state: State) -> None:
    print(f"  {guard.name} sits down (stamina {guard.stamina:.1f})")


def rest_update(guard: Guard, machine: Machine, state: State, dt: float) -> None:
    guard.stamina += 4 * dt
    if guard.stamina >= 4:
        machine.change_state(guard, "patrol")


def patrol_enter(guard: Guard, machine: Machine, state: State) -> None:
    print(f"  {guard.name} starts a patrol")


def patrol_exit(guard: Guard, machine: Machine, state: State) -> None:
    guard.shifts_left -= 1
    print(f"  {guard.name} ends a patrol ({guard.shifts_left} shifts left)")


def patrol_update(guard: Guard, machine: Machine, state: State, dt: float) -> None:
    guard.stamina -= 2 * dt
    if guard.stamina <= 0:
        machine.change_state(guard, "rest")


# ---------------------------------------------------------------------------
# Setup and run
# ---------------------------------------------------------------------------

def main() -> None:
    logging.basicConfig(level=logging.WARNING, format="  [%(levelname)s] %(message)s")
    print("=== Guards: shared states, many entities ===\n")

    rest = State.from_info(StateInfo(name="rest", enter=rest_enter, update=rest_update))
    patrol = State.from_info(StateInfo(
        name="patrol", enter=patrol_enter, exit=patrol_exit, update=patrol_update,
    ))
    machine = Machine(states=[rest, patrol])

    # Off duty once the last shift ends: leave before entering "rest".
    def retire(guard: Guard, m: Machine, state: State) -> None:
        if guard.shifts_left <= 0:
            print(f"  {guard.name} goes home")
            m.remove_entity(guard)

    patrol.exited.connect(retire)

    guards = [Guard("Ada", 0.0, 2), Guard("Bo", 3.0, 1)]
    for guard in guards:
        machine.add_entity(guard)
    machine.start()

    # Invalid requests are reported, not raised.
    machine.change_state(guards[0], "sleep")
    machine.stop_entity(Guard("Nobody", 0.0, 0))

    tick = 0
    while machine.active_entities() and tick < 100:
        tick += 1
        machine.update(DT)

    print(f"\n  All guards off duty after {tick} ticks")


if __name__ == "__main__":
    main()
