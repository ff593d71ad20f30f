"""Machine - entity/state bookkeeping, lifecycle and transitions."""
from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable
from types import MappingProxyType
from typing import Any, Mapping

from tick_signal import Signal

from tick_machine.config import CreationInfo
from tick_machine.state import State
from tick_machine.types import (
    InactiveEntityError,
    MachineError,
    StateInUseError,
    StateRef,
    UnknownStateError,
    UnregisteredEntityError,
)

logger = logging.getLogger(__name__)

DEFAULT_STATE_NAME = "default"


def _as_list(value: Any) -> list[Any]:
    """Coerce an optional constructor argument to a list. Malformed -> []."""
    if value is None or isinstance(value, (str, bytes)):
        return []
    if not isinstance(value, Iterable):
        return []
    return list(value)


class Machine:
    """Finite state machine shared by many entities.

    An entity is *registered* once it has a current state and *active*
    once started. Only active entities are updated and can complete a
    transition. Enter and exit effects are delivered by firing the
    state's ``entered``/``exited`` signals, never by calling the state's
    callbacks directly.

    Invalid operations (unregistered entity, double stop, unknown state)
    are logged as warnings and leave the machine untouched. With
    ``strict=True`` they raise a ``MachineError`` subclass instead.
    """

    def __init__(
        self,
        entities: Iterable[Any] = (),
        states: Iterable[Any] = (),
        initial_state: Any = None,
        *,
        strict: bool = False,
    ) -> None:
        valid_states = [s for s in _as_list(states) if isinstance(s, State)]

        if isinstance(initial_state, State):
            initial = initial_state
        elif valid_states:
            initial = valid_states[0]
        else:
            initial = State(name=DEFAULT_STATE_NAME)

        self._initial_state: State = initial
        self._strict = strict
        self._entity_state: dict[Any, State] = {}
        # Insertion-ordered set: update order follows activation order.
        self._active: dict[Any, None] = {}
        self._states: dict[str, State] = {}

        for entity in _as_list(entities):
            if entity is None or not isinstance(entity, Hashable):
                continue
            self._entity_state[entity] = initial

        # Duplicate names: last one wins. A shadowed initial state still
        # resolves by identity, see resolve().
        for state in valid_states:
            self._states[state.name] = state
        self._states.setdefault(initial.name, initial)

        self.entity_added = Signal()
        self.entity_removed = Signal()
        self.entity_started = Signal()
        self.entity_stopped = Signal()
        self.state_added = Signal()
        self.state_removed = Signal()
        self.started = Signal()
        self.stopped = Signal()
        self.state_changed = Signal()

    @classmethod
    def from_info(cls, info: CreationInfo | None = None) -> Machine:
        if info is None:
            info = CreationInfo()
        return cls(
            entities=info.entities,
            states=info.states,
            initial_state=info.initial_state,
            strict=info.strict,
        )

    @property
    def initial_state(self) -> State:
        return self._initial_state

    @property
    def strict(self) -> bool:
        return self._strict

    # --- Registration ---

    def add_entity(self, entity: Any, initial_state: StateRef | None = None) -> None:
        """Register ``entity`` without activating it.

        ``initial_state`` falls back to ``self.initial_state`` when absent
        or unresolvable. Re-adding an entity overwrites its state and fires
        ``entity_added`` again.
        """
        if entity is None or not isinstance(entity, Hashable):
            return
        state = self.resolve(initial_state) if initial_state is not None else None
        if state is None:
            state = self._initial_state
        self._entity_state[entity] = state
        self.entity_added.fire(entity, state)

    def remove_entity(self, entity: Any) -> None:
        """Forget ``entity``. Safe for unregistered entities."""
        if isinstance(entity, Hashable):
            self._active.pop(entity, None)
            self._entity_state.pop(entity, None)
        self.entity_removed.fire(entity)

    def add_state(self, state: Any) -> None:
        """Index ``state`` by name. Non-State values are ignored."""
        if not isinstance(state, State):
            return
        previous = self._states.get(state.name)
        if previous is not None and previous is not state:
            logger.debug("State name %r re-registered, replacing %r", state.name, previous)
        self._states[state.name] = state
        self.state_added.fire(state)

    def remove_state(self, ref: StateRef) -> None:
        """Drop a state from the registry.

        The initial state and states that a registered entity is currently
        in cannot be removed.
        """
        state = self.resolve(ref)
        if state is None:
            self._report(UnknownStateError(
                ref, f"{ref!r} has not been added to the state machine",
            ))
            return
        if state is self._initial_state:
            self._report(StateInUseError(
                state, f"{state!r} is the initial state and cannot be removed",
            ))
            return
        if any(current is state for current in self._entity_state.values()):
            self._report(StateInUseError(
                state, f"{state!r} is the current state of a registered entity",
            ))
            return
        del self._states[state.name]
        self.state_removed.fire(state)

    # --- Entity lifecycle ---

    def start_entity(self, entity: Any, start_in: StateRef | None = None) -> None:
        """Activate ``entity``, optionally moving it to ``start_in`` first."""
        target: State | None = None
        if start_in is not None:
            target = self.resolve(start_in)
            if target is None:
                self._report(UnknownStateError(
                    start_in, f"{start_in!r} has not been added to the state machine",
                ))
                return

        current = self.get_current_state(entity)
        if current is None:
            self._report(UnregisteredEntityError(
                entity, f"Entity {entity!r} has not been added to the state machine",
            ))
            return

        state = target if target is not None else current
        self._entity_state[entity] = state
        self._active[entity] = None
        logger.debug("Entity %r started in %r", entity, state)
        state.entered.fire(entity, self, state)
        self.entity_started.fire(entity)

    def stop_entity(self, entity: Any) -> None:
        current = self.get_current_state(entity)
        if current is None:
            self._report(UnregisteredEntityError(
                entity, f"Entity {entity!r} has not been added to the state machine",
            ))
            return
        if not self.is_active(entity):
            self._report(InactiveEntityError(
                entity, f"Entity {entity!r} is already inactive",
            ))
            return

        del self._active[entity]
        logger.debug("Entity %r stopped in %r", entity, current)
        current.exited.fire(entity, self, current)
        self.entity_stopped.fire(entity)

    # --- Machine lifecycle ---

    def start(self, start_in: StateRef | None = None) -> None:
        """Start every registered entity that is not active yet."""
        inactive = [e for e in self._entity_state if e not in self._active]
        for entity in inactive:
            # An earlier entered handler may have started or removed it.
            if entity in self._active or entity not in self._entity_state:
                continue
            self.start_entity(entity, start_in)
        self.started.fire()

    def stop(self) -> None:
        """Stop every active entity."""
        for entity in list(self._active):
            if entity in self._active:
                self.stop_entity(entity)
        self.stopped.fire()

    # --- Transitions ---

    def change_state(self, entity: Any, new_state: StateRef | None) -> None:
        """Move ``entity`` to ``new_state``.

        ``exited`` fires on the old state first. If a handler stopped or
        removed the entity meanwhile, the transition ends there and
        ``entered`` is never fired.
        """
        current = self.get_current_state(entity)
        if current is None:
            self._report(UnregisteredEntityError(
                entity, f"Entity {entity!r} has not been added to the state machine",
            ))
            return

        target = self.resolve(new_state) if new_state is not None else None
        if target is None:
            self._report(UnknownStateError(
                new_state, f"Can't change state to {new_state!r}: not in the state machine",
            ))
            return

        current.exited.fire(entity, self, current)

        if entity not in self._active:
            logger.debug(
                "Entity %r inactive after exiting %r, not entering %r",
                entity, current, target,
            )
            return

        self._entity_state[entity] = target
        logger.debug("Entity %r changed %r -> %r", entity, current, target)
        target.entered.fire(entity, self, target)
        self.state_changed.fire(entity, target, current)

    def update(self, dt: float) -> None:
        """Run the current state's update for every active entity.

        Entities activated during the pass wait for the next call; entities
        stopped or removed during the pass are skipped.
        """
        for entity in list(self._active):
            if entity not in self._active:
                continue
            self._entity_state[entity].update(entity, self, dt)

    # --- Queries ---

    def resolve(self, ref: Any) -> State | None:
        """Look up a known state by name or by identity.

        Names resolve through the registry only. A State object also
        resolves when it is the initial state or some entity's current
        state, even if a later state took over its name.
        """
        if isinstance(ref, str):
            return self._states.get(ref)
        if isinstance(ref, State):
            if self._states.get(ref.name) is ref or ref is self._initial_state:
                return ref
            if any(current is ref for current in self._entity_state.values()):
                return ref
        return None

    def get_current_state(self, entity: Any) -> State | None:
        if not isinstance(entity, Hashable):
            return None
        return self._entity_state.get(entity)

    def get_states(self) -> Mapping[str, State]:
        """Read-only view of the name -> State registry."""
        return MappingProxyType(self._states)

    def is_registered(self, entity: Any) -> bool:
        return isinstance(entity, Hashable) and entity in self._entity_state

    def is_active(self, entity: Any) -> bool:
        return isinstance(entity, Hashable) and entity in self._active

    def entities(self) -> frozenset[Any]:
        return frozenset(self._entity_state)

    def active_entities(self) -> frozenset[Any]:
        return frozenset(self._active)

    # --- Internal helpers ---

    def _report(self, error: MachineError) -> None:
        if self._strict:
            raise error
        logger.warning("%s", error.args[0])

    def __repr__(self) -> str:
        return (
            f"<Machine states={len(self._states)} "
            f"entities={len(self._entity_state)} active={len(self._active)}>"
        )
