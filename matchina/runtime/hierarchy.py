# matchina/runtime/hierarchy.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Tuple

from matchina.core.emitter import Emitter
from matchina.core.hooks import TRANSITION, UPDATE, create_disposer, setup
from matchina.core.states import child_machine_of
from matchina.core.transitions import has_transition
from matchina.interfaces.protocols import MachineProtocol
from matchina.interfaces.types import Disposer, Installer, Listener
from matchina.runtime.addressing import DELIMITER, MAX_DEPTH, active_keys

logger = logging.getLogger(__name__)

CHILD_EXIT = "child.exit"


def build_active_path(root: MachineProtocol) -> List[MachineProtocol]:
    """
    Walk from ``root`` through compound states and return the chain of
    machines, root first, deepest active child last.
    """
    path = [root]
    state = root.get_state()
    while len(path) < MAX_DEPTH:
        child = child_machine_of(state)
        if child is None or any(child is machine for machine in path):
            break
        path.append(child)
        state = child.get_state()
    return path


def handles(machine: MachineProtocol, event_type: str) -> bool:
    """Return True if the machine's table models ``event_type`` for its current state."""
    transitions = getattr(machine, "transitions", None) or {}
    return has_transition(transitions, machine.get_state().key, event_type)


def is_final(machine: MachineProtocol) -> bool:
    """
    A machine is final when its state data is flagged ``final`` or its current
    state has an empty transition entry.
    """
    state = machine.get_state()
    data = state.data
    if isinstance(data, Mapping) and data.get("final"):
        return True
    entry = (getattr(machine, "transitions", None) or {}).get(state.key)
    return entry is not None and len(entry) == 0


class HierarchicalMachine:
    """
    Routes events through a root machine whose compound states embed child
    machines. Each event goes to the deepest active machine whose table models
    it; ancestors only see events their descendants do not model.

    Every machine on the active path stays hooked while it is there, so
    subscribers see each accepted change once and in commit order, including
    changes sent from hooks or sent to a child directly. The composer keeps no
    reference inside children beyond those hooks, and its active path is a
    plain list rebuilt from the root whenever a change is committed.
    """

    def __init__(self, root: MachineProtocol, dispose_discarded: bool = False) -> None:
        """
        :param root: The root machine.
        :param dispose_discarded: If True, children dropped from the active path
            have their ``dispose()`` called when they define one.
        """
        self.root = root
        self.dispose_discarded = dispose_discarded
        self._emitter = Emitter()
        # Committed changes not yet delivered, in commit order.
        self._pending: List[Any] = []
        self._hooked: List[Tuple[MachineProtocol, Disposer]] = []
        self._active_path: List[MachineProtocol] = []
        self._refresh()

    @property
    def states(self) -> Any:
        return self.root.states

    @property
    def transitions(self) -> Any:
        return self.root.transitions

    @property
    def active_path(self) -> List[MachineProtocol]:
        """Machines from root to the deepest active child."""
        return list(self._active_path)

    def get_state(self) -> Any:
        return self.root.get_state()

    def get_change(self) -> Any:
        return self.root.get_change()

    def full_key(self, delimiter: str = DELIMITER) -> str:
        """Dotted address of the active state chain, e.g. ``"Working.Red"``."""
        return delimiter.join(active_keys(self.root))

    def send(self, event_type: str, *params: Any) -> None:
        """
        Deliver an event to the deepest active machine that models it. A guard
        veto at that level consumes the event.

        :param event_type: The event type.
        :param params: Event parameters.
        """
        path = self._refresh()
        for index in range(len(path) - 1, -1, -1):
            machine = path[index]
            if not handles(machine, event_type):
                continue
            logger.debug("Routing '%s' to level %d in state '%s'", event_type, index, machine.get_state().key)
            machine.send(event_type, *params)
            return
        logger.debug("No machine in active path models '%s'", event_type)

    def _hook(self, machine: MachineProtocol) -> Disposer:
        unhooks = [machine.subscribe(lambda change: self._notified(machine, change))]
        hooks = getattr(machine, "hooks", None)
        if hooks is not None:
            unhooks.append(hooks.add(UPDATE, self._committed))
            unhooks.append(hooks.add(TRANSITION, self._drop_on_failure))
        return create_disposer(unhooks)

    def _committed(self, change: Any) -> None:
        self._pending.append(change)
        # Hook a newly entered child before anything can send to it.
        self._refresh()

    def _drop_on_failure(self, change: Any, next: Any) -> None:
        try:
            next(change)
        except Exception:
            # A failed lifecycle is never notified.
            self._pending[:] = [pending for pending in self._pending if pending is not change]
            raise

    def _notified(self, machine: MachineProtocol, change: Any) -> None:
        for accepted in self._take_pending(machine, change):
            self._emitter.emit(accepted)
        path = self._refresh()
        for level in range(1, len(path)):
            if path[level] is machine:
                self._bubble_child_exit(path[level - 1], machine)
                break

    def _take_pending(self, machine: MachineProtocol, change: Any) -> List[Any]:
        for position, pending in enumerate(self._pending):
            if pending is change:
                delivered = self._pending[: position + 1]
                del self._pending[: position + 1]
                return delivered
        if getattr(machine, "hooks", None) is None:
            # No commit hook; the notification is the only report.
            return [change]
        # Already delivered with a change notified earlier.
        return []

    def _bubble_child_exit(self, parent: MachineProtocol, child: MachineProtocol) -> None:
        if not is_final(child) or not handles(parent, CHILD_EXIT):
            return
        parent_data = parent.get_state().data
        child_state = child.get_state()
        payload: Dict[str, Any] = {
            "id": parent_data.get("id") if isinstance(parent_data, Mapping) else getattr(parent_data, "id", None),
            "state": child_state.key,
            "data": child_state.data,
        }
        logger.debug("Child reached final state '%s'; sending '%s' to parent", child_state.key, CHILD_EXIT)
        parent.send(CHILD_EXIT, payload)

    def _refresh(self) -> List[MachineProtocol]:
        current = build_active_path(self.root)
        hooked: List[Tuple[MachineProtocol, Disposer]] = []
        for machine, unhook in self._hooked:
            if any(machine is kept for kept in current):
                hooked.append((machine, unhook))
                continue
            unhook()
            logger.debug("Discarded child machine in state '%s'", machine.get_state().key)
            if self.dispose_discarded and callable(getattr(machine, "dispose", None)):
                machine.dispose()
        for machine in current:
            if not any(machine is known for known, _ in hooked):
                hooked.append((machine, self._hook(machine)))
        self._hooked = hooked
        self._active_path = current
        return current

    def subscribe(self, listener: Listener) -> Disposer:
        """
        Call ``listener`` with every change accepted at any level of the
        active path, in commit order.
        """
        return self._emitter.subscribe(listener)

    def setup(self, *installers: Installer) -> Disposer:
        """Install lifecycle middleware on the root machine."""
        return setup(self.root, *installers)

    def dispose(self) -> None:
        """Drop this composer's subscribers and unhook it from the active path. Children are left running."""
        self._emitter.clear()
        for _, unhook in reversed(self._hooked):
            unhook()
        self._hooked = []
        self._pending.clear()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.full_key()!r})"


def create_hierarchical_machine(root: MachineProtocol, dispose_discarded: bool = False) -> HierarchicalMachine:
    """
    Wrap a root machine so events reach nested child machines first.

    Example::

        light = lambda: create_machine(light_states, {"Red": {"tick": "Green"}, "Green": {"tick": "Red"}}, "Red")
        states = define_states({"Idle": None, "Working": submachine(light)})
        hsm = create_hierarchical_machine(
            create_machine(states, {"Idle": {"start": "Working"}, "Working": {"stop": "Idle"}}, "Idle")
        )
        hsm.send("start")
        hsm.send("tick")
        hsm.full_key()  # "Working.Green"
    """
    return HierarchicalMachine(root, dispose_discarded=dispose_discarded)
