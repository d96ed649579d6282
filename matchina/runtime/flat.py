# matchina/runtime/flat.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from matchina.core.changes import ChangeRecord
from matchina.core.state_machine import StateMachine
from matchina.core.states import State, StateFactory
from matchina.core.transitions import TransitionTable, TransitionTarget, build_change, resolve_exit_state
from matchina.core.validations import Validator
from matchina.runtime.addressing import DELIMITER, parse_flat_key
from matchina.runtime.hierarchy import CHILD_EXIT

logger = logging.getLogger(__name__)


def ancestor_keys(key: str, delimiter: str = DELIMITER) -> List[str]:
    """
    Addresses enclosing ``key``, nearest first: ``"A.B.C"`` gives
    ``["A.B", "A"]``.
    """
    parts = parse_flat_key(key, delimiter).parts
    return [delimiter.join(parts[:size]) for size in range(len(parts) - 1, 0, -1)]


class FlatMachine(StateMachine):
    """
    A single machine whose state keys carry the hierarchy as dotted addresses,
    e.g. ``"Working.Red"``.

    An event the current state does not model falls back to the nearest
    enclosing address that does (``"Working.Red"`` then ``"Working"``). When
    an event lands in a final nested state (data flagged ``final``, or no
    outgoing transitions), ``child.exit`` is sent right after, resolved the
    same way, so the enclosing address can leave.
    """

    def __init__(
        self,
        states: StateFactory,
        transitions: TransitionTable,
        initial: Union[str, State],
        hooks: Optional[List] = None,
        validator: Optional[Validator] = None,
        delimiter: str = DELIMITER,
    ):
        """
        :param delimiter: Separator between address segments.
        """
        self.delimiter = delimiter
        if validator is not None:
            # Enclosing addresses need not be states themselves.
            addressed = {
                key: entry
                for key, entry in transitions.items()
                if key in states or not any(state.startswith(key + delimiter) for state in states)
            }
            validator.validate_definition(states, addressed, initial)
        super().__init__(states, transitions, initial, hooks=hooks)

    def _lookup(self, event_type: str) -> Optional[TransitionTarget]:
        key = self.get_state().key
        for candidate in [key] + ancestor_keys(key, self.delimiter):
            entry = self.transitions.get(candidate)
            if entry and entry.get(event_type) is not None:
                if candidate != key:
                    logger.debug("'%s' in '%s' handled by enclosing '%s'", event_type, key, candidate)
                return entry[event_type]
        return None

    def can_send(self, event_type: str) -> bool:
        return self._lookup(event_type) is not None

    def available_actions(self) -> List[str]:
        """Event types modelled for the current address or any enclosing one."""
        key = self.get_state().key
        actions: List[str] = []
        for candidate in [key] + ancestor_keys(key, self.delimiter):
            for event_type in self.transitions.get(candidate) or {}:
                if event_type not in actions:
                    actions.append(event_type)
        return actions

    def resolve_exit(self, event_type: str, *params: Any) -> Optional[ChangeRecord]:
        from_state = self.get_state()
        to_state = resolve_exit_state(
            self._lookup(event_type), params, self.states, from_state=from_state, event_type=event_type
        )
        if to_state is None:
            return None
        return build_change(event_type, params, from_state, to_state)

    def send(self, event_type: str, *params: Any) -> None:
        before = self.get_change()
        super().send(event_type, *params)
        if event_type == CHILD_EXIT or self.get_change() is before:
            return
        if self.is_final_child():
            state = self.get_state()
            address = parse_flat_key(state.key, self.delimiter)
            payload: Dict[str, Any] = {
                "id": self.delimiter.join(address.parts[:-1]),
                "state": address.parts[-1],
                "data": state.data,
            }
            super().send(CHILD_EXIT, payload)

    def is_final_child(self) -> bool:
        """True when the current state is nested and final."""
        state = self.get_state()
        if parse_flat_key(state.key, self.delimiter).child is None:
            return False
        if isinstance(state.data, Mapping) and state.data.get("final"):
            return True
        return not self.transitions.get(state.key)


def create_flat_machine(
    states: StateFactory,
    transitions: TransitionTable,
    initial: Union[str, State],
    hooks: Optional[List] = None,
    validator: Optional[Validator] = None,
    delimiter: str = DELIMITER,
) -> FlatMachine:
    """
    Create a machine over dotted state keys.

    Example::

        states = define_states({"Idle": None, "Working.Red": None, "Working.Green": None, "Working.Done": None})
        machine = create_flat_machine(
            states,
            {
                "Idle": {"start": "Working.Red"},
                "Working": {"stop": "Idle", CHILD_EXIT: "Idle"},
                "Working.Red": {"tick": "Working.Green"},
                "Working.Green": {"tick": "Working.Red", "finish": "Working.Done"},
            },
            "Idle",
        )
        machine.send("start")
        machine.send("stop")  # handled by "Working"
    """
    return FlatMachine(states, transitions, initial, hooks=hooks, validator=validator, delimiter=delimiter)
