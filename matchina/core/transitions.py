# matchina/core/transitions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Any, Callable, List, Mapping, Optional, Sequence, Union

from matchina.core.changes import ChangeRecord
from matchina.core.errors import StateNotFoundError
from matchina.core.states import State, StateFactory

TransitionTarget = Union[str, Callable[..., Any]]
TransitionTable = Mapping[str, Mapping[str, TransitionTarget]]


def lookup_transition(transitions: TransitionTable, state_key: str, event_type: str) -> Optional[TransitionTarget]:
    """
    Return the table entry for ``(state_key, event_type)``, or None if the
    combination is not modelled.
    """
    entry = transitions.get(state_key)
    if not entry:
        return None
    return entry.get(event_type)


def has_transition(transitions: TransitionTable, state_key: str, event_type: str) -> bool:
    return lookup_transition(transitions, state_key, event_type) is not None


def get_available_actions(transitions: TransitionTable, state_key: str) -> List[str]:
    """Event types modelled for ``state_key``, in table order."""
    entry = transitions.get(state_key)
    return list(entry) if entry else []


def _instantiate(states: StateFactory, key: str, params: Sequence[Any]) -> State:
    constructor = states.get(key)
    if constructor is None:
        raise StateNotFoundError(f"State '{key}' is not defined by the state factory")
    return constructor(*params)


def resolve_exit_state(
    target: Optional[TransitionTarget],
    params: Sequence[Any],
    states: StateFactory,
    from_state: Optional[State] = None,
    event_type: Optional[str] = None,
) -> Optional[State]:
    """
    Resolve a table entry to a concrete state.

    A string target is instantiated with the event params. A resolver is called
    with the params; it may return a key, a state, None, or a zero-argument
    callable that is called once more to produce the key or state. A callable
    marked with :func:`receives_change` gets the pending change instead.

    :param target: The table entry, or None.
    :param params: Event parameters.
    :param states: Factory used to instantiate keys.
    :param from_state: The current state, exposed as ``from_`` on the pending change.
    :param event_type: The event type, exposed as ``type`` on the pending change.
    :raises StateNotFoundError: If a key does not name a defined state.
    """
    if target is None:
        return None
    if isinstance(target, str):
        return _instantiate(states, target, params)

    result = target(*params)
    if callable(result):
        if getattr(result, "receives_change", False):
            result = result(ChangeRecord(type=event_type, from_=from_state, to=None, params=tuple(params)))
        else:
            result = result()
    if result is None:
        return None
    if isinstance(result, str):
        return _instantiate(states, result, ())
    return result


def resolve_next_state(
    transitions: TransitionTable, states: StateFactory, from_state: State, event_type: str, params: Sequence[Any]
) -> Optional[State]:
    target = lookup_transition(transitions, from_state.key, event_type)
    return resolve_exit_state(target, params, states, from_state=from_state, event_type=event_type)


def build_change(event_type: str, params: Sequence[Any], from_state: State, to_state: State) -> ChangeRecord:
    return ChangeRecord(type=event_type, from_=from_state, to=to_state, params=tuple(params))


def receives_change(fn: Callable[[ChangeRecord], Any]) -> Callable[[ChangeRecord], Any]:
    """
    Mark a second-level resolver so it is called with the pending change
    (``from_`` is the current state, ``to`` is None) instead of no arguments.
    """
    fn.receives_change = True
    return fn


def update_state(updater: Callable[[Any], Mapping[str, Any]]) -> Callable[[ChangeRecord], State]:
    """
    Second-level resolver that keeps the current state key and merges
    ``updater(current_data)`` into a copy of its data.

    Example::

        transitions = {"Idle": {"increment": lambda n=1: update_state(lambda data: {"count": data["count"] + n})}}
    """

    @receives_change
    def resolve(change: ChangeRecord) -> State:
        current = change.from_
        data = dict(current.data or {})
        data.update(updater(current.data))
        return type(current)(current.key, data)

    return resolve
