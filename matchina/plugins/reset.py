# matchina/plugins/reset.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Any, Callable, Union

from matchina.core.changes import ChangeRecord

RESET = "reset"


def reset_machine(machine: Any, state: Union[str, Any], event_type: str = RESET) -> None:
    """
    Force ``machine`` into ``state`` with a ``reset`` change. The change still
    passes through guards and the full lifecycle.

    :param machine: The machine to reset.
    :param state: A state, or a key instantiated with no arguments.
    :param event_type: The change type recorded.
    """
    target = machine.states[state]() if isinstance(state, str) else state
    machine.transition(ChangeRecord(type=event_type, from_=machine.get_state(), to=target, params=()))


def create_reset(machine: Any, state: Union[str, Any]) -> Callable[[], None]:
    """Return a zero-argument function resetting ``machine`` to ``state``."""

    def reset() -> None:
        reset_machine(machine, state)

    return reset


def with_reset(machine: Any, state: Union[str, Any]) -> Any:
    """Attach ``machine.reset()`` unless the machine already has one."""
    if getattr(machine, "reset", None) is None:
        machine.reset = create_reset(machine, state)
    return machine
