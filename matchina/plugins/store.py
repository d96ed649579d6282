# matchina/plugins/store.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from matchina.core.changes import ChangeRecord
from matchina.core.state_machine import BaseMachine

logger = logging.getLogger(__name__)

StoreAction = Union[Any, Callable[..., Any]]


class StoreMachine(BaseMachine):
    """
    A machine over a single value instead of a state factory.

    Each action is a replacement value or a callable taking the event params
    and returning the new value, or a callable that receives the pending change
    (``from_`` is the current value) and returns the new value. An action that
    resolves to None leaves the store untouched.
    """

    def __init__(self, initial: Any, actions: Mapping[str, StoreAction], hooks: Optional[List] = None) -> None:
        """
        :param initial: The initial value.
        :param actions: Mapping of event type to action.
        :param hooks: Optional list of observer objects.
        """
        super().__init__(initial, hooks)
        self.actions: Dict[str, StoreAction] = dict(actions)

    def resolve_exit(self, event_type: str, *params: Any) -> Optional[ChangeRecord]:
        if event_type not in self.actions:
            return None
        action = self.actions[event_type]
        pending = ChangeRecord(type=event_type, from_=self.get_state(), to=None, params=params)
        value = action(*params) if callable(action) else action
        if callable(value):
            value = value(pending)
        if value is None:
            return None
        return ChangeRecord(type=event_type, from_=pending.from_, to=value, params=params)

    def dispatch(self, event_type: str, *params: Any) -> None:
        """
        Apply an action. Unknown types and actions resolving to None are no-ops.
        """
        change = self.resolve_exit(event_type, *params)
        if change is None:
            logger.debug("Ignoring store action '%s'", event_type)
            return
        self.transition(change)

    send = dispatch

    def __repr__(self) -> str:
        return f"{type(self).__name__}(value={self.get_state()!r})"


def create_store_machine(initial: Any, actions: Mapping[str, StoreAction], hooks: Optional[List] = None) -> StoreMachine:
    """
    Create a store machine.

    Example::

        counter = create_store_machine(0, {
            "increment": lambda amount=1: lambda change: change.from_ + amount,
            "set": lambda value: value,
            "reset": 0,
        })
        counter.dispatch("increment", 5)
        counter.get_state()  # 5
    """
    return StoreMachine(initial, actions, hooks=hooks)
