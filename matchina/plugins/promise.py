# matchina/plugins/promise.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, List, Optional

from matchina.core.errors import TransitionError
from matchina.core.state_machine import StateMachine
from matchina.core.states import define_states

logger = logging.getLogger(__name__)

PROMISE_STATES = define_states(
    {
        "Idle": None,
        "Pending": lambda awaitable, params: {"awaitable": awaitable, "params": params},
        "Resolved": lambda result: {"result": result},
        "Rejected": lambda error: {"error": error},
    }
)

PROMISE_TRANSITIONS = {
    "Idle": {"execute": "Pending"},
    "Pending": {"resolve": "Resolved", "reject": "Rejected"},
    "Resolved": {},
    "Rejected": {},
}


class PromiseMachine(StateMachine):
    """
    Tracks one asynchronous call through Idle, Pending, Resolved and Rejected.

    Transitions themselves stay synchronous; only :meth:`execute` awaits, and it
    sends ``resolve`` or ``reject`` once the awaited call settles.
    """

    def __init__(self, make_awaitable: Optional[Callable[..., Awaitable[Any]]] = None, hooks: Optional[List] = None):
        """
        :param make_awaitable: Called with the execute params; returns the awaitable to track.
        :param hooks: Optional list of observer objects.
        """
        super().__init__(PROMISE_STATES, PROMISE_TRANSITIONS, "Idle", hooks=hooks)
        self._make_awaitable = make_awaitable
        self._current: Optional[Awaitable[Any]] = None

    async def execute(self, *params: Any) -> Any:
        """
        Start the call and await it.

        :return: The awaited result.
        :raises TransitionError: If no factory was given or the machine is not idle.
        :raises Exception: Whatever the awaited call raised, after moving to Rejected.
        """
        if self._make_awaitable is None:
            raise TransitionError("No awaitable factory provided")
        if not self.get_state().is_("Idle"):
            raise TransitionError(f"Can only execute from Idle state, not {self.get_state().key}")

        awaitable = self._make_awaitable(*params)
        self._current = awaitable
        self.send("execute", awaitable, params)
        try:
            result = await awaitable
        except Exception as error:
            logger.debug("Awaited call rejected: %s", error)
            if self._current is awaitable:
                self.send("reject", error)
            raise
        if self._current is awaitable:
            self.send("resolve", result)
        return result


def create_promise_machine(
    make_awaitable: Optional[Callable[..., Awaitable[Any]]] = None, hooks: Optional[List] = None
) -> PromiseMachine:
    """
    Create a promise machine around a coroutine function.

    Example::

        fetcher = create_promise_machine(fetch_user)
        user = await fetcher.execute(42)
        fetcher.get_state().key  # "Resolved"
    """
    return PromiseMachine(make_awaitable, hooks=hooks)
