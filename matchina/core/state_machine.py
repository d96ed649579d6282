# matchina/core/state_machine.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import logging
from typing import Any, List, Optional, Union

from matchina.core.changes import ChangeRecord
from matchina.core.emitter import Emitter
from matchina.core.errors import ValidationError
from matchina.core.hooks import EFFECT, ENTER, LEAVE, NOTIFY, UPDATE, HookManager, setup
from matchina.core.states import State, StateFactory
from matchina.core.transitions import (
    TransitionTable,
    build_change,
    get_available_actions,
    has_transition,
    resolve_next_state,
)
from matchina.core.validations import Validator
from matchina.interfaces.types import Disposer, Installer, Listener

logger = logging.getLogger(__name__)


def _label(value: Any) -> Any:
    return getattr(value, "key", value)


class BaseMachine:
    """
    Holds one current change record and runs the lifecycle around every
    accepted change: guard, leave, commit, enter, effect, notify.

    Subclasses decide how an event becomes a prospective change and hand it to
    :meth:`transition`.
    """

    def __init__(self, initial: Any, hooks: Optional[List] = None):
        """
        :param initial: The initial state or value.
        :param hooks: Optional list of observer objects implementing on_enter, on_exit, on_error.
        """
        self.hooks = HookManager(hooks)
        self._emitter = Emitter()
        self._current_change = ChangeRecord.initial(initial)
        self._depth = 0
        # Errors already reported by a nested transition of this machine.
        self._reported: List[BaseException] = []

    def get_state(self) -> Any:
        """Get the current state."""
        return self._current_change.to

    def get_change(self) -> ChangeRecord:
        """Get the change record of the last accepted transition."""
        return self._current_change

    def transition(self, change: ChangeRecord) -> None:
        """
        Apply a prospective change through transition middleware, guards and
        the lifecycle stages. Errors raised by hooks are reported to observers
        and re-raised; nothing already committed is rolled back.
        """
        self.hooks.wrap_transition(change, self._process)

    def _process(self, change: ChangeRecord) -> None:
        self._depth += 1
        try:
            if not self.guard(change):
                logger.debug("Guard vetoed '%s': %s -> %s", change.type, _label(change.from_), _label(change.to))
                return
            self.leave(change)
            self.update(change)
            self.enter(change)
            self.effect(change)
            self.notify(change)
        except Exception as error:
            if not any(error is reported for reported in self._reported):
                self._reported.append(error)
                logger.error("Lifecycle hook failed during '%s': %s", change.type, error)
                self.hooks.execute_on_error(error)
            raise
        finally:
            self._depth -= 1
            if self._depth == 0:
                self._reported.clear()

    def guard(self, change: ChangeRecord) -> bool:
        return self.hooks.check_guards(change)

    def leave(self, change: ChangeRecord) -> None:
        self.hooks.execute_on_exit(change.from_)
        self.hooks.run(LEAVE, change)

    def update(self, change: ChangeRecord) -> None:
        self._current_change = change
        logger.debug("Transitioned '%s': %s -> %s", change.type, _label(change.from_), _label(change.to))
        self.hooks.run(UPDATE, change)

    def enter(self, change: ChangeRecord) -> None:
        self.hooks.execute_on_enter(change.to)
        self.hooks.run(ENTER, change)

    def effect(self, change: ChangeRecord) -> None:
        self.hooks.run(EFFECT, change)

    def notify(self, change: ChangeRecord) -> None:
        self.hooks.run(NOTIFY, change)
        self._emitter.emit(change)

    def subscribe(self, listener: Listener) -> Disposer:
        """
        Call ``listener`` with the change record of every accepted transition.

        :param listener: May return a cleanup callable, run before its next call
            and on unsubscribe.
        :return: A function that unsubscribes the listener.
        """
        return self._emitter.subscribe(listener)

    def setup(self, *installers: Installer) -> Disposer:
        """
        Install lifecycle middleware, e.g. ``machine.setup(guard(fn), effect(fn))``.

        :return: A disposer removing them in reverse order.
        """
        return setup(self, *installers)

    def dispose(self) -> None:
        """Drop all subscribers (running their cleanups) and hooks."""
        self._emitter.clear()
        self.hooks.clear()
        logger.debug("Disposed %r", self)


class StateMachine(BaseMachine):
    """
    A finite state machine driven by a transition table over a state factory.

    ``get_state()`` is always ``get_change().to``. Unmodelled events and guard
    vetoes leave the machine untouched and notify nobody.
    """

    def __init__(
        self,
        states: StateFactory,
        transitions: TransitionTable,
        initial: Union[str, State],
        hooks: Optional[List] = None,
        validator: Optional[Validator] = None,
    ):
        """
        :param states: The state factory the table refers to.
        :param transitions: Mapping of state key to mapping of event type to target.
        :param initial: Initial state key (instantiated with no arguments) or a state.
        :param hooks: Optional list of observer objects implementing on_enter, on_exit, on_error.
        :param validator: Optional validator run against the definition once, here.
        """
        if validator is not None:
            validator.validate_definition(states, transitions, initial)

        self.states = states
        self.transitions = transitions
        super().__init__(self._resolve_initial(initial), hooks)

    def _resolve_initial(self, initial: Union[str, State]) -> State:
        if not isinstance(initial, str):
            return initial
        constructor = self.states.get(initial)
        if constructor is None:
            raise ValidationError(f"Initial state '{initial}' is not defined by the state factory")
        return constructor()

    def can_send(self, event_type: str) -> bool:
        """Return True if the table models ``event_type`` for the current state."""
        return has_transition(self.transitions, self.get_state().key, event_type)

    def available_actions(self) -> List[str]:
        """Event types modelled for the current state."""
        return get_available_actions(self.transitions, self.get_state().key)

    def send(self, event_type: str, *params: Any) -> None:
        """
        Request a transition. Errors raised by hooks propagate to the caller.

        :param event_type: The event type looked up in the current state's table entry.
        :param params: Event parameters, passed to the target constructor or resolver.
        """
        change = self.resolve_exit(event_type, *params)
        if change is None:
            logger.debug("Ignoring '%s' in state '%s'", event_type, self.get_state().key)
            return
        self.transition(change)

    def resolve_exit(self, event_type: str, *params: Any) -> Optional[ChangeRecord]:
        """
        Compute the prospective change for an event without applying it.

        :return: The change record, or None if the event does not apply.
        """
        from_state = self.get_state()
        to_state = resolve_next_state(self.transitions, self.states, from_state, event_type, params)
        if to_state is None:
            return None
        return build_change(event_type, params, from_state, to_state)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(state={self.get_state().key!r})"


def create_machine(
    states: StateFactory,
    transitions: TransitionTable,
    initial: Union[str, State],
    hooks: Optional[List] = None,
    validator: Optional[Validator] = None,
) -> StateMachine:
    """
    Create a state machine.

    Example::

        states = define_states({"Red": None, "Green": None, "Yellow": None})
        light = create_machine(
            states,
            {"Red": {"next": "Green"}, "Green": {"next": "Yellow"}, "Yellow": {"next": "Red"}},
            "Red",
        )
        light.send("next")
        light.get_state().key  # "Green"
    """
    return StateMachine(states, transitions, initial, hooks=hooks, validator=validator)
