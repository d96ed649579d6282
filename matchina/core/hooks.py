# matchina/core/hooks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence

from matchina.interfaces.types import Disposer, EffectFunc, GuardFunc, Installer, Middleware

if TYPE_CHECKING:
    from matchina.core.changes import ChangeRecord
    from matchina.interfaces.protocols import HookProtocol

GUARD = "guard"
LEAVE = "leave"
UPDATE = "update"
ENTER = "enter"
EFFECT = "effect"
NOTIFY = "notify"
TRANSITION = "transition"

STAGES = (GUARD, LEAVE, UPDATE, ENTER, EFFECT, NOTIFY, TRANSITION)


class HookManager:
    """
    Holds the lifecycle hooks of one machine: per-stage callables (guard, leave, update,
    enter, effect, notify), transition middleware, and observer objects with
    ``on_enter``/``on_exit``/``on_error`` methods.
    """

    def __init__(self, hooks: Optional[List["HookProtocol"]] = None) -> None:
        """
        Initialize with an optional list of observer objects.
        """
        self._hooks: List["HookProtocol"] = list(hooks or [])
        self._stages: Dict[str, List[Callable[..., Any]]] = {stage: [] for stage in STAGES}
        self._invoker = _HookInvoker(self._hooks)

    def register_hook(self, hook: "HookProtocol") -> Disposer:
        """
        Add an observer object; returns a function that removes it.

        :param hook: An object implementing any of the HookProtocol methods.
        """
        self._hooks.append(hook)
        return _remover(self._hooks, hook)

    def add(self, stage: str, fn: Callable[..., Any]) -> Disposer:
        """
        Register ``fn`` for a lifecycle stage; returns a function that removes it.

        :param stage: One of guard, leave, update, enter, effect, notify, transition.
        :param fn: The hook callable.
        :raises ValueError: If the stage is unknown.
        """
        if stage not in self._stages:
            raise ValueError(f"Unknown lifecycle stage: {stage}")
        hooks = self._stages[stage]
        hooks.append(fn)
        return _remover(hooks, fn)

    def check_guards(self, change: "ChangeRecord") -> bool:
        """Return False as soon as a guard returns a falsy value."""
        for guard_fn in list(self._stages[GUARD]):
            if not guard_fn(change):
                return False
        return True

    def run(self, stage: str, change: "ChangeRecord") -> None:
        """Run every hook of ``stage`` with the change, in registration order."""
        for fn in list(self._stages[stage]):
            fn(change)

    def wrap_transition(self, change: "ChangeRecord", final: Callable[["ChangeRecord"], None]) -> None:
        """
        Run ``final`` inside the transition middleware. The first registered
        middleware is the outermost layer; each one receives the change and a
        ``next`` callable it may call, or skip to suppress the transition.
        """
        middlewares = list(self._stages[TRANSITION])

        def dispatch(index: int, current: "ChangeRecord") -> None:
            if index == len(middlewares):
                final(current)
                return
            middlewares[index](current, lambda next_change=current: dispatch(index + 1, next_change))

        dispatch(0, change)

    def execute_on_enter(self, state: Any) -> None:
        """
        Run all observers' on_enter logic when entering a state.
        """
        self._invoker.invoke_on_enter(state)

    def execute_on_exit(self, state: Any) -> None:
        """
        Run all observers' on_exit logic when exiting a state.
        """
        self._invoker.invoke_on_exit(state)

    def execute_on_error(self, error: Exception) -> None:
        """
        Run all observers' on_error logic when a hook raised.
        """
        self._invoker.invoke_on_error(error)

    def clear(self) -> None:
        for hooks in self._stages.values():
            hooks.clear()
        self._hooks.clear()


class _HookInvoker:
    """
    Internal helper that iterates through observer objects and invokes the
    lifecycle methods each one defines.
    """

    def __init__(self, hooks: List["HookProtocol"]) -> None:
        self._hooks = hooks

    def _invoke(self, method: str, arg: Any) -> None:
        for hook in list(self._hooks):
            fn = getattr(hook, method, None)
            if callable(fn):
                fn(arg)

    def invoke_on_enter(self, state: Any) -> None:
        self._invoke("on_enter", state)

    def invoke_on_exit(self, state: Any) -> None:
        self._invoke("on_exit", state)

    def invoke_on_error(self, error: Exception) -> None:
        self._invoke("on_error", error)


def _remover(items: List[Any], item: Any) -> Disposer:
    def remove() -> None:
        # Remove by identity so equal-but-distinct hooks stay registered.
        for index, existing in enumerate(items):
            if existing is item:
                del items[index]
                return

    return remove


def create_disposer(disposers: Sequence[Disposer]) -> Disposer:
    """Return a function that calls ``disposers`` in reverse order."""
    disposers = list(disposers)

    def dispose() -> None:
        for disposer in reversed(disposers):
            disposer()

    return dispose


def setup(target: Any, *installers: Installer) -> Disposer:
    """
    Apply installers to ``target`` in order and return one disposer that
    removes them in reverse order.

    :param target: Usually a machine.
    :param installers: Callables ``(target) -> disposer``.
    """
    return create_disposer([install(target) for install in installers])


def create_setup(*installers: Installer) -> Installer:
    """Compose installers into a single reusable installer."""

    def install(target: Any) -> Disposer:
        return setup(target, *installers)

    return install


def _stage_installer(stage: str) -> Callable[[Callable[..., Any]], Installer]:
    def make(fn: Callable[..., Any]) -> Installer:
        def install(machine: Any) -> Disposer:
            return machine.hooks.add(stage, fn)

        install.stage = stage
        return install

    make.__name__ = stage
    return make


def _bound_installer(stage: str) -> Callable[[Any, Callable[..., Any]], Disposer]:
    def on(machine: Any, fn: Callable[..., Any]) -> Disposer:
        return machine.hooks.add(stage, fn)

    on.__name__ = f"on_{stage}"
    return on


guard: Callable[[GuardFunc], Installer] = _stage_installer(GUARD)
leave: Callable[[EffectFunc], Installer] = _stage_installer(LEAVE)
update: Callable[[EffectFunc], Installer] = _stage_installer(UPDATE)
enter: Callable[[EffectFunc], Installer] = _stage_installer(ENTER)
effect: Callable[[EffectFunc], Installer] = _stage_installer(EFFECT)
notify: Callable[[EffectFunc], Installer] = _stage_installer(NOTIFY)
transition: Callable[[Middleware], Installer] = _stage_installer(TRANSITION)

on_guard = _bound_installer(GUARD)
on_leave = _bound_installer(LEAVE)
on_update = _bound_installer(UPDATE)
on_enter = _bound_installer(ENTER)
on_effect = _bound_installer(EFFECT)
on_notify = _bound_installer(NOTIFY)
on_transition = _bound_installer(TRANSITION)
