# tests/unit/core/test_hooks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import List
from unittest.mock import MagicMock

import pytest

from matchina.core.hooks import (
    HookManager,
    create_disposer,
    create_setup,
    effect,
    enter,
    guard,
    leave,
    notify,
    on_effect,
    on_guard,
    on_transition,
    setup,
    transition,
)


def test_hook_manager(dummy_hooks: List[MagicMock], light_states):
    hm = HookManager(hooks=dummy_hooks)
    red = light_states.Red()
    hm.execute_on_enter(red)
    dummy_hooks[0].on_enter.assert_called_once_with(red)
    hm.execute_on_exit(red)
    dummy_hooks[0].on_exit.assert_called_once_with(red)
    err = Exception("TestError")
    hm.execute_on_error(err)
    dummy_hooks[0].on_error.assert_called_once_with(err)


def test_hook_manager_register():
    hm = HookManager()
    hook = MagicMock()
    remove = hm.register_hook(hook)
    assert len(hm._hooks) == 1
    remove()
    assert hm._hooks == []


def test_observers_may_omit_methods():
    class EnterOnly:
        def __init__(self):
            self.entered = []

        def on_enter(self, state):
            self.entered.append(state)

    observer = EnterOnly()
    hm = HookManager(hooks=[observer])
    hm.execute_on_exit("A")
    hm.execute_on_error(RuntimeError())
    hm.execute_on_enter("B")
    assert observer.entered == ["B"]


def test_add_rejects_unknown_stage():
    with pytest.raises(ValueError):
        HookManager().add("after", lambda change: None)


def test_check_guards_stops_at_first_veto():
    hm = HookManager()
    first = MagicMock(return_value=0)
    second = MagicMock(return_value=True)
    hm.add("guard", first)
    hm.add("guard", second)
    assert hm.check_guards("change") is False
    second.assert_not_called()


def test_run_in_registration_order_and_remove():
    hm = HookManager()
    calls = []
    hm.add("effect", lambda change: calls.append(("a", change)))
    remove_b = hm.add("effect", lambda change: calls.append(("b", change)))
    hm.run("effect", 1)
    remove_b()
    hm.run("effect", 2)
    assert calls == [("a", 1), ("b", 1), ("a", 2)]


def test_removing_twice_is_harmless():
    hm = HookManager()
    remove = hm.add("notify", print)
    remove()
    remove()


def test_wrap_transition_is_onion_ordered():
    hm = HookManager()
    calls = []

    def outer(change, next):
        calls.append("outer:before")
        next(change)
        calls.append("outer:after")

    def inner(change, next):
        calls.append("inner:before")
        next(change)
        calls.append("inner:after")

    hm.add("transition", outer)
    hm.add("transition", inner)
    hm.wrap_transition("change", lambda change: calls.append(f"final:{change}"))
    assert calls == ["outer:before", "inner:before", "final:change", "inner:after", "outer:after"]


def test_wrap_transition_can_replace_or_suppress_change():
    hm = HookManager()
    final = MagicMock()
    remove = hm.add("transition", lambda change, next: next(change.upper()))
    hm.wrap_transition("abc", final)
    final.assert_called_once_with("ABC")

    remove()
    hm.add("transition", lambda change, next: None)
    final.reset_mock()
    hm.wrap_transition("abc", final)
    final.assert_not_called()


def test_wrap_transition_next_defaults_to_current_change():
    hm = HookManager()
    final = MagicMock()
    hm.add("transition", lambda change, next: next())
    hm.wrap_transition("abc", final)
    final.assert_called_once_with("abc")


def test_create_disposer_runs_in_reverse_order():
    calls = []
    dispose = create_disposer([lambda: calls.append(1), lambda: calls.append(2), lambda: calls.append(3)])
    dispose()
    assert calls == [3, 2, 1]


def test_setup_installs_and_disposes(light):
    calls = []
    dispose = setup(
        light,
        guard(lambda change: True),
        leave(lambda change: calls.append("leave")),
        enter(lambda change: calls.append("enter")),
        effect(lambda change: calls.append("effect")),
        notify(lambda change: calls.append("notify")),
        transition(lambda change, next: next(change)),
    )
    light.send("next")
    assert calls == ["leave", "enter", "effect", "notify"]

    dispose()
    calls.clear()
    light.send("next")
    assert calls == []
    assert light.get_state().key == "Yellow"


def test_create_setup_is_reusable(light_states, light_transitions):
    from matchina.core.state_machine import create_machine

    seen = []
    extension = create_setup(effect(lambda change: seen.append(change.to.key)))
    first = create_machine(light_states, light_transitions, "Red")
    second = create_machine(light_states, light_transitions, "Green")
    extension(first)
    extension(second)
    first.send("next")
    second.send("next")
    assert seen == ["Green", "Yellow"]


def test_bound_installers(light):
    seen = []
    remove_guard = on_guard(light, lambda change: change.to.key != "Green")
    remove_effect = on_effect(light, lambda change: seen.append(change.to.key))
    remove_middleware = on_transition(light, lambda change, next: next(change))
    light.send("next")
    assert light.get_state().key == "Red"

    remove_guard()
    light.send("next")
    assert seen == ["Green"]
    remove_effect()
    remove_middleware()
    light.send("next")
    assert seen == ["Green"]
