# tests/unit/core/test_emitter.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from unittest.mock import MagicMock

from matchina.core.emitter import Emitter


def test_emit_in_registration_order():
    emitter = Emitter()
    calls = []
    emitter.subscribe(lambda value: calls.append(("a", value)))
    emitter.subscribe(lambda value: calls.append(("b", value)))
    emitter.emit(1)
    assert calls == [("a", 1), ("b", 1)]


def test_unsubscribe_stops_delivery():
    emitter = Emitter()
    listener = MagicMock(return_value=None)
    unsubscribe = emitter.subscribe(listener)
    emitter.emit(1)
    unsubscribe()
    unsubscribe()
    emitter.emit(2)
    listener.assert_called_once_with(1)
    assert len(emitter) == 0


def test_cleanup_runs_before_next_call_and_on_unsubscribe():
    emitter = Emitter()
    calls = []

    def listener(value):
        calls.append(f"call:{value}")
        return lambda: calls.append(f"cleanup:{value}")

    unsubscribe = emitter.subscribe(listener)
    emitter.emit(1)
    emitter.emit(2)
    unsubscribe()
    assert calls == ["call:1", "cleanup:1", "call:2", "cleanup:2"]


def test_listener_removed_during_emit_is_skipped():
    emitter = Emitter()
    second = MagicMock(return_value=None)
    holder = {}

    def first(value):
        holder["unsubscribe_second"]()

    emitter.subscribe(first)
    holder["unsubscribe_second"] = emitter.subscribe(second)
    emitter.emit(1)
    second.assert_not_called()


def test_listener_added_during_emit_waits_for_next_emit():
    emitter = Emitter()
    late = MagicMock(return_value=None)
    emitter.subscribe(lambda value: emitter.subscribe(late) and None)
    emitter.emit(1)
    late.assert_not_called()
    emitter.emit(2)
    late.assert_called_once_with(2)


def test_self_unsubscribe_runs_returned_cleanup():
    emitter = Emitter()
    cleanup = MagicMock()
    holder = {}

    def listener(value):
        holder["unsubscribe"]()
        return cleanup

    holder["unsubscribe"] = emitter.subscribe(listener)
    emitter.emit(1)
    cleanup.assert_called_once_with()


def test_clear_runs_cleanups_in_reverse_order():
    emitter = Emitter()
    calls = []
    emitter.subscribe(lambda value: lambda: calls.append("a"))
    emitter.subscribe(lambda value: lambda: calls.append("b"))
    emitter.emit(1)
    emitter.clear()
    assert calls == ["b", "a"]
    assert len(emitter) == 0
