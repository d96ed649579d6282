# matchina/core/emitter.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Any, Callable, List, Optional

from matchina.interfaces.types import Disposer, Listener


class _Subscription:
    __slots__ = ("listener", "cleanup", "active")

    def __init__(self, listener: Listener) -> None:
        self.listener = listener
        self.cleanup: Optional[Callable[[], None]] = None
        self.active = True

    def run_cleanup(self) -> None:
        cleanup, self.cleanup = self.cleanup, None
        if cleanup is not None:
            cleanup()


class Emitter:
    """
    Ordered publish/subscribe list. A listener may return a cleanup callable,
    which runs right before that listener's next call and on unsubscribe.
    """

    def __init__(self) -> None:
        self._subscriptions: List[_Subscription] = []

    def subscribe(self, listener: Listener) -> Disposer:
        """
        Register ``listener``; returns a function that unsubscribes it.

        :param listener: Called with each emitted value.
        """
        subscription = _Subscription(listener)
        self._subscriptions.append(subscription)

        def unsubscribe() -> None:
            if not subscription.active:
                return
            subscription.active = False
            self._subscriptions.remove(subscription)
            subscription.run_cleanup()

        return unsubscribe

    def emit(self, value: Any) -> None:
        # Snapshot so listeners added or removed during emit take effect next time.
        for subscription in list(self._subscriptions):
            if not subscription.active:
                continue
            subscription.run_cleanup()
            result = subscription.listener(value)
            if not callable(result):
                continue
            if subscription.active:
                subscription.cleanup = result
            else:
                # Unsubscribed from inside its own call.
                result()

    def clear(self) -> None:
        """Unsubscribe every listener, running pending cleanups in reverse order."""
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in reversed(subscriptions):
            subscription.active = False
            subscription.run_cleanup()

    def __len__(self) -> int:
        return len(self._subscriptions)
