# matchina/interfaces/protocols.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Mapping, Protocol, runtime_checkable

from matchina.interfaces.types import Disposer, EventType, Listener


@runtime_checkable
class MachineProtocol(Protocol):
    """
    The public machine surface consumed by adapters and visualizers.

    Both flat machines and hierarchical composers satisfy it, so consumers do
    not need to know whether a machine nests children.

    Runtime Invariants:
    - ``get_change().to`` is ``get_state()``.
    - ``send`` runs to completion before returning.
    """

    states: Any
    transitions: Mapping[str, Mapping[str, Any]]

    def get_state(self) -> Any:
        """Return the current state."""
        ...

    def get_change(self) -> Any:
        """Return the change record of the last accepted transition."""
        ...

    def send(self, type: EventType, *params: Any) -> None:
        """Request a transition. Unmodelled events are ignored."""
        ...

    def subscribe(self, listener: Listener) -> Disposer:
        """Register a listener for accepted transitions; returns an unsubscribe function."""
        ...


@runtime_checkable
class HookProtocol(Protocol):
    """
    Lifecycle observer attached to a machine at construction time. Each method
    is optional; the machine only calls those that exist.
    """

    def on_enter(self, state: Any) -> None:
        ...

    def on_exit(self, state: Any) -> None:
        ...

    def on_error(self, error: Exception) -> None:
        ...
