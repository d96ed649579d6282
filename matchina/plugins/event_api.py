# matchina/plugins/event_api.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Any, Callable, Dict, Iterator, List, Optional

Sender = Callable[..., None]


class EventApi:
    """
    One sender per event type of a machine's table: ``api.next(1)`` is
    ``machine.send("next", 1)``. Event types that are not identifiers are
    reachable by item access, e.g. ``api["child.exit"]()``.
    """

    def __init__(self, machine: Any, state_key: Optional[str] = None) -> None:
        """
        :param machine: Any machine exposing ``send`` and ``transitions``.
        :param state_key: If given, only events modelled for this state get senders.
        """
        self._senders: Dict[str, Sender] = {}
        for key, entry in machine.transitions.items():
            if state_key is not None and key != state_key:
                continue
            for event_type in entry or {}:
                if event_type not in self._senders:
                    self._senders[event_type] = _sender(machine, event_type)

    def __getattr__(self, name: str) -> Sender:
        senders = self.__dict__.get("_senders", {})
        try:
            return senders[name]
        except KeyError:
            raise AttributeError(name) from None

    def __getitem__(self, event_type: str) -> Sender:
        return self._senders[event_type]

    def __contains__(self, event_type: object) -> bool:
        return event_type in self._senders

    def __iter__(self) -> Iterator[str]:
        return iter(self._senders)

    def __dir__(self) -> List[str]:
        return sorted(set(super().__dir__()) | set(self._senders))


def _sender(machine: Any, event_type: str) -> Sender:
    def send(*params: Any) -> None:
        machine.send(event_type, *params)

    send.__name__ = event_type
    return send


def event_api(machine: Any, state_key: Optional[str] = None) -> EventApi:
    """Build an :class:`EventApi` for ``machine``."""
    return EventApi(machine, state_key)


def add_event_api(machine: Any) -> Any:
    """Attach an event API as ``machine.api`` unless one is already there."""
    if getattr(machine, "api", None) is None:
        machine.api = event_api(machine)
    return machine
