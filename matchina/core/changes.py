# matchina/core/changes.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Tuple, Union

INITIALIZE = "__initialize"

KeyFilter = Union[None, str, Iterable[str]]


@dataclass(frozen=True)
class ChangeRecord:
    """
    Immutable record of one accepted transition.

    ``from_`` is the state the machine left and ``to`` the state it entered.
    """

    type: str
    from_: Any
    to: Any
    params: Tuple[Any, ...] = field(default_factory=tuple)

    @classmethod
    def initial(cls, state: Any) -> "ChangeRecord":
        """The change a machine starts with: ``from_`` and ``to`` are both ``state``."""
        return cls(type=INITIALIZE, from_=state, to=state, params=())

    def __getitem__(self, name: str) -> Any:
        # Dict-style access; "from" maps to from_.
        if name == "from":
            return self.from_
        if name in ("type", "to", "params", "from_"):
            return getattr(self, name)
        raise KeyError(name)


def _key_of(state: Any) -> Optional[str]:
    return getattr(state, "key", None)


def _matches(expected: KeyFilter, actual: Optional[str]) -> bool:
    if expected is None:
        return True
    if isinstance(expected, str):
        return expected == actual
    return actual in expected


def match_change(change: Any, type: KeyFilter = None, from_: KeyFilter = None, to: KeyFilter = None) -> bool:
    """
    Check a change against optional filters. Each filter is a key, a collection
    of keys, or None for "any".

    :param change: The change record to test.
    :param type: Event type filter.
    :param from_: Filter on the key of the state left.
    :param to: Filter on the key of the state entered.
    """
    if change is None:
        return False
    return (
        _matches(to, _key_of(change.to))
        and _matches(type, change.type)
        and _matches(from_, _key_of(change.from_))
    )


def when(
    fn: Callable[[ChangeRecord], Any], type: KeyFilter = None, from_: KeyFilter = None, to: KeyFilter = None
) -> Callable[[ChangeRecord], Any]:
    """
    Wrap an effect or listener so it only runs for changes accepted by
    :func:`match_change`. Not meant for guards: a skipped call returns None.
    """

    def filtered(change: ChangeRecord) -> Any:
        if match_change(change, type=type, from_=from_, to=to):
            return fn(change)
        return None

    return filtered
