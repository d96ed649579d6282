# matchina/core/states.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Optional, Sequence, Union

from matchina.core.variants import Variant, VariantFactory, VariantSpec

if TYPE_CHECKING:
    from matchina.interfaces.protocols import MachineProtocol

STATE_KEY = "key"
MACHINE_FIELD = "machine"


class State(Variant):
    """
    A variant that names a machine state. Its tag is exposed as ``key``.

    A state whose data embeds a child machine under ``machine`` is a compound
    state; the child is owned by this state's data and has no reference back
    to the parent.
    """

    def __init__(self, key: str, data: Any, tag_prop: str = STATE_KEY) -> None:
        super().__init__(key, data, tag_prop)

    @property
    def tag(self) -> str:
        """Same as ``key``."""
        return self._tag

    @property
    def child(self) -> Optional["MachineProtocol"]:
        """The embedded child machine, or None for a leaf state."""
        return child_machine_of(self)

    @property
    def is_compound(self) -> bool:
        return self.child is not None


class StateFactory(VariantFactory):
    """
    A variant factory whose members are states keyed on ``key``.
    """

    variant_class = State

    def __init__(self, spec: Union[Mapping[str, VariantSpec], Sequence[str]]) -> None:
        super().__init__(spec, tag_prop=STATE_KEY)


def define_states(spec: Union[Mapping[str, VariantSpec], Sequence[str]]) -> StateFactory:
    """
    Create a state factory. Each entry becomes a state constructor.

    Example::

        states = define_states({
            "Idle": None,
            "Loading": lambda query: {"query": query},
            "Working": submachine(create_light),
        })
        states.Loading("search").data  # {"query": "search"}

    :param spec: Mapping of state key to ``None``, a data constructor, or a constant.
    """
    return StateFactory(spec)


def submachine(create_child: Callable[[], Any], id: Optional[str] = None) -> Callable[..., Dict[str, Any]]:
    """
    Build a data constructor for a compound state. Each call creates a fresh
    child machine and embeds it under ``machine`` (and ``id`` when given).

    :param create_child: Zero-argument callable returning the child machine.
    :param id: Optional stable identifier for the child.
    """

    def factory(*args: Any, **kwargs: Any) -> Dict[str, Any]:
        data: Dict[str, Any] = {MACHINE_FIELD: create_child()}
        if id is not None:
            data["id"] = id
        return data

    factory.machine_factory = create_child
    return factory


def child_machine_of(state: Any) -> Optional["MachineProtocol"]:
    """
    Return the machine embedded in a state's data, if any. Data may be a mapping
    with a ``machine`` entry or an object with a ``machine`` attribute.
    """
    data = getattr(state, "data", None)
    if data is None:
        return None
    if isinstance(data, Mapping):
        candidate = data.get(MACHINE_FIELD)
    else:
        candidate = getattr(data, MACHINE_FIELD, None)
    if candidate is None:
        return None
    if callable(getattr(candidate, "get_state", None)) and callable(getattr(candidate, "send", None)):
        return candidate
    return None
