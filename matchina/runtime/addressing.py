# matchina/runtime/addressing.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Any, List, NamedTuple, Optional, Tuple

from matchina.core.states import child_machine_of

DELIMITER = "."
MAX_DEPTH = 100


class FlatKey(NamedTuple):
    parent: str
    child: Optional[str]
    parts: Tuple[str, ...]
    full: str


def parse_flat_key(key: str, delimiter: str = DELIMITER) -> FlatKey:
    """
    Split a dotted address such as ``"Working.Red"``.

    ``parent`` is the first segment and ``child`` the second (None when the
    address has a single segment); ``parts`` holds every segment.
    """
    parts = tuple(key.split(delimiter))
    return FlatKey(parent=parts[0], child=parts[1] if len(parts) > 1 else None, parts=parts, full=key)


def active_keys(root: Any) -> List[str]:
    """
    Keys of the active state chain, starting from a machine or a state and
    following embedded child machines.
    """
    state = root.get_state() if callable(getattr(root, "get_state", None)) else root
    keys: List[str] = []
    # Depth cap stops a child that embeds one of its ancestors.
    while state is not None and len(keys) < MAX_DEPTH:
        key = getattr(state, "key", None)
        if not isinstance(key, str):
            break
        keys.append(key)
        child = child_machine_of(state)
        if child is None:
            break
        state = child.get_state()
    return keys


def full_key(root: Any, delimiter: str = DELIMITER) -> str:
    """The dotted address of the active state chain, e.g. ``"Working.Red"``."""
    return delimiter.join(active_keys(root))
