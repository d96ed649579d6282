# matchina/__init__.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""matchina: tagged variants, table-driven state machines and hierarchical composition.

Responsibilities:
    - Closed variant families with exhaustive matching (define_variants)
    - State factories and compound states embedding child machines (define_states, submachine)
    - Transition tables with a guard/leave/enter/effect/notify lifecycle (create_machine)
    - Child-first event routing across nested machines (create_hierarchical_machine)
    - Dotted state addresses with fallback to enclosing addresses (create_flat_machine)

Cross-cutting Concerns:
    Concurrency:
        - Single-threaded and synchronous; send runs to completion before returning
        - Re-entrant sends from hooks nest on the call stack

    Error Handling:
        - MatchinaError hierarchy in matchina.core.errors
        - Hook errors propagate out of send; committed changes are not rolled back

    Logging:
        - Module-level loggers under the "matchina" namespace; no handlers configured
"""

from matchina.core.changes import ChangeRecord, match_change, when
from matchina.core.errors import (
    CastError,
    MatchinaError,
    StateNotFoundError,
    TransitionError,
    UnhandledVariantError,
    ValidationError,
)
from matchina.core.hooks import (
    create_disposer,
    create_setup,
    effect,
    enter,
    guard,
    leave,
    notify,
    on_effect,
    on_enter,
    on_guard,
    on_leave,
    on_notify,
    on_transition,
    on_update,
    setup,
    transition,
    update,
)
from matchina.core.state_machine import StateMachine, create_machine
from matchina.core.states import State, StateFactory, define_states, submachine
from matchina.core.transitions import get_available_actions, receives_change, update_state
from matchina.core.validations import Validator
from matchina.core.variants import Variant, VariantFactory, define_variants, match_case
from matchina.runtime.addressing import FlatKey, full_key, parse_flat_key
from matchina.runtime.flat import FlatMachine, create_flat_machine
from matchina.runtime.hierarchy import HierarchicalMachine, create_hierarchical_machine

__version__ = "0.1.0"

__all__ = [
    "CastError",
    "ChangeRecord",
    "FlatKey",
    "FlatMachine",
    "HierarchicalMachine",
    "MatchinaError",
    "State",
    "StateFactory",
    "StateMachine",
    "StateNotFoundError",
    "TransitionError",
    "UnhandledVariantError",
    "ValidationError",
    "Validator",
    "Variant",
    "VariantFactory",
    "create_disposer",
    "create_flat_machine",
    "create_hierarchical_machine",
    "create_machine",
    "create_setup",
    "define_states",
    "define_variants",
    "effect",
    "enter",
    "full_key",
    "get_available_actions",
    "guard",
    "leave",
    "match_case",
    "match_change",
    "notify",
    "on_effect",
    "on_enter",
    "on_guard",
    "on_leave",
    "on_notify",
    "on_transition",
    "on_update",
    "parse_flat_key",
    "receives_change",
    "setup",
    "submachine",
    "transition",
    "update",
    "update_state",
    "when",
]
