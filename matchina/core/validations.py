# matchina/core/validations.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List

from matchina.core.errors import ValidationError

if TYPE_CHECKING:
    from matchina.core.states import StateFactory
    from matchina.core.transitions import TransitionTable


class Validator:
    """
    Construction-time checks for machine definitions. Machines only run these
    when a validator is passed in; ``send`` itself never validates.
    """

    def __init__(self) -> None:
        self._rules_engine = _ValidationRulesEngine()

    def validate_definition(self, states: "StateFactory", transitions: "TransitionTable", initial: Any) -> None:
        """
        Check the transition table and initial state against the state factory.

        :raises ValidationError: Listing every problem found.
        """
        errors = self._rules_engine.collect(states, transitions, initial)
        if errors:
            raise ValidationError("\n".join(errors))


class _ValidationRulesEngine:
    """
    Internal engine applying the default rules and collecting their messages.
    """

    def __init__(self) -> None:
        self._default_rules = _DefaultValidationRules

    def collect(self, states: "StateFactory", transitions: "TransitionTable", initial: Any) -> List[str]:
        errors: List[str] = []
        errors.extend(self._default_rules.check_sources(states, transitions))
        errors.extend(self._default_rules.check_targets(states, transitions))
        errors.extend(self._default_rules.check_initial(states, initial))
        return errors


class _DefaultValidationRules:
    """
    Built-in rules: table keys and string targets must be defined states, and
    the initial state must belong to the factory.
    """

    @staticmethod
    def check_sources(states: "StateFactory", transitions: "TransitionTable") -> List[str]:
        return [
            f"Transition table has entries for unknown state '{key}'" for key in transitions if key not in states
        ]

    @staticmethod
    def check_targets(states: "StateFactory", transitions: "TransitionTable") -> List[str]:
        errors = []
        for source, entry in transitions.items():
            for event_type, target in (entry or {}).items():
                if isinstance(target, str) and target not in states:
                    errors.append(f"Transition '{source}.{event_type}' targets unknown state '{target}'")
                elif not isinstance(target, str) and not callable(target):
                    errors.append(f"Transition '{source}.{event_type}' must be a state key or a resolver")
        return errors

    @staticmethod
    def check_initial(states: "StateFactory", initial: Any) -> List[str]:
        key = initial if isinstance(initial, str) else getattr(initial, "key", None)
        if key not in states:
            return [f"Initial state '{key}' is not defined by the state factory"]
        return []
