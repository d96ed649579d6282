# matchina/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details


class MatchinaError(Exception):
    """
    Base exception class for errors raised by the matchina library.
    """


class CastError(MatchinaError):
    """
    Raised when a variant is cast to a tag it does not carry.
    """

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(f"Attempted to cast {actual} as {expected}")
        self.expected = expected
        self.actual = actual


class UnhandledVariantError(MatchinaError):
    """
    Raised when an exhaustive match finds neither a handler for the tag nor a
    default ``_`` handler.
    """

    def __init__(self, tag: str) -> None:
        super().__init__(f"Match did not handle key: '{tag}'")
        self.tag = tag


class StateNotFoundError(MatchinaError):
    """
    Raised when a transition target names a state the state factory does not define.
    """


class ValidationError(MatchinaError):
    """
    Raised when validation detects configuration problems in a machine definition.
    """


class TransitionError(MatchinaError):
    """
    Raised when a machine is asked to start a transition it cannot accept,
    such as executing a promise machine that is not idle.
    """
