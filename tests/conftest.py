# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from unittest.mock import MagicMock

import pytest

from matchina.core.state_machine import create_machine
from matchina.core.states import define_states, submachine


@pytest.fixture
def light_states():
    """Traffic light states with no data."""
    return define_states({"Red": None, "Green": None, "Yellow": None})


@pytest.fixture
def light_transitions():
    return {
        "Red": {"next": "Green"},
        "Green": {"next": "Yellow"},
        "Yellow": {"next": "Red"},
    }


@pytest.fixture
def light(light_states, light_transitions):
    """A traffic light machine starting at Red."""
    return create_machine(light_states, light_transitions, "Red")


@pytest.fixture
def fetch_states():
    return define_states(
        {
            "Idle": None,
            "Pending": lambda *params: {"params": params},
            "Resolved": lambda result: {"result": result},
            "Rejected": lambda error: {"error": error},
        }
    )


@pytest.fixture
def fetcher(fetch_states):
    """An Idle/Pending/Resolved/Rejected machine starting at Idle."""
    return create_machine(
        fetch_states,
        {
            "Idle": {"execute": "Pending"},
            "Pending": {"resolve": "Resolved", "reject": "Rejected"},
            "Resolved": {},
            "Rejected": {},
        },
        "Idle",
    )


@pytest.fixture
def ticker_factory():
    """Returns a factory for child machines cycling Red -> Green -> Red on 'tick'."""
    states = define_states({"Red": None, "Green": None})

    def _factory():
        return create_machine(states, {"Red": {"tick": "Green"}, "Green": {"tick": "Red"}}, "Red")

    return _factory


@pytest.fixture
def worker(ticker_factory):
    """A root machine whose Working state embeds a ticker child."""
    states = define_states({"Idle": None, "Working": submachine(ticker_factory, id="light")})
    return create_machine(
        states,
        {"Idle": {"start": "Working"}, "Working": {"stop": "Idle", "restart": "Working"}},
        "Idle",
    )


@pytest.fixture
def dummy_hooks():
    """A list of observer mocks with on_enter, on_exit and on_error."""
    hook = MagicMock()
    hook.on_enter = MagicMock()
    hook.on_exit = MagicMock()
    hook.on_error = MagicMock()
    return [hook]
