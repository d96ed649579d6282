# tests/unit/core/test_changes.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import dataclasses

import pytest

from matchina.core.changes import INITIALIZE, ChangeRecord, match_change, when


@pytest.fixture
def change(light_states):
    return ChangeRecord(type="next", from_=light_states.Red(), to=light_states.Green(), params=(1,))


def test_change_record_is_immutable(change):
    with pytest.raises(dataclasses.FrozenInstanceError):
        change.type = "other"


def test_initial_change(light_states):
    red = light_states.Red()
    initial = ChangeRecord.initial(red)
    assert initial.type == INITIALIZE
    assert initial.from_ is red
    assert initial.to is red
    assert initial.params == ()


def test_item_access(change):
    assert change["type"] == "next"
    assert change["from"] is change.from_
    assert change["to"] is change.to
    assert change["params"] == (1,)
    with pytest.raises(KeyError):
        change["machine"]


def test_match_change_filters(change):
    assert match_change(change)
    assert match_change(change, type="next")
    assert match_change(change, from_="Red", to="Green")
    assert match_change(change, to=["Green", "Yellow"])
    assert not match_change(change, type="reset")
    assert not match_change(change, from_="Green")
    assert not match_change(None)


def test_when_only_runs_for_matching_changes(change):
    seen = []
    effect = when(seen.append, to="Green")
    effect(change)
    when(seen.append, to="Yellow")(change)
    assert seen == [change]
