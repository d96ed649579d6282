# tests/unit/plugins/test_event_api.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from matchina.plugins.event_api import EventApi, add_event_api, event_api


def test_senders_for_every_event(fetcher):
    api = event_api(fetcher)
    assert list(api) == ["execute", "resolve", "reject"]
    api.execute("url")
    api.resolve({"id": 1})
    assert fetcher.get_state().data == {"result": {"id": 1}}


def test_senders_for_one_state(fetcher):
    api = EventApi(fetcher, state_key="Pending")
    assert "resolve" in api
    assert "execute" not in api
    with pytest.raises(AttributeError):
        api.execute


def test_item_access(light):
    api = event_api(light)
    api["next"]()
    assert light.get_state().key == "Green"
    assert api.next.__name__ == "next"
    assert "next" in dir(api)


def test_add_event_api_keeps_existing(light):
    add_event_api(light)
    api = light.api
    add_event_api(light)
    assert light.api is api
    light.api.next()
    assert light.get_state().key == "Green"
