import pytest

from core.events import BEFORE_SEND_NOTIFICATION, SEND_NOTIFICATION, EventDispatcher


def test_has_listeners_tracks_registration():
    events = EventDispatcher()
    listener = lambda details: None  # noqa: E731
    assert not events.has_listeners(SEND_NOTIFICATION)

    events.add_listener(SEND_NOTIFICATION, listener)
    assert events.has_listeners(SEND_NOTIFICATION)
    assert not events.has_listeners(BEFORE_SEND_NOTIFICATION)

    events.remove_listener(SEND_NOTIFICATION, listener)
    assert not events.has_listeners(SEND_NOTIFICATION)


@pytest.mark.asyncio
async def test_dispatch_runs_all_listeners_and_ors_results():
    calls = []
    events = EventDispatcher()
    events.add_listener("e", lambda d: calls.append("a") or True)
    events.add_listener("e", lambda d: calls.append("b"))

    assert await events.dispatch("e", object()) is True
    assert calls == ["a", "b"]


@pytest.mark.asyncio
async def test_dispatch_awaits_coroutine_listeners():
    async def veto(details):
        return details == "block"

    events = EventDispatcher().add_listener("e", veto)
    assert await events.dispatch("e", "block") is True
    assert await events.dispatch("e", "allow") is False


@pytest.mark.asyncio
async def test_dispatch_without_listeners_is_false():
    assert await EventDispatcher().dispatch("missing", None) is False


@pytest.mark.asyncio
async def test_only_true_counts_as_prevent_default():
    events = EventDispatcher().add_listener("e", lambda d: "yes")
    assert await events.dispatch("e", None) is False
