import json

import pytest

from core.exceptions import CorruptRecordError
from core.keys import subscriptions_key


@pytest.mark.asyncio
async def test_subscribe_then_unsubscribe_removes_document(subscriptions, store):
    """Removing the only channel deletes the document instead of storing {}."""
    await subscriptions.subscribe("user1", "news", {"lang": "en"})
    assert await subscriptions.is_subscribed("user1", "news")
    assert await store.get(subscriptions_key("user1")) is not None

    await subscriptions.unsubscribe("user1", "news")

    assert not await subscriptions.is_subscribed("user1", "news")
    assert await store.get(subscriptions_key("user1")) is None
    assert store.keys() == []
    assert await subscriptions.get_subscriptions("user1") == []


@pytest.mark.asyncio
async def test_subscription_data_and_date(subscriptions, clock):
    await subscriptions.subscribe("user1", "news", {"lang": "en"})
    sub = await subscriptions.get_subscription_data("user1", "news")
    assert sub.date == clock.now
    assert sub.data == {"lang": "en"}
    assert await subscriptions.get_subscription_data("user1", "sports") is None


@pytest.mark.asyncio
async def test_resubscribe_overwrites_date_and_data(subscriptions, clock):
    await subscriptions.subscribe("user1", "news", {"lang": "en"})
    clock.advance(60)
    await subscriptions.subscribe("user1", "news")

    sub = await subscriptions.get_subscription_data("user1", "news")
    assert sub.date == clock.now
    assert sub.data == {}
    assert len(await subscriptions.get_subscriptions("user1")) == 1


@pytest.mark.asyncio
async def test_unsubscribe_keeps_other_channels(subscriptions, store):
    await subscriptions.subscribe("user1", "news")
    await subscriptions.subscribe("user1", "sports")
    await subscriptions.unsubscribe("user1", "news")

    assert [s.channel for s in await subscriptions.get_subscriptions("user1")] == ["sports"]
    document = json.loads(await store.get(subscriptions_key("user1")))
    assert list(document) == ["sports"]


@pytest.mark.asyncio
async def test_get_subscriptions_preserves_document_order(subscriptions, clock):
    for channel in ["zeta", "alpha", "mid"]:
        await subscriptions.subscribe("user1", channel, {"name": channel})
        clock.advance(1)

    subs = await subscriptions.get_subscriptions("user1")
    assert [s.channel for s in subs] == ["zeta", "alpha", "mid"]
    assert [s.data["name"] for s in subs] == ["zeta", "alpha", "mid"]
    assert subs[0].date < subs[2].date


@pytest.mark.asyncio
async def test_stored_document_format(subscriptions, store, clock):
    await subscriptions.subscribe("user1", "news", {"a": 1})
    document = json.loads(await store.get(subscriptions_key("user1")))
    assert document == {"news": [clock.now, {"a": 1}]}


@pytest.mark.asyncio
async def test_unsubscribe_unknown_channel_is_noop(subscriptions, store):
    await subscriptions.unsubscribe("nobody", "news")
    await subscriptions.subscribe("user1", "news")
    writes = len(store.writes)
    await subscriptions.unsubscribe("user1", "sports")
    assert len(store.writes) == writes
    assert await subscriptions.is_subscribed("user1", "news")


@pytest.mark.asyncio
async def test_recipients_are_isolated(subscriptions):
    await subscriptions.subscribe("user1", "news")
    assert not await subscriptions.is_subscribed("user2", "news")
    assert await subscriptions.get_subscriptions("user2") == []


@pytest.mark.asyncio
async def test_corrupt_document_raises(subscriptions, store):
    await store.set(subscriptions_key("user1"), b'{"news": 5}')
    with pytest.raises(CorruptRecordError):
        await subscriptions.is_subscribed("user1", "news")
