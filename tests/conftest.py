import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# Ensure project root is on sys.path so `services.*` / `core.*` imports work
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))


# Explicitly enable pytest-asyncio plugin for async tests/fixtures
pytest_plugins = ("pytest_asyncio",)


from core.events import EventDispatcher
from infra.kv_store import InMemoryKeyValueStore
from services.notification_service import NotificationService
from services.subscription_service import SubscriptionService


class FakeClock:
    """Controllable unix-seconds clock."""

    def __init__(self, now: int = 1_700_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


class RecordingStore(InMemoryKeyValueStore):
    """In-memory store that records every write and delete."""

    def __init__(self):
        super().__init__()
        self.writes = []
        self.deletes = []

    async def set(self, key, value):
        self.writes.append(key)
        await super().set(key, value)

    async def delete(self, key):
        self.deletes.append(key)
        await super().delete(key)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def store():
    return RecordingStore()


@pytest.fixture()
def events():
    return EventDispatcher()


@pytest.fixture()
def notifications(store, events, clock):
    return NotificationService(store, events, clock=clock)


@pytest.fixture()
def subscriptions(store, clock):
    return SubscriptionService(store, clock=clock)


@pytest_asyncio.fixture()
async def api_client(notifications, subscriptions):
    """Async test client for the API, wired to the per-test services."""
    from main import app
    from core.singleton import get_notification_service, get_subscription_service

    app.dependency_overrides[get_notification_service] = lambda: notifications
    app.dependency_overrides[get_subscription_service] = lambda: subscriptions
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()
