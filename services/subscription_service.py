from models.subscription import Subscription, SubscriptionData
from typing import Any, Dict, List, Optional
import json
import logging

from core.exceptions import CorruptRecordError
from core.keys import subscriptions_key
from infra.kv_store import KeyValueStore
from services.notification_service import Clock, unix_now

logger = logging.getLogger(__name__)

class SubscriptionService:
    """
    Channel subscriptions per recipient.

    All of a recipient's subscriptions are kept in one JSON document:
    {"<channel>": [<timestamp>, {<data>}], ...}
    The document is deleted once its last channel is removed.
    """

    def __init__(self, store: KeyValueStore, clock: Clock = unix_now):
        self.store = store
        self.clock = clock

    async def subscribe(self, recipient_id: str, channel: str, data: Optional[Dict[str, Any]] = None):
        """Add or refresh a subscription; re-subscribing overwrites date and data."""
        document = await self._load(recipient_id)
        document[channel] = [self.clock(), dict(data or {})]
        await self._save(recipient_id, document)
        logger.info("Subscribed %s to %s", recipient_id, channel)

    async def unsubscribe(self, recipient_id: str, channel: str):
        document = await self._load(recipient_id)
        if channel not in document:
            return
        del document[channel]
        await self._save(recipient_id, document)
        logger.info("Unsubscribed %s from %s", recipient_id, channel)

    async def is_subscribed(self, recipient_id: str, channel: str) -> bool:
        return channel in await self._load(recipient_id)

    async def get_subscription_data(self, recipient_id: str, channel: str) -> Optional[SubscriptionData]:
        entry = (await self._load(recipient_id)).get(channel)
        if entry is None:
            return None
        date, data = entry
        return SubscriptionData(date=date, data=data or {})

    async def get_subscriptions(self, recipient_id: str) -> List[Subscription]:
        """All subscriptions in the document's stored key order."""
        return [
            Subscription(channel=channel, date=date, data=data or {})
            for channel, (date, data) in (await self._load(recipient_id)).items()
        ]

    # --- document storage ---

    async def _load(self, recipient_id: str) -> Dict[str, List[Any]]:
        key = subscriptions_key(recipient_id)
        raw = await self.store.get(key)
        if raw is None:
            return {}
        try:
            document = json.loads(raw)
        except (TypeError, ValueError) as exc:
            raise CorruptRecordError(key, str(exc)) from exc
        if not isinstance(document, dict) or not all(
            isinstance(entry, list) and len(entry) == 2 for entry in document.values()
        ):
            raise CorruptRecordError(key, "expected {channel: [timestamp, data]}")
        return document

    async def _save(self, recipient_id: str, document: Dict[str, List[Any]]):
        key = subscriptions_key(recipient_id)
        if not document:
            await self.store.delete(key)
            return
        await self.store.set(key, json.dumps(document).encode("utf-8"))
