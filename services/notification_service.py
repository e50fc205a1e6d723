# services/notification_service.py
import asyncio
import logging
import secrets
import time
import weakref
from typing import AsyncIterator, Callable, List, Optional, Tuple

from core.events import (
    BEFORE_SEND_NOTIFICATION,
    SEND_NOTIFICATION,
    BeforeSendNotificationDetails,
    EventDispatcher,
    SendNotificationDetails,
)
from core.keys import notification_key, recipient_prefix
from infra.kv_store import KeyValueStore
from models.notification import DEFAULT_MAX_AGE, STATUS_READ, STATUS_UNREAD, Notification, make_notification
from services.notification_list import NotificationList

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def unix_now() -> int:
    return int(time.time())


def generate_notification_id() -> str:
    """Unique id: nanosecond timestamp plus 32 random bits, e.g. n17f0c3a2b91e4c00x9f3b21aa."""
    return f"n{time.time_ns():x}x{secrets.token_hex(4)}"


class NotificationService:
    """
    Per-recipient notification mailbox on top of a flat key-value store.

    Records are stored as JSON under keys derived in core.keys. Expired
    records (dateCreated + maxAge < now) are removed lazily whenever a
    recipient's list is read or delete_old() is called.
    """

    def __init__(
        self,
        store: KeyValueStore,
        events: Optional[EventDispatcher] = None,
        clock: Clock = unix_now,
        default_max_age: int = DEFAULT_MAX_AGE,
    ):
        self.store = store
        self.events = events if events is not None else EventDispatcher()
        self.clock = clock
        self.default_max_age = default_max_age
        # Serializes type replacement + write per recipient within this process
        self._send_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    def make(self, title: Optional[str] = None, text: Optional[str] = None) -> Notification:
        notification = make_notification(title, text)
        notification.max_age = self.default_max_age
        return notification

    async def send(self, recipient_id: str, notification: Notification) -> bool:
        """
        Store `notification` in the recipient's mailbox.

        Assigns id and dateCreated on the passed object when they are unset.
        A beforeSendNotification listener returning True cancels the send.
        A non-empty `type` replaces any other stored notification of that type.

        Returns True if the notification was persisted, False if a listener
        prevented it.
        """
        if not notification.id:
            notification.id = generate_notification_id()
        if notification.date_created is None:
            notification.date_created = self.clock()

        if self.events.has_listeners(BEFORE_SEND_NOTIFICATION):
            details = BeforeSendNotificationDetails(recipient_id=recipient_id, notification=notification)
            if await self.events.dispatch(BEFORE_SEND_NOTIFICATION, details):
                logger.info("Send of notification %s to %s prevented by listener", notification.id, recipient_id)
                return False

        async with self._lock_for(recipient_id):
            if notification.type:
                await self._delete_same_type(recipient_id, notification)
            await self._write(recipient_id, notification)
        logger.info("Notification %s sent to %s (type=%s)", notification.id, recipient_id, notification.type)

        if self.events.has_listeners(SEND_NOTIFICATION):
            details = SendNotificationDetails(recipient_id=recipient_id, notification=notification.model_copy(deep=True))
            await self.events.dispatch(SEND_NOTIFICATION, details)
        return True

    async def get(self, recipient_id: str, notification_id: str) -> Optional[Notification]:
        key = notification_key(recipient_id, notification_id)
        raw = await self.store.get(key)
        if raw is None:
            return None
        return Notification.from_json(raw, key)

    async def mark_as_read(self, recipient_id: str, notification_id: str) -> None:
        await self._set_status(recipient_id, notification_id, STATUS_READ)

    async def mark_as_unread(self, recipient_id: str, notification_id: str) -> None:
        await self._set_status(recipient_id, notification_id, STATUS_UNREAD)

    async def delete(self, recipient_id: str, notification_id: str) -> None:
        await self.store.delete(notification_key(recipient_id, notification_id))

    async def delete_all(self, recipient_id: str) -> None:
        items = await self.store.list_with_prefix(recipient_prefix(recipient_id))
        for key, _ in items:
            await self.store.delete(key)
        logger.info("Deleted %d notifications of %s", len(items), recipient_id)

    async def delete_old(self, recipient_id: str) -> None:
        now = self.clock()
        removed = 0
        for key, notification in await self._load_all(recipient_id):
            if notification.is_expired(now):
                await self.store.delete(key)
                removed += 1
        if removed:
            logger.info("Deleted %d expired notifications of %s", removed, recipient_id)

    def get_list(self, recipient_id: str) -> NotificationList:
        return NotificationList(lambda: self._iter_live(recipient_id))

    async def get_unread_count(self, recipient_id: str) -> int:
        count = 0
        async for notification in self.get_list(recipient_id):
            if notification.status == STATUS_UNREAD:
                count += 1
        return count

    # --- internals ---

    def _lock_for(self, recipient_id: str) -> asyncio.Lock:
        lock = self._send_locks.get(recipient_id)
        if lock is None:
            lock = asyncio.Lock()
            self._send_locks[recipient_id] = lock
        return lock

    async def _write(self, recipient_id: str, notification: Notification) -> None:
        key = notification_key(recipient_id, notification.id)
        await self.store.set(key, notification.to_json().encode("utf-8"))

    async def _set_status(self, recipient_id: str, notification_id: str, status: str) -> None:
        notification = await self.get(recipient_id, notification_id)
        if notification is None or notification.status == status:
            return
        notification.status = status
        await self._write(recipient_id, notification)

    async def _load_all(self, recipient_id: str) -> List[Tuple[str, Notification]]:
        items = await self.store.list_with_prefix(recipient_prefix(recipient_id))
        return [(key, Notification.from_json(raw, key)) for key, raw in items]

    async def _delete_same_type(self, recipient_id: str, notification: Notification) -> None:
        for key, existing in await self._load_all(recipient_id):
            if existing.type == notification.type and existing.id != notification.id:
                await self.store.delete(key)
                logger.debug("Replaced notification %s of type %s for %s", existing.id, notification.type, recipient_id)

    async def _iter_live(self, recipient_id: str) -> AsyncIterator[Notification]:
        now = self.clock()
        for key, raw in await self.store.list_with_prefix(recipient_prefix(recipient_id)):
            notification = Notification.from_json(raw, key)
            if notification.is_expired(now):
                await self._expire(key, notification)
                continue
            yield notification

    async def _expire(self, key: str, notification: Notification) -> None:
        try:
            await self.store.delete(key)
            logger.debug("Expired notification %s removed", notification.id)
        except Exception:
            # reads never fail on expiry cleanup
            logger.warning("Failed to delete expired notification %s", notification.id, exc_info=True)
