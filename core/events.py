"""
Send-pipeline observers.

Two named events surround every send:
- beforeSendNotification: listeners receive BeforeSendNotificationDetails and
  veto the send by returning True
- sendNotification: listeners receive SendNotificationDetails after the
  record is persisted

Listeners can be plain callables or coroutine functions.
"""
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from models.notification import Notification

logger = logging.getLogger(__name__)

BEFORE_SEND_NOTIFICATION = "beforeSendNotification"
SEND_NOTIFICATION = "sendNotification"

Listener = Callable[[Any], Union[Optional[bool], Awaitable[Optional[bool]]]]


@dataclass(frozen=True)
class BeforeSendNotificationDetails:
    recipient_id: str
    notification: Notification


@dataclass(frozen=True)
class SendNotificationDetails:
    recipient_id: str
    notification: Notification


class EventDispatcher:
    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = {}

    def add_listener(self, event_name: str, listener: Listener) -> "EventDispatcher":
        self._listeners.setdefault(event_name, []).append(listener)
        return self

    def remove_listener(self, event_name: str, listener: Listener) -> "EventDispatcher":
        listeners = self._listeners.get(event_name, [])
        if listener in listeners:
            listeners.remove(listener)
        return self

    def has_listeners(self, event_name: str) -> bool:
        return bool(self._listeners.get(event_name))

    async def dispatch(self, event_name: str, details: Any) -> bool:
        """
        Call every listener of `event_name` in registration order.

        Returns True if any listener returned True (prevent default).
        Listener exceptions propagate to the caller.
        """
        prevented = False
        for listener in list(self._listeners.get(event_name, [])):
            result = listener(details)
            if inspect.isawaitable(result):
                result = await result
            if result is True:
                logger.debug("%s prevented by %r", event_name, listener)
                prevented = True
        return prevented
