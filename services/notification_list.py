# services/notification_list.py
from typing import Any, AsyncIterator, Callable, List, Optional, Tuple

from models.notification import Notification

_ORDERS = ("asc", "desc")


def _field_name(field: str) -> str:
    """Accept either the attribute name (date_created) or the JSON name (dateCreated)."""
    if field in Notification.model_fields:
        return field
    for name, info in Notification.model_fields.items():
        if info.alias == field:
            return name
    raise ValueError(f"Unknown notification field: {field}")


def _sort_key(value: Any) -> Tuple[int, Any]:
    # unset values go last regardless of type
    return (0, value) if value is not None else (1, 0)


class NotificationList:
    """
    Lazy, restartable view over one recipient's live notifications.

    Every `async for` re-scans the store through `loader`, so two iterations
    can see different contents. Nothing is cached between iterations.
    """

    def __init__(
        self,
        loader: Callable[[], AsyncIterator[Notification]],
        sort_field: Optional[str] = None,
        descending: bool = False,
    ):
        self._loader = loader
        self._sort_field = sort_field
        self._descending = descending

    def __aiter__(self) -> AsyncIterator[Notification]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[Notification]:
        if self._sort_field is None:
            async for notification in self._loader():
                yield notification
            return

        items = [n async for n in self._loader()]
        items.sort(key=lambda n: _sort_key(getattr(n, self._sort_field)), reverse=self._descending)
        for notification in items:
            yield notification

    def sort_by(self, field: str, order: str = "asc") -> "NotificationList":
        """Return a new list sorted by `field` ('asc' or 'desc'). Sorting loads the whole mailbox."""
        if order not in _ORDERS:
            raise ValueError(f"order must be one of {_ORDERS}, got {order!r}")
        return NotificationList(self._loader, _field_name(field), order == "desc")

    async def to_list(self) -> List[Notification]:
        return [n async for n in self]

    async def count(self) -> int:
        total = 0
        async for _ in self:
            total += 1
        return total
