# models/notification.py
import json
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from core.exceptions import CorruptRecordError, ImmutableFieldError

STATUS_UNREAD = "unread"
STATUS_READ = "read"
VALID_STATUSES = (STATUS_UNREAD, STATUS_READ)

DEFAULT_PRIORITY = 3
DEFAULT_MAX_AGE = 30 * 86400  # seconds

# Stored nulls (and the empty array older writers emit for an empty map) fall back to the default
_DEFAULTED_FIELDS = {"priority", "status", "maxAge", "max_age", "data"}


class Notification(BaseModel):
    """
    A single alert in a recipient's mailbox.

    Python attributes are snake_case; the persisted JSON uses the camelCase
    names (dateCreated, maxAge, clickURL). Either form is accepted on input.
    Assignments are validated, so an out-of-range priority or unknown status
    raises pydantic.ValidationError at the moment it is set.
    """
    model_config = ConfigDict(populate_by_name=True, validate_assignment=True, extra="ignore")

    id: Optional[str] = None
    type: Optional[str] = None  # at most one live notification per non-empty type
    title: Optional[str] = None
    text: Optional[str] = None
    priority: int = Field(DEFAULT_PRIORITY, strict=True)  # 1 (highest) .. 5 (lowest)
    status: str = STATUS_UNREAD
    date_created: Optional[int] = Field(None, alias="dateCreated")
    max_age: int = Field(DEFAULT_MAX_AGE, alias="maxAge")
    data: Dict[str, Any] = Field(default_factory=dict)
    click_url: Optional[str] = Field(None, alias="clickURL")

    @field_validator("priority")
    @classmethod
    def _check_priority(cls, value: int) -> int:
        if value < 1 or value > 5:
            raise PydanticCustomError(
                "notification_priority",
                "The priority value must be 1 (highest), 2 (high), 3 (normal), 4 (low), 5 (lowest)",
            )
        return value

    @field_validator("status")
    @classmethod
    def _check_status(cls, value: str) -> str:
        if value not in VALID_STATUSES:
            raise PydanticCustomError("notification_status", "The status value must be read or unread")
        return value

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "date_created" and self.date_created is not None and value != self.date_created:
            raise ImmutableFieldError("dateCreated")
        super().__setattr__(name, value)

    def is_expired(self, now: int) -> bool:
        """True when dateCreated + maxAge lies strictly before `now`. Unsent records never expire."""
        return self.date_created is not None and self.date_created + self.max_age < now

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, raw: Union[str, bytes], key: str = "<unknown>") -> "Notification":
        """
        Decode a persisted record.

        Missing fields take their defaults and unknown fields are dropped.
        Anything that is not a valid notification object raises CorruptRecordError.
        """
        try:
            payload = json.loads(raw)
        except (TypeError, ValueError) as exc:
            raise CorruptRecordError(key, str(exc)) from exc
        if not isinstance(payload, dict):
            raise CorruptRecordError(key, "expected a JSON object")

        payload = {k: v for k, v in payload.items() if k not in _DEFAULTED_FIELDS or v not in (None, [])}
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            raise CorruptRecordError(key, str(exc)) from exc


def make_notification(title: Optional[str] = None, text: Optional[str] = None) -> Notification:
    """Fresh notification with defaults applied; id and dateCreated stay unset until sent."""
    return Notification(title=title, text=text)
