"""Domain exceptions raised by the mailbox services."""


class MailboxError(Exception):
    """Base class for notification mailbox errors."""


class CorruptRecordError(MailboxError):
    """A persisted record could not be decoded."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Corrupt record at {key}: {reason}")
        self.key = key
        self.reason = reason


class ImmutableFieldError(MailboxError, ValueError):
    """Attempt to change a field that may only be set once."""

    def __init__(self, field: str):
        super().__init__(f"{field} is already set and cannot be changed")
        self.field = field
