"""
Storage key derivation.

Every record lives in one flat key-value namespace. Keys are sharded two levels
deep by the leading hex characters of an MD5 digest so that no single
directory/partition of the underlying store grows unbounded:

    notifications/recipients/recipient/ab/cd/<md5(recipient)>/
        notifications/notification/ef/01/<md5(notification_id)>.json
    notifications/channels/ab/cd/<md5(recipient)>.json

The hash is used for fan-out only, not for security.
"""
import hashlib

RECIPIENTS_ROOT = "notifications/recipients/recipient/"
CHANNELS_ROOT = "notifications/channels/"


def _digest(value: str) -> str:
    return hashlib.md5(value.encode("utf-8")).hexdigest()


def _sharded(digest: str) -> str:
    return f"{digest[0:2]}/{digest[2:4]}/{digest}"


def recipient_prefix(recipient_id: str) -> str:
    """Prefix shared by all notification keys of one recipient (ends with '/')."""
    return f"{RECIPIENTS_ROOT}{_sharded(_digest(recipient_id))}/"


def notification_key(recipient_id: str, notification_id: str) -> str:
    return f"{recipient_prefix(recipient_id)}notifications/notification/{_sharded(_digest(notification_id))}.json"


def subscriptions_key(recipient_id: str) -> str:
    return f"{CHANNELS_ROOT}{_sharded(_digest(recipient_id))}.json"
