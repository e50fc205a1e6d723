# core/singleton.py
from config.settings import settings
from core.events import EventDispatcher
from infra.kv_store import build_kv_store
from services.notification_service import NotificationService
from services.subscription_service import SubscriptionService

# Unified singleton registry
kv_store = build_kv_store(settings)
events = EventDispatcher()
notification_service = NotificationService(kv_store, events, default_max_age=settings.NOTIFICATION_MAX_AGE_SEC)
subscription_service = SubscriptionService(kv_store)

# FastAPI dependencies (override in tests via app.dependency_overrides)
def get_notification_service() -> NotificationService:
    return notification_service

def get_subscription_service() -> SubscriptionService:
    return subscription_service

__all__ = [
    "kv_store",
    "events",
    "notification_service",
    "subscription_service",
    "get_notification_service",
    "get_subscription_service",
]
