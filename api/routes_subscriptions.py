# api/routes_subscriptions.py
from fastapi import APIRouter, Depends, HTTPException

from core.response import ok
from core.singleton import get_subscription_service
from models.schemas import SubscribeRequest
from services.subscription_service import SubscriptionService

router = APIRouter(prefix="/recipients/{recipient_id}/subscriptions")

@router.get("")
async def list_subscriptions(recipient_id: str, service: SubscriptionService = Depends(get_subscription_service)):
    return ok(await service.get_subscriptions(recipient_id))

@router.put("/{channel}")
async def subscribe(
    recipient_id: str,
    channel: str,
    payload: SubscribeRequest,
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Subscribe (or re-subscribe, refreshing date and data) to a channel."""
    await service.subscribe(recipient_id, channel, payload.data)
    return ok(await service.get_subscription_data(recipient_id, channel))

@router.get("/{channel}")
async def get_subscription(recipient_id: str, channel: str, service: SubscriptionService = Depends(get_subscription_service)):
    subscription = await service.get_subscription_data(recipient_id, channel)
    if subscription is None:
        raise HTTPException(status_code=404, detail="Subscription not found")
    return ok(subscription)

@router.delete("/{channel}")
async def unsubscribe(recipient_id: str, channel: str, service: SubscriptionService = Depends(get_subscription_service)):
    await service.unsubscribe(recipient_id, channel)
    return ok({"subscribed": False})
