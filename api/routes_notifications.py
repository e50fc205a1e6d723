# api/routes_notifications.py
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from typing import Optional

from core.response import ok
from core.singleton import get_notification_service
from models.schemas import SendNotificationRequest
from services.notification_service import NotificationService

router = APIRouter(prefix="/recipients/{recipient_id}/notifications")

async def _get_or_404(service: NotificationService, recipient_id: str, notification_id: str):
    notification = await service.get(recipient_id, notification_id)
    if notification is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    return notification

@router.post("", status_code=201)
async def send_notification(
    recipient_id: str,
    payload: SendNotificationRequest,
    response: Response,
    service: NotificationService = Depends(get_notification_service),
):
    """
    Send a notification to a recipient.

    - 201: stored (a previous notification of the same type is replaced)
    - 200 with sent=false: a beforeSendNotification listener prevented it
    """
    notification = service.make(payload.title, payload.text)
    notification.id = payload.id
    notification.type = payload.type
    notification.priority = payload.priority
    if payload.maxAge is not None:
        notification.max_age = payload.maxAge
    notification.data = payload.data
    notification.click_url = payload.clickURL

    sent = await service.send(recipient_id, notification)
    if not sent:
        response.status_code = 200
    return ok({"sent": sent, "notification": notification.model_dump(by_alias=True)})

@router.get("")
async def list_notifications(
    recipient_id: str,
    sort: Optional[str] = Query(None, description="Field to sort by, e.g. dateCreated"),
    order: str = Query("asc", pattern="^(asc|desc)$"),
    service: NotificationService = Depends(get_notification_service),
):
    """List live notifications; expired ones are removed while listing."""
    notifications = service.get_list(recipient_id)
    if sort:
        try:
            notifications = notifications.sort_by(sort, order)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    return ok(await notifications.to_list())

@router.get("/unread-count")
async def unread_count(recipient_id: str, service: NotificationService = Depends(get_notification_service)):
    return ok({"unread": await service.get_unread_count(recipient_id)})

@router.delete("")
async def delete_all(recipient_id: str, service: NotificationService = Depends(get_notification_service)):
    await service.delete_all(recipient_id)
    return ok({"deleted": True})

@router.post("/cleanup")
async def delete_old(recipient_id: str, service: NotificationService = Depends(get_notification_service)):
    """Remove expired notifications without listing."""
    await service.delete_old(recipient_id)
    return ok({"cleaned": True})

@router.get("/{notification_id}")
async def get_notification(recipient_id: str, notification_id: str, service: NotificationService = Depends(get_notification_service)):
    return ok(await _get_or_404(service, recipient_id, notification_id))

@router.post("/{notification_id}/read")
async def mark_as_read(recipient_id: str, notification_id: str, service: NotificationService = Depends(get_notification_service)):
    await service.mark_as_read(recipient_id, notification_id)
    return ok(await _get_or_404(service, recipient_id, notification_id))

@router.post("/{notification_id}/unread")
async def mark_as_unread(recipient_id: str, notification_id: str, service: NotificationService = Depends(get_notification_service)):
    await service.mark_as_unread(recipient_id, notification_id)
    return ok(await _get_or_404(service, recipient_id, notification_id))

@router.delete("/{notification_id}")
async def delete_notification(recipient_id: str, notification_id: str, service: NotificationService = Depends(get_notification_service)):
    """Idempotent: deleting a missing notification still returns 200."""
    await service.delete(recipient_id, notification_id)
    return ok({"deleted": True})
