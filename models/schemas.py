from pydantic import BaseModel, Field
from typing import Optional, Dict, Any

class SendNotificationRequest(BaseModel):
    """Body of POST /recipients/{recipient_id}/notifications (JSON field names as stored)."""
    id: Optional[str] = Field(None, min_length=1)
    type: Optional[str] = None
    title: Optional[str] = None
    text: Optional[str] = None
    priority: int = Field(3, ge=1, le=5)
    maxAge: Optional[int] = Field(None, ge=0)
    data: Dict[str, Any] = Field(default_factory=dict)
    clickURL: Optional[str] = None

class SubscribeRequest(BaseModel):
    data: Dict[str, Any] = Field(default_factory=dict)
