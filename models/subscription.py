# models/subscription.py
from pydantic import BaseModel, Field
from typing import Any, Dict

class SubscriptionData(BaseModel):
    date: int  # unix seconds of the latest (re)subscription
    data: Dict[str, Any] = Field(default_factory=dict)

class Subscription(BaseModel):
    channel: str
    date: int
    data: Dict[str, Any] = Field(default_factory=dict)
