# marketplace/schemas/notification_schema.py

import enum
from pydantic import BaseModel
from datetime import datetime
from typing import Any, Dict, Optional

class NotificationType(str, enum.Enum):
    message = "message"
    proposal = "proposal"
    job = "job"
    appointment = "appointment"
    review = "review"
    payment = "payment"
    system = "system"

class NotificationEvent(BaseModel):
    """
    透過 WebSocket 推送的 JSON 事件
    (timestamp 由 ConnectionManager 在送出時蓋上)
    """
    type: NotificationType
    title: str
    message: str
    sender_id: Optional[str] = None
    receiver_id: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    timestamp: Optional[datetime] = None

class WebSocketAuthIn(BaseModel):
    """連線後的第一個訊息：{"type": "auth", "token": "<JWT>"}"""
    type: str
    token: str
