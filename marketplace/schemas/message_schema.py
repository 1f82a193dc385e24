# marketplace/schemas/message_schema.py

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime

from marketplace.schemas.user_schema import UserOut

class MessageCreate(BaseModel):
    receiver_id: str
    content: str = Field(..., min_length=1, description="訊息內容")

class MessageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    message_id: str
    sender_id: str
    receiver_id: str
    content: str
    is_read: bool
    created_at: datetime

class ContactOut(BaseModel):
    """聯絡人列表：對方資料、最後一則訊息、對方傳來的未讀數"""
    user: UserOut
    last_message: Optional[MessageOut] = None
    unread_count: int = 0

class UnreadCountOut(BaseModel):
    count: int
