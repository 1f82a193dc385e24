# marketplace/models/message.py

import uuid
from datetime import datetime
from sqlalchemy import Column, Text, ForeignKey, DateTime, CHAR, Boolean, Index
from marketplace.core.database import Base

class Message(Base):
    """兩位使用者之間的私訊；對話 = {sender, receiver} 為同一組的所有訊息"""
    __tablename__ = "messages"
    __table_args__ = (
        Index("message_conversation_idx", "sender_id", "receiver_id"),
    )

    message_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    sender_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    receiver_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False, index=True)
    # 由應用程式產生 (含微秒)，對話排序才穩定
    created_at = Column(DateTime, default=datetime.now, nullable=False, index=True)
