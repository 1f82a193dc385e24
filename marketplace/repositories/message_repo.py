# marketplace/repositories/message_repo.py

import logging
from typing import Dict, List

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.models.message import Message

logger = logging.getLogger(__name__)

class MessageRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def save_message(self, message: Message) -> Message:
        self.db.add(message)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error(f"Failed to save message from {message.sender_id}", exc_info=True)
            raise
        await self.db.refresh(message)
        return message

    async def get_conversation(self, user_id: str, other_user_id: str) -> List[Message]:
        """
        兩人之間的所有訊息，依時間由舊到新
        """
        stmt = (
            select(Message)
            .where(
                or_(
                    and_(Message.sender_id == user_id, Message.receiver_id == other_user_id),
                    and_(Message.sender_id == other_user_id, Message.receiver_id == user_id),
                )
            )
            .order_by(Message.created_at, Message.message_id)
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def mark_conversation_read(self, reader_id: str, other_user_id: str) -> int:
        """
        把 other_user 傳給 reader 的未讀訊息標為已讀，回傳更新筆數
        """
        stmt = (
            update(Message)
            .where(
                Message.sender_id == other_user_id,
                Message.receiver_id == reader_id,
                Message.is_read == False,  # noqa: E712
            )
            .values(is_read=True)
            .execution_options(synchronize_session="fetch")
        )
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error(f"Failed to mark messages from {other_user_id} as read", exc_info=True)
            raise
        return result.rowcount

    async def count_unread(self, user_id: str) -> int:
        stmt = select(func.count(Message.message_id)).where(
            Message.receiver_id == user_id,
            Message.is_read == False,  # noqa: E712
        )
        return (await self.db.execute(stmt)).scalar_one()

    async def list_messages_for_user(self, user_id: str) -> List[Message]:
        """
        使用者傳送或收到的所有訊息，依時間由新到舊
        """
        stmt = (
            select(Message)
            .where(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
            .order_by(Message.created_at.desc(), Message.message_id.desc())
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def count_unread_by_sender(self, user_id: str) -> Dict[str, int]:
        stmt = (
            select(Message.sender_id, func.count(Message.message_id))
            .where(
                Message.receiver_id == user_id,
                Message.is_read == False,  # noqa: E712
            )
            .group_by(Message.sender_id)
        )
        result = await self.db.execute(stmt)
        return {sender_id: count for sender_id, count in result.all()}
