# marketplace/services/message_service.py

import logging
from typing import Dict, List

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.models.message import Message
from marketplace.models.user import User
from marketplace.repositories.message_repo import MessageRepository
from marketplace.repositories.user_repo import UserRepository
from marketplace.schemas.message_schema import ContactOut, MessageCreate
from marketplace.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

class MessageService:
    def __init__(self, db: AsyncSession, notifier: NotificationService):
        self.message_repo = MessageRepository(db)
        self.user_repo = UserRepository(db)
        self.notifier = notifier

    async def send_message(self, sender: User, data: MessageCreate) -> Message:
        """
        儲存訊息並即時通知收件者
        """
        if data.receiver_id == sender.user_id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="不能傳訊息給自己")
        receiver = await self.user_repo.get_user_by_id(data.receiver_id)
        if not receiver:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="收件者不存在")

        message = await self.message_repo.save_message(Message(
            sender_id=sender.user_id,
            receiver_id=receiver.user_id,
            content=data.content,
            is_read=False,
        ))

        self.notifier.notify_new_message(
            receiver_id=receiver.user_id,
            sender_id=sender.user_id,
            sender_name=sender.name,
            content=message.content,
        )
        return message

    async def get_conversation(self, user: User, other_user_id: str) -> List[Message]:
        """
        讀取與對方的對話 (由舊到新)，並將對方傳來的訊息標為已讀
        """
        if not await self.user_repo.get_user_by_id(other_user_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="使用者不存在")

        marked = await self.message_repo.mark_conversation_read(user.user_id, other_user_id)
        if marked:
            logger.info(f"Marked {marked} messages from {other_user_id} as read for {user.user_id}")
        return await self.message_repo.get_conversation(user.user_id, other_user_id)

    async def get_unread_count(self, user: User) -> int:
        return await self.message_repo.count_unread(user.user_id)

    async def get_contacts(self, user: User) -> List[ContactOut]:
        """
        聯絡人列表：依最後一則訊息的時間由新到舊
        """
        messages = await self.message_repo.list_messages_for_user(user.user_id)

        # 訊息已由新到舊排序，第一次出現的就是最後一則
        last_messages: Dict[str, Message] = {}
        for message in messages:
            other_id = message.receiver_id if message.sender_id == user.user_id else message.sender_id
            if other_id not in last_messages:
                last_messages[other_id] = message

        unread = await self.message_repo.count_unread_by_sender(user.user_id)
        users = {u.user_id: u for u in await self.user_repo.get_users_by_ids(list(last_messages))}

        contacts = []
        for other_id, last_message in last_messages.items():
            other = users.get(other_id)
            if other is None:
                continue
            contacts.append(ContactOut.model_validate({
                "user": other,
                "last_message": last_message,
                "unread_count": unread.get(other_id, 0),
            }, from_attributes=True))
        return contacts
