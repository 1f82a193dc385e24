# marketplace/routers/message_router.py

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.database import get_db
from marketplace.core.security import get_current_user
from marketplace.models.user import User
from marketplace.schemas.message_schema import ContactOut, MessageCreate, MessageOut, UnreadCountOut
from marketplace.services.message_service import MessageService
from marketplace.services.notification_service import NotificationService, get_notification_service

router = APIRouter(
    prefix="/messages",
    tags=["Messages"],
    dependencies=[Depends(get_current_user)]
)

@router.post("", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
async def send_message(
    data: MessageCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    notifier: NotificationService = Depends(get_notification_service)
):
    """
    傳送私訊，收件者在線上時會即時收到通知
    """
    return await MessageService(db, notifier).send_message(user, data)

@router.get("/contacts", response_model=List[ContactOut])
async def get_contacts(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    notifier: NotificationService = Depends(get_notification_service)
):
    return await MessageService(db, notifier).get_contacts(user)

@router.get("/unread-count", response_model=UnreadCountOut)
async def get_unread_count(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    notifier: NotificationService = Depends(get_notification_service)
):
    count = await MessageService(db, notifier).get_unread_count(user)
    return {"count": count}

@router.get("/{other_user_id}", response_model=List[MessageOut])
async def get_conversation(
    other_user_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    notifier: NotificationService = Depends(get_notification_service)
):
    """
    與某位使用者的對話 (舊 -> 新)，並將對方的訊息標為已讀
    """
    return await MessageService(db, notifier).get_conversation(user, other_user_id)
