# marketplace/routers/review_router.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.database import get_db
from marketplace.core.security import get_current_user
from marketplace.models.user import User
from marketplace.schemas.review_schema import ReviewCreate, ReviewOut
from marketplace.services.notification_service import NotificationService, get_notification_service
from marketplace.services.review_service import ReviewService

router = APIRouter(
    prefix="/reviews",
    tags=["Reviews"],
    dependencies=[Depends(get_current_user)]
)

@router.post("", response_model=ReviewOut, status_code=status.HTTP_201_CREATED)
async def create_review(
    data: ReviewCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    notifier: NotificationService = Depends(get_notification_service)
):
    """
    (雇主) 評價工作者 (1-5 星)，並即時通知工作者
    """
    return await ReviewService(db, notifier).create_review(current_user, data)
