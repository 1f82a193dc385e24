# marketplace/services/review_service.py
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.models.user import User, UserTypeEnum
from marketplace.models.review import Review
from marketplace.repositories.profile_repo import ProfileRepository
from marketplace.repositories.review_repo import ReviewRepository
from marketplace.schemas.review_schema import ReviewCreate
from marketplace.services.notification_service import NotificationService

class ReviewService:
    def __init__(self, db: AsyncSession, notifier: NotificationService):
        self.review_repo = ReviewRepository(db)
        self.profile_repo = ProfileRepository(db)
        self.notifier = notifier

    async def create_review(self, client: User, data: ReviewCreate) -> Review:
        """
        (雇主) 評價工作者，完成後通知工作者
        """
        if client.user_type != UserTypeEnum.client:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="只有雇主可以評價")

        profile = await self.profile_repo.get_profile_by_id(data.profile_id)
        if not profile:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="找不到此工作者 Profile")

        review = await self.review_repo.create_review(Review(
            profile_id=profile.profile_id,
            client_id=client.user_id,
            rating=data.rating,
            comment=data.comment,
        ))

        self.notifier.notify_new_review(
            freelancer_id=profile.user_id,
            client_id=client.user_id,
            client_name=client.name,
            rating=review.rating,
        )
        return review
