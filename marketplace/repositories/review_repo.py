# marketplace/repositories/review_repo.py
import logging
from typing import List, Tuple

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from marketplace.models.review import Review

logger = logging.getLogger(__name__)

class ReviewRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_review(self, review: Review) -> Review:
        """
        新增評價 (評價建立後不可修改)
        """
        self.db.add(review)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error(f"Failed to create review for profile {review.profile_id}", exc_info=True)
            raise
        await self.db.refresh(review)
        return review

    async def list_reviews_by_profile(self, profile_id: str) -> List[Review]:
        stmt = (
            select(Review)
            .where(Review.profile_id == profile_id)
            .order_by(Review.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def get_rating_summary(self, profile_id: str) -> Tuple[float, int]:
        """
        回傳 (平均評分, 評價數)；沒有評價時平均為 0
        """
        stmt = select(func.avg(Review.rating), func.count(Review.review_id)).where(
            Review.profile_id == profile_id
        )
        avg_rating, count = (await self.db.execute(stmt)).one()
        return (float(avg_rating) if avg_rating is not None else 0.0, int(count or 0))
