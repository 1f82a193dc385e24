# marketplace/repositories/profile_repo.py
import logging
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from marketplace.models.freelancer_profile import FreelancerProfile
from marketplace.models.review import Review
from marketplace.models.user import User

logger = logging.getLogger(__name__)

class ProfileRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_profile_by_user_id(self, user_id: str) -> Optional[FreelancerProfile]:
        stmt = select(FreelancerProfile).where(FreelancerProfile.user_id == user_id)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_profile_by_id(self, profile_id: str) -> Optional[FreelancerProfile]:
        stmt = select(FreelancerProfile).where(FreelancerProfile.profile_id == profile_id)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_profile_detail_by_user_id(self, user_id: str) -> Optional[FreelancerProfile]:
        """
        工作者公開頁面：一次載入 user 與 services
        """
        stmt = (
            select(FreelancerProfile)
            .where(FreelancerProfile.user_id == user_id)
            .options(
                selectinload(FreelancerProfile.user),
                selectinload(FreelancerProfile.services),
            )
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def save_profile(self, profile: FreelancerProfile) -> FreelancerProfile:
        """
        新增或更新 Profile (新物件會被 add 進 session)
        """
        self.db.add(profile)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error(f"Failed to save profile for user {profile.user_id}", exc_info=True)
            raise
        await self.db.refresh(profile)
        return profile

    async def list_freelancers_with_ratings(self) -> List[Dict]:
        """
        列出所有 (啟用中的) 工作者：Profile + User + 平均評分 + 評價數
        沒有評價的工作者 avg_rating = 0, review_count = 0
        """
        rating_subq = (
            select(
                Review.profile_id.label("profile_id"),
                func.avg(Review.rating).label("avg_rating"),
                func.count(Review.review_id).label("review_count"),
            )
            .group_by(Review.profile_id)
            .subquery()
        )

        stmt = (
            select(
                FreelancerProfile,
                User,
                rating_subq.c.avg_rating,
                rating_subq.c.review_count,
            )
            .join(User, User.user_id == FreelancerProfile.user_id)
            .outerjoin(rating_subq, rating_subq.c.profile_id == FreelancerProfile.profile_id)
            .where(User.is_active == True)  # noqa: E712
            .order_by(User.created_at, FreelancerProfile.profile_id)
        )
        result = await self.db.execute(stmt)

        candidates = []
        for profile, user, avg_rating, review_count in result.all():
            candidates.append({
                "user": user,
                "profile": profile,
                # MySQL 的 AVG 回傳 Decimal
                "avg_rating": float(avg_rating) if avg_rating is not None else 0.0,
                "review_count": int(review_count or 0),
            })
        return candidates
