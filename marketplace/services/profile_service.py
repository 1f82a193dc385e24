# marketplace/services/profile_service.py
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.models.user import User, UserTypeEnum
from marketplace.models.freelancer_profile import FreelancerProfile
from marketplace.repositories.profile_repo import ProfileRepository
from marketplace.repositories.review_repo import ReviewRepository
from marketplace.schemas.profile_schema import FreelancerProfileCreate, FreelancerDetailOut

class ProfileService:
    def __init__(self, db: AsyncSession):
        self.profile_repo = ProfileRepository(db)
        self.review_repo = ReviewRepository(db)

    async def get_my_profile(self, user: User) -> FreelancerProfile:
        profile = await self.profile_repo.get_profile_by_user_id(user.user_id)
        if not profile:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="尚未建立工作者 Profile")
        return profile

    async def create_or_update_profile(self, user: User, data: FreelancerProfileCreate) -> FreelancerProfile:
        """
        (工作者) 建立或更新自己的 Profile
        """
        if user.user_type != UserTypeEnum.freelancer:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="只有自由工作者可以建立 Profile")

        profile = await self.profile_repo.get_profile_by_user_id(user.user_id)
        if profile is None:
            profile = FreelancerProfile(user_id=user.user_id)

        for field, value in data.model_dump().items():
            setattr(profile, field, value)

        return await self.profile_repo.save_profile(profile)

    async def get_freelancer_detail(self, user_id: str) -> FreelancerDetailOut:
        """
        工作者公開頁面：Profile、服務、評價與平均評分
        """
        profile = await self.profile_repo.get_profile_detail_by_user_id(user_id)
        if profile is None or not profile.user.is_active:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="找不到此工作者")

        avg_rating, review_count = await self.review_repo.get_rating_summary(profile.profile_id)
        reviews = await self.review_repo.list_reviews_by_profile(profile.profile_id)

        return FreelancerDetailOut.model_validate({
            "user": profile.user,
            "profile": profile,
            "services": profile.services,
            "reviews": reviews,
            "avg_rating": avg_rating,
            "review_count": review_count,
        }, from_attributes=True)
