# marketplace/services/user_service.py
import logging
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.models.user import User
from marketplace.repositories.user_repo import UserRepository
from marketplace.schemas.user_schema import UserUpdate, LocationUpdate

logger = logging.getLogger(__name__)

class UserService:
    def __init__(self, db: AsyncSession):
        self.user_repo = UserRepository(db)

    async def update_me(self, user: User, data: UserUpdate) -> User:
        """只更新有傳入的欄位"""
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
        return await self.user_repo.update_user(user)

    async def update_location(self, user: User, data: LocationUpdate) -> User:
        user.location = data.location
        user.latitude = data.latitude
        user.longitude = data.longitude
        logger.info(f"User {user.user_id} moved to {data.location} ({data.latitude}, {data.longitude})")
        return await self.user_repo.update_user(user)
