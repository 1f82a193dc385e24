# marketplace/services/offering_service.py
# 工作者提供的「服務」(可被預約、固定價格)
from typing import List

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.models.user import User
from marketplace.models.service import Service
from marketplace.repositories.profile_repo import ProfileRepository
from marketplace.repositories.service_repo import ServiceRepository
from marketplace.schemas.service_schema import ServiceCreate, ServiceUpdate

class OfferingService:
    def __init__(self, db: AsyncSession):
        self.service_repo = ServiceRepository(db)
        self.profile_repo = ProfileRepository(db)

    async def list_services(self, profile_id: str) -> List[Service]:
        if not await self.profile_repo.get_profile_by_id(profile_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="找不到此工作者 Profile")
        return await self.service_repo.list_services_by_profile(profile_id)

    async def get_service(self, service_id: str) -> Service:
        service = await self.service_repo.get_service_by_id(service_id)
        if not service:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="服務不存在")
        return service

    async def create_service(self, user: User, data: ServiceCreate) -> Service:
        profile = await self.profile_repo.get_profile_by_user_id(user.user_id)
        if not profile:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="請先建立工作者 Profile")

        new_service = Service(profile_id=profile.profile_id, **data.model_dump())
        return await self.service_repo.save_service(new_service)

    async def _get_own_service(self, service_id: str, user: User) -> Service:
        service = await self.service_repo.get_service_by_id_with_profile(service_id)
        if not service:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="服務不存在")
        if service.profile.user_id != user.user_id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="你沒有權限修改此服務")
        return service

    async def update_service(self, service_id: str, user: User, data: ServiceUpdate) -> Service:
        service = await self._get_own_service(service_id, user)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(service, field, value)
        return await self.service_repo.save_service(service)

    async def delete_service(self, service_id: str, user: User) -> None:
        await self._get_own_service(service_id, user)
        await self.service_repo.delete_service(service_id)
