# marketplace/repositories/service_repo.py
import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload, selectinload

from marketplace.models.service import Service

logger = logging.getLogger(__name__)

class ServiceRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_service_by_id(self, service_id: str) -> Optional[Service]:
        stmt = select(Service).where(Service.service_id == service_id)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_service_by_id_with_profile(self, service_id: str) -> Optional[Service]:
        """
        載入 service.profile (權限檢查需要 profile.user_id)
        """
        stmt = (
            select(Service)
            .where(Service.service_id == service_id)
            .options(joinedload(Service.profile))
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_services_by_profile(self, profile_id: str) -> List[Service]:
        stmt = select(Service).where(Service.profile_id == profile_id).order_by(Service.title)
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def save_service(self, service: Service) -> Service:
        self.db.add(service)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error(f"Failed to save service {service.service_id}", exc_info=True)
            raise
        await self.db.refresh(service)
        return service

    async def delete_service(self, service_id: str) -> None:
        # 連同預約一起刪除 (cascade 需要先載入 appointments)
        stmt = (
            select(Service)
            .where(Service.service_id == service_id)
            .options(selectinload(Service.appointments))
        )
        service = (await self.db.execute(stmt)).scalars().first()
        if service is None:
            return
        try:
            await self.db.delete(service)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error(f"Failed to delete service {service_id}", exc_info=True)
            raise
