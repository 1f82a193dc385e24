# marketplace/repositories/appointment_repo.py
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload

from marketplace.models.appointment import Appointment, AppointmentStatusEnum
from marketplace.models.freelancer_profile import FreelancerProfile
from marketplace.models.service import Service

logger = logging.getLogger(__name__)

class AppointmentRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_appointment_by_id(self, appointment_id: str) -> Optional[Appointment]:
        """
        透過 ID 獲取預約，並載入 service -> profile (判斷服務擁有者)
        """
        stmt = (
            select(Appointment)
            .where(Appointment.appointment_id == appointment_id)
            .options(joinedload(Appointment.service).joinedload(Service.profile))
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_appointments_for_client(
        self, client_id: str, status: Optional[AppointmentStatusEnum] = None
    ) -> List[Appointment]:
        stmt = select(Appointment).where(Appointment.client_id == client_id)
        if status is not None:
            stmt = stmt.where(Appointment.status == status)
        stmt = stmt.order_by(Appointment.appointment_date)
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def list_appointments_for_freelancer(
        self, user_id: str, status: Optional[AppointmentStatusEnum] = None
    ) -> List[Appointment]:
        """
        工作者收到的預約：預約的服務屬於該使用者的 Profile
        """
        stmt = (
            select(Appointment)
            .join(Service, Service.service_id == Appointment.service_id)
            .join(FreelancerProfile, FreelancerProfile.profile_id == Service.profile_id)
            .where(FreelancerProfile.user_id == user_id)
        )
        if status is not None:
            stmt = stmt.where(Appointment.status == status)
        stmt = stmt.order_by(Appointment.appointment_date)
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def list_appointments_by_service(self, service_id: str) -> List[Appointment]:
        stmt = (
            select(Appointment)
            .where(Appointment.service_id == service_id)
            .order_by(Appointment.appointment_date)
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def list_active_appointments_starting_between(
        self, service_id: str, start: datetime, end: datetime
    ) -> List[Appointment]:
        """
        某服務在 [start, end) 之間開始、且未取消的預約 (計算可預約時段用)
        """
        stmt = (
            select(Appointment)
            .where(
                Appointment.service_id == service_id,
                Appointment.appointment_date >= start,
                Appointment.appointment_date < end,
                Appointment.status != AppointmentStatusEnum.canceled,
            )
            .order_by(Appointment.appointment_date)
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def find_overlapping_appointment(
        self, service_id: str, start: datetime, end: datetime
    ) -> Optional[Appointment]:
        """
        檢查 [start, end) 是否與該服務任一未取消的預約重疊
        """
        stmt = select(Appointment).where(
            Appointment.service_id == service_id,
            Appointment.status != AppointmentStatusEnum.canceled,
            Appointment.appointment_date < end,
            Appointment.end_time > start,
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def save_appointment(self, appointment: Appointment) -> Appointment:
        self.db.add(appointment)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error(f"Failed to save appointment for service {appointment.service_id}", exc_info=True)
            raise
        await self.db.refresh(appointment)
        return appointment
