# marketplace/services/appointment_service.py
import logging
from datetime import date
from typing import Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.config import settings
from marketplace.models.user import User, UserTypeEnum
from marketplace.models.appointment import Appointment, AppointmentStatusEnum
from marketplace.repositories.appointment_repo import AppointmentRepository
from marketplace.repositories.service_repo import ServiceRepository
from marketplace.repositories.user_repo import UserRepository
from marketplace.schemas.appointment_schema import AppointmentCreate
from marketplace.services.notification_service import NotificationService
from marketplace.utils.lifecycle import allowed_appointment_statuses, can_transition_appointment
from marketplace.utils.slots import compute_available_slots, day_bounds

logger = logging.getLogger(__name__)

class AppointmentService:
    def __init__(self, db: AsyncSession, notifier: NotificationService):
        self.appointment_repo = AppointmentRepository(db)
        self.service_repo = ServiceRepository(db)
        self.user_repo = UserRepository(db)
        self.notifier = notifier

    async def create_appointment(self, client: User, data: AppointmentCreate) -> Appointment:
        """
        (雇主) 預約服務：檢查時段沒有衝突後建立，並通知服務擁有者
        """
        service = await self.service_repo.get_service_by_id_with_profile(data.service_id)
        if not service:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="服務不存在")

        owner_id = service.profile.user_id
        if owner_id == client.user_id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="不能預約自己的服務")

        conflict = await self.appointment_repo.find_overlapping_appointment(
            service.service_id, data.appointment_date, data.end_time
        )
        if conflict:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="此時段已被預約")

        appointment = await self.appointment_repo.save_appointment(Appointment(
            service_id=service.service_id,
            client_id=client.user_id,
            appointment_date=data.appointment_date,
            end_time=data.end_time,
            notes=data.notes,
            status=AppointmentStatusEnum.pending,
        ))

        self.notifier.notify_new_appointment(
            freelancer_id=owner_id,
            client_id=client.user_id,
            client_name=client.name,
            service_title=service.title,
            appointment_date=appointment.appointment_date,
        )
        return appointment

    async def list_my_appointments(
        self, user: User, role: Optional[str] = None, status_filter: Optional[AppointmentStatusEnum] = None
    ) -> List[Appointment]:
        """
        role 未指定時依使用者身分決定：雇主看自己預約的，工作者看別人預約自己的
        """
        if role is None:
            role = "freelancer" if user.user_type == UserTypeEnum.freelancer else "client"
        if role == "freelancer":
            return await self.appointment_repo.list_appointments_for_freelancer(user.user_id, status_filter)
        return await self.appointment_repo.list_appointments_for_client(user.user_id, status_filter)

    async def list_service_appointments(self, service_id: str, user: User) -> List[Appointment]:
        service = await self.service_repo.get_service_by_id_with_profile(service_id)
        if not service:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="服務不存在")
        if service.profile.user_id != user.user_id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="你沒有權限檢視此服務的預約")
        return await self.appointment_repo.list_appointments_by_service(service_id)

    async def get_appointment(self, appointment_id: str, user: User) -> Appointment:
        appointment = await self.appointment_repo.get_appointment_by_id(appointment_id)
        if not appointment:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="預約不存在")
        if user.user_id not in (appointment.client_id, appointment.service.profile.user_id):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="你沒有權限檢視此預約")
        return appointment

    async def update_appointment_status(
        self, appointment_id: str, new_status: AppointmentStatusEnum, actor: User
    ) -> Appointment:
        """
        更新預約狀態：
        - 雇主 (預約者) 只能取消
        - 服務擁有者可以確認 / 取消 / 完成
        成功後通知另一方
        """
        appointment = await self.appointment_repo.get_appointment_by_id(appointment_id)
        if not appointment:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="預約不存在")

        service = appointment.service
        owner_id = service.profile.user_id
        is_client = appointment.client_id == actor.user_id
        is_owner = owner_id == actor.user_id

        allowed = allowed_appointment_statuses(is_client, is_owner)
        if allowed is None:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="你沒有權限修改此預約")
        if new_status not in allowed:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="你不能將預約設為此狀態")
        if not can_transition_appointment(appointment.status, new_status):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"預約無法從 {appointment.status.value} 變更為 {new_status.value}"
            )

        appointment.status = new_status
        appointment = await self.appointment_repo.save_appointment(appointment)

        # 通知另一方 (不通知操作者本人)
        counterpart_id = owner_id if is_client else appointment.client_id
        self.notifier.notify_appointment_status_change(
            user_id=counterpart_id,
            other_user_name=actor.name,
            service_title=service.title,
            status=new_status,
        )
        return appointment

    async def get_available_slots(self, service_id: str, day: date) -> List[Dict]:
        """
        某服務某天的可預約時段 (排除與未取消預約重疊的時段)
        """
        service = await self.service_repo.get_service_by_id(service_id)
        if not service:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="服務不存在")

        day_start, day_end = day_bounds(day)
        booked = await self.appointment_repo.list_active_appointments_starting_between(
            service_id, day_start, day_end
        )
        return compute_available_slots(
            day,
            [(a.appointment_date, a.end_time) for a in booked],
            start_hour=settings.WORK_DAY_START_HOUR,
            end_hour=settings.WORK_DAY_END_HOUR,
            slot_minutes=settings.SLOT_MINUTES,
        )
