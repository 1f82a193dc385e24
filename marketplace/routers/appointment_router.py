# marketplace/routers/appointment_router.py
from datetime import date
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.database import get_db
from marketplace.core.security import get_current_user
from marketplace.models.appointment import AppointmentStatusEnum
from marketplace.models.user import User
from marketplace.schemas.appointment_schema import (
    AppointmentCreate,
    AppointmentOut,
    AppointmentStatusUpdate,
    TimeSlotOut
)
from marketplace.services.appointment_service import AppointmentService
from marketplace.services.notification_service import NotificationService, get_notification_service

router = APIRouter(
    prefix="/appointments",
    tags=["Appointments"],
    dependencies=[Depends(get_current_user)] # 此 router 下所有 API 都需要登入
)

# 可預約時段為公開查詢，不掛在需要登入的 router 下
slot_router = APIRouter(
    prefix="/available-slots",
    tags=["Appointments"]
)

@router.post("", response_model=AppointmentOut, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    data: AppointmentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    notifier: NotificationService = Depends(get_notification_service)
):
    """
    預約服務 [appointment_date, end_time)，與既有預約重疊時回傳 400
    """
    return await AppointmentService(db, notifier).create_appointment(current_user, data)

@router.get("", response_model=List[AppointmentOut])
async def list_my_appointments(
    role: Optional[Literal["client", "freelancer"]] = Query(None),
    status_filter: Optional[AppointmentStatusEnum] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    notifier: NotificationService = Depends(get_notification_service)
):
    return await AppointmentService(db, notifier).list_my_appointments(current_user, role, status_filter)

@router.get("/service/{service_id}", response_model=List[AppointmentOut])
async def list_service_appointments(
    service_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    notifier: NotificationService = Depends(get_notification_service)
):
    """
    (工作者) 檢視自己某項服務的所有預約
    """
    return await AppointmentService(db, notifier).list_service_appointments(service_id, current_user)

@router.get("/{appointment_id}", response_model=AppointmentOut)
async def get_appointment(
    appointment_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    notifier: NotificationService = Depends(get_notification_service)
):
    return await AppointmentService(db, notifier).get_appointment(appointment_id, current_user)

@router.put("/{appointment_id}/status", response_model=AppointmentOut)
async def update_appointment_status(
    appointment_id: str,
    status_update: AppointmentStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    notifier: NotificationService = Depends(get_notification_service)
):
    """
    更新預約狀態並通知另一方
    - 雇主：只能 canceled
    - 服務擁有者：confirmed / canceled / completed
    """
    return await AppointmentService(db, notifier).update_appointment_status(
        appointment_id, status_update.status, current_user
    )

@slot_router.get("/{service_id}", response_model=List[TimeSlotOut])
async def get_available_slots(
    service_id: str,
    day: date = Query(..., alias="date", description="YYYY-MM-DD"),
    db: AsyncSession = Depends(get_db),
    notifier: NotificationService = Depends(get_notification_service)
):
    return await AppointmentService(db, notifier).get_available_slots(service_id, day)
