# marketplace/routers/job_router.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.database import get_db
from marketplace.core.security import get_current_user
from marketplace.models.job import JobStatusEnum
from marketplace.models.user import User
from marketplace.schemas.job_schema import JobCreate, JobDetailOut, JobOut, JobStatusUpdate
from marketplace.services.job_service import JobService
from marketplace.services.notification_service import NotificationService, get_notification_service

router = APIRouter(
    prefix="/jobs",
    tags=["Jobs"]
)

@router.get("", response_model=List[JobOut])
async def list_jobs(
    status_filter: Optional[JobStatusEnum] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    notifier: NotificationService = Depends(get_notification_service)
):
    """
    公開的案件列表 (新到舊)
    """
    return await JobService(db, notifier).list_jobs(status_filter)

@router.post("", response_model=JobOut, status_code=status.HTTP_201_CREATED)
async def create_job(
    data: JobCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    notifier: NotificationService = Depends(get_notification_service)
):
    return await JobService(db, notifier).create_job(current_user, data)

# (注意) 必須定義在 /{job_id} 之前
@router.get("/my", response_model=List[JobOut])
async def list_my_jobs(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    notifier: NotificationService = Depends(get_notification_service)
):
    """
    (雇主) 我刊登的案件
    """
    return await JobService(db, notifier).list_my_jobs(current_user)

@router.get("/{job_id}", response_model=JobDetailOut)
async def get_job_detail(
    job_id: str,
    db: AsyncSession = Depends(get_db),
    notifier: NotificationService = Depends(get_notification_service)
):
    return await JobService(db, notifier).get_job_detail(job_id)

@router.patch("/{job_id}/status", response_model=JobOut)
async def update_job_status(
    job_id: str,
    status_update: JobStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    notifier: NotificationService = Depends(get_notification_service)
):
    """
    (雇主) 變更案件狀態：open -> closed，in_progress -> completed；進入 in_progress 需接受提案
    """
    return await JobService(db, notifier).update_job_status(job_id, status_update.status, current_user)

@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_job(
    job_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    notifier: NotificationService = Depends(get_notification_service)
):
    """
    (雇主) 刪除案件 (連同所有提案)
    """
    await JobService(db, notifier).delete_job(job_id, current_user)
