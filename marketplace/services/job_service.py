# marketplace/services/job_service.py
import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.models.user import User, UserTypeEnum
from marketplace.models.job import Job, JobStatusEnum
from marketplace.models.proposal import ProposalStatusEnum
from marketplace.repositories.job_repo import JobRepository
from marketplace.repositories.proposal_repo import ProposalRepository
from marketplace.schemas.job_schema import JobCreate, JobDetailOut
from marketplace.services.notification_service import NotificationService
from marketplace.utils.lifecycle import can_transition_job

logger = logging.getLogger(__name__)

class JobService:
    def __init__(self, db: AsyncSession, notifier: NotificationService):
        self.job_repo = JobRepository(db)
        self.proposal_repo = ProposalRepository(db)
        self.notifier = notifier

    async def create_job(self, client: User, data: JobCreate) -> Job:
        """
        (雇主) 刊登案件
        """
        if client.user_type != UserTypeEnum.client:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="只有雇主可以刊登案件")

        new_job = Job(client_id=client.user_id, status=JobStatusEnum.open, **data.model_dump())
        return await self.job_repo.create_job(new_job)

    async def list_jobs(self, status_filter: Optional[JobStatusEnum] = None) -> List[Job]:
        return await self.job_repo.list_jobs(status_filter)

    async def list_my_jobs(self, client: User) -> List[Job]:
        return await self.job_repo.list_jobs_by_client(client.user_id)

    async def get_job_detail(self, job_id: str) -> JobDetailOut:
        job = await self.job_repo.get_job_by_id_with_client(job_id)
        if not job:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="案件不存在")

        proposal_count = await self.job_repo.count_proposals(job_id)
        return JobDetailOut.model_validate({
            **{c.name: getattr(job, c.name) for c in Job.__table__.columns},
            "client_name": job.client.name,
            "proposal_count": proposal_count,
        })

    async def _get_own_job(self, job_id: str, user: User) -> Job:
        job = await self.job_repo.get_job_by_id(job_id)
        if not job:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="案件不存在")
        if job.client_id != user.user_id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="你沒有權限修改此案件")
        return job

    async def update_job_status(self, job_id: str, new_status: JobStatusEnum, actor: User) -> Job:
        """
        (雇主) 變更案件狀態，只允許合法的轉換；
        案件已有得標的工作者時通知對方
        """
        job = await self._get_own_job(job_id, actor)

        # in_progress 只能經由接受提案進入 (同時自動拒絕其他提案)
        if new_status == JobStatusEnum.in_progress:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="請透過接受提案開始案件"
            )
        if not can_transition_job(job.status, new_status):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"案件無法從 {job.status.value} 變更為 {new_status.value}"
            )

        job.status = new_status
        job = await self.job_repo.update_job(job)
        logger.info(f"Job {job.job_id} status changed to {new_status.value} by {actor.user_id}")

        for proposal in await self.proposal_repo.get_proposals_by_job_id(job_id):
            if proposal.status == ProposalStatusEnum.accepted:
                self.notifier.notify_job_status_change(
                    freelancer_id=proposal.freelancer_id,
                    client_name=actor.name,
                    job_id=job.job_id,
                    job_title=job.title,
                    status=new_status,
                )
        return job

    async def delete_job(self, job_id: str, actor: User) -> None:
        """
        (雇主) 刪除自己的案件，連同所有提案
        """
        await self._get_own_job(job_id, actor)
        await self.job_repo.delete_job(job_id)
        logger.info(f"Job {job_id} deleted by {actor.user_id}")
