# marketplace/repositories/job_repo.py
import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload, selectinload

from marketplace.models.job import Job, JobStatusEnum
from marketplace.models.proposal import Proposal

logger = logging.getLogger(__name__)

class JobRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_job(self, job: Job) -> Job:
        self.db.add(job)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error(f"Failed to create job for client {job.client_id}", exc_info=True)
            raise
        await self.db.refresh(job)
        return job

    async def get_job_by_id(self, job_id: str) -> Optional[Job]:
        stmt = select(Job).where(Job.job_id == job_id)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_job_by_id_with_client(self, job_id: str) -> Optional[Job]:
        """
        案件詳情頁：需要雇主名稱
        """
        stmt = select(Job).where(Job.job_id == job_id).options(joinedload(Job.client))
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_job_for_update(self, job_id: str) -> Optional[Job]:
        """
        SELECT ... FOR UPDATE 鎖定案件，直到交易 commit / rollback
        (populate_existing：以資料庫的最新值覆蓋 session 中的舊物件)
        """
        stmt = (
            select(Job)
            .where(Job.job_id == job_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_jobs(self, status: Optional[JobStatusEnum] = None) -> List[Job]:
        stmt = select(Job)
        if status is not None:
            stmt = stmt.where(Job.status == status)
        stmt = stmt.order_by(Job.created_at.desc())
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def list_jobs_by_client(self, client_id: str) -> List[Job]:
        stmt = select(Job).where(Job.client_id == client_id).order_by(Job.created_at.desc())
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def count_proposals(self, job_id: str) -> int:
        stmt = select(func.count(Proposal.proposal_id)).where(Proposal.job_id == job_id)
        return (await self.db.execute(stmt)).scalar_one()

    async def update_job(self, job: Job) -> Job:
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error(f"Failed to update job {job.job_id}", exc_info=True)
            raise
        await self.db.refresh(job)
        return job

    async def delete_job(self, job_id: str) -> None:
        """
        刪除案件與其所有提案 (同一個交易)
        """
        # 先載入 proposals，cascade 才能在 async session 中刪除
        stmt = select(Job).where(Job.job_id == job_id).options(selectinload(Job.proposals))
        job = (await self.db.execute(stmt)).scalars().first()
        if job is None:
            return
        try:
            await self.db.delete(job)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error(f"Failed to delete job {job_id}", exc_info=True)
            raise
