# marketplace/repositories/proposal_repo.py

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload

from marketplace.models.proposal import Proposal, ProposalStatusEnum

logger = logging.getLogger(__name__)

class ProposalRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_proposal_by_id(self, proposal_id: str, refresh: bool = False) -> Optional[Proposal]:
        """
        透過 ID 獲取單一提案
        refresh=True 時以資料庫的最新值覆蓋 session 中的物件 (鎖定案件後重新讀取用)
        """
        stmt = select(Proposal).where(Proposal.proposal_id == proposal_id)
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def check_existing_proposal(self, job_id: str, freelancer_id: str) -> Optional[Proposal]:
        """
        檢查特定工作者是否已對特定案件提案 (不論狀態)
        """
        stmt = select(Proposal).where(
            Proposal.job_id == job_id,
            Proposal.freelancer_id == freelancer_id
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_proposals_by_job_id(self, job_id: str) -> List[Proposal]:
        stmt = select(Proposal).where(Proposal.job_id == job_id).order_by(Proposal.created_at.desc())
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def get_pending_proposals_for_job(self, job_id: str, exclude_proposal_id: str) -> List[Proposal]:
        """
        同一案件中其他仍在 pending 的提案 (接受提案時一併拒絕)
        """
        stmt = (
            select(Proposal)
            .where(
                Proposal.job_id == job_id,
                Proposal.proposal_id != exclude_proposal_id,
                Proposal.status == ProposalStatusEnum.pending,
            )
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def get_proposals_by_freelancer_id(self, freelancer_id: str) -> List[Proposal]:
        """
        獲取特定工作者的所有提案 (工作者檢視「我的提案」用)
        """
        stmt = select(Proposal).where(Proposal.freelancer_id == freelancer_id).options(
            # 載入關聯的案件資訊 (標題、預算)
            joinedload(Proposal.job)
        ).order_by(Proposal.created_at.desc())

        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def create_proposal(self, proposal: Proposal) -> Proposal:
        """
        新增提案
        """
        self.db.add(proposal)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error(f"Failed to create proposal for job {proposal.job_id}", exc_info=True)
            raise
        await self.db.refresh(proposal)
        return proposal

    async def commit(self) -> None:
        """
        提交目前交易中的所有變更 (案件 + 提案)；失敗時 rollback 並往上拋
        """
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error("Failed to commit proposal status change", exc_info=True)
            raise

    async def rollback(self) -> None:
        await self.db.rollback()
