# marketplace/services/proposal_service.py

import logging
from typing import List, Tuple

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.models.user import User, UserTypeEnum
from marketplace.models.job import JobStatusEnum
from marketplace.models.proposal import Proposal, ProposalStatusEnum
from marketplace.repositories.job_repo import JobRepository
from marketplace.repositories.profile_repo import ProfileRepository
from marketplace.repositories.proposal_repo import ProposalRepository
from marketplace.schemas.proposal_schema import ProposalCreate, ProposalOutWithJob
from marketplace.services.notification_service import NotificationService
from marketplace.utils.lifecycle import can_transition_proposal

logger = logging.getLogger(__name__)

class ProposalService:
    def __init__(self, db: AsyncSession, notifier: NotificationService):
        self.proposal_repo = ProposalRepository(db)
        self.job_repo = JobRepository(db)
        self.profile_repo = ProfileRepository(db)
        self.notifier = notifier

    async def create_proposal(self, job_id: str, freelancer: User, data: ProposalCreate) -> Proposal:
        """
        (工作者) 對招募中的案件提案，並通知雇主
        """
        if freelancer.user_type != UserTypeEnum.freelancer:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="只有自由工作者可以提案")
        if not await self.profile_repo.get_profile_by_user_id(freelancer.user_id):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="請先建立工作者 Profile")

        # 步驟 1: 驗證
        job = await self.job_repo.get_job_by_id(job_id)
        if not job:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="案件不存在")
        if job.status != JobStatusEnum.open:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="此案件目前未在招募中")
        existing = await self.proposal_repo.check_existing_proposal(job_id, freelancer.user_id)
        if existing:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="你已經對此案件提案")

        # 步驟 2: 儲存 (並發的重複提案由 unique constraint 擋下)
        try:
            created = await self.proposal_repo.create_proposal(Proposal(
                job_id=job_id,
                freelancer_id=freelancer.user_id,
                price=data.price,
                proposal=data.proposal,
                timeframe=data.timeframe,
                status=ProposalStatusEnum.pending,
            ))
        except IntegrityError:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="你已經對此案件提案")

        # 步驟 3: 通知雇主
        self.notifier.notify_new_proposal(
            client_id=job.client_id,
            freelancer_id=freelancer.user_id,
            freelancer_name=freelancer.name,
            job_id=job.job_id,
            job_title=job.title,
        )
        return created

    async def list_job_proposals(self, job_id: str, viewer: User) -> Tuple[bool, List[Proposal]]:
        """
        回傳 (是否為案件擁有者, 提案列表)；
        Router 依此決定回傳完整或精簡的資料
        """
        job = await self.job_repo.get_job_by_id(job_id)
        if not job:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="案件不存在")
        proposals = await self.proposal_repo.get_proposals_by_job_id(job_id)
        return job.client_id == viewer.user_id, proposals

    async def list_my_proposals(self, freelancer: User) -> List[ProposalOutWithJob]:
        proposals = await self.proposal_repo.get_proposals_by_freelancer_id(freelancer.user_id)
        return [
            ProposalOutWithJob.model_validate({
                **{c.name: getattr(p, c.name) for c in Proposal.__table__.columns},
                "job_title": p.job.title,
                "job_budget": p.job.budget,
            })
            for p in proposals
        ]

    async def update_proposal_status(
        self, proposal_id: str, new_status: ProposalStatusEnum, actor: User
    ) -> Proposal:
        """
        (雇主) 接受或拒絕提案。

        接受時在同一個交易中：
        1. 鎖定案件 (SELECT ... FOR UPDATE) 並重新讀取提案
        2. 案件 open -> in_progress
        3. 此提案 -> accepted，其他 pending 提案 -> rejected
        提交成功後才發送通知 (每位受影響的工作者各一則)。
        """
        proposal = await self.proposal_repo.get_proposal_by_id(proposal_id)
        if not proposal:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="提案不存在")

        auto_rejected: List[Proposal] = []
        try:
            job = await self.job_repo.get_job_for_update(proposal.job_id)
            if not job:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="案件不存在")
            if job.client_id != actor.user_id:
                raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="你沒有權限修改此提案")

            # 鎖定後重新讀取，避免使用過期的狀態
            proposal = await self.proposal_repo.get_proposal_by_id(proposal_id, refresh=True)
            if not proposal or not can_transition_proposal(proposal.status, new_status):
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="此提案已被處理")

            if new_status == ProposalStatusEnum.accepted:
                if job.status != JobStatusEnum.open:
                    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="此案件目前未在招募中")

                job.status = JobStatusEnum.in_progress
                proposal.status = ProposalStatusEnum.accepted
                auto_rejected = await self.proposal_repo.get_pending_proposals_for_job(job.job_id, proposal_id)
                for sibling in auto_rejected:
                    sibling.status = ProposalStatusEnum.rejected
            else:
                proposal.status = ProposalStatusEnum.rejected

            await self.proposal_repo.commit()
        except HTTPException:
            # 驗證失敗時尚未修改任何資料，直接結束交易釋放鎖 (不 expire 呼叫端持有的物件)
            await self.proposal_repo.commit()
            raise
        except Exception:
            # 釋放鎖並丟棄記憶體中的變更
            await self.proposal_repo.rollback()
            raise

        logger.info(
            f"Proposal {proposal_id} {new_status.value} by {actor.user_id}; "
            f"{len(auto_rejected)} other proposals auto-rejected"
        )

        # 提交成功後才通知
        self.notifier.notify_proposal_status_change(
            freelancer_id=proposal.freelancer_id,
            client_name=actor.name,
            job_id=job.job_id,
            job_title=job.title,
            status=new_status,
        )
        for sibling in auto_rejected:
            self.notifier.notify_proposal_status_change(
                freelancer_id=sibling.freelancer_id,
                client_name=actor.name,
                job_id=job.job_id,
                job_title=job.title,
                status=ProposalStatusEnum.rejected,
            )
        return proposal
