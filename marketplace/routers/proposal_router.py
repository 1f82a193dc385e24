# marketplace/routers/proposal_router.py

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.database import get_db
from marketplace.core.security import get_current_user
from marketplace.models.user import User
from marketplace.services.notification_service import NotificationService, get_notification_service
from marketplace.services.proposal_service import ProposalService
from marketplace.schemas.proposal_schema import (
    ProposalCreate,
    ProposalOut,
    ProposalOutWithJob,
    ProposalStatusUpdate,
    ProposalSummaryOut
)

# 建立 API Router
router = APIRouter(
    prefix="/proposals",
    tags=["Proposals"],
    dependencies=[Depends(get_current_user)] # 重要：此 router 下所有 API 都需要登入
)

# 提交 / 檢視提案掛載在 /jobs/ 下，語意更清晰
job_proposal_router = APIRouter(
    prefix="/jobs",
    tags=["Proposals"], # 歸類到同一個 Tag
    dependencies=[Depends(get_current_user)]
)

# -----------------------------------------------------------------
# 1. (工作者) 提交提案
# -----------------------------------------------------------------
@job_proposal_router.post(
    "/{job_id}/proposals",
    response_model=ProposalOut,
    status_code=status.HTTP_201_CREATED
)
async def submit_proposal(
    job_id: str,
    data: ProposalCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    notifier: NotificationService = Depends(get_notification_service)
):
    """
    自由工作者對招募中的案件提交提案 (每個案件限一次)。
    """
    service = ProposalService(db, notifier)
    return await service.create_proposal(job_id, current_user, data)

# -----------------------------------------------------------------
# 2. 檢視案件的提案：雇主看完整內容，其他人只看精簡資訊
# -----------------------------------------------------------------
@job_proposal_router.get("/{job_id}/proposals", response_model=None)
async def list_job_proposals(
    job_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    notifier: NotificationService = Depends(get_notification_service)
):
    service = ProposalService(db, notifier)
    is_owner, proposals = await service.list_job_proposals(job_id, current_user)
    schema = ProposalOut if is_owner else ProposalSummaryOut
    return [schema.model_validate(p) for p in proposals]

# -----------------------------------------------------------------
# 3. (工作者) 我的提案
# -----------------------------------------------------------------
@router.get("/my", response_model=List[ProposalOutWithJob])
async def list_my_proposals(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    notifier: NotificationService = Depends(get_notification_service)
):
    service = ProposalService(db, notifier)
    return await service.list_my_proposals(current_user)

# -----------------------------------------------------------------
# 4. (雇主) 接受 / 拒絕提案
# -----------------------------------------------------------------
@router.patch("/{proposal_id}/status", response_model=ProposalOut)
async def update_proposal_status(
    proposal_id: str,
    status_update: ProposalStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    notifier: NotificationService = Depends(get_notification_service)
):
    """
    雇主接受或拒絕提案。
    - accepted：案件轉為 in_progress，其他 pending 提案自動拒絕
    - 每位受影響的工作者都會收到通知
    """
    service = ProposalService(db, notifier)
    return await service.update_proposal_status(proposal_id, status_update.status, current_user)
