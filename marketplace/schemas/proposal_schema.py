# marketplace/schemas/proposal_schema.py
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional
from marketplace.models.proposal import ProposalStatusEnum

# --- 建立 (Create) ---
class ProposalCreate(BaseModel):
    # job_id 和 freelancer_id 將從 URL 和 Token 中取得
    price: int = Field(..., gt=0)
    proposal: str = Field(..., min_length=1)
    timeframe: str = Field(..., min_length=1, max_length=100)

# --- 讀取 (Read / Out) ---
class ProposalOut(ProposalCreate):
    model_config = ConfigDict(from_attributes=True)

    proposal_id: str
    job_id: str
    freelancer_id: str
    status: ProposalStatusEnum
    created_at: Optional[datetime] = None

# 非案件擁有者只能看到的精簡資訊
class ProposalSummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    proposal_id: str
    job_id: str
    freelancer_id: str
    status: ProposalStatusEnum
    created_at: Optional[datetime] = None

# 工作者「我的提案」：附帶案件標題與預算
class ProposalOutWithJob(ProposalOut):
    job_title: str
    job_budget: int

class ProposalStatusUpdate(BaseModel):
    """用於更新提案狀態的請求 Body"""
    status: ProposalStatusEnum
