# marketplace/schemas/job_schema.py
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional
from marketplace.models.job import JobStatusEnum

# 基礎欄位 (對應 Model)
class JobBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str
    category: str = Field(..., max_length=50)
    budget: int = Field(..., gt=0)
    location: str = Field(..., max_length=255)
    deadline: Optional[datetime] = None
    contact_info: Optional[str] = Field(None, max_length=255)

# 雇主刊登案件時的 Request Body
class JobCreate(JobBase):
    pass

# 回傳給前端的案件資料
class JobOut(JobBase):
    model_config = ConfigDict(from_attributes=True)

    job_id: str
    client_id: str
    status: JobStatusEnum
    created_at: Optional[datetime] = None

# 案件詳情頁：附帶雇主名稱與提案數
class JobDetailOut(JobOut):
    client_name: str
    proposal_count: int

class JobStatusUpdate(BaseModel):
    status: JobStatusEnum
