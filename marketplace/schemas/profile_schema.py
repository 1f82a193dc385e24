# marketplace/schemas/profile_schema.py
from pydantic import BaseModel, Field
from typing import List, Optional
from marketplace.models.freelancer_profile import CategoryEnum
from marketplace.schemas.user_schema import UserOut
from marketplace.schemas.service_schema import ServiceOut
from marketplace.schemas.review_schema import ReviewOut

# --- 自由工作者 (Freelancer) ---
class FreelancerProfileBase(BaseModel):
    title: str = Field(..., max_length=255)
    category: CategoryEnum
    hourly_rate: int = Field(..., ge=0)
    # 保留順序，允許重複
    skills: List[str] = []
    experience: Optional[str] = None
    education: Optional[str] = None

class FreelancerProfileCreate(FreelancerProfileBase):
    pass

class FreelancerProfileOut(FreelancerProfileBase):
    profile_id: str
    user_id: str

    class Config:
        from_attributes = True

# 工作者公開頁面：Profile + 服務 + 評價
class FreelancerDetailOut(BaseModel):
    user: UserOut
    profile: FreelancerProfileOut
    services: List[ServiceOut] = []
    reviews: List[ReviewOut] = []
    avg_rating: float
    review_count: int
