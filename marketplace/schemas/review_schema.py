# marketplace/schemas/review_schema.py
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional

class ReviewCreate(BaseModel):
    profile_id: str = Field(..., description="被評價的工作者 Profile ID")
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None

class ReviewOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    review_id: str
    profile_id: str
    client_id: str
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
