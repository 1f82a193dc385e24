# marketplace/schemas/service_schema.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

class ServiceCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str
    price: int = Field(..., gt=0)

# 更新時全為選填
class ServiceUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[int] = Field(None, gt=0)

class ServiceOut(ServiceCreate):
    model_config = ConfigDict(from_attributes=True)

    service_id: str
    profile_id: str
