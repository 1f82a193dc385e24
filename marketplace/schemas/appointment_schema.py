# marketplace/schemas/appointment_schema.py
from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from datetime import datetime
from typing import Optional
from marketplace.models.appointment import AppointmentStatusEnum

class AppointmentCreate(BaseModel):
    service_id: str
    appointment_date: datetime
    end_time: datetime
    notes: Optional[str] = None

    # 時段以當地時間 (naive) 計算，帶時區的輸入只保留牆上時間
    @field_validator("appointment_date", "end_time")
    @classmethod
    def drop_timezone(cls, v: datetime) -> datetime:
        return v.replace(tzinfo=None)

    @model_validator(mode="after")
    def check_time_range(self):
        if self.end_time <= self.appointment_date:
            raise ValueError("結束時間必須晚於開始時間")
        return self

class AppointmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    appointment_id: str
    service_id: str
    client_id: str
    appointment_date: datetime
    end_time: datetime
    status: AppointmentStatusEnum
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

class AppointmentStatusUpdate(BaseModel):
    """用於更新預約狀態的請求 Body"""
    status: AppointmentStatusEnum

# 可預約時段 [start_time, end_time)
class TimeSlotOut(BaseModel):
    start_time: datetime
    end_time: datetime
