# marketplace/models/appointment.py
import enum
import uuid
from sqlalchemy import Column, TEXT, CHAR, ForeignKey, DateTime, TIMESTAMP, Enum, Index, func
from sqlalchemy.orm import relationship
from marketplace.core.database import Base

class AppointmentStatusEnum(str, enum.Enum):
    pending = "pending"
    confirmed = "confirmed"
    canceled = "canceled"
    completed = "completed"

class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        # 查詢某服務某天的預約 (可預約時段計算)
        Index("appointment_date_period_idx", "appointment_date", "end_time"),
    )

    appointment_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    service_id = Column(CHAR(36), ForeignKey("services.service_id", ondelete="CASCADE"), nullable=False, index=True)
    client_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    # 開始時間 [appointment_date, end_time)
    appointment_date = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    status = Column(
        Enum(AppointmentStatusEnum, values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
        default=AppointmentStatusEnum.pending,
        index=True
    )
    notes = Column(TEXT)
    created_at = Column(TIMESTAMP, server_default=func.now())

    service = relationship("Service", back_populates="appointments")
