# marketplace/models/service.py
import uuid
from sqlalchemy import Column, String, TEXT, INT, CHAR, ForeignKey
from sqlalchemy.orm import relationship
from marketplace.core.database import Base

class Service(Base):
    """工作者提供、可被預約的服務 (固定價格)"""
    __tablename__ = "services"

    service_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    profile_id = Column(CHAR(36), ForeignKey("freelancer_profiles.profile_id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(TEXT, nullable=False)
    price = Column(INT, nullable=False, index=True)

    profile = relationship("FreelancerProfile", back_populates="services")

    appointments = relationship(
        "Appointment",
        back_populates="service",
        cascade="all, delete-orphan"
    )
