# marketplace/models/freelancer_profile.py
import enum
import uuid
from sqlalchemy import Column, String, TEXT, ForeignKey, JSON, INT, CHAR, Enum
from sqlalchemy.orm import relationship
from marketplace.core.database import Base

# 固定的專業分類
class CategoryEnum(str, enum.Enum):
    development = "development"
    design = "design"
    marketing = "marketing"
    writing = "writing"
    photography = "photography"
    video = "video"
    audio = "audio"
    translation = "translation"
    legal = "legal"
    finance = "finance"
    admin = "admin"
    other = "other"

class FreelancerProfile(Base):
    __tablename__ = "freelancer_profiles"

    profile_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # 一個使用者只會有一份工作者 Profile
    user_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    category = Column(Enum(CategoryEnum, values_callable=lambda obj: [e.value for e in obj]), nullable=False, index=True)
    hourly_rate = Column(INT, nullable=False, index=True)
    # 保留順序，允許重複
    skills = Column(JSON, nullable=False, default=list)
    experience = Column(TEXT)
    education = Column(TEXT)

    # 1-to-1 反向關聯到 User
    user = relationship("User", back_populates="freelancer_profile")

    services = relationship(
        "Service",
        back_populates="profile",
        cascade="all, delete-orphan"
    )

    reviews = relationship(
        "Review",
        back_populates="profile",
        cascade="all, delete-orphan"
    )
