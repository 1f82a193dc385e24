# marketplace/models/user.py
import enum
import uuid
from sqlalchemy import Column, String, Boolean, Enum, Float, TEXT, TIMESTAMP, CHAR, func
from sqlalchemy.orm import relationship
from marketplace.core.database import Base

# 對應 SQL 中的 ENUM 型別
class UserTypeEnum(str, enum.Enum):
    freelancer = "freelancer"
    client = "client"

class User(Base):
    __tablename__ = "users"

    # 基本欄位
    user_id = Column(CHAR(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    username = Column(String(100), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=False) # 顯示名稱
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    user_type = Column(Enum(UserTypeEnum, values_callable=lambda obj: [e.value for e in obj]), nullable=False, index=True)
    is_active = Column(Boolean, default=True)

    # 個人資料 (可更新)
    profile_image = Column(String(500))
    bio = Column(TEXT)
    location = Column(String(255), index=True)
    latitude = Column(Float)
    longitude = Column(Float)

    created_at = Column(TIMESTAMP, server_default=func.now())

    # 關聯設定
    freelancer_profile = relationship(
        "FreelancerProfile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan"
    )

    jobs_owned = relationship(
        "Job",
        back_populates="client"
    )

    proposals = relationship(
        "Proposal",
        back_populates="freelancer"
    )
