# marketplace/models/job.py
import enum
import uuid
from sqlalchemy import Column, String, TEXT, INT, CHAR, ForeignKey, DateTime, TIMESTAMP, Enum, func
from sqlalchemy.orm import relationship
from marketplace.core.database import Base

class JobStatusEnum(str, enum.Enum):
    open = "open"
    closed = "closed"
    in_progress = "in_progress"
    completed = "completed"

class Job(Base):
    # 告訴 SQLAlchemy，這個類別對應到資料庫中名為 jobs 的表格 (table)
    __tablename__ = "jobs"

    job_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    client_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(TEXT, nullable=False)
    category = Column(String(50), nullable=False)
    budget = Column(INT, nullable=False)
    location = Column(String(255), nullable=False)
    deadline = Column(DateTime, nullable=True)
    status = Column(
        Enum(JobStatusEnum, values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
        default=JobStatusEnum.open,
        index=True
    )
    contact_info = Column(String(255))
    created_at = Column(TIMESTAMP, server_default=func.now())

    # 建立與 User (雇主) 的 '一' 關聯
    client = relationship("User", back_populates="jobs_owned")

    # 刪除案件時，一併刪除關聯提案
    proposals = relationship(
        "Proposal",
        back_populates="job",
        cascade="all, delete-orphan"
    )
