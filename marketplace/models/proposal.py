# marketplace/models/proposal.py
import enum
import uuid
from sqlalchemy import Column, String, Text, INT, ForeignKey, TIMESTAMP, CHAR, Enum, UniqueConstraint, func
from sqlalchemy.orm import relationship
from marketplace.core.database import Base

class ProposalStatusEnum(str, enum.Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"

class Proposal(Base):
    __tablename__ = "proposals"
    __table_args__ = (
        # 同一位工作者對同一案件只能有一份提案
        UniqueConstraint("job_id", "freelancer_id", name="uq_proposal_job_freelancer"),
    )

    proposal_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    job_id = Column(CHAR(36), ForeignKey("jobs.job_id", ondelete="CASCADE"), nullable=False, index=True)
    freelancer_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)

    price = Column(INT, nullable=False)
    proposal = Column(Text, nullable=False)
    timeframe = Column(String(100), nullable=False)
    status = Column(
        Enum(ProposalStatusEnum, values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
        default=ProposalStatusEnum.pending,
        index=True
    )

    created_at = Column(TIMESTAMP, server_default=func.now())

    # --- 建立關聯 (Relationships) ---
    job = relationship("Job", back_populates="proposals")
    freelancer = relationship("User", back_populates="proposals")
