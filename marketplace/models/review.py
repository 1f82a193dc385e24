# marketplace/models/review.py
import uuid
from sqlalchemy import Column, TEXT, INT, CHAR, ForeignKey, TIMESTAMP, CheckConstraint, func
from sqlalchemy.orm import relationship
from marketplace.core.database import Base

class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_review_rating_range"),
    )

    review_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    profile_id = Column(CHAR(36), ForeignKey("freelancer_profiles.profile_id", ondelete="CASCADE"), nullable=False, index=True)
    client_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(INT, nullable=False, index=True)
    comment = Column(TEXT)
    created_at = Column(TIMESTAMP, server_default=func.now(), index=True)

    profile = relationship("FreelancerProfile", back_populates="reviews")
