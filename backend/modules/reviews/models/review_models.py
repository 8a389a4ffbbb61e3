# backend/modules/reviews/models/review_models.py

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Index, Enum
from sqlalchemy.sql import func
import enum

from core.database import Base


class ReviewStatus(str, enum.Enum):
    """Review processing status"""
    PENDING = "PENDING"
    PROCESSED = "PROCESSED"
    PUBLISHED = "PUBLISHED"
    REJECTED = "REJECTED"


class Review(Base):
    """A single customer submission for a business"""
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)

    # Submitter
    customer_name = Column(String(100), nullable=False)
    customer_phone = Column(String(30), nullable=True)

    # Content
    rating = Column(Integer, nullable=False)  # 1 to 5 stars
    feedback = Column(Text, nullable=True)

    # Derived from the rating at creation time, never set by the submitter
    is_public = Column(Boolean, nullable=False, default=False, index=True)
    status = Column(Enum(ReviewStatus, native_enum=False, length=20),
                    nullable=False, default=ReviewStatus.PENDING, index=True)

    submitted_at = Column(DateTime, nullable=False, default=func.now())
    processed_at = Column(DateTime, nullable=True)

    __table_args__ = (
        Index("idx_review_business_submitted", "business_id", "submitted_at"),
        Index("idx_review_business_rating", "business_id", "rating"),
    )

    def __repr__(self):
        return f"<Review {self.id} business={self.business_id} rating={self.rating}>"
