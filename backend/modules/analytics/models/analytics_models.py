# backend/modules/analytics/models/analytics_models.py

from sqlalchemy import (
    Column, Integer, Float, Date, DateTime, ForeignKey, Index, UniqueConstraint
)
from sqlalchemy.sql import func

from core.database import Base
from core.mixins import TimestampMixin


class DailyAggregate(Base, TimestampMixin):
    """Per-business, per-UTC-day review counters"""
    __tablename__ = "daily_aggregates"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)

    # Invariant: total_reviews == high_ratings + low_ratings
    total_reviews = Column(Integer, nullable=False, default=0)
    high_ratings = Column(Integer, nullable=False, default=0)
    low_ratings = Column(Integer, nullable=False, default=0)
    google_redirects = Column(Integer, nullable=False, default=0)
    private_feedback = Column(Integer, nullable=False, default=0)
    average_rating = Column(Float, nullable=False, default=0.0)

    # Bumped on every applied delta
    version = Column(Integer, nullable=False, default=1)

    __table_args__ = (
        UniqueConstraint("business_id", "date", name="uq_daily_aggregate_business_date"),
        Index("idx_daily_aggregate_date_business", "date", "business_id"),
    )

    def __repr__(self):
        return (
            f"<DailyAggregate business={self.business_id} date={self.date} "
            f"total={self.total_reviews} avg={self.average_rating}>"
        )


class AggregateApplication(Base):
    """Ledger of reviews already counted in a DailyAggregate"""
    __tablename__ = "aggregate_applications"

    review_id = Column(Integer, ForeignKey("reviews.id"), primary_key=True)
    business_id = Column(Integer, nullable=False, index=True)
    date = Column(Date, nullable=False)
    applied_at = Column(DateTime, nullable=False, default=func.now())
