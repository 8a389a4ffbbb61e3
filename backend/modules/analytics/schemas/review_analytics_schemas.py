# backend/modules/analytics/schemas/review_analytics_schemas.py

from datetime import date as date_type
from typing import Dict, List

from pydantic import BaseModel, ConfigDict


class DailyAggregateResponse(BaseModel):
    """One business's counters for one UTC day"""

    model_config = ConfigDict(from_attributes=True)

    business_id: int
    date: date_type
    total_reviews: int
    high_ratings: int
    low_ratings: int
    google_redirects: int
    private_feedback: int
    average_rating: float


class DashboardMetrics(BaseModel):
    total_reviews: int = 0
    positive_reviews: int = 0
    internal_feedback: int = 0
    google_redirects: int = 0
    conversion_rate: float = 0.0  # percent of reviews that were positive
    average_rating: float = 0.0


class TrendPoint(BaseModel):
    date: date_type
    count: int = 0
    positive_count: int = 0
    negative_count: int = 0
    average_rating: float = 0.0


class DashboardResponse(BaseModel):
    business_ids: List[int]
    period_days: int
    start_date: date_type
    end_date: date_type
    metrics: DashboardMetrics
    trends: List[TrendPoint]
    rating_distribution: Dict[int, int]


class ReconciliationResponse(BaseModel):
    examined: int
    applied: int
    failed: int
