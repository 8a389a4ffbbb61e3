# backend/modules/analytics/services/dashboard_service.py

import logging
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from core.config import Settings, get_settings
from core.exceptions import ValidationError
from modules.analytics.models.analytics_models import DailyAggregate
from modules.analytics.schemas.review_analytics_schemas import (
    DashboardMetrics,
    DashboardResponse,
    TrendPoint,
)
from modules.analytics.services.aggregate_repository import DailyAggregateRepository
from modules.analytics.services.bucketing import bucket_date
from modules.businesses.services.business_service import BusinessService
from modules.reviews.services.review_repository import ReviewRepository

logger = logging.getLogger(__name__)


class ReviewAnalyticsService:
    """Dashboard summaries read from the daily aggregates"""

    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()
        self.aggregates = DailyAggregateRepository(db)
        self.reviews = ReviewRepository(db)
        self.businesses = BusinessService(db, self.settings)

    def dashboard(
        self,
        business_id: Optional[int] = None,
        period_days: Optional[int] = None,
        today: Optional[date] = None,
    ) -> DashboardResponse:
        """Metrics, daily trends and rating distribution over the last ``period_days`` days"""
        period_days = self._validate_period(period_days)
        end = today or bucket_date()
        start = end - timedelta(days=period_days - 1)

        if business_id is not None:
            business_ids = [self.businesses.get_business(business_id, include_inactive=True).id]
        else:
            business_ids = [b.id for b in self.businesses.list_businesses()]

        if not business_ids:
            return DashboardResponse(
                business_ids=[],
                period_days=period_days,
                start_date=start,
                end_date=end,
                metrics=DashboardMetrics(),
                trends=[],
                rating_distribution=self.reviews.rating_distribution([]),
            )

        rows = self.aggregates.list_range(business_ids, start, end)
        trends = self._build_trends(rows, start, end)

        return DashboardResponse(
            business_ids=business_ids,
            period_days=period_days,
            start_date=start,
            end_date=end,
            metrics=self._build_metrics(rows),
            trends=trends,
            rating_distribution=self.reviews.rating_distribution(
                business_ids,
                since=datetime.combine(start, time.min),
                until=datetime.combine(end + timedelta(days=1), time.min),
            ),
        )

    def daily_aggregates(
        self,
        business_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[DailyAggregate]:
        self.businesses.get_business(business_id, include_inactive=True)
        end = end or bucket_date()
        start = start or end - timedelta(days=self.settings.analytics_default_period_days - 1)
        if start > end:
            raise ValidationError("start must not be after end")
        return self.aggregates.list_range([business_id], start, end)

    def _validate_period(self, period_days: Optional[int]) -> int:
        if period_days is None:
            return self.settings.analytics_default_period_days
        if not 1 <= period_days <= self.settings.analytics_max_period_days:
            raise ValidationError(
                f"period must be between 1 and {self.settings.analytics_max_period_days} days"
            )
        return period_days

    @staticmethod
    def _build_metrics(rows: List[DailyAggregate]) -> DashboardMetrics:
        total = sum(row.total_reviews for row in rows)
        positive = sum(row.high_ratings for row in rows)
        rating_sum = sum(row.average_rating * row.total_reviews for row in rows)

        return DashboardMetrics(
            total_reviews=total,
            positive_reviews=positive,
            internal_feedback=sum(row.private_feedback for row in rows),
            google_redirects=sum(row.google_redirects for row in rows),
            conversion_rate=round(positive / total * 100, 2) if total else 0.0,
            average_rating=round(rating_sum / total, 2) if total else 0.0,
        )

    @staticmethod
    def _build_trends(rows: List[DailyAggregate], start: date, end: date) -> List[TrendPoint]:
        by_day: Dict[date, List[DailyAggregate]] = {}
        for row in rows:
            by_day.setdefault(row.date, []).append(row)

        trends = []
        day = start
        while day <= end:
            day_rows = by_day.get(day, [])
            count = sum(r.total_reviews for r in day_rows)
            rating_sum = sum(r.average_rating * r.total_reviews for r in day_rows)
            trends.append(
                TrendPoint(
                    date=day,
                    count=count,
                    positive_count=sum(r.high_ratings for r in day_rows),
                    negative_count=sum(r.low_ratings for r in day_rows),
                    average_rating=round(rating_sum / count, 2) if count else 0.0,
                )
            )
            day += timedelta(days=1)
        return trends
