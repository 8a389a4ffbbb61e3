# backend/modules/analytics/tests/test_dashboard.py

from datetime import date, datetime, timedelta

import pytest

from core.exceptions import BusinessNotFound, ValidationError
from modules.analytics.services.dashboard_service import ReviewAnalyticsService
from tests.factories import BusinessFactory, ReviewFactory


TODAY = date(2024, 5, 10)


@pytest.fixture
def service(db_session, test_settings):
    return ReviewAnalyticsService(db_session, test_settings)


def _record(updater, business_id, when, rating):
    """Persist a review and count it, as a submission would"""
    review = ReviewFactory(business_id=business_id, rating=rating, submitted_at=when)
    updater.apply_review(business_id, when, rating, review_id=review.id)
    return review


class TestDashboard:
    """Dashboard summaries over the daily aggregates"""

    def test_metrics_across_days(self, service, updater):
        business = BusinessFactory()
        _record(updater, business.id, datetime(2024, 5, 9, 10, 0), 5)
        _record(updater, business.id, datetime(2024, 5, 9, 11, 0), 2)
        _record(updater, business.id, datetime(2024, 5, 10, 9, 0), 4)
        _record(updater, business.id, datetime(2024, 5, 10, 9, 30), 4)

        result = service.dashboard(business_id=business.id, period_days=7, today=TODAY)

        assert result.business_ids == [business.id]
        assert result.start_date == date(2024, 5, 4)
        assert result.end_date == TODAY
        assert result.metrics.total_reviews == 4
        assert result.metrics.positive_reviews == 3
        assert result.metrics.internal_feedback == 1
        assert result.metrics.google_redirects == 3
        assert result.metrics.conversion_rate == 75.0
        assert result.metrics.average_rating == 3.75
        assert result.rating_distribution == {1: 0, 2: 1, 3: 0, 4: 2, 5: 1}

    def test_trends_are_zero_filled(self, service, updater):
        business = BusinessFactory()
        _record(updater, business.id, datetime(2024, 5, 8, 12, 0), 5)

        result = service.dashboard(business_id=business.id, period_days=5, today=TODAY)

        assert [point.date for point in result.trends] == [
            TODAY - timedelta(days=offset) for offset in range(4, -1, -1)
        ]
        counts = {point.date: point.count for point in result.trends}
        assert counts[date(2024, 5, 8)] == 1
        assert sum(counts.values()) == 1

        empty_day = result.trends[0]
        assert empty_day.positive_count == 0
        assert empty_day.negative_count == 0
        assert empty_day.average_rating == 0.0

    def test_trend_average_is_weighted_across_businesses(self, service, updater):
        first, second = BusinessFactory(), BusinessFactory()
        noon = datetime(2024, 5, 10, 12, 0)
        _record(updater, first.id, noon, 5)
        _record(updater, first.id, noon, 5)
        _record(updater, first.id, noon, 5)
        _record(updater, second.id, noon, 1)

        result = service.dashboard(period_days=1, today=TODAY)

        assert sorted(result.business_ids) == sorted([first.id, second.id])
        (point,) = result.trends
        assert point.count == 4
        assert point.positive_count == 3
        assert point.negative_count == 1
        assert point.average_rating == 4.0

    def test_reviews_outside_period_are_excluded(self, service, updater):
        business = BusinessFactory()
        _record(updater, business.id, datetime(2024, 4, 1, 12, 0), 1)
        _record(updater, business.id, datetime(2024, 5, 10, 12, 0), 5)

        result = service.dashboard(business_id=business.id, period_days=7, today=TODAY)

        assert result.metrics.total_reviews == 1
        assert result.metrics.average_rating == 5.0
        assert result.rating_distribution[1] == 0
        assert result.rating_distribution[5] == 1

    def test_no_reviews(self, service):
        business = BusinessFactory()

        result = service.dashboard(business_id=business.id, period_days=3, today=TODAY)

        assert result.metrics.total_reviews == 0
        assert result.metrics.conversion_rate == 0.0
        assert result.metrics.average_rating == 0.0
        assert len(result.trends) == 3
        assert result.rating_distribution == {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}

    def test_no_businesses(self, service):
        result = service.dashboard(period_days=7, today=TODAY)

        assert result.business_ids == []
        assert result.trends == []
        assert result.metrics.total_reviews == 0

    def test_inactive_businesses_left_out_of_overview(self, service, updater):
        active = BusinessFactory()
        retired = BusinessFactory(inactive=True)
        _record(updater, retired.id, datetime(2024, 5, 10, 12, 0), 1)

        result = service.dashboard(period_days=1, today=TODAY)

        assert result.business_ids == [active.id]
        assert result.metrics.total_reviews == 0

    def test_inactive_business_still_has_history(self, service, updater):
        retired = BusinessFactory(inactive=True)
        _record(updater, retired.id, datetime(2024, 5, 10, 12, 0), 1)

        result = service.dashboard(business_id=retired.id, period_days=1, today=TODAY)

        assert result.metrics.total_reviews == 1

    def test_default_period(self, service, test_settings):
        result = service.dashboard(business_id=BusinessFactory().id, today=TODAY)

        assert result.period_days == test_settings.analytics_default_period_days
        assert len(result.trends) == test_settings.analytics_default_period_days

    @pytest.mark.parametrize("period", [0, -3, 366])
    def test_invalid_period(self, service, period):
        with pytest.raises(ValidationError):
            service.dashboard(period_days=period, today=TODAY)

    def test_unknown_business(self, service):
        with pytest.raises(BusinessNotFound):
            service.dashboard(business_id=9999, today=TODAY)


class TestDailyAggregates:
    """Listing stored aggregate rows"""

    def test_range_is_inclusive(self, service, updater):
        business = BusinessFactory()
        for day in (1, 2, 3, 4):
            _record(updater, business.id, datetime(2024, 5, day, 12, 0), 5)

        rows = service.daily_aggregates(business.id, start=date(2024, 5, 2), end=date(2024, 5, 3))

        assert [row.date for row in rows] == [date(2024, 5, 2), date(2024, 5, 3)]

    def test_start_after_end(self, service):
        business = BusinessFactory()

        with pytest.raises(ValidationError):
            service.daily_aggregates(business.id, start=date(2024, 5, 3), end=date(2024, 5, 1))

    def test_unknown_business(self, service):
        with pytest.raises(BusinessNotFound):
            service.daily_aggregates(9999)
