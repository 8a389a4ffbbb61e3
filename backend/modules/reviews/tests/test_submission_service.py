# backend/modules/reviews/tests/test_submission_service.py

from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timezone, timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from core.exceptions import BusinessNotFound, InvalidRating, StorageUnavailable
from modules.analytics.models.analytics_models import AggregateApplication, DailyAggregate
from modules.analytics.services.aggregate_updater import AggregateUpdater
from modules.businesses.services.business_service import BusinessService
from modules.reviews.models.review_models import Review, ReviewStatus
from modules.reviews.schemas.review_schemas import ReviewSubmission
from modules.reviews.services.submission_service import ReviewSubmissionService
from tests.factories import BusinessFactory


NOON = datetime(2024, 5, 1, 12, 0)


@pytest.fixture
def service(db_session, updater, test_settings):
    return ReviewSubmissionService(
        db_session,
        businesses=BusinessService(db_session, test_settings),
        aggregates=updater,
        settings=test_settings,
    )


def _payload(rating, **overrides):
    data = {"customer_name": "Jane Doe", "rating": rating, **overrides}
    return ReviewSubmission(**data)


class TestSubmitReview:

    def test_high_then_low_rating(self, service, read_aggregate):
        business = BusinessFactory(google_review_url="https://g.page/x")

        first = service.submit_review(business.id, _payload(5), submitted_at=NOON)

        assert first.is_public is True
        assert first.redirect_url == "https://g.page/x"
        assert first.status == ReviewStatus.PROCESSED
        assert first.aggregate_applied is True
        aggregate = read_aggregate(business.id, date(2024, 5, 1))
        assert (aggregate.total_reviews, aggregate.high_ratings) == (1, 1)
        assert aggregate.average_rating == 5.0

        second = service.submit_review(
            business.id, _payload(2, feedback="Slow service"), submitted_at=NOON
        )

        assert second.is_public is False
        assert second.redirect_url is None
        aggregate = read_aggregate(business.id, date(2024, 5, 1))
        assert aggregate.total_reviews == 2
        assert aggregate.high_ratings == 1
        assert aggregate.low_ratings == 1
        assert aggregate.private_feedback == 1
        assert aggregate.average_rating == 3.5

    def test_review_is_stored(self, service, db_session):
        business = BusinessFactory()

        result = service.submit_review(
            business.id,
            _payload(3, customer_phone="+15550100", feedback="Okay"),
            submitted_at=NOON,
        )

        review = db_session.get(Review, result.review_id)
        assert review.business_id == business.id
        assert review.customer_name == "Jane Doe"
        assert review.customer_phone == "+15550100"
        assert review.rating == 3
        assert review.feedback == "Okay"
        assert review.is_public is False
        assert review.status == ReviewStatus.PROCESSED
        assert review.submitted_at == NOON
        assert review.processed_at is not None

    def test_review_claimed_in_ledger(self, service, db_session):
        business = BusinessFactory()

        result = service.submit_review(business.id, _payload(4), submitted_at=NOON)

        entry = db_session.get(AggregateApplication, result.review_id)
        assert entry.business_id == business.id
        assert entry.date == date(2024, 5, 1)

    def test_high_rating_without_redirect_target(self, service):
        business = BusinessFactory(without_redirect=True)

        result = service.submit_review(business.id, _payload(5))

        assert result.is_public is True
        assert result.redirect_url is None

    def test_aware_timestamp_is_bucketed_in_utc(self, service, read_aggregate):
        business = BusinessFactory()
        # 2024-05-01 20:30 in UTC-5 is 2024-05-02 01:30 UTC
        submitted_at = datetime(2024, 5, 1, 20, 30, tzinfo=timezone(timedelta(hours=-5)))

        service.submit_review(business.id, _payload(5), submitted_at=submitted_at)

        assert read_aggregate(business.id, date(2024, 5, 2)).total_reviews == 1
        assert read_aggregate(business.id, date(2024, 5, 1)) is None

    def test_unknown_business(self, service, db_session):
        with pytest.raises(BusinessNotFound):
            service.submit_review(9999, _payload(5))

        assert db_session.query(Review).count() == 0

    def test_inactive_business(self, service, db_session):
        business = BusinessFactory(inactive=True)

        with pytest.raises(BusinessNotFound):
            service.submit_review(business.id, _payload(5))

        assert db_session.query(Review).count() == 0

    @pytest.mark.parametrize("rating", [0, 6, -2])
    def test_invalid_rating_stores_nothing(self, service, db_session, rating):
        business = BusinessFactory()

        with pytest.raises(InvalidRating):
            service.submit_review(business.id, _payload(rating))

        assert db_session.query(Review).count() == 0
        assert db_session.query(DailyAggregate).count() == 0

    def test_aggregate_failure_keeps_review(self, service, db_session):
        business = BusinessFactory()

        with patch.object(
            AggregateUpdater,
            "apply_review",
            side_effect=StorageUnavailable("Could not update review analytics"),
        ):
            result = service.submit_review(business.id, _payload(5), submitted_at=NOON)

        assert result.aggregate_applied is False
        assert result.is_public is True
        assert db_session.get(Review, result.review_id) is not None
        assert db_session.query(DailyAggregate).count() == 0

    def test_insert_failure(self, service, db_session):
        business = BusinessFactory()

        with patch.object(
            db_session,
            "commit",
            side_effect=OperationalError("INSERT", {}, Exception("disk full")),
        ):
            with pytest.raises(StorageUnavailable):
                service.submit_review(business.id, _payload(5), submitted_at=NOON)

        assert db_session.query(Review).count() == 0
        assert db_session.query(DailyAggregate).count() == 0


class TestConcurrentSubmissions:

    def test_parallel_submissions_are_all_counted(
        self, session_factory, updater, test_settings, read_aggregate, db_session
    ):
        business = BusinessFactory()
        n = 30

        def submit(_):
            with session_factory() as db:
                service = ReviewSubmissionService(
                    db,
                    businesses=BusinessService(db, test_settings),
                    aggregates=updater,
                    settings=test_settings,
                )
                return service.submit_review(business.id, _payload(5), submitted_at=NOON)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(submit, range(n)))

        assert all(result.aggregate_applied for result in results)
        assert len({result.review_id for result in results}) == n

        aggregate = read_aggregate(business.id, date(2024, 5, 1))
        assert aggregate.total_reviews == n
        assert aggregate.high_ratings == n
        assert aggregate.average_rating == 5.0
        assert db_session.query(AggregateApplication).count() == n
