# backend/modules/analytics/services/aggregate_repository.py

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import ConcurrentUpdateConflict
from modules.analytics.models.analytics_models import AggregateApplication, DailyAggregate
from modules.reviews.services.routing import is_high_rating

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregateDelta:
    """Counter changes contributed by one review"""
    rating: int
    high: int
    low: int

    @classmethod
    def for_rating(cls, rating: int, high_threshold: int) -> "AggregateDelta":
        is_high = is_high_rating(rating, high_threshold)
        return cls(rating=rating, high=int(is_high), low=int(not is_high))


class DailyAggregateRepository:
    """
    Storage access for daily aggregates.

    Counter changes are applied as a single UPDATE whose SET clause is
    computed from the row's current values, so concurrent writers cannot
    overwrite each other's increments. Row creation is insert-if-absent;
    losing the race to create the row raises ConcurrentUpdateConflict and
    the caller re-runs the transaction, which then takes the UPDATE path.

    None of the methods commit; the caller owns the transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_aggregate(self, business_id: int, day: date) -> Optional[DailyAggregate]:
        return (
            self.db.query(DailyAggregate)
            .filter(
                DailyAggregate.business_id == business_id,
                DailyAggregate.date == day,
            )
            .first()
        )

    def upsert_aggregate(self, business_id: int, day: date, delta: AggregateDelta) -> bool:
        """
        Apply ``delta`` to the (business, day) row, creating it if absent.

        Returns True if an existing row was incremented, False if a new row
        was inserted.
        """
        # Incremental mean: avg + (rating - avg) / new_total, evaluated
        # against the pre-update row
        stmt = (
            update(DailyAggregate)
            .where(
                DailyAggregate.business_id == business_id,
                DailyAggregate.date == day,
            )
            .values(
                total_reviews=DailyAggregate.total_reviews + 1,
                high_ratings=DailyAggregate.high_ratings + delta.high,
                low_ratings=DailyAggregate.low_ratings + delta.low,
                google_redirects=DailyAggregate.google_redirects + delta.high,
                private_feedback=DailyAggregate.private_feedback + delta.low,
                average_rating=DailyAggregate.average_rating
                + (float(delta.rating) - DailyAggregate.average_rating)
                / (DailyAggregate.total_reviews + 1),
                version=DailyAggregate.version + 1,
                updated_at=func.now(),
            )
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        if result.rowcount:
            return True

        aggregate = DailyAggregate(
            business_id=business_id,
            date=day,
            total_reviews=1,
            high_ratings=delta.high,
            low_ratings=delta.low,
            google_redirects=delta.high,
            private_feedback=delta.low,
            average_rating=float(delta.rating),
            version=1,
        )
        self.db.add(aggregate)
        try:
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            raise ConcurrentUpdateConflict(
                f"Aggregate for business {business_id} on {day} was created concurrently"
            ) from e

        logger.debug(f"Created daily aggregate for business {business_id} on {day}")
        return False

    def is_applied(self, review_id: int) -> bool:
        return self.db.get(AggregateApplication, review_id) is not None

    def record_application(self, review_id: int, business_id: int, day: date) -> bool:
        """
        Claim ``review_id`` in the ledger.

        Returns False if the review was already counted. On a duplicate the
        current transaction is rolled back.
        """
        self.db.add(
            AggregateApplication(review_id=review_id, business_id=business_id, date=day)
        )
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            if self.is_applied(review_id):
                return False
            raise
        return True

    def list_range(
        self, business_ids: Iterable[int], start: date, end: date
    ) -> List[DailyAggregate]:
        """Aggregates for the given businesses with start <= date <= end"""
        business_ids = list(business_ids)
        if not business_ids:
            return []
        return (
            self.db.query(DailyAggregate)
            .filter(
                DailyAggregate.business_id.in_(business_ids),
                DailyAggregate.date >= start,
                DailyAggregate.date <= end,
            )
            .order_by(DailyAggregate.date, DailyAggregate.business_id)
            .all()
        )
