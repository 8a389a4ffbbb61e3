# backend/modules/analytics/services/aggregate_updater.py

import logging
from datetime import date, datetime
from typing import Callable, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.config import Settings, get_settings
from core.db_retry import retry_on_conflict
from core.exceptions import ConcurrentUpdateConflict, StorageUnavailable
from modules.analytics.models.analytics_models import DailyAggregate
from modules.analytics.services.aggregate_repository import (
    AggregateDelta,
    DailyAggregateRepository,
)
from modules.analytics.services.bucketing import bucket_date
from modules.reviews.services.routing import validate_rating

logger = logging.getLogger(__name__)


class AggregateUpdater:
    """
    Applies reviews to their business's daily aggregate.

    Every attempt runs in its own session so a conflict can be retried from
    a clean transaction. When a review id is given it is claimed in the
    ledger within the same transaction as the counter update, which makes
    re-running the update for that review a no-op.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        settings: Optional[Settings] = None,
    ):
        self.session_factory = session_factory
        self.settings = settings or get_settings()

    def apply_review(
        self,
        business_id: int,
        rating_date: Union[datetime, date, None],
        rating: int,
        review_id: Optional[int] = None,
    ) -> DailyAggregate:
        """Count one rating in the (business, UTC day) aggregate and return the row"""
        validate_rating(rating)
        day = bucket_date(rating_date)
        delta = AggregateDelta.for_rating(rating, self.settings.review_public_threshold)

        try:
            return retry_on_conflict(
                self._apply_once,
                business_id,
                day,
                delta,
                review_id,
                max_retries=self.settings.aggregate_max_retries,
                initial_delay=self.settings.aggregate_retry_initial_delay,
                max_delay=self.settings.aggregate_retry_max_delay,
                backoff_factor=self.settings.aggregate_retry_backoff,
            )
        except (ConcurrentUpdateConflict, SQLAlchemyError) as e:
            logger.error(
                f"Aggregate update failed for business {business_id} on {day} "
                f"(review {review_id}): {e}"
            )
            raise StorageUnavailable("Could not update review analytics") from e

    def _apply_once(
        self,
        business_id: int,
        day: date,
        delta: AggregateDelta,
        review_id: Optional[int],
    ) -> DailyAggregate:
        with self.session_factory() as db:
            repo = DailyAggregateRepository(db)
            try:
                if review_id is not None and not repo.record_application(
                    review_id, business_id, day
                ):
                    logger.info(f"Review {review_id} already counted, skipping aggregate update")
                else:
                    incremented = repo.upsert_aggregate(business_id, day, delta)
                    db.commit()
                    logger.info(
                        f"{'Incremented' if incremented else 'Created'} aggregate for "
                        f"business {business_id} on {day} (rating {delta.rating})"
                    )
            except Exception:
                db.rollback()
                raise

            aggregate = repo.get_aggregate(business_id, day)
            if aggregate is not None:
                db.expunge(aggregate)
            return aggregate
