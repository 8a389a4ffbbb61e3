# backend/modules/analytics/services/reconciliation_service.py

import logging
from typing import Optional

from sqlalchemy.orm import Session

from core.exceptions import StorageUnavailable
from modules.analytics.models.analytics_models import AggregateApplication
from modules.analytics.schemas.review_analytics_schemas import ReconciliationResponse
from modules.analytics.services.aggregate_updater import AggregateUpdater
from modules.reviews.models.review_models import Review, ReviewStatus

logger = logging.getLogger(__name__)

COUNTED_STATUSES = (ReviewStatus.PROCESSED, ReviewStatus.PUBLISHED)


class AggregateReconciler:
    """Applies reviews whose aggregate update did not complete at submission time"""

    def __init__(self, db: Session, updater: AggregateUpdater):
        self.db = db
        self.updater = updater

    def pending_reviews(self, limit: Optional[int] = None):
        query = (
            self.db.query(Review)
            .outerjoin(AggregateApplication, AggregateApplication.review_id == Review.id)
            .filter(
                AggregateApplication.review_id.is_(None),
                Review.status.in_(COUNTED_STATUSES),
            )
            .order_by(Review.id)
        )
        if limit:
            query = query.limit(limit)
        return query.all()

    def reconcile(self, limit: Optional[int] = None) -> ReconciliationResponse:
        pending = [
            (review.id, review.business_id, review.submitted_at, review.rating)
            for review in self.pending_reviews(limit)
        ]
        # The updater uses its own sessions; release this one's read transaction
        self.db.rollback()

        applied = failed = 0
        for review_id, business_id, submitted_at, rating in pending:
            try:
                self.updater.apply_review(business_id, submitted_at, rating, review_id=review_id)
                applied += 1
            except StorageUnavailable:
                failed += 1
                logger.warning(f"Review {review_id} still not counted in aggregates")

        if pending:
            logger.info(
                f"Aggregate reconciliation: {applied} applied, {failed} failed "
                f"of {len(pending)} pending reviews"
            )
        return ReconciliationResponse(examined=len(pending), applied=applied, failed=failed)

    def reconcile_review(self, review_id: int) -> bool:
        """Apply a single review; returns True once it is counted"""
        review = self.db.get(Review, review_id)
        if review is None or review.status not in COUNTED_STATUSES:
            return False
        business_id, submitted_at, rating = review.business_id, review.submitted_at, review.rating
        self.db.rollback()

        try:
            self.updater.apply_review(business_id, submitted_at, rating, review_id=review_id)
        except StorageUnavailable:
            logger.warning(f"Deferred aggregate update for review {review_id} failed again")
            return False
        return True
