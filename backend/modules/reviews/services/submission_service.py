# backend/modules/reviews/services/submission_service.py

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from core.config import Settings, get_settings
from core.exceptions import StorageUnavailable
from modules.analytics.services.aggregate_updater import AggregateUpdater
from modules.analytics.services.bucketing import to_utc_naive, utc_now
from modules.businesses.services.business_service import BusinessService
from modules.reviews.models.review_models import Review, ReviewStatus
from modules.reviews.schemas.review_schemas import ReviewSubmission
from modules.reviews.services.review_repository import ReviewRepository
from modules.reviews.services.routing import decide, validate_rating

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    review_id: int
    is_public: bool
    redirect_url: Optional[str]
    status: ReviewStatus
    aggregate_applied: bool = True


class ReviewSubmissionService:
    """
    Handles a customer's review submission end to end.

    Order of operations:
        1. validate the rating and resolve the business (nothing stored yet)
        2. route the rating to public/private and decide on the redirect
        3. persist the review; this commits the submission
        4. count it in today's aggregate

    A failure in step 4 does not undo the submission. The result carries
    ``aggregate_applied=False`` so the caller can retry later; the ledger
    kept by the updater guarantees the review is counted only once.
    """

    def __init__(
        self,
        db: Session,
        businesses: BusinessService,
        aggregates: AggregateUpdater,
        settings: Optional[Settings] = None,
    ):
        self.db = db
        self.businesses = businesses
        self.aggregates = aggregates
        self.settings = settings or get_settings()
        self.reviews = ReviewRepository(db)

    def submit_review(
        self,
        business_id: int,
        payload: ReviewSubmission,
        submitted_at: Optional[datetime] = None,
    ) -> SubmissionResult:
        rating = validate_rating(payload.rating)
        redirect_url = self.businesses.get_redirect_url(business_id)

        decision = decide(
            rating,
            redirect_url is not None,
            threshold=self.settings.review_public_threshold,
        )

        submitted_at = to_utc_naive(submitted_at) if submitted_at else utc_now()
        review = Review(
            business_id=business_id,
            customer_name=payload.customer_name,
            customer_phone=payload.customer_phone,
            rating=rating,
            feedback=payload.feedback,
            is_public=decision.is_public,
            status=ReviewStatus.PENDING,
            submitted_at=submitted_at,
        )
        self._mark_processed(review)

        status = review.status
        review_id = self.reviews.insert_review(review)
        logger.info(
            f"Created review {review_id} for business {business_id} "
            f"(rating {rating}, {'public' if decision.is_public else 'private'})"
        )

        aggregate_applied = True
        try:
            self.aggregates.apply_review(
                business_id, submitted_at, rating, review_id=review_id
            )
        except StorageUnavailable as e:
            aggregate_applied = False
            logger.warning(f"Aggregate update deferred for review {review_id}: {e.detail}")

        return SubmissionResult(
            review_id=review_id,
            is_public=decision.is_public,
            redirect_url=redirect_url if decision.should_redirect else None,
            status=status,
            aggregate_applied=aggregate_applied,
        )

    @staticmethod
    def _mark_processed(review: Review):
        if review.status != ReviewStatus.PENDING:
            raise ValueError(f"Review in status {review.status.value} cannot be processed")
        review.status = ReviewStatus.PROCESSED
        review.processed_at = utc_now()


def create_submission_service(db: Session, session_factory) -> ReviewSubmissionService:
    """Factory function wiring the submission service's collaborators"""
    settings = get_settings()
    return ReviewSubmissionService(
        db,
        businesses=BusinessService(db, settings),
        aggregates=AggregateUpdater(session_factory, settings),
        settings=settings,
    )
