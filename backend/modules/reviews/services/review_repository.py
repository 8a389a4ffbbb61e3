# backend/modules/reviews/services/review_repository.py

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.exceptions import NotFoundError, StorageUnavailable
from modules.reviews.models.review_models import Review

logger = logging.getLogger(__name__)


class ReviewRepository:
    """Storage access for review records"""

    def __init__(self, db: Session):
        self.db = db

    def insert_review(self, review: Review) -> int:
        """Persist a review and commit; returns the new review id"""
        try:
            self.db.add(review)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error inserting review for business {review.business_id}: {e}")
            raise StorageUnavailable("Could not save review") from e

        return review.id

    def get_review(self, review_id: int) -> Review:
        review = self.db.get(Review, review_id)
        if review is None:
            raise NotFoundError(f"Review {review_id} not found")
        return review

    def list_for_business(
        self,
        business_id: int,
        page: int = 1,
        page_size: int = 10,
        is_public: Optional[bool] = None,
    ) -> Tuple[List[Review], int]:
        """Newest-first page of a business's reviews plus the total count"""
        query = self.db.query(Review).filter(Review.business_id == business_id)
        if is_public is not None:
            query = query.filter(Review.is_public.is_(is_public))

        total = query.count()
        reviews = (
            query.order_by(Review.submitted_at.desc(), Review.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return reviews, total

    def rating_distribution(
        self, business_ids: Iterable[int], since=None, until=None
    ) -> Dict[int, int]:
        """Count of reviews per star value, with every star present"""
        distribution = {star: 0 for star in range(1, 6)}
        business_ids = list(business_ids)
        if not business_ids:
            return distribution

        query = self.db.query(Review.rating, func.count(Review.id)).filter(
            Review.business_id.in_(business_ids)
        )
        if since is not None:
            query = query.filter(Review.submitted_at >= since)
        if until is not None:
            query = query.filter(Review.submitted_at < until)

        for rating, count in query.group_by(Review.rating).all():
            distribution[rating] = count
        return distribution
