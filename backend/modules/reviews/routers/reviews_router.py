# backend/modules/reviews/routers/reviews_router.py

import logging
from typing import Callable, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Path, Query
from sqlalchemy.orm import Session

from core.database import get_db, get_session_factory
from modules.analytics.services.aggregate_updater import AggregateUpdater
from modules.analytics.services.reconciliation_service import AggregateReconciler
from modules.businesses.services.business_service import BusinessService
from modules.reviews.schemas.review_schemas import (
    Pagination,
    ReviewListResponse,
    ReviewResponse,
    ReviewSubmission,
    SubmissionResponse,
)
from modules.reviews.services.review_repository import ReviewRepository
from modules.reviews.services.submission_service import create_submission_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Reviews"])


def retry_deferred_aggregate(review_id: int, session_factory: Callable[[], Session]):
    """Background task: count a review whose aggregate update failed at submission"""
    with session_factory() as db:
        reconciler = AggregateReconciler(db, AggregateUpdater(session_factory))
        if not reconciler.reconcile_review(review_id):
            logger.error(
                f"Review {review_id} is missing from aggregates; "
                "it will be picked up by the next reconciliation run"
            )


@router.post(
    "/businesses/{business_id}/reviews",
    response_model=SubmissionResponse,
    status_code=201,
)
def submit_review(
    payload: ReviewSubmission,
    background_tasks: BackgroundTasks,
    business_id: int = Path(..., description="Business ID"),
    db: Session = Depends(get_db),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
):
    """Public endpoint for a customer's star rating"""
    service = create_submission_service(db, session_factory)
    result = service.submit_review(business_id, payload)

    if not result.aggregate_applied:
        background_tasks.add_task(retry_deferred_aggregate, result.review_id, session_factory)

    return SubmissionResponse(
        review_id=result.review_id,
        is_public=result.is_public,
        redirect_url=result.redirect_url,
        status=result.status,
    )


@router.get("/businesses/{business_id}/reviews", response_model=ReviewListResponse)
def list_business_reviews(
    business_id: int = Path(..., description="Business ID"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    is_public: Optional[bool] = Query(None, description="Filter by visibility"),
    db: Session = Depends(get_db),
):
    """Paginated reviews for a business, newest first"""
    BusinessService(db).get_business(business_id, include_inactive=True)
    reviews, total = ReviewRepository(db).list_for_business(
        business_id, page=page, page_size=limit, is_public=is_public
    )
    return ReviewListResponse(
        reviews=[ReviewResponse.model_validate(r) for r in reviews],
        pagination=Pagination(page=page, page_size=limit, total=total),
    )


@router.get("/reviews/{review_id}", response_model=ReviewResponse)
def get_review(
    review_id: int = Path(..., description="Review ID"),
    db: Session = Depends(get_db),
):
    """Get a specific review by ID"""
    return ReviewRepository(db).get_review(review_id)
