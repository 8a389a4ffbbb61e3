# backend/modules/analytics/routers/review_analytics_router.py

import logging
from datetime import date
from typing import Callable, List, Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from core.config import get_settings
from core.database import get_db, get_session_factory
from modules.analytics.schemas.review_analytics_schemas import (
    DailyAggregateResponse,
    DashboardResponse,
    ReconciliationResponse,
)
from modules.analytics.services.aggregate_updater import AggregateUpdater
from modules.analytics.services.dashboard_service import ReviewAnalyticsService
from modules.analytics.services.reconciliation_service import AggregateReconciler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics", tags=["Review Analytics"])


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    business_id: Optional[int] = Query(None, description="Limit to one business"),
    period: Optional[int] = Query(None, description="Number of days, ending today (UTC)"),
    db: Session = Depends(get_db),
):
    """Review metrics, daily trends and rating distribution"""
    return ReviewAnalyticsService(db).dashboard(business_id=business_id, period_days=period)


@router.get(
    "/businesses/{business_id}/daily",
    response_model=List[DailyAggregateResponse],
)
def get_daily_aggregates(
    business_id: int = Path(..., description="Business ID"),
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    db: Session = Depends(get_db),
):
    """Stored per-day aggregates for a business"""
    return ReviewAnalyticsService(db).daily_aggregates(business_id, start=start, end=end)


@router.post("/reconcile", response_model=ReconciliationResponse)
def reconcile_aggregates(
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
):
    """Count reviews whose aggregate update was deferred"""
    reconciler = AggregateReconciler(db, AggregateUpdater(session_factory))
    return reconciler.reconcile(limit or get_settings().reconcile_batch_size)
