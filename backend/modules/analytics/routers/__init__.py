# backend/modules/analytics/routers/__init__.py

from .review_analytics_router import router as review_analytics_router

__all__ = ["review_analytics_router"]
