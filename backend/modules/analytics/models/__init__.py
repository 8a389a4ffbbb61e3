# backend/modules/analytics/models/__init__.py

from .analytics_models import DailyAggregate, AggregateApplication

__all__ = ["DailyAggregate", "AggregateApplication"]
