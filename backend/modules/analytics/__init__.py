# backend/modules/analytics/__init__.py

"""
Review Analytics Module

Maintains one aggregate row per business per UTC day (review counts,
high/low split, redirects, private feedback, running average rating)
and serves the dashboard summaries built from those rows.

Components:
- Models: DailyAggregate and the ledger of reviews already counted
- Services: atomic aggregate updates, dashboard summaries, reconciliation
- Routers: dashboard, daily aggregate and reconciliation endpoints
"""
