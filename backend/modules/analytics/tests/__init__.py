# backend/modules/analytics/tests/__init__.py
