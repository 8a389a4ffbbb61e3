# backend/modules/reviews/tests/__init__.py
