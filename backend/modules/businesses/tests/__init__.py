# backend/modules/businesses/tests/__init__.py
