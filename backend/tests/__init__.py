# backend/tests/__init__.py
