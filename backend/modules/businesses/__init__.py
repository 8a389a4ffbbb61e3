# backend/modules/businesses/__init__.py

"""
Business Profiles Module

Owns the business profiles that reviews are collected for. Each profile
carries the optional public review platform URL that satisfied customers
are redirected to, plus the copy shown on the public review page.
"""
