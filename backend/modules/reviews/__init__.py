# backend/modules/reviews/__init__.py

"""
Customer Review Collection Module

Handles the public review submission flow:
- Star rating validation
- Routing: high ratings are public and redirect to the business's
  review platform, low ratings stay private as internal feedback
- Review persistence
- Hand-off to the daily analytics aggregates
"""
