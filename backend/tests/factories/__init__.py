# backend/tests/factories/__init__.py

"""
Shared test factories for the review backend.
"""

from .base import BaseFactory
from .business import BusinessFactory
from .review import ReviewFactory

ALL_FACTORIES = (BusinessFactory, ReviewFactory)


def bind_session(session):
    """Attach every factory to ``session`` (None detaches)."""
    for factory_class in ALL_FACTORIES:
        factory_class._meta.sqlalchemy_session = session


__all__ = [
    'BaseFactory',
    'BusinessFactory',
    'ReviewFactory',
    'bind_session',
]
