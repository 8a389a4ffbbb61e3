# backend/modules/businesses/models/business_models.py

from sqlalchemy import Column, Integer, String, Text, Boolean, Index

from core.database import Base
from core.mixins import TimestampMixin


DEFAULT_WELCOME_MESSAGE = "Thank you for your feedback!"
DEFAULT_THANK_YOU_MESSAGE = (
    "Thank you for taking the time to share your experience with us."
)


class Business(Base, TimestampMixin):
    """Business profile that collects customer reviews"""
    __tablename__ = "businesses"

    id = Column(Integer, primary_key=True, index=True)

    # Profile
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    website = Column(String(500), nullable=True)
    phone = Column(String(30), nullable=True)
    email = Column(String(255), nullable=True)
    address = Column(String(500), nullable=True)

    # Redirect target for high ratings (e.g. a Google review link)
    google_review_url = Column(String(1000), nullable=True)

    # Public review page copy
    welcome_message = Column(String(500), default=DEFAULT_WELCOME_MESSAGE)
    thank_you_message = Column(String(1000), default=DEFAULT_THANK_YOU_MESSAGE)

    is_active = Column(Boolean, default=True, nullable=False, index=True)

    __table_args__ = (
        Index("idx_business_active_name", "is_active", "name"),
    )

    def __repr__(self):
        return f"<Business {self.id} {self.name!r}>"
