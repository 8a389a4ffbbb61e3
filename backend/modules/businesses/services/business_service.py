# backend/modules/businesses/services/business_service.py

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.config import Settings, get_settings
from core.exceptions import BusinessNotFound, StorageUnavailable
from modules.businesses.models.business_models import (
    Business,
    DEFAULT_THANK_YOU_MESSAGE,
    DEFAULT_WELCOME_MESSAGE,
)
from modules.businesses.schemas.business_schemas import (
    BusinessCreate,
    BusinessResponse,
    BusinessUpdate,
)

logger = logging.getLogger(__name__)


class BusinessService:
    """Service for business profiles and the redirect lookup used by routing"""

    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()

    def create_business(self, business_data: BusinessCreate) -> Business:
        """Create a new business profile"""
        business = Business(**self._to_columns(business_data), is_active=True)

        try:
            self.db.add(business)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating business: {e}")
            raise StorageUnavailable("Could not save business") from e

        self.db.refresh(business)
        logger.info(f"Created business {business.id} ({business.name})")
        return business

    def get_business(self, business_id: int, include_inactive: bool = False) -> Business:
        """Get a business by ID; inactive businesses count as missing by default"""
        business = self.db.get(Business, business_id)
        if business is None or (not business.is_active and not include_inactive):
            raise BusinessNotFound(business_id)
        return business

    def list_businesses(self, include_inactive: bool = False) -> List[Business]:
        query = self.db.query(Business)
        if not include_inactive:
            query = query.filter(Business.is_active.is_(True))
        return query.order_by(Business.name, Business.id).all()

    def update_business(self, business_id: int, update_data: BusinessUpdate) -> Business:
        """Replace the editable fields of a business"""
        business = self.get_business(business_id)

        for key, value in self._to_columns(update_data).items():
            setattr(business, key, value)

        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating business {business_id}: {e}")
            raise StorageUnavailable("Could not save business") from e

        self.db.refresh(business)
        logger.info(f"Updated business {business_id}")
        return business

    def deactivate_business(self, business_id: int) -> Business:
        """Soft delete: reviews and aggregates stay, new submissions are refused"""
        business = self.get_business(business_id)
        business.is_active = False

        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageUnavailable("Could not save business") from e

        logger.info(f"Deactivated business {business_id}")
        return business

    def get_redirect_url(self, business_id: int) -> Optional[str]:
        """Public review platform URL for high ratings, or None if not configured"""
        business = self.get_business(business_id)
        return business.google_review_url or None

    def review_link(self, business: Business) -> str:
        """Shareable link to the public review form (the QR code target)"""
        return f"{self.settings.public_base_url}/review/{business.id}"

    def to_response(self, business: Business) -> BusinessResponse:
        response = BusinessResponse.model_validate(business)
        response.review_link = self.review_link(business)
        return response

    @staticmethod
    def _to_columns(data) -> dict:
        values = data.model_dump()
        for url_field in ("website", "google_review_url"):
            if values.get(url_field) is not None:
                values[url_field] = str(values[url_field])
        values["welcome_message"] = values.get("welcome_message") or DEFAULT_WELCOME_MESSAGE
        values["thank_you_message"] = (
            values.get("thank_you_message") or DEFAULT_THANK_YOU_MESSAGE
        )
        return values
