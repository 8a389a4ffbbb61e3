# backend/modules/reviews/schemas/review_schemas.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.reviews.models.review_models import ReviewStatus


class ReviewSubmission(BaseModel):
    """Payload posted by a customer from the public review page"""

    customer_name: str = Field(..., min_length=1, max_length=100)
    customer_phone: Optional[str] = Field(None, max_length=30)
    # Range is enforced by the routing policy so it surfaces as INVALID_RATING
    rating: int = Field(..., strict=True)
    feedback: Optional[str] = Field(None, max_length=1000)

    @field_validator("customer_name")
    @classmethod
    def validate_customer_name(cls, v):
        if not v.strip():
            raise ValueError("Name is required")
        return v.strip()

    @field_validator("customer_phone", "feedback")
    @classmethod
    def blank_to_none(cls, v):
        if v is not None and not v.strip():
            return None
        return v


class SubmissionResponse(BaseModel):
    """Result returned to the submitter"""

    review_id: int
    is_public: bool
    redirect_url: Optional[str] = None
    status: ReviewStatus


class ReviewResponse(BaseModel):
    """Schema for review responses"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    business_id: int
    customer_name: str
    customer_phone: Optional[str]
    rating: int
    feedback: Optional[str]
    is_public: bool
    status: ReviewStatus
    submitted_at: datetime
    processed_at: Optional[datetime]


class Pagination(BaseModel):
    page: int
    page_size: int
    total: int


class ReviewListResponse(BaseModel):
    reviews: List[ReviewResponse]
    pagination: Pagination
