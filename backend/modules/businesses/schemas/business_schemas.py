# backend/modules/businesses/schemas/business_schemas.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl, field_validator


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class BusinessBase(BaseModel):
    """Fields shared by create and update payloads"""

    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    website: Optional[HttpUrl] = None
    phone: Optional[str] = Field(None, max_length=30)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(None, max_length=500)
    google_review_url: Optional[HttpUrl] = None
    welcome_message: Optional[str] = Field(None, max_length=500)
    thank_you_message: Optional[str] = Field(None, max_length=1000)

    @field_validator(
        "website", "email", "google_review_url", "phone", "address", mode="before"
    )
    @classmethod
    def empty_strings_are_missing(cls, v):
        # Forms submit "" for untouched optional inputs
        return _blank_to_none(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Business name is required")
        return v.strip()


class BusinessCreate(BusinessBase):
    """Schema for creating a business profile"""


class BusinessUpdate(BusinessBase):
    """Schema for replacing a business profile's editable fields"""


class BusinessResponse(BaseModel):
    """Schema for business responses"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str]
    website: Optional[str]
    phone: Optional[str]
    email: Optional[str]
    address: Optional[str]
    google_review_url: Optional[str]
    welcome_message: Optional[str]
    thank_you_message: Optional[str]
    is_active: bool
    review_link: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class BusinessListResponse(BaseModel):
    businesses: List[BusinessResponse]
    total: int
