# backend/modules/businesses/routers/business_router.py

import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.orm import Session

from core.database import get_db
from core.exceptions import APIError
from modules.businesses.schemas.business_schemas import (
    BusinessCreate,
    BusinessListResponse,
    BusinessResponse,
    BusinessUpdate,
)
from modules.businesses.services.business_service import BusinessService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/businesses", tags=["Businesses"])


@router.post("/", response_model=BusinessResponse, status_code=201)
def create_business(business_data: BusinessCreate, db: Session = Depends(get_db)):
    """Create a business profile"""
    service = BusinessService(db)
    return service.to_response(service.create_business(business_data))


@router.get("/", response_model=BusinessListResponse)
def list_businesses(
    include_inactive: bool = Query(False, description="Include deactivated businesses"),
    db: Session = Depends(get_db),
):
    """List business profiles"""
    try:
        service = BusinessService(db)
        businesses = service.list_businesses(include_inactive=include_inactive)
        return BusinessListResponse(
            businesses=[service.to_response(b) for b in businesses],
            total=len(businesses),
        )
    except APIError:
        raise
    except Exception as e:
        logger.error(f"Error listing businesses: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/{business_id}", response_model=BusinessResponse)
def get_business(
    business_id: int = Path(..., description="Business ID"),
    db: Session = Depends(get_db),
):
    """Get a business profile"""
    service = BusinessService(db)
    return service.to_response(service.get_business(business_id))


@router.put("/{business_id}", response_model=BusinessResponse)
def update_business(
    update_data: BusinessUpdate,
    business_id: int = Path(..., description="Business ID"),
    db: Session = Depends(get_db),
):
    """Update a business profile"""
    service = BusinessService(db)
    return service.to_response(service.update_business(business_id, update_data))


@router.delete("/{business_id}")
def delete_business(
    business_id: int = Path(..., description="Business ID"),
    db: Session = Depends(get_db),
):
    """Deactivate a business; its reviews and analytics are kept"""
    BusinessService(db).deactivate_business(business_id)
    return {"success": True, "message": "Business deactivated successfully"}
