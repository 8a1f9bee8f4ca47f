# routers/properties.py
"""
Property API routes.

Landlords list and maintain properties; anyone signed in can browse them
and check availability for a date range.
"""
from datetime import date
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from database import get_session
from models import PropertyStatus, RentingType
from schemas.booking import AvailabilityResponse
from schemas.property import (
     PropertyCreate,
     PropertyUpdate,
     PropertyStatusUpdate,
     PropertyImageResponse,
     PropertyResponse,
     PropertyListResponse,
)
from security import get_current_user
from services.availability_service import check_property_availability
from services.context import CurrentUser
from services.exceptions import RentalValidationError
from services.property_service import PropertyService

router = APIRouter(prefix="/api/properties", tags=["properties"])


@router.post(
     "",
     response_model=PropertyResponse,
     status_code=status.HTTP_201_CREATED,
     summary="List a new property"
)
def create_property(
     property_data: PropertyCreate,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     prop = PropertyService.create(db, property_data, current_user)
     return PropertyResponse.model_validate(prop)


@router.get("", response_model=PropertyListResponse, summary="Browse properties")
def list_properties(
     status_filter: Optional[PropertyStatus] = Query(None, alias="status"),
     renting_type: Optional[RentingType] = None,
     owner_id: Optional[int] = None,
     min_price: Optional[Decimal] = Query(None, ge=0),
     max_price: Optional[Decimal] = Query(None, ge=0),
     page: int = Query(1, ge=1),
     page_size: int = Query(10, ge=1, le=100),
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     items, total = PropertyService.list_properties(
          db,
          status=status_filter,
          renting_type=renting_type,
          owner_id=owner_id,
          min_price=min_price,
          max_price=max_price,
          page=page,
          page_size=page_size,
     )
     return PropertyListResponse(
          items=[PropertyResponse.model_validate(p) for p in items],
          total=total,
          page=page,
          page_size=page_size,
     )


@router.get("/{property_id}", response_model=PropertyResponse, summary="Get property by ID")
def get_property(
     property_id: int,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     return PropertyResponse.model_validate(PropertyService.get(db, property_id))


@router.put("/{property_id}", response_model=PropertyResponse, summary="Update a property")
def update_property(
     property_id: int,
     property_data: PropertyUpdate,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     prop = PropertyService.update(db, property_id, property_data, current_user)
     return PropertyResponse.model_validate(prop)


@router.patch("/{property_id}/status", response_model=PropertyResponse, summary="Change listing status")
def update_property_status(
     property_id: int,
     body: PropertyStatusUpdate,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     prop = PropertyService.update_status(db, property_id, body.status, current_user)
     return PropertyResponse.model_validate(prop)


@router.post(
     "/{property_id}/images",
     response_model=PropertyImageResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Upload a property image"
)
def upload_property_image(
     property_id: int,
     image: UploadFile = File(...),
     is_cover: bool = Form(False),
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     saved = PropertyService.add_image(db, property_id, image, current_user, is_cover=is_cover)
     return PropertyImageResponse.model_validate(saved)


@router.delete(
     "/{property_id}/images/{image_id}",
     status_code=status.HTTP_204_NO_CONTENT,
     summary="Remove a property image"
)
def delete_property_image(
     property_id: int,
     image_id: int,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     PropertyService.remove_image(db, property_id, image_id, current_user)
     return None


@router.get(
     "/{property_id}/availability",
     response_model=AvailabilityResponse,
     summary="Check availability for a date range"
)
def get_property_availability(
     property_id: int,
     start_date: date,
     end_date: date,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     """
     Report whether [start_date, end_date) is free, with the bookings and
     approved leases that block it.
     """
     if start_date >= end_date:
          raise RentalValidationError(["End date must be after start date"], "Invalid date range")
     return check_property_availability(db, property_id, start_date, end_date)
