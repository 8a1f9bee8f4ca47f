# schemas/property.py
"""
Pydantic schemas for Property API request/response validation.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from models import PropertyStatus, RentingType


class PropertyCreate(BaseModel):
     """Schema for listing a new property."""
     name: str = Field(..., min_length=1, max_length=255)
     description: Optional[str] = None
     price: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, description="Per month, or per night for daily rentals")
     bedrooms: int = Field(1, ge=0)
     renting_type: RentingType = RentingType.MONTHLY
     status: PropertyStatus = PropertyStatus.AVAILABLE

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "name": "Riverside two-bedroom",
                    "price": 600.00,
                    "bedrooms": 2,
                    "renting_type": "Monthly"
               }
          }
     )


class PropertyUpdate(BaseModel):
     name: Optional[str] = Field(None, min_length=1, max_length=255)
     description: Optional[str] = None
     price: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
     bedrooms: Optional[int] = Field(None, ge=0)
     renting_type: Optional[RentingType] = None


class PropertyStatusUpdate(BaseModel):
     status: PropertyStatus


class PropertyImageResponse(BaseModel):
     id: int
     url: str
     is_cover: bool

     model_config = ConfigDict(from_attributes=True)


class PropertyResponse(BaseModel):
     id: int
     owner_id: int
     name: str
     description: Optional[str] = None
     price: Decimal
     bedrooms: int
     status: PropertyStatus
     renting_type: RentingType
     created_at: datetime
     updated_at: datetime
     images: List[PropertyImageResponse] = []

     model_config = ConfigDict(from_attributes=True)


class PropertyListResponse(BaseModel):
     items: List[PropertyResponse]
     total: int
     page: int = 1
     page_size: int = 10
