# schemas/tenant.py
"""
Pydantic schemas for tenant (active lease) responses.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict

from models import TenantStatus


class TenantResponse(BaseModel):
     id: int
     user_id: int
     property_id: int
     rental_request_id: Optional[int] = None
     lease_start_date: date
     lease_end_date: Optional[date] = None
     monthly_rent: Decimal
     status: TenantStatus
     created_at: datetime
     updated_at: datetime

     model_config = ConfigDict(from_attributes=True)


class LeaseTransitionResponse(BaseModel):
     """Counts reported by the lease processing job."""
     started: int
     ended: int
