# schemas/maintenance.py
"""
Pydantic schemas for maintenance issue API request/response validation.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from models import MaintenancePriority, MaintenanceStatus


class MaintenanceIssueCreate(BaseModel):
     """Schema for reporting a maintenance issue."""
     property_id: int = Field(..., gt=0)
     title: str = Field(..., min_length=1, max_length=200)
     description: Optional[str] = Field(None, max_length=1000)
     category: Optional[str] = Field(None, max_length=100)
     priority: MaintenancePriority = MaintenancePriority.MEDIUM
     assigned_to_user_id: Optional[int] = Field(None, gt=0)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "property_id": 1,
                    "title": "Leaking kitchen tap",
                    "description": "Drips constantly since Monday",
                    "category": "Plumbing",
                    "priority": "High"
               }
          }
     )


class MaintenanceIssueUpdate(BaseModel):
     """Schema for editing an issue's details; omitted fields are unchanged."""
     title: Optional[str] = Field(None, min_length=1, max_length=200)
     description: Optional[str] = Field(None, max_length=1000)
     category: Optional[str] = Field(None, max_length=100)
     priority: Optional[MaintenancePriority] = None
     cost: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)


class MaintenanceStatusUpdate(BaseModel):
     status: MaintenanceStatus
     cost: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
     resolved_at: Optional[datetime] = Field(None, description="Defaults to now when completing")
     resolution_notes: Optional[str] = Field(None, max_length=500)


class MaintenanceAssignRequest(BaseModel):
     assigned_to_user_id: int = Field(..., gt=0)


class MaintenanceIssueResponse(BaseModel):
     id: int
     property_id: int
     reported_by_user_id: int
     assigned_to_user_id: Optional[int] = None
     title: str
     description: Optional[str] = None
     category: Optional[str] = None
     priority: MaintenancePriority
     status: MaintenanceStatus
     is_tenant_complaint: bool
     cost: Optional[Decimal] = None
     resolved_at: Optional[datetime] = None
     resolution_notes: Optional[str] = None
     created_at: datetime
     updated_at: datetime

     # Joined for display
     property_name: Optional[str] = None

     model_config = ConfigDict(from_attributes=True)


class MaintenanceIssueListResponse(BaseModel):
     items: List[MaintenanceIssueResponse]
     total: int
     page: int = 1
     page_size: int = 10


class MaintenanceStatisticsResponse(BaseModel):
     """Totals over every issue on the caller's properties."""
     total_issues: int
     pending_issues: int
     in_progress_issues: int
     completed_issues: int
     high_priority_issues: int
     emergency_issues: int
     tenant_complaints: int
     total_costs: Decimal
     average_resolution_days: float
     oldest_pending_issue: Optional[datetime] = None
