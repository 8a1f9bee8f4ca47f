# routers/tenants.py
"""
Tenant (active lease) API routes.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_session
from models import TenantStatus
from schemas.tenant import TenantResponse, LeaseTransitionResponse
from security import get_current_user
from services.context import CurrentUser, require_admin
from services.tenant_service import TenantService

router = APIRouter(prefix="/api/tenants", tags=["tenants"])


@router.get("", response_model=List[TenantResponse], summary="List tenancies")
def list_tenants(
     status_filter: Optional[TenantStatus] = Query(None, alias="status"),
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     """Landlords see tenants of their properties; tenants see their own leases."""
     tenants = TenantService.list_tenants(db, current_user, status_filter)
     return [TenantResponse.model_validate(t) for t in tenants]


@router.post("/{tenant_id}/end", response_model=TenantResponse, summary="End a lease early")
def end_lease(
     tenant_id: int,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     tenant = TenantService.end_lease(db, tenant_id, current_user)
     return TenantResponse.model_validate(tenant)


@router.post(
     "/process-transitions",
     response_model=LeaseTransitionResponse,
     summary="Start and end leases due today (admin)"
)
def process_lease_transitions(
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     require_admin(current_user)
     return TenantService.process_lease_transitions(db)


@router.post("/notify-expiring", summary="Warn about leases ending soon (admin)")
def notify_expiring_leases(
     days_ahead: int = Query(60, ge=1, le=365),
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     require_admin(current_user)
     return {"notified": TenantService.notify_expiring_leases(db, days_ahead=days_ahead)}
