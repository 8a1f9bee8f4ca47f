# routers/maintenance.py
"""
Maintenance issue API routes.

Owners report and manage issues on their properties; current tenants can
report them too. Assignees see and progress the issues given to them.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from models import MaintenanceIssue, MaintenancePriority, MaintenanceStatus
from schemas.maintenance import (
     MaintenanceAssignRequest,
     MaintenanceIssueCreate,
     MaintenanceIssueListResponse,
     MaintenanceIssueResponse,
     MaintenanceIssueUpdate,
     MaintenanceStatisticsResponse,
     MaintenanceStatusUpdate,
)
from security import get_current_user
from services.context import CurrentUser
from services.maintenance_service import MaintenanceService

router = APIRouter(prefix="/api/maintenance", tags=["maintenance"])


def _build_issue_response(issue: MaintenanceIssue) -> MaintenanceIssueResponse:
     response = MaintenanceIssueResponse.model_validate(issue)
     if issue.property is not None:
          response.property_name = issue.property.name
     return response


@router.post(
     "",
     response_model=MaintenanceIssueResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Report a maintenance issue"
)
def create_issue(
     issue_data: MaintenanceIssueCreate,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     return _build_issue_response(MaintenanceService.create(db, issue_data, current_user))


@router.get("", response_model=MaintenanceIssueListResponse, summary="List maintenance issues")
def list_issues(
     property_id: Optional[int] = None,
     status_filter: Optional[MaintenanceStatus] = Query(None, alias="status"),
     priority: Optional[MaintenancePriority] = None,
     page: int = Query(1, ge=1),
     page_size: int = Query(10, ge=1, le=100),
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     items, total = MaintenanceService.list_issues(
          db,
          current_user,
          property_id=property_id,
          status=status_filter,
          priority=priority,
          page=page,
          page_size=page_size,
     )
     return MaintenanceIssueListResponse(
          items=[_build_issue_response(i) for i in items],
          total=total,
          page=page,
          page_size=page_size,
     )


@router.get("/overdue", response_model=List[MaintenanceIssueResponse], summary="Pending issues older than a week")
def get_overdue_issues(
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     return [_build_issue_response(i) for i in MaintenanceService.get_overdue(db, current_user)]


@router.get("/statistics", response_model=MaintenanceStatisticsResponse, summary="Totals for my properties")
def get_statistics(
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     return MaintenanceService.statistics(db, current_user)


@router.get("/{issue_id}", response_model=MaintenanceIssueResponse, summary="Get maintenance issue by ID")
def get_issue(
     issue_id: int,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     return _build_issue_response(MaintenanceService.get(db, issue_id, current_user))


@router.put("/{issue_id}", response_model=MaintenanceIssueResponse, summary="Edit a maintenance issue")
def update_issue(
     issue_id: int,
     issue_data: MaintenanceIssueUpdate,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     return _build_issue_response(MaintenanceService.update(db, issue_id, issue_data, current_user))


@router.patch("/{issue_id}/status", response_model=MaintenanceIssueResponse, summary="Progress a maintenance issue")
def update_issue_status(
     issue_id: int,
     body: MaintenanceStatusUpdate,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     return _build_issue_response(MaintenanceService.update_status(db, issue_id, body, current_user))


@router.post("/{issue_id}/assign", response_model=MaintenanceIssueResponse, summary="Assign a maintenance issue")
def assign_issue(
     issue_id: int,
     body: MaintenanceAssignRequest,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     issue = MaintenanceService.assign(db, issue_id, body.assigned_to_user_id, current_user)
     return _build_issue_response(issue)


@router.delete("/{issue_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a maintenance issue")
def delete_issue(
     issue_id: int,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     MaintenanceService.delete(db, issue_id, current_user)
     return None
