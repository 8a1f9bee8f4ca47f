# services/maintenance_service.py
"""
Maintenance Service - repair issues reported on a property.

States:
     Pending -> InProgress | Completed | Cancelled
     InProgress -> Completed | Cancelled

The owner reports issues, edits, assigns and deletes them. An active tenant
of the property can also report one; it is recorded as a tenant complaint
and the owner is notified. The owner or the assignee moves an issue through
its states.
"""
import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from models import (
     MaintenanceIssue,
     MaintenancePriority,
     MaintenanceStatus,
     Property,
     Tenant,
     TenantStatus,
     User,
)
from schemas.maintenance import MaintenanceIssueCreate, MaintenanceIssueUpdate, MaintenanceStatusUpdate
from services.context import CurrentUser, resolve_now
from services.exceptions import InvalidStateError, NotFoundError, RentalValidationError, UnauthorizedError
from services.notification_service import NotificationService

logger = logging.getLogger(__name__)

OVERDUE_DAYS = 7


class MaintenanceService:
     """Service class for maintenance issue business logic."""

     @staticmethod
     def _get_or_404(db: Session, issue_id: int) -> MaintenanceIssue:
          issue = db.query(MaintenanceIssue).filter(MaintenanceIssue.id == issue_id).first()
          if issue is None:
               raise NotFoundError.for_entity("Maintenance issue", issue_id)
          return issue

     @staticmethod
     def _get_owned(db: Session, issue_id: int, current_user: CurrentUser, action: str) -> MaintenanceIssue:
          issue = MaintenanceService._get_or_404(db, issue_id)
          if issue.property.owner_id != current_user.id:
               raise UnauthorizedError(f"Only the property owner can {action} this maintenance issue")
          return issue

     @staticmethod
     def _scope(query: Query, current_user: CurrentUser) -> Query:
          if current_user.is_admin:
               return query
          return query.join(Property, MaintenanceIssue.property_id == Property.id).filter(
               or_(
                    Property.owner_id == current_user.id,
                    MaintenanceIssue.assigned_to_user_id == current_user.id,
                    MaintenanceIssue.reported_by_user_id == current_user.id,
               )
          )

     @staticmethod
     def _require_user(db: Session, user_id: int) -> User:
          user = db.query(User).filter(User.id == user_id).first()
          if user is None:
               raise NotFoundError.for_entity("User", user_id)
          return user

     @staticmethod
     def _is_active_tenant(db: Session, property_id: int, user_id: int) -> bool:
          return db.query(Tenant).filter(
               Tenant.property_id == property_id,
               Tenant.user_id == user_id,
               Tenant.status == TenantStatus.ACTIVE,
          ).first() is not None

     # ------------------------------------------------------------------
     # CRUD
     # ------------------------------------------------------------------

     @staticmethod
     def get(db: Session, issue_id: int, current_user: CurrentUser) -> MaintenanceIssue:
          issue = MaintenanceService._get_or_404(db, issue_id)
          if not (
               current_user.is_admin
               or issue.property.owner_id == current_user.id
               or issue.assigned_to_user_id == current_user.id
               or issue.reported_by_user_id == current_user.id
          ):
               raise UnauthorizedError("You don't have permission to view this maintenance issue")
          return issue

     @staticmethod
     def create(db: Session, data: MaintenanceIssueCreate, current_user: CurrentUser) -> MaintenanceIssue:
          """
          Report an issue on a property.

          Raises:
               NotFoundError: If the property or the assignee doesn't exist
               UnauthorizedError: If the caller neither owns nor rents the property
          """
          prop = db.query(Property).filter(Property.id == data.property_id).first()
          if prop is None:
               raise NotFoundError.for_entity("Property", data.property_id)

          is_owner = prop.owner_id == current_user.id
          if not is_owner and not MaintenanceService._is_active_tenant(db, prop.id, current_user.id):
               raise UnauthorizedError("Only the owner or a current tenant can report issues on this property")
          if data.assigned_to_user_id is not None:
               if not is_owner:
                    raise UnauthorizedError("Only the property owner can assign maintenance issues")
               MaintenanceService._require_user(db, data.assigned_to_user_id)

          issue = MaintenanceIssue(
               property_id=prop.id,
               reported_by_user_id=current_user.id,
               assigned_to_user_id=data.assigned_to_user_id,
               title=data.title,
               description=data.description,
               category=data.category,
               priority=data.priority,
               status=MaintenanceStatus.PENDING,
               is_tenant_complaint=not is_owner,
          )
          db.add(issue)
          db.flush()

          if not is_owner:
               NotificationService.create_notification(
                    db,
                    prop.owner_id,
                    "New Maintenance Issue",
                    f"A tenant reported '{issue.title}' ({issue.priority.value}) at {prop.name}.",
                    "maintenance_reported",
                    issue.id,
               )
          logger.info("Maintenance issue %s reported on property %s by user %s", issue.id, prop.id, current_user.id)
          return issue

     @staticmethod
     def update(
          db: Session,
          issue_id: int,
          data: MaintenanceIssueUpdate,
          current_user: CurrentUser
     ) -> MaintenanceIssue:
          issue = MaintenanceService._get_owned(db, issue_id, current_user, "update")
          if issue.is_closed:
               raise InvalidStateError(f"{issue.status.value} maintenance issues cannot be modified")
          for field, value in data.model_dump(exclude_unset=True).items():
               if value is not None:
                    setattr(issue, field, value)
          db.flush()
          logger.info("Updated maintenance issue %s", issue_id)
          return issue

     @staticmethod
     def delete(db: Session, issue_id: int, current_user: CurrentUser) -> None:
          issue = MaintenanceService._get_owned(db, issue_id, current_user, "delete")
          db.delete(issue)
          db.flush()
          logger.info("Deleted maintenance issue %s", issue_id)

     # ------------------------------------------------------------------
     # Workflow
     # ------------------------------------------------------------------

     @staticmethod
     def assign(db: Session, issue_id: int, assignee_id: int, current_user: CurrentUser) -> MaintenanceIssue:
          issue = MaintenanceService._get_owned(db, issue_id, current_user, "assign")
          if issue.is_closed:
               raise InvalidStateError(f"{issue.status.value} maintenance issues cannot be reassigned")
          assignee = MaintenanceService._require_user(db, assignee_id)
          issue.assigned_to_user_id = assignee.id
          db.flush()

          NotificationService.create_notification(
               db,
               assignee.id,
               "Maintenance Assigned",
               f"You were assigned '{issue.title}' at {issue.property.name}.",
               "maintenance_assigned",
               issue.id,
          )
          logger.info("Assigned maintenance issue %s to user %s", issue_id, assignee.id)
          return issue

     @staticmethod
     def update_status(
          db: Session,
          issue_id: int,
          data: MaintenanceStatusUpdate,
          current_user: CurrentUser,
          now: Optional[datetime] = None
     ) -> MaintenanceIssue:
          """
          Move an issue forward. Completing it stamps `resolved_at`, which
          defaults to now and may not lie in the future.

          Raises:
               UnauthorizedError: If the caller is neither owner nor assignee
               InvalidStateError: If the transition is not allowed
               RentalValidationError: If `resolved_at` is in the future
          """
          now = resolve_now(now)
          issue = MaintenanceService._get_or_404(db, issue_id)
          if current_user.id not in (issue.property.owner_id, issue.assigned_to_user_id):
               raise UnauthorizedError("Only the owner or the assignee can update this maintenance issue")
          if not issue.can_transition_to(data.status):
               raise InvalidStateError(
                    f"Cannot change maintenance status from {issue.status.value} to {data.status.value}"
               )

          if data.status == MaintenanceStatus.COMPLETED:
               resolved_at = data.resolved_at or now
               if resolved_at > now:
                    raise RentalValidationError(
                         ["Resolved date cannot be in the future"], "Invalid maintenance update"
                    )
               issue.resolved_at = resolved_at

          issue.status = data.status
          if data.cost is not None:
               issue.cost = data.cost
          if data.resolution_notes is not None:
               issue.resolution_notes = data.resolution_notes
          db.flush()

          if issue.reported_by_user_id != current_user.id:
               NotificationService.create_notification(
                    db,
                    issue.reported_by_user_id,
                    "Maintenance Update",
                    f"'{issue.title}' at {issue.property.name} is now {issue.status.value}.",
                    "maintenance_status_changed",
                    issue.id,
               )
          logger.info("Maintenance issue %s status set to %s", issue_id, issue.status.value)
          return issue

     # ------------------------------------------------------------------
     # Queries
     # ------------------------------------------------------------------

     @staticmethod
     def list_issues(
          db: Session,
          current_user: CurrentUser,
          property_id: Optional[int] = None,
          status: Optional[MaintenanceStatus] = None,
          priority: Optional[MaintenancePriority] = None,
          page: int = 1,
          page_size: int = 10
     ) -> Tuple[List[MaintenanceIssue], int]:
          query = MaintenanceService._scope(db.query(MaintenanceIssue), current_user)

          if property_id is not None:
               query = query.filter(MaintenanceIssue.property_id == property_id)
          if status is not None:
               query = query.filter(MaintenanceIssue.status == status)
          if priority is not None:
               query = query.filter(MaintenanceIssue.priority == priority)

          total = query.count()
          offset = (page - 1) * page_size
          items = (
               query.order_by(MaintenanceIssue.created_at.desc(), MaintenanceIssue.id.desc())
               .offset(offset)
               .limit(page_size)
               .all()
          )
          return items, total

     @staticmethod
     def _owned_issues(db: Session, current_user: CurrentUser) -> Query:
          return db.query(MaintenanceIssue).join(Property, MaintenanceIssue.property_id == Property.id).filter(
               Property.owner_id == current_user.id
          )

     @staticmethod
     def get_overdue(
          db: Session,
          current_user: CurrentUser,
          now: Optional[datetime] = None
     ) -> List[MaintenanceIssue]:
          """Pending issues on the caller's properties older than OVERDUE_DAYS."""
          cutoff = resolve_now(now) - timedelta(days=OVERDUE_DAYS)
          return (
               MaintenanceService._owned_issues(db, current_user)
               .filter(
                    MaintenanceIssue.status == MaintenanceStatus.PENDING,
                    MaintenanceIssue.created_at < cutoff,
               )
               .order_by(MaintenanceIssue.created_at)
               .all()
          )

     @staticmethod
     def statistics(db: Session, current_user: CurrentUser) -> dict:
          issues = MaintenanceService._owned_issues(db, current_user).all()

          def count(predicate) -> int:
               return sum(1 for issue in issues if predicate(issue))

          resolved = [
               issue for issue in issues
               if issue.status == MaintenanceStatus.COMPLETED and issue.resolved_at is not None
          ]
          average_days = (
               sum((issue.resolved_at - issue.created_at).total_seconds() for issue in resolved)
               / len(resolved) / 86400
               if resolved else 0.0
          )
          pending = [issue.created_at for issue in issues if issue.status == MaintenanceStatus.PENDING]

          return {
               "total_issues": len(issues),
               "pending_issues": len(pending),
               "in_progress_issues": count(lambda i: i.status == MaintenanceStatus.IN_PROGRESS),
               "completed_issues": count(lambda i: i.status == MaintenanceStatus.COMPLETED),
               "high_priority_issues": count(lambda i: i.priority == MaintenancePriority.HIGH),
               "emergency_issues": count(lambda i: i.priority == MaintenancePriority.EMERGENCY),
               "tenant_complaints": count(lambda i: i.is_tenant_complaint),
               "total_costs": sum((issue.cost for issue in issues if issue.cost is not None), Decimal("0.00")),
               "average_resolution_days": round(average_days, 2),
               "oldest_pending_issue": min(pending) if pending else None,
          }
