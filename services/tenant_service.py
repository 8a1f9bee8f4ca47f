# services/tenant_service.py
"""
Tenant Service - active leases created from approved rental requests.

A tenant row exists from the day an approved lease begins. When the lease
end date passes, the tenant is marked LeaseEnded and the property is put
back on the market. `process_lease_transitions` and
`notify_expiring_leases` are intended to run daily from a scheduler.
"""
import logging
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from models import Property, PropertyStatus, RentalRequest, RentalRequestStatus, Tenant, TenantStatus, UserRole
from services.context import CurrentUser, resolve_today
from services.exceptions import InvalidStateError, NotFoundError, UnauthorizedError
from services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class TenantService:
     """Service class for tenant/lease business logic."""

     @staticmethod
     def start_lease(db: Session, rental_request: RentalRequest) -> Tenant:
          """
          Turn an approved rental request into an active tenancy.

          Raises:
               InvalidStateError: If the request isn't approved or already has a tenancy
          """
          if rental_request.status != RentalRequestStatus.APPROVED:
               raise InvalidStateError("Only approved rental requests can start a lease")
          if rental_request.tenant is not None:
               raise InvalidStateError(f"Lease for rental request {rental_request.id} has already started")

          tenant = Tenant(
               user_id=rental_request.user_id,
               property_id=rental_request.property_id,
               rental_request=rental_request,
               lease_start_date=rental_request.proposed_start_date,
               lease_end_date=rental_request.proposed_end_date,
               monthly_rent=rental_request.proposed_monthly_rent,
               status=TenantStatus.ACTIVE,
          )
          db.add(tenant)
          rental_request.property.status = PropertyStatus.OCCUPIED
          db.flush()

          NotificationService.create_notification(
               db,
               tenant.user_id,
               "Lease Started",
               f"Your lease for {rental_request.property.name} has started. Welcome home!",
               "lease_started",
               tenant.property_id,
          )
          logger.info("Started lease: tenant %s on property %s", tenant.id, tenant.property_id)
          return tenant

     @staticmethod
     def _close(db: Session, tenant: Tenant, today: date) -> None:
          tenant.status = TenantStatus.LEASE_ENDED
          if tenant.lease_end_date is None or tenant.lease_end_date > today:
               tenant.lease_end_date = today

          still_occupied = db.query(Tenant).filter(
               Tenant.property_id == tenant.property_id,
               Tenant.status == TenantStatus.ACTIVE,
               Tenant.id != tenant.id,
          ).first()
          if still_occupied is None and tenant.property.status == PropertyStatus.OCCUPIED:
               tenant.property.status = PropertyStatus.AVAILABLE

     @staticmethod
     def end_lease(
          db: Session,
          tenant_id: int,
          current_user: CurrentUser,
          today: Optional[date] = None
     ) -> Tenant:
          """End an active lease early (property owner or admin)."""
          today = resolve_today(today)
          tenant = db.query(Tenant).filter(Tenant.id == tenant_id).first()
          if tenant is None:
               raise NotFoundError.for_entity("Tenant", tenant_id)
          if not (current_user.is_admin or tenant.property.owner_id == current_user.id):
               raise UnauthorizedError("Only the property owner can end this lease")
          if tenant.status != TenantStatus.ACTIVE:
               raise InvalidStateError("Lease has already ended")

          TenantService._close(db, tenant, today)
          db.flush()

          NotificationService.create_notification(
               db,
               tenant.user_id,
               "Lease Ended",
               f"Your lease for {tenant.property.name} ended on {tenant.lease_end_date}.",
               "lease_ended",
               tenant.property_id,
          )
          logger.info("Ended lease for tenant %s", tenant_id)
          return tenant

     @staticmethod
     def process_lease_transitions(db: Session, today: Optional[date] = None) -> dict:
          """
          Start leases whose start date has arrived and end leases whose end date has passed.

          Returns:
               Dictionary with the number of leases started and ended
          """
          today = resolve_today(today)

          starting = (
               db.query(RentalRequest)
               .filter(
                    RentalRequest.status == RentalRequestStatus.APPROVED,
                    RentalRequest.proposed_start_date <= today,
                    RentalRequest.proposed_end_date > today,
                    ~RentalRequest.tenant.has(),
               )
               .order_by(RentalRequest.proposed_start_date)
               .all()
          )
          for rental_request in starting:
               TenantService.start_lease(db, rental_request)

          expired = (
               db.query(Tenant)
               .filter(
                    Tenant.status == TenantStatus.ACTIVE,
                    Tenant.lease_end_date.isnot(None),
                    Tenant.lease_end_date <= today,
               )
               .all()
          )
          for tenant in expired:
               TenantService._close(db, tenant, today)
               db.flush()
               NotificationService.create_notification(
                    db,
                    tenant.user_id,
                    "Contract Expired",
                    f"Your lease for {tenant.property.name} expired on {tenant.lease_end_date}.",
                    "contract_expired",
                    tenant.property_id,
               )
               NotificationService.create_notification(
                    db,
                    tenant.property.owner_id,
                    "Contract Expired",
                    f"The tenant contract for {tenant.property.name} has expired. "
                    "The property is now available for new rentals.",
                    "contract_expired",
                    tenant.property_id,
               )

          logger.info("Lease transitions: %d started, %d ended", len(starting), len(expired))
          return {"started": len(starting), "ended": len(expired)}

     @staticmethod
     def notify_expiring_leases(db: Session, today: Optional[date] = None, days_ahead: int = 60) -> int:
          """Warn tenant and landlord about leases ending within `days_ahead` days."""
          today = resolve_today(today)
          horizon = today + timedelta(days=days_ahead)

          expiring = (
               db.query(Tenant)
               .filter(
                    Tenant.status == TenantStatus.ACTIVE,
                    Tenant.lease_end_date > today,
                    Tenant.lease_end_date <= horizon,
               )
               .all()
          )
          for tenant in expiring:
               days_left = (tenant.lease_end_date - today).days
               NotificationService.create_notification(
                    db,
                    tenant.user_id,
                    "Contract Expiring Soon",
                    f"Your lease for {tenant.property.name} expires in {days_left} days. "
                    "Please contact your landlord to discuss renewal.",
                    "contract_expiring",
                    tenant.property_id,
               )
               NotificationService.create_notification(
                    db,
                    tenant.property.owner_id,
                    "Tenant Contract Expiring",
                    f"Tenant contract for {tenant.property.name} expires in {days_left} days.",
                    "contract_expiring",
                    tenant.property_id,
               )

          logger.info("Sent expiring-lease notifications for %d tenants", len(expiring))
          return len(expiring)

     @staticmethod
     def list_tenants(
          db: Session,
          current_user: CurrentUser,
          status: Optional[TenantStatus] = None
     ) -> List[Tenant]:
          query = db.query(Tenant)
          if current_user.role == UserRole.LANDLORD:
               query = query.join(Property, Tenant.property_id == Property.id).filter(
                    Property.owner_id == current_user.id
               )
          elif not current_user.is_admin:
               query = query.filter(Tenant.user_id == current_user.id)

          if status is not None:
               query = query.filter(Tenant.status == status)
          return query.order_by(Tenant.lease_start_date.desc(), Tenant.id.desc()).all()
