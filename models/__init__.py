# models/__init__.py
from .base import Base
from .user import User, UserRole
from .property import Property, PropertyStatus, RentingType
from .property_image import PropertyImage
from .rental_request import RentalRequest, RentalRequestStatus
from .booking import Booking, BookingStatus
from .tenant import Tenant, TenantStatus
from .payment import Payment, PaymentType, PaymentStatus
from .notification import Notification
from .maintenance_issue import MaintenanceIssue, MaintenancePriority, MaintenanceStatus

__all__ = [
     "Base",
     "User",
     "UserRole",
     "Property",
     "PropertyStatus",
     "RentingType",
     "PropertyImage",
     "RentalRequest",
     "RentalRequestStatus",
     "Booking",
     "BookingStatus",
     "Tenant",
     "TenantStatus",
     "Payment",
     "PaymentType",
     "PaymentStatus",
     "Notification",
     "MaintenanceIssue",
     "MaintenancePriority",
     "MaintenanceStatus",
]
