# services/__init__.py
from .availability_service import (
     has_overlap,
     is_property_available,
     check_property_availability,
)
from .pricing_service import (
     calculate_rental_price,
     calculate_booking_price,
     calculate_refund_amount,
)
from .rental_request_service import RentalRequestService, validate_rental_request
from .booking_service import BookingService
from .tenant_service import TenantService
from .property_service import PropertyService
from .notification_service import NotificationService
from .maintenance_service import MaintenanceService
from .context import CurrentUser

__all__ = [
     "has_overlap",
     "is_property_available",
     "check_property_availability",
     "calculate_rental_price",
     "calculate_booking_price",
     "calculate_refund_amount",
     "RentalRequestService",
     "validate_rental_request",
     "BookingService",
     "TenantService",
     "PropertyService",
     "NotificationService",
     "MaintenanceService",
     "CurrentUser",
]
