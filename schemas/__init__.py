# schemas/__init__.py
from .common import ErrorResponse, ValidationResultResponse
from .property import (
     PropertyCreate,
     PropertyUpdate,
     PropertyStatusUpdate,
     PropertyResponse,
     PropertyListResponse,
)
from .rental_request import (
     RentalRequestCreate,
     RentalRequestUpdate,
     RentalRequestResponse,
     RentalRequestListResponse,
     RentalRequestFilter,
)
from .booking import (
     BookingCreate,
     BookingUpdate,
     BookingResponse,
     BookingListResponse,
     AvailabilityResponse,
)
from .tenant import TenantResponse
from .notification import NotificationResponse
from .maintenance import (
     MaintenanceIssueCreate,
     MaintenanceIssueUpdate,
     MaintenanceStatusUpdate,
     MaintenanceIssueResponse,
     MaintenanceIssueListResponse,
)

__all__ = [
     "ErrorResponse",
     "ValidationResultResponse",
     "PropertyCreate",
     "PropertyUpdate",
     "PropertyStatusUpdate",
     "PropertyResponse",
     "PropertyListResponse",
     "RentalRequestCreate",
     "RentalRequestUpdate",
     "RentalRequestResponse",
     "RentalRequestListResponse",
     "RentalRequestFilter",
     "BookingCreate",
     "BookingUpdate",
     "BookingResponse",
     "BookingListResponse",
     "AvailabilityResponse",
     "TenantResponse",
     "NotificationResponse",
     "MaintenanceIssueCreate",
     "MaintenanceIssueUpdate",
     "MaintenanceStatusUpdate",
     "MaintenanceIssueResponse",
     "MaintenanceIssueListResponse",
]
