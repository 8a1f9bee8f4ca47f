# services/context.py
"""
Caller identity and clock helpers passed explicitly into service operations.
"""
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional

from models import UserRole
from services.exceptions import UnauthorizedError


@dataclass(frozen=True)
class CurrentUser:
     """The authenticated caller, resolved from the bearer token by the router layer."""
     id: int
     role: UserRole = UserRole.USER

     @property
     def is_admin(self) -> bool:
          return self.role == UserRole.ADMIN

     @property
     def is_landlord(self) -> bool:
          return self.role == UserRole.LANDLORD


def utc_now() -> datetime:
     """Naive UTC timestamp, matching the DateTime columns."""
     return datetime.now(timezone.utc).replace(tzinfo=None)


def resolve_today(today: Optional[date] = None) -> date:
     return today if today is not None else utc_now().date()


def resolve_now(now: Optional[datetime] = None) -> datetime:
     return now if now is not None else utc_now()


def require_admin(current_user: CurrentUser) -> None:
     if not current_user.is_admin:
          raise UnauthorizedError("Only administrators can run this operation")
