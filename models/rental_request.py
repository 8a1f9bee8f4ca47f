# models/rental_request.py
import enum
from calendar import monthrange
from datetime import date
from sqlalchemy import Column, Integer, Numeric, Date, DateTime, Text, ForeignKey, Enum
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, enum_values


class RentalRequestStatus(str, enum.Enum):
     """Lifecycle states of an annual/monthly lease proposal."""
     PENDING = "Pending"
     APPROVED = "Approved"
     REJECTED = "Rejected"
     CANCELLED = "Cancelled"


def add_months(start: date, months: int) -> date:
     """Shift a date by whole months, clamping to the last day of the target month."""
     month_index = start.month - 1 + months
     year = start.year + month_index // 12
     month = month_index % 12 + 1
     day = min(start.day, monthrange(year, month)[1])
     return date(year, month, day)


class RentalRequest(TimestampMixin, Base):
     """
     RentalRequest model - a prospective tenant's lease proposal for a property.

     The end date is derived (start + lease_duration_months) and stored so that
     overlap queries can run in SQL; call `set_lease_period` to keep the two in sync.
     """
     __tablename__ = "rental_requests"

     id = Column(Integer, primary_key=True, autoincrement=True)

     # Foreign keys
     property_id = Column(
          Integer,
          ForeignKey("properties.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     user_id = Column(
          Integer,
          ForeignKey("users.id"),
          nullable=False,
          index=True
     )

     # Lease period
     proposed_start_date = Column(Date, nullable=False)
     lease_duration_months = Column(Integer, nullable=False)
     proposed_end_date = Column(Date, nullable=False, index=True)

     # Terms
     number_of_guests = Column(Integer, default=1, nullable=False)
     proposed_monthly_rent = Column(Numeric(12, 2), nullable=False)
     total_price = Column(Numeric(12, 2), nullable=False)
     message = Column(Text, nullable=True)

     status = Column(
          Enum(RentalRequestStatus, name="rental_request_status", create_constraint=True, values_callable=enum_values),
          default=RentalRequestStatus.PENDING,
          nullable=False,
          index=True
     )
     response_date = Column(DateTime, nullable=True)
     landlord_response = Column(Text, nullable=True)

     version = Column(Integer, nullable=False)

     # Relationships
     property = relationship("Property", back_populates="rental_requests")
     user = relationship("User", back_populates="rental_requests")
     tenant = relationship("Tenant", back_populates="rental_request", uselist=False)

     __mapper_args__ = {"version_id_col": version}

     def set_lease_period(self, start_date: date, duration_months: int) -> None:
          self.proposed_start_date = start_date
          self.lease_duration_months = duration_months
          self.proposed_end_date = add_months(start_date, duration_months)

     def __repr__(self):
          return (
               f"<RentalRequest(id={self.id}, property_id={self.property_id}, "
               f"status='{self.status.value}', start={self.proposed_start_date})>"
          )
