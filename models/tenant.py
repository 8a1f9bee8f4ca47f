# models/tenant.py
import enum
from sqlalchemy import Column, Integer, Numeric, Date, ForeignKey, Enum
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, enum_values


class TenantStatus(str, enum.Enum):
     ACTIVE = "Active"
     LEASE_ENDED = "LeaseEnded"


class Tenant(TimestampMixin, Base):
     """
     Tenant model - links a user to a property for the duration of an active lease.
     Created when an approved rental request's lease begins.
     """
     __tablename__ = "tenants"

     id = Column(Integer, primary_key=True, autoincrement=True)
     user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
     property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
     rental_request_id = Column(Integer, ForeignKey("rental_requests.id"), nullable=True, unique=True)

     # Lease period
     lease_start_date = Column(Date, nullable=False)
     lease_end_date = Column(Date, nullable=True)
     monthly_rent = Column(Numeric(12, 2), nullable=False)

     status = Column(
          Enum(TenantStatus, name="tenant_status", create_constraint=True, values_callable=enum_values),
          default=TenantStatus.ACTIVE,
          nullable=False,
          index=True
     )

     # Relationships
     user = relationship("User")
     property = relationship("Property", back_populates="tenants")
     rental_request = relationship("RentalRequest", back_populates="tenant")

     def __repr__(self):
          return f"<Tenant(id={self.id}, user_id={self.user_id}, property_id={self.property_id}, status='{self.status.value}')>"
