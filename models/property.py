# models/property.py
import enum
from sqlalchemy import Column, Integer, String, Numeric, Text, ForeignKey, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.orm.attributes import flag_modified
from .base import Base, TimestampMixin, enum_values


class PropertyStatus(str, enum.Enum):
     """Listing status of a property."""
     AVAILABLE = "Available"
     OCCUPIED = "Occupied"
     UNDER_MAINTENANCE = "UnderMaintenance"
     UNAVAILABLE = "Unavailable"


class RentingType(str, enum.Enum):
     """How the property is rented; decides whether price is per day or per month."""
     DAILY = "Daily"
     MONTHLY = "Monthly"


class Property(TimestampMixin, Base):
     """
     Property model - a listing owned by a landlord.

     `price` is per month for MONTHLY properties and per night for DAILY ones.
     `version` is an optimistic concurrency counter: any transaction that
     claims dates on the property bumps it, so two claims racing on the same
     row cannot both commit.
     """
     __tablename__ = "properties"
     __table_args__ = (
          CheckConstraint("price > 0", name="ck_properties_price_positive"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
     name = Column(String(255), nullable=False)
     description = Column(Text, nullable=True)

     price = Column(Numeric(12, 2), nullable=False)
     bedrooms = Column(Integer, default=1, nullable=False)
     status = Column(
          Enum(PropertyStatus, name="property_status", create_constraint=True, values_callable=enum_values),
          default=PropertyStatus.AVAILABLE,
          nullable=False,
          index=True
     )
     renting_type = Column(
          Enum(RentingType, name="renting_type", create_constraint=True, values_callable=enum_values),
          default=RentingType.MONTHLY,
          nullable=False
     )

     version = Column(Integer, nullable=False)

     # Relationships
     owner = relationship("User", back_populates="properties")
     rental_requests = relationship("RentalRequest", back_populates="property", cascade="all, delete-orphan")
     bookings = relationship("Booking", back_populates="property", cascade="all, delete-orphan")
     tenants = relationship("Tenant", back_populates="property")
     images = relationship("PropertyImage", back_populates="property", cascade="all, delete-orphan")
     maintenance_issues = relationship("MaintenanceIssue", back_populates="property", cascade="all, delete-orphan")

     __mapper_args__ = {"version_id_col": version}

     @property
     def max_guests(self) -> int:
          """Capacity used by request validation: two guests per bedroom."""
          return (self.bedrooms or 0) * 2

     def claim(self, now) -> None:
          """Mark the row changed so the next flush bumps `version`, even if `updated_at` is unchanged."""
          self.updated_at = now
          flag_modified(self, "updated_at")

     def __repr__(self):
          return f"<Property(id={self.id}, name='{self.name}', status='{self.status.value}')>"
