# models/user.py
import enum
from sqlalchemy import Column, Integer, String, DateTime, Enum, func
from sqlalchemy.orm import relationship
from .base import Base, enum_values


class UserRole(str, enum.Enum):
     """Roles recognised by the authorization checks."""
     LANDLORD = "Landlord"
     USER = "User"
     ADMIN = "Admin"


class User(Base):
     """
     User model - central authentication table.
     Landlords own properties; users (tenants) submit rental requests and bookings.
     """
     __tablename__ = "users"

     id = Column(Integer, primary_key=True, autoincrement=True)
     email = Column(String(255), unique=True, nullable=False, index=True)
     password = Column(String(255), nullable=False)
     first_name = Column(String(100), nullable=False)
     last_name = Column(String(100), nullable=False)
     role = Column(
          Enum(UserRole, name="user_role", create_constraint=True, values_callable=enum_values),
          default=UserRole.USER,
          nullable=False,
     )
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     properties = relationship("Property", back_populates="owner")
     rental_requests = relationship("RentalRequest", back_populates="user")
     bookings = relationship("Booking", back_populates="user")
     notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")

     @property
     def full_name(self) -> str:
          return f"{self.first_name} {self.last_name}"

     def __repr__(self):
          return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"
