# models/booking.py
import enum
from sqlalchemy import Column, Integer, String, Numeric, Date, Text, ForeignKey, Enum
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, enum_values


class BookingStatus(str, enum.Enum):
     """Booking status; moves forward only (see ALLOWED_TRANSITIONS)."""
     UPCOMING = "Upcoming"
     ACTIVE = "Active"
     COMPLETED = "Completed"
     CANCELLED = "Cancelled"


ALLOWED_TRANSITIONS = {
     BookingStatus.UPCOMING: {BookingStatus.ACTIVE, BookingStatus.CANCELLED},
     BookingStatus.ACTIVE: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
     BookingStatus.COMPLETED: set(),
     BookingStatus.CANCELLED: set(),
}

# Bookings in these states hold their dates against new claims
BLOCKING_STATUSES = (BookingStatus.UPCOMING, BookingStatus.ACTIVE)


class Booking(TimestampMixin, Base):
     """
     Booking model - a confirmed stay (daily, or a confirmed monthly lease)
     with a committed date range [start_date, end_date) and price.
     """
     __tablename__ = "bookings"

     id = Column(Integer, primary_key=True, autoincrement=True)

     # Foreign keys
     property_id = Column(
          Integer,
          ForeignKey("properties.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

     # Stay
     start_date = Column(Date, nullable=False, index=True)
     end_date = Column(Date, nullable=False, index=True)
     number_of_guests = Column(Integer, default=1, nullable=False)
     special_requests = Column(Text, nullable=True)

     # Money
     total_price = Column(Numeric(12, 2), nullable=False)
     payment_status = Column(String(50), default="Pending", nullable=False)

     status = Column(
          Enum(BookingStatus, name="booking_status", create_constraint=True, values_callable=enum_values),
          default=BookingStatus.UPCOMING,
          nullable=False,
          index=True
     )

     version = Column(Integer, nullable=False)

     # defined before the `property` relationship, which shadows the builtin below
     @property
     def is_terminal(self) -> bool:
          return not ALLOWED_TRANSITIONS[self.status]

     def can_transition_to(self, new_status: BookingStatus) -> bool:
          return new_status in ALLOWED_TRANSITIONS[self.status]

     # Relationships
     property = relationship("Property", back_populates="bookings")
     user = relationship("User", back_populates="bookings")
     payments = relationship("Payment", back_populates="booking", cascade="all, delete-orphan")

     __mapper_args__ = {"version_id_col": version}

     def __repr__(self):
          return (
               f"<Booking(id={self.id}, property_id={self.property_id}, "
               f"{self.start_date}..{self.end_date}, status='{self.status.value}')>"
          )
