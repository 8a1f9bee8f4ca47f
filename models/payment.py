# models/payment.py
"""
Payment model - money movements recorded against a booking.

Refunds computed on cancellation are written here with payment_type=REFUND;
settling them with the payment provider happens outside this service.
"""
import enum
from sqlalchemy import Column, Integer, Numeric, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from .base import Base, enum_values


class PaymentType(str, enum.Enum):
     BOOKING_PAYMENT = "BookingPayment"
     REFUND = "Refund"


class PaymentStatus(str, enum.Enum):
     PENDING = "Pending"
     COMPLETED = "Completed"
     FAILED = "Failed"


class Payment(Base):
     __tablename__ = "payments"

     id = Column(Integer, primary_key=True, autoincrement=True)
     booking_id = Column(
          Integer,
          ForeignKey("bookings.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     amount = Column(Numeric(12, 2), nullable=False)
     payment_type = Column(
          Enum(PaymentType, name="payment_type", create_constraint=True, values_callable=enum_values),
          nullable=False
     )
     status = Column(
          Enum(PaymentStatus, name="payment_status", create_constraint=True, values_callable=enum_values),
          default=PaymentStatus.PENDING,
          nullable=False
     )
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     booking = relationship("Booking", back_populates="payments")

     def __repr__(self):
          return f"<Payment(id={self.id}, booking_id={self.booking_id}, type='{self.payment_type.value}', amount={self.amount})>"
