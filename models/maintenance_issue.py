# models/maintenance_issue.py
import enum
from sqlalchemy import Column, Integer, String, Numeric, Text, Boolean, DateTime, ForeignKey, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, enum_values


class MaintenancePriority(str, enum.Enum):
     LOW = "Low"
     MEDIUM = "Medium"
     HIGH = "High"
     EMERGENCY = "Emergency"


class MaintenanceStatus(str, enum.Enum):
     PENDING = "Pending"
     IN_PROGRESS = "InProgress"
     COMPLETED = "Completed"
     CANCELLED = "Cancelled"


MAINTENANCE_TRANSITIONS = {
     MaintenanceStatus.PENDING: {
          MaintenanceStatus.IN_PROGRESS, MaintenanceStatus.COMPLETED, MaintenanceStatus.CANCELLED
     },
     MaintenanceStatus.IN_PROGRESS: {MaintenanceStatus.COMPLETED, MaintenanceStatus.CANCELLED},
     MaintenanceStatus.COMPLETED: set(),
     MaintenanceStatus.CANCELLED: set(),
}


class MaintenanceIssue(TimestampMixin, Base):
     """
     MaintenanceIssue model - a repair reported on a property.
     Reported by the owner or by one of its active tenants (a tenant complaint),
     optionally assigned to a user who carries out the work.
     """
     __tablename__ = "maintenance_issues"
     __table_args__ = (
          CheckConstraint("cost IS NULL OR cost >= 0", name="ck_maintenance_issues_cost_non_negative"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     property_id = Column(Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True)
     reported_by_user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
     assigned_to_user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

     title = Column(String(200), nullable=False)
     description = Column(Text, nullable=True)
     category = Column(String(100), nullable=True)
     priority = Column(
          Enum(MaintenancePriority, name="maintenance_priority", create_constraint=True, values_callable=enum_values),
          default=MaintenancePriority.MEDIUM,
          nullable=False
     )
     status = Column(
          Enum(MaintenanceStatus, name="maintenance_status", create_constraint=True, values_callable=enum_values),
          default=MaintenanceStatus.PENDING,
          nullable=False,
          index=True
     )
     is_tenant_complaint = Column(Boolean, default=False, nullable=False)

     # Resolution
     cost = Column(Numeric(12, 2), nullable=True)
     resolved_at = Column(DateTime, nullable=True)
     resolution_notes = Column(String(500), nullable=True)

     # defined before the `property` relationship, which shadows the builtin below
     @property
     def is_closed(self) -> bool:
          return not MAINTENANCE_TRANSITIONS[self.status]

     def can_transition_to(self, status: MaintenanceStatus) -> bool:
          return status in MAINTENANCE_TRANSITIONS[self.status]

     # Relationships
     property = relationship("Property", back_populates="maintenance_issues")
     reported_by = relationship("User", foreign_keys=[reported_by_user_id])
     assigned_to = relationship("User", foreign_keys=[assigned_to_user_id])

     def __repr__(self):
          return f"<MaintenanceIssue(id={self.id}, property_id={self.property_id}, status='{self.status.value}')>"
