"""SQLAlchemy models backing the schedule store."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, relationship

from .entities import StaffMember


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class StaffRecord(Base):
    """Staff member who can carry recurring assignments and appointments."""

    __tablename__ = "staff"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    active = Column(Boolean, nullable=False, default=True)

    # Relationships
    assignments = relationship("AssignmentRecord", back_populates="staff")
    events = relationship("BookedEventRecord", back_populates="staff")

    def to_entity(self) -> StaffMember:
        return StaffMember(id=self.id, name=self.name, active=bool(self.active))

    def __repr__(self) -> str:
        return f"<StaffRecord(id={self.id}, name='{self.name}', active={self.active})>"


class AssignmentRecord(Base):
    """Recurring weekly pattern anchored on a Monday."""

    __tablename__ = "recurring_assignments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=False)
    week_start = Column(Date, nullable=False)
    schedule_json = Column(Text, nullable=False)  # [{"day": "MONDAY", "shifts": [{"start", "end"}]}]
    service_id = Column(Integer, nullable=True)
    branch_id = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    staff = relationship("StaffRecord", back_populates="assignments")

    def to_wire(self) -> dict:
        return {
            "id": self.id,
            "staffId": self.staff_id,
            "weekStart": self.week_start.isoformat() if self.week_start else None,
            "scheduleJson": self.schedule_json,
            "serviceId": self.service_id,
            "branchId": self.branch_id,
            "notes": self.notes,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:
        return f"<AssignmentRecord(id={self.id}, staff={self.staff_id}, week_start={self.week_start})>"


class BookedEventRecord(Base):
    """Appointment booked against a staff member."""

    __tablename__ = "booked_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=False)
    scheduled_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=True)
    estimated_minutes = Column(Integer, nullable=True)
    label = Column(String(200), nullable=True)

    staff = relationship("StaffRecord", back_populates="events")

    def to_wire(self) -> dict:
        return {
            "id": self.id,
            "staffId": self.staff_id,
            "scheduledTime": self.scheduled_time.isoformat(),
            "endTime": self.end_time.isoformat() if self.end_time else None,
            "estimatedMinutes": self.estimated_minutes,
            "label": self.label,
        }

    def __repr__(self) -> str:
        return f"<BookedEventRecord(id={self.id}, staff={self.staff_id}, at={self.scheduled_time})>"
