"""Appointment domain model and its state machine."""

from datetime import date, datetime, timedelta
from enum import Enum

from pydantic import BaseModel, Field

from app.core.exceptions import (
    InvalidTransitionException,
    PastAppointmentLockException,
    ReasonRequiredException,
)

DEFAULT_UPCOMING_WINDOW = timedelta(hours=2)


class AppointmentStatus(str, Enum):
    """Appointment status enumeration."""

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


_STATUS_LABELS: dict[AppointmentStatus, str] = {
    AppointmentStatus.SCHEDULED: "Scheduled",
    AppointmentStatus.COMPLETED: "Completed",
    AppointmentStatus.CANCELLED: "Cancelled",
}


def status_label(status: AppointmentStatus) -> str:
    """Display label for a status."""
    return _STATUS_LABELS[status]


class Appointment(BaseModel):
    """
    A consultation between one patient and one doctor at a fixed minute.

    Identity, participants and schedule time are frozen once created. Status
    only moves forward through :meth:`complete` or :meth:`cancel`; ``notes``
    may be edited in any state.
    """

    model_config = {"validate_assignment": True}

    id: str = Field(..., frozen=True)
    patient_id: str = Field(..., frozen=True)
    doctor_id: str = Field(..., frozen=True)
    scheduled_at: datetime = Field(..., frozen=True)
    created_at: datetime = Field(..., frozen=True)
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    notes: str = ""
    cancelled_at: datetime | None = None
    cancel_reason: str | None = None
    completed_at: datetime | None = None
    completion_notes: str | None = None

    def __str__(self) -> str:
        return f"{self.id} - {self.scheduled_at:%Y-%m-%d %H:%M} - {status_label(self.status)}"

    def is_on(self, day: date) -> bool:
        """Check whether the appointment falls on ``day``."""
        return self.scheduled_at.date() == day

    def can_cancel(self, now: datetime) -> bool:
        """Scheduled appointments can be cancelled up to the end of their day."""
        if self.status != AppointmentStatus.SCHEDULED:
            return False
        return self.scheduled_at.date() >= now.date()

    def is_upcoming(self, now: datetime, window: timedelta = DEFAULT_UPCOMING_WINDOW) -> bool:
        """Scheduled and starting within ``window`` from ``now``."""
        if self.status != AppointmentStatus.SCHEDULED:
            return False
        remaining = self.scheduled_at - now
        return timedelta(0) < remaining <= window

    def is_overdue(self, now: datetime) -> bool:
        """Scheduled but its time has already passed."""
        return self.status == AppointmentStatus.SCHEDULED and now > self.scheduled_at

    def complete(self, now: datetime, notes: str = "") -> None:
        """
        Register the consultation as attended.

        Raises:
            InvalidTransitionException: If the appointment is not scheduled
        """
        if self.status != AppointmentStatus.SCHEDULED:
            raise InvalidTransitionException(
                f"Appointment {self.id} is {self.status.value} and cannot be completed"
            )
        self.status = AppointmentStatus.COMPLETED
        self.completion_notes = notes
        self.completed_at = now

    def cancel(self, now: datetime, reason: str) -> None:
        """
        Cancel the appointment, recording why and when.

        Raises:
            InvalidTransitionException: If the appointment is not scheduled
            PastAppointmentLockException: If its date is before today
            ReasonRequiredException: If ``reason`` is blank
        """
        if self.status != AppointmentStatus.SCHEDULED:
            raise InvalidTransitionException(
                f"Appointment {self.id} is {self.status.value} and cannot be cancelled"
            )
        if not self.can_cancel(now):
            raise PastAppointmentLockException(
                f"Appointment {self.id} was due on {self.scheduled_at:%Y-%m-%d} "
                "and can no longer be cancelled"
            )
        if not reason or not reason.strip():
            raise ReasonRequiredException()

        self.status = AppointmentStatus.CANCELLED
        self.cancel_reason = reason.strip()
        self.cancelled_at = now
