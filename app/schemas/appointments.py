"""Appointment schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.models.appointments import AppointmentStatus

__all__ = [
    "AppointmentCancel",
    "AppointmentComplete",
    "AppointmentCreate",
    "AppointmentListResponse",
    "AppointmentNotesUpdate",
    "AppointmentResponse",
    "AppointmentStatus",
    "SlotAvailabilityResponse",
]


class AppointmentCreate(BaseModel):
    """Schema for scheduling a new appointment."""

    patient_id: str = Field(..., min_length=1, max_length=20)
    doctor_id: str = Field(..., min_length=1, max_length=20)
    scheduled_at: datetime
    notes: str = Field(default="", max_length=1000)

    @field_validator("patient_id", "doctor_id")
    @classmethod
    def strip_reference(cls, v: str) -> str:
        """Reject blank participant references."""
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("Reference must not be blank")
        return cleaned


class AppointmentComplete(BaseModel):
    """Schema for registering an appointment as attended."""

    notes: str = Field(default="", max_length=1000)


class AppointmentCancel(BaseModel):
    """Schema for cancelling an appointment."""

    # Blank reasons are rejected by the lifecycle so the error stays domain specific.
    reason: str = Field(default="", max_length=500)


class AppointmentNotesUpdate(BaseModel):
    """Schema for editing free-form notes."""

    notes: str = Field(..., max_length=1000)


class AppointmentResponse(BaseModel):
    """Schema for appointment response."""

    id: str
    patient_id: str
    patient_name: str
    doctor_id: str
    doctor_name: str
    scheduled_at: datetime
    status: AppointmentStatus
    status_label: str
    notes: str
    created_at: datetime
    cancelled_at: datetime | None = None
    cancel_reason: str | None = None
    completed_at: datetime | None = None
    completion_notes: str | None = None
    can_cancel: bool
    is_upcoming: bool
    is_overdue: bool

    model_config = {"from_attributes": True}


class AppointmentListResponse(BaseModel):
    """Schema for appointment list response."""

    total: int
    items: list[AppointmentResponse]


class SlotAvailabilityResponse(BaseModel):
    """Whether a doctor is free at a given minute."""

    doctor_id: str
    scheduled_at: datetime
    available: bool
