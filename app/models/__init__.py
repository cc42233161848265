"""Domain models."""

from app.models.appointments import Appointment, AppointmentStatus
from app.models.participants import Doctor, ParticipantStatus, Patient, Specialty

__all__ = [
    "Appointment",
    "AppointmentStatus",
    "Doctor",
    "ParticipantStatus",
    "Patient",
    "Specialty",
]
