"""Patient and doctor records consumed by the scheduling engine."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class ParticipantStatus(str, Enum):
    """Whether a participant can take part in new appointments."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class Specialty(str, Enum):
    """Medical specialties offered by the office."""

    GENERAL_PRACTICE = "general_practice"
    CARDIOLOGY = "cardiology"
    PEDIATRICS = "pediatrics"
    ORTHOPEDICS = "orthopedics"
    DERMATOLOGY = "dermatology"
    GYNECOLOGY = "gynecology"


_SPECIALTY_LABELS: dict[Specialty, str] = {
    Specialty.GENERAL_PRACTICE: "General Practice",
    Specialty.CARDIOLOGY: "Cardiology",
    Specialty.PEDIATRICS: "Pediatrics",
    Specialty.ORTHOPEDICS: "Orthopedics",
    Specialty.DERMATOLOGY: "Dermatology",
    Specialty.GYNECOLOGY: "Gynecology",
}


def specialty_label(specialty: Specialty) -> str:
    """Display label for a specialty."""
    return _SPECIALTY_LABELS[specialty]


class Patient(BaseModel):
    """A registered patient."""

    model_config = {"validate_assignment": True}

    id: str = Field(..., frozen=True)
    full_name: str
    email: str
    phone: str
    status: ParticipantStatus = ParticipantStatus.ACTIVE
    created_at: datetime = Field(..., frozen=True)

    @property
    def is_active(self) -> bool:
        return self.status == ParticipantStatus.ACTIVE


class Doctor(BaseModel):
    """A practitioner who can be booked."""

    model_config = {"validate_assignment": True}

    id: str = Field(..., frozen=True)
    full_name: str
    license_number: str = Field(..., frozen=True)
    specialty: Specialty
    phone: str
    status: ParticipantStatus = ParticipantStatus.ACTIVE
    created_at: datetime = Field(..., frozen=True)

    @property
    def is_active(self) -> bool:
        return self.status == ParticipantStatus.ACTIVE

    @property
    def specialty_label(self) -> str:
        return specialty_label(self.specialty)
