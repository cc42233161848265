"""Patient and doctor schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.participants import ParticipantStatus, Specialty


def _validate_phone(v: str) -> str:
    # Remove common separators
    cleaned = v.replace("-", "").replace(" ", "").replace("(", "").replace(")", "").replace("+", "")
    if not cleaned.isdigit():
        raise ValueError("Phone number must contain only digits and separators")
    if len(cleaned) < 7:
        raise ValueError("Phone number must have at least 7 digits")
    return v.strip()


# ============================================================================
# Patient Schemas
# ============================================================================


class PatientCreate(BaseModel):
    """Schema for registering a patient."""

    full_name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: str = Field(..., min_length=7, max_length=20)

    @field_validator("full_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject blank names."""
        if not v.strip():
            raise ValueError("Name must not be blank")
        return v.strip()

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        """Validate phone number format."""
        return _validate_phone(v)


class PatientUpdate(BaseModel):
    """Schema for updating a patient's contact details."""

    email: EmailStr | None = None
    phone: str | None = Field(None, min_length=7, max_length=20)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str | None) -> str | None:
        """Validate phone number format."""
        return _validate_phone(v) if v is not None else v


class PatientResponse(BaseModel):
    """Patient response schema."""

    id: str
    full_name: str
    email: str
    phone: str
    status: ParticipantStatus
    created_at: datetime

    model_config = {"from_attributes": True}


# ============================================================================
# Doctor Schemas
# ============================================================================


class DoctorCreate(BaseModel):
    """Schema for registering a doctor."""

    full_name: str = Field(..., min_length=1, max_length=200)
    license_number: str = Field(..., min_length=1, max_length=100)
    specialty: Specialty
    phone: str = Field(..., min_length=7, max_length=20)

    @field_validator("full_name", "license_number")
    @classmethod
    def validate_text(cls, v: str) -> str:
        """Reject blank values."""
        if not v.strip():
            raise ValueError("Value must not be blank")
        return v.strip()

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        """Validate phone number format."""
        return _validate_phone(v)


class DoctorUpdate(BaseModel):
    """Schema for updating a doctor."""

    specialty: Specialty | None = None
    phone: str | None = Field(None, min_length=7, max_length=20)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str | None) -> str | None:
        """Validate phone number format."""
        return _validate_phone(v) if v is not None else v


class DoctorResponse(BaseModel):
    """Doctor response schema."""

    id: str
    full_name: str
    license_number: str
    specialty: Specialty
    specialty_label: str
    phone: str
    status: ParticipantStatus
    created_at: datetime

    model_config = {"from_attributes": True}
