"""Doctor endpoints."""

from datetime import date, datetime

from fastapi import APIRouter, Query, status

from app.core.clock import to_minute
from app.dependencies import Appointments, Directory
from app.models.participants import ParticipantStatus, Specialty
from app.schemas.appointments import AppointmentListResponse, SlotAvailabilityResponse
from app.schemas.participants import DoctorCreate, DoctorResponse, DoctorUpdate

router = APIRouter()


@router.post(
    "/",
    response_model=DoctorResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register doctor",
)
async def create_doctor(data: DoctorCreate, directory: Directory) -> DoctorResponse:
    """Register a new doctor."""
    return DoctorResponse.model_validate(directory.register_doctor(data))


@router.get(
    "/",
    response_model=list[DoctorResponse],
    status_code=status.HTTP_200_OK,
    summary="List doctors",
)
async def list_doctors(
    directory: Directory,
    status_filter: ParticipantStatus | None = Query(None, alias="status"),
    specialty: Specialty | None = Query(None),
) -> list[DoctorResponse]:
    """List doctors in registration order."""
    doctors = directory.list_doctors(status=status_filter, specialty=specialty)
    return [DoctorResponse.model_validate(d) for d in doctors]


@router.get(
    "/{doctor_id}",
    response_model=DoctorResponse,
    status_code=status.HTTP_200_OK,
    summary="Get doctor by ID",
)
async def get_doctor(doctor_id: str, directory: Directory) -> DoctorResponse:
    """Get a specific doctor."""
    return DoctorResponse.model_validate(directory.get_doctor(doctor_id))


@router.patch(
    "/{doctor_id}",
    response_model=DoctorResponse,
    status_code=status.HTTP_200_OK,
    summary="Update doctor",
)
async def update_doctor(doctor_id: str, data: DoctorUpdate, directory: Directory) -> DoctorResponse:
    """Update a doctor's specialty and/or phone."""
    return DoctorResponse.model_validate(directory.update_doctor(doctor_id, data))


@router.post(
    "/{doctor_id}/activate",
    response_model=DoctorResponse,
    status_code=status.HTTP_200_OK,
    summary="Activate doctor",
)
async def activate_doctor(doctor_id: str, directory: Directory) -> DoctorResponse:
    """Allow the doctor to receive appointments again."""
    doctor = directory.set_doctor_status(doctor_id, ParticipantStatus.ACTIVE)
    return DoctorResponse.model_validate(doctor)


@router.post(
    "/{doctor_id}/deactivate",
    response_model=DoctorResponse,
    status_code=status.HTTP_200_OK,
    summary="Deactivate doctor",
)
async def deactivate_doctor(doctor_id: str, directory: Directory) -> DoctorResponse:
    """Stop the doctor from receiving new appointments."""
    doctor = directory.set_doctor_status(doctor_id, ParticipantStatus.INACTIVE)
    return DoctorResponse.model_validate(doctor)


@router.get(
    "/{doctor_id}/appointments",
    response_model=AppointmentListResponse,
    status_code=status.HTTP_200_OK,
    summary="Doctor agenda",
)
async def list_doctor_appointments(
    doctor_id: str,
    service: Appointments,
    on: date | None = Query(None, description="Only appointments on this day"),
) -> AppointmentListResponse:
    """List the doctor's appointments ordered by time."""
    items = service.list_for_doctor(doctor_id, on)
    return AppointmentListResponse(
        total=len(items),
        items=[service.to_response(item) for item in items],
    )


@router.get(
    "/{doctor_id}/availability",
    response_model=SlotAvailabilityResponse,
    status_code=status.HTTP_200_OK,
    summary="Check slot availability",
)
async def check_availability(
    doctor_id: str,
    service: Appointments,
    at: datetime = Query(..., description="Date and time to check"),
) -> SlotAvailabilityResponse:
    """Tell whether the doctor is free at the given minute."""
    return SlotAvailabilityResponse(
        doctor_id=doctor_id.upper(),
        scheduled_at=to_minute(at),
        available=service.is_slot_free(doctor_id, at),
    )
