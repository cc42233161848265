"""Patient endpoints."""

from fastapi import APIRouter, Query, status

from app.dependencies import Appointments, Directory
from app.models.participants import ParticipantStatus
from app.schemas.appointments import AppointmentListResponse
from app.schemas.participants import PatientCreate, PatientResponse, PatientUpdate

router = APIRouter()


@router.post(
    "/",
    response_model=PatientResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register patient",
)
async def create_patient(data: PatientCreate, directory: Directory) -> PatientResponse:
    """Register a new patient."""
    return PatientResponse.model_validate(directory.register_patient(data))


@router.get(
    "/",
    response_model=list[PatientResponse],
    status_code=status.HTTP_200_OK,
    summary="List patients",
)
async def list_patients(
    directory: Directory,
    status_filter: ParticipantStatus | None = Query(None, alias="status"),
    name: str | None = Query(None, description="Case-insensitive name fragment"),
) -> list[PatientResponse]:
    """List patients in registration order."""
    patients = directory.list_patients(status=status_filter, name=name)
    return [PatientResponse.model_validate(p) for p in patients]


@router.get(
    "/{patient_id}",
    response_model=PatientResponse,
    status_code=status.HTTP_200_OK,
    summary="Get patient by ID",
)
async def get_patient(patient_id: str, directory: Directory) -> PatientResponse:
    """Get a specific patient."""
    return PatientResponse.model_validate(directory.get_patient(patient_id))


@router.patch(
    "/{patient_id}",
    response_model=PatientResponse,
    status_code=status.HTTP_200_OK,
    summary="Update patient contact details",
)
async def update_patient(
    patient_id: str,
    data: PatientUpdate,
    directory: Directory,
) -> PatientResponse:
    """
    Update a patient's e-mail and/or phone.

    Raises:
        NotFoundException: If patient not found
        DuplicateParticipantException: If the e-mail belongs to another patient
    """
    return PatientResponse.model_validate(directory.update_patient(patient_id, data))


@router.post(
    "/{patient_id}/activate",
    response_model=PatientResponse,
    status_code=status.HTTP_200_OK,
    summary="Activate patient",
)
async def activate_patient(patient_id: str, directory: Directory) -> PatientResponse:
    """Allow the patient to book appointments again."""
    patient = directory.set_patient_status(patient_id, ParticipantStatus.ACTIVE)
    return PatientResponse.model_validate(patient)


@router.post(
    "/{patient_id}/deactivate",
    response_model=PatientResponse,
    status_code=status.HTTP_200_OK,
    summary="Deactivate patient",
)
async def deactivate_patient(patient_id: str, directory: Directory) -> PatientResponse:
    """Stop the patient from booking new appointments."""
    patient = directory.set_patient_status(patient_id, ParticipantStatus.INACTIVE)
    return PatientResponse.model_validate(patient)


@router.get(
    "/{patient_id}/appointments",
    response_model=AppointmentListResponse,
    status_code=status.HTTP_200_OK,
    summary="Patient appointment history",
)
async def list_patient_appointments(
    patient_id: str,
    service: Appointments,
) -> AppointmentListResponse:
    """List the patient's appointments, most recent first."""
    items = service.list_for_patient(patient_id)
    return AppointmentListResponse(
        total=len(items),
        items=[service.to_response(item) for item in items],
    )
