"""Appointment endpoints."""

from datetime import date

from fastapi import APIRouter, Query, status

from app.dependencies import Appointments
from app.schemas.appointments import (
    AppointmentCancel,
    AppointmentComplete,
    AppointmentCreate,
    AppointmentListResponse,
    AppointmentNotesUpdate,
    AppointmentResponse,
    AppointmentStatus,
)

router = APIRouter()


def _list_response(service: Appointments, items: list) -> AppointmentListResponse:
    return AppointmentListResponse(
        total=len(items),
        items=[service.to_response(item) for item in items],
    )


@router.post(
    "/",
    response_model=AppointmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Schedule new appointment",
)
async def create_appointment(
    data: AppointmentCreate,
    service: Appointments,
) -> AppointmentResponse:
    """
    Schedule a new appointment.

    Args:
        data: Appointment creation data
        service: Appointment service

    Returns:
        Created appointment
    """
    appointment = service.schedule(data.patient_id, data.doctor_id, data.scheduled_at, data.notes)
    return service.to_response(appointment)


@router.get(
    "/",
    response_model=AppointmentListResponse,
    status_code=status.HTTP_200_OK,
    summary="List appointments",
)
async def list_appointments(
    service: Appointments,
    status_filter: AppointmentStatus | None = Query(None, alias="status"),
    on: date | None = Query(None, description="Only appointments scheduled on this day"),
) -> AppointmentListResponse:
    """
    List appointments ordered by time, optionally by day and/or status.

    Args:
        service: Appointment service
        status_filter: Filter by status
        on: Filter by day

    Returns:
        List of appointments
    """
    if on is not None:
        items = service.list_for_date(on)
        if status_filter is not None:
            items = [a for a in items if a.status == status_filter]
    elif status_filter is not None:
        items = service.list_by_status(status_filter)
    else:
        items = service.list_all()
    return _list_response(service, items)


@router.get(
    "/upcoming",
    response_model=AppointmentListResponse,
    status_code=status.HTTP_200_OK,
    summary="List upcoming appointments",
)
async def list_upcoming_appointments(service: Appointments) -> AppointmentListResponse:
    """List scheduled appointments starting within the upcoming window."""
    return _list_response(service, service.list_upcoming())


@router.get(
    "/overdue",
    response_model=AppointmentListResponse,
    status_code=status.HTTP_200_OK,
    summary="List overdue appointments",
)
async def list_overdue_appointments(service: Appointments) -> AppointmentListResponse:
    """List scheduled appointments whose time has passed."""
    return _list_response(service, service.list_overdue())


@router.get(
    "/today/pending",
    response_model=AppointmentListResponse,
    status_code=status.HTTP_200_OK,
    summary="List today's pending appointments",
)
async def list_pending_today(service: Appointments) -> AppointmentListResponse:
    """List today's appointments that are still scheduled."""
    return _list_response(service, service.list_pending_today())


@router.get(
    "/{appointment_id}",
    response_model=AppointmentResponse,
    status_code=status.HTTP_200_OK,
    summary="Get appointment by ID",
)
async def get_appointment(appointment_id: str, service: Appointments) -> AppointmentResponse:
    """
    Get a specific appointment by ID.

    Raises:
        NotFoundException: If appointment not found
    """
    return service.to_response(service.get_appointment(appointment_id))


@router.post(
    "/{appointment_id}/complete",
    response_model=AppointmentResponse,
    status_code=status.HTTP_200_OK,
    summary="Register appointment as attended",
)
async def complete_appointment(
    appointment_id: str,
    data: AppointmentComplete,
    service: Appointments,
) -> AppointmentResponse:
    """
    Mark a scheduled appointment as completed.

    Raises:
        NotFoundException: If appointment not found
        InvalidTransitionException: If appointment is not scheduled
    """
    return service.to_response(service.complete(appointment_id, data.notes))


@router.post(
    "/{appointment_id}/cancel",
    response_model=AppointmentResponse,
    status_code=status.HTTP_200_OK,
    summary="Cancel appointment",
)
async def cancel_appointment(
    appointment_id: str,
    data: AppointmentCancel,
    service: Appointments,
) -> AppointmentResponse:
    """
    Cancel a scheduled appointment.

    Raises:
        NotFoundException: If appointment not found
        InvalidTransitionException: If appointment is not scheduled
        PastAppointmentLockException: If appointment is dated before today
        ReasonRequiredException: If no reason was given
    """
    return service.to_response(service.cancel(appointment_id, data.reason))


@router.patch(
    "/{appointment_id}/notes",
    response_model=AppointmentResponse,
    status_code=status.HTTP_200_OK,
    summary="Update appointment notes",
)
async def update_appointment_notes(
    appointment_id: str,
    data: AppointmentNotesUpdate,
    service: Appointments,
) -> AppointmentResponse:
    """Replace the notes of an appointment in any status."""
    return service.to_response(service.update_notes(appointment_id, data.notes))
