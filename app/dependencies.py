"""FastAPI dependencies."""

from datetime import timedelta
from typing import Annotated

from fastapi import Depends

from app.config import settings
from app.core.clock import Clock, system_clock
from app.core.identity import IdentityRegistry
from app.services.appointment_service import AppointmentService
from app.services.participant_service import ParticipantDirectory
from app.services.report_service import ReportService
from app.services.schedule_store import ScheduleStore

# Process-wide state; the store is volatile and lives as long as the process
_identity_registry: IdentityRegistry | None = None
_schedule_store: ScheduleStore | None = None
_participant_directory: ParticipantDirectory | None = None


def get_clock() -> Clock:
    """Get the wall clock used for "now"."""
    return system_clock


def get_identity_registry() -> IdentityRegistry:
    """Get or create the identity registry."""
    global _identity_registry

    if _identity_registry is None:
        _identity_registry = IdentityRegistry()

    return _identity_registry


def get_schedule_store() -> ScheduleStore:
    """Get or create the schedule store."""
    global _schedule_store

    if _schedule_store is None:
        _schedule_store = ScheduleStore()

    return _schedule_store


def get_participant_directory() -> ParticipantDirectory:
    """Get or create the participant directory."""
    global _participant_directory

    if _participant_directory is None:
        _participant_directory = ParticipantDirectory(get_identity_registry())

    return _participant_directory


def reset_state() -> None:
    """Drop all in-memory state."""
    global _identity_registry, _schedule_store, _participant_directory

    _identity_registry = None
    _schedule_store = None
    _participant_directory = None


def get_appointment_service(
    store: Annotated[ScheduleStore, Depends(get_schedule_store)],
    directory: Annotated[ParticipantDirectory, Depends(get_participant_directory)],
    registry: Annotated[IdentityRegistry, Depends(get_identity_registry)],
    clock: Annotated[Clock, Depends(get_clock)],
) -> AppointmentService:
    """Build the appointment service over the shared store."""
    return AppointmentService(
        store,
        directory,
        registry,
        clock=clock,
        upcoming_window=timedelta(minutes=settings.upcoming_window_minutes),
    )


def get_report_service(
    store: Annotated[ScheduleStore, Depends(get_schedule_store)],
    directory: Annotated[ParticipantDirectory, Depends(get_participant_directory)],
    clock: Annotated[Clock, Depends(get_clock)],
) -> ReportService:
    """Build the report service over the shared store."""
    return ReportService(
        store,
        directory,
        clock=clock,
        cancellation_report_days=settings.cancellation_report_days,
    )


# Type aliases for dependency injection
Directory = Annotated[ParticipantDirectory, Depends(get_participant_directory)]
Appointments = Annotated[AppointmentService, Depends(get_appointment_service)]
Reports = Annotated[ReportService, Depends(get_report_service)]
