"""Appointment service for business logic."""

from datetime import date, datetime, timedelta

import structlog

from app.core.clock import Clock, system_clock, to_minute
from app.core.exceptions import (
    AppException,
    IneligiblePatientException,
    IneligibleProviderException,
    InvalidInputException,
    NotFoundException,
    PastDateRejectedException,
    SlotConflictException,
)
from app.core.identity import EntityKind, IdentityRegistry
from app.models.appointments import (
    DEFAULT_UPCOMING_WINDOW,
    Appointment,
    AppointmentStatus,
    status_label,
)
from app.schemas.appointments import AppointmentResponse
from app.services.participant_service import ParticipantDirectory
from app.services.schedule_store import ScheduleStore
from app.services.slot_validator import SlotValidator

logger = structlog.get_logger(__name__)


class AppointmentService:
    """
    Service for scheduling appointments and moving them through their lifecycle.

    All writes run inside the store transaction, so the availability check
    and the insert that follows it cannot interleave with another writer.
    """

    def __init__(
        self,
        store: ScheduleStore,
        directory: ParticipantDirectory,
        registry: IdentityRegistry,
        clock: Clock = system_clock,
        upcoming_window: timedelta = DEFAULT_UPCOMING_WINDOW,
    ):
        """Initialize service with its collaborators."""
        self.store = store
        self.directory = directory
        self.registry = registry
        self.clock = clock
        self.upcoming_window = upcoming_window
        self.slots = SlotValidator(store)

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def is_slot_free(self, doctor_id: str, scheduled_at: datetime) -> bool:
        """Check whether the doctor has no scheduled appointment at that minute."""
        doctor = self.directory.get_doctor(doctor_id)
        return self.slots.is_slot_free(doctor.id, scheduled_at)

    def schedule(
        self,
        patient_id: str,
        doctor_id: str,
        scheduled_at: datetime,
        notes: str = "",
    ) -> Appointment:
        """
        Create a new appointment.

        Args:
            patient_id: Patient reference
            doctor_id: Doctor reference
            scheduled_at: Date and time of the consultation
            notes: Free-form notes

        Returns:
            Created appointment

        Raises:
            InvalidInputException: If a reference or the timestamp is missing
            NotFoundException: If a participant does not exist
            IneligiblePatientException: If the patient is inactive
            IneligibleProviderException: If the doctor is inactive
            PastDateRejectedException: If the date is before today
            SlotConflictException: If the doctor is already booked at that minute
        """
        if scheduled_at is None:
            raise InvalidInputException("Appointment date and time are required")
        target = to_minute(scheduled_at)

        # Directory lock too, so a deactivation cannot land between the
        # eligibility check and the insert
        with self.store.transaction(), self.directory.transaction():
            now = self.clock()
            patient = self.directory.get_patient(patient_id)
            doctor = self.directory.get_doctor(doctor_id)
            try:
                if not patient.is_active:
                    raise IneligiblePatientException(
                        f"Patient {patient.id} is inactive and cannot book appointments"
                    )
                if not doctor.is_active:
                    raise IneligibleProviderException(
                        f"Doctor {doctor.id} is inactive and cannot receive appointments"
                    )
                if target.date() < now.date():
                    raise PastDateRejectedException(
                        f"Cannot schedule on {target:%Y-%m-%d}, which is in the past"
                    )
                if not self.slots.is_slot_free(doctor.id, target):
                    raise SlotConflictException(
                        f"{doctor.full_name} already has an appointment at {target:%Y-%m-%d %H:%M}"
                    )
            except AppException as e:
                logger.info(
                    "appointment_rejected",
                    reason=e.__class__.__name__,
                    patient_id=patient.id,
                    doctor_id=doctor.id,
                    scheduled_at=target.isoformat(),
                )
                raise

            appointment = self.store.add(
                Appointment(
                    id=self.registry.allocate(EntityKind.APPOINTMENT),
                    patient_id=patient.id,
                    doctor_id=doctor.id,
                    scheduled_at=target,
                    notes=notes or "",
                    created_at=now,
                )
            )

        logger.info(
            "appointment_scheduled",
            appointment_id=appointment.id,
            patient_id=appointment.patient_id,
            doctor_id=appointment.doctor_id,
            scheduled_at=appointment.scheduled_at.isoformat(),
        )
        return appointment

    def complete(self, appointment_id: str, notes: str = "") -> Appointment:
        """
        Register an appointment as attended. Completion is not date-gated.

        Raises:
            NotFoundException: If the appointment does not exist
            InvalidTransitionException: If it is not scheduled
        """
        self._require_id(appointment_id)
        with self.store.transaction():
            now = self.clock()
            appointment = self.store.apply(
                appointment_id,
                lambda draft: draft.complete(now, notes or ""),
            )

        logger.info("appointment_completed", appointment_id=appointment.id)
        return appointment

    def cancel(self, appointment_id: str, reason: str) -> Appointment:
        """
        Cancel an appointment.

        Raises:
            NotFoundException: If the appointment does not exist
            InvalidTransitionException: If it is not scheduled
            PastAppointmentLockException: If it is dated before today
            ReasonRequiredException: If no reason is given
        """
        self._require_id(appointment_id)
        with self.store.transaction():
            now = self.clock()
            appointment = self.store.apply(
                appointment_id,
                lambda draft: draft.cancel(now, reason),
            )

        logger.info(
            "appointment_cancelled",
            appointment_id=appointment.id,
            reason=appointment.cancel_reason,
        )
        return appointment

    def update_notes(self, appointment_id: str, notes: str) -> Appointment:
        """Replace the free-form notes of an appointment, whatever its status."""
        self._require_id(appointment_id)

        def change(draft: Appointment) -> None:
            draft.notes = notes or ""

        with self.store.transaction():
            appointment = self.store.apply(appointment_id, change)

        logger.info("appointment_notes_updated", appointment_id=appointment.id)
        return appointment

    @staticmethod
    def _require_id(appointment_id: str) -> None:
        if appointment_id is None or not str(appointment_id).strip():
            raise InvalidInputException("Appointment ID must not be blank")

    # ========================================================================
    # Queries
    # ========================================================================

    def get_appointment(self, appointment_id: str) -> Appointment:
        """
        Get appointment by ID (case-insensitive).

        Raises:
            NotFoundException: If appointment not found
        """
        self._require_id(appointment_id)
        appointment = self.store.get(appointment_id)
        if appointment is None:
            raise NotFoundException(f"Appointment {appointment_id} not found")
        return appointment

    def list_all(self) -> list[Appointment]:
        return self.store.list_all()

    def list_for_date(self, day: date | None = None) -> list[Appointment]:
        """Appointments of ``day`` (today by default), earliest first."""
        return self.store.list_for_date(day or self.clock().date())

    def list_for_patient(self, patient_id: str) -> list[Appointment]:
        """Patient history, most recent first."""
        patient = self.directory.get_patient(patient_id)
        return self.store.list_for_patient(patient.id)

    def list_for_doctor(self, doctor_id: str, on: date | None = None) -> list[Appointment]:
        """Doctor agenda, optionally for a single day."""
        doctor = self.directory.get_doctor(doctor_id)
        return self.store.list_for_doctor(doctor.id, on)

    def list_by_status(self, status: AppointmentStatus) -> list[Appointment]:
        return self.store.list_by_status(status)

    def list_upcoming(self) -> list[Appointment]:
        """Scheduled appointments starting within the upcoming window."""
        return self.store.list_upcoming(self.clock(), self.upcoming_window)

    def list_overdue(self) -> list[Appointment]:
        """Scheduled appointments whose time has already passed."""
        return self.store.list_overdue(self.clock())

    def list_pending_today(self) -> list[Appointment]:
        """Appointments of today still waiting to be attended."""
        return self.store.list_pending_for_date(self.clock().date())

    # ========================================================================
    # Presentation
    # ========================================================================

    def to_response(self, appointment: Appointment) -> AppointmentResponse:
        """Build the API representation with names and time-derived flags."""
        now = self.clock()
        return AppointmentResponse(
            **appointment.model_dump(),
            patient_name=self.directory.patient_name(appointment.patient_id),
            doctor_name=self.directory.doctor_name(appointment.doctor_id),
            status_label=status_label(appointment.status),
            can_cancel=appointment.can_cancel(now),
            is_upcoming=appointment.is_upcoming(now, self.upcoming_window),
            is_overdue=appointment.is_overdue(now),
        )
