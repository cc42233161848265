"""Tests for scheduling rules and the appointment state machine."""

from datetime import datetime, timedelta

import pytest

from app.core.exceptions import (
    IneligiblePatientException,
    IneligibleProviderException,
    InvalidInputException,
    InvalidTransitionException,
    NotFoundException,
    PastAppointmentLockException,
    PastDateRejectedException,
    ReasonRequiredException,
    SlotConflictException,
)
from app.core.identity import EntityKind
from app.models.appointments import AppointmentStatus
from app.models.participants import ParticipantStatus

SLOT = datetime(2025, 3, 10, 9, 0)


# ============================================================================
# Scheduling
# ============================================================================


def test_schedule_creates_scheduled_appointment(service, patient, doctor, clock):
    """Test a successful booking."""
    appointment = service.schedule(patient.id, doctor.id, SLOT, "First visit")

    assert appointment.id == "CON-001"
    assert appointment.status == AppointmentStatus.SCHEDULED
    assert appointment.patient_id == patient.id
    assert appointment.doctor_id == doctor.id
    assert appointment.scheduled_at == SLOT
    assert appointment.notes == "First visit"
    assert appointment.created_at == clock.now
    assert appointment.cancelled_at is None
    assert appointment.completed_at is None


def test_schedule_truncates_to_minute(service, patient, doctor):
    """Test that seconds do not create distinct slots."""
    first = service.schedule(patient.id, doctor.id, SLOT.replace(second=42))

    assert first.scheduled_at == SLOT
    with pytest.raises(SlotConflictException):
        service.schedule(patient.id, doctor.id, SLOT.replace(second=5))


def test_schedule_ids_are_sequential(service, patient, doctor):
    """Test identifiers increase with each booking."""
    ids = [service.schedule(patient.id, doctor.id, SLOT + timedelta(hours=i)).id for i in range(3)]

    assert ids == ["CON-001", "CON-002", "CON-003"]


def test_schedule_same_slot_conflicts_until_cancelled(service, patient, other_patient, doctor):
    """Test the double-booking scenario end to end."""
    first = service.schedule(patient.id, doctor.id, SLOT)

    with pytest.raises(SlotConflictException):
        service.schedule(other_patient.id, doctor.id, SLOT)
    assert service.is_slot_free(doctor.id, SLOT) is False

    cancelled = service.cancel(first.id, "patient request")
    assert cancelled.status == AppointmentStatus.CANCELLED
    assert cancelled.cancel_reason == "patient request"
    assert service.is_slot_free(doctor.id, SLOT) is True

    rebooked = service.schedule(other_patient.id, doctor.id, SLOT)
    assert rebooked.status == AppointmentStatus.SCHEDULED
    assert rebooked.id == "CON-002"


def test_completed_appointment_frees_slot(service, patient, other_patient, doctor):
    """Test that only scheduled appointments occupy a slot."""
    first = service.schedule(patient.id, doctor.id, SLOT)
    service.complete(first.id)

    assert service.is_slot_free(doctor.id, SLOT) is True
    service.schedule(other_patient.id, doctor.id, SLOT)


def test_same_time_with_other_doctor_is_allowed(service, patient, other_patient, doctor, other_doctor):
    """Test that slots are per doctor."""
    service.schedule(patient.id, doctor.id, SLOT)
    second = service.schedule(other_patient.id, other_doctor.id, SLOT)

    assert second.doctor_id == other_doctor.id


def test_schedule_inactive_patient(service, directory, patient, doctor):
    """Test inactive patients cannot book."""
    directory.set_patient_status(patient.id, ParticipantStatus.INACTIVE)

    with pytest.raises(IneligiblePatientException):
        service.schedule(patient.id, doctor.id, SLOT)


def test_schedule_inactive_doctor(service, directory, patient, doctor):
    """Test inactive doctors cannot be booked."""
    directory.set_doctor_status(doctor.id, ParticipantStatus.INACTIVE)

    with pytest.raises(IneligibleProviderException):
        service.schedule(patient.id, doctor.id, SLOT)


def test_patient_eligibility_checked_before_doctor(service, directory, patient, doctor):
    """Test the order of precondition checks."""
    directory.set_patient_status(patient.id, ParticipantStatus.INACTIVE)
    directory.set_doctor_status(doctor.id, ParticipantStatus.INACTIVE)

    with pytest.raises(IneligiblePatientException):
        service.schedule(patient.id, doctor.id, SLOT - timedelta(days=3))


def test_eligibility_is_read_live(service, directory, patient, doctor):
    """Test reactivated patients can book again."""
    directory.set_patient_status(patient.id, ParticipantStatus.INACTIVE)
    with pytest.raises(IneligiblePatientException):
        service.schedule(patient.id, doctor.id, SLOT)

    directory.set_patient_status(patient.id, ParticipantStatus.ACTIVE)
    assert service.schedule(patient.id, doctor.id, SLOT).id == "CON-001"


def test_deactivation_during_schedule_is_seen(service, store, directory, patient, doctor, clock):
    """Test a doctor deactivated once the booking has started cannot be booked."""
    # "now" is read first inside the transaction, so this lands mid-booking
    def deactivating_clock():
        directory.set_doctor_status(doctor.id, ParticipantStatus.INACTIVE)
        return clock.now

    service.clock = deactivating_clock

    with pytest.raises(IneligibleProviderException):
        service.schedule(patient.id, doctor.id, SLOT)
    assert store.count() == 0


def test_schedule_past_date_rejected(service, patient, doctor):
    """Test bookings on a previous day are rejected."""
    with pytest.raises(PastDateRejectedException):
        service.schedule(patient.id, doctor.id, datetime(2025, 3, 9, 15, 0))


def test_schedule_earlier_today_is_allowed(service, patient, doctor, clock):
    """Test the past-date rule compares dates, not times."""
    earlier = clock.now - timedelta(hours=1)

    assert service.schedule(patient.id, doctor.id, earlier).scheduled_at == earlier


def test_past_date_checked_before_conflict(service, patient, doctor, clock):
    """Test a past date wins over a slot conflict."""
    service.schedule(patient.id, doctor.id, SLOT)
    clock.advance(days=1)

    with pytest.raises(PastDateRejectedException):
        service.schedule(patient.id, doctor.id, SLOT)


def test_failed_schedule_leaves_store_unchanged(service, store, registry, patient, doctor):
    """Test rejected bookings have no side effects."""
    service.schedule(patient.id, doctor.id, SLOT)

    with pytest.raises(SlotConflictException):
        service.schedule(patient.id, doctor.id, SLOT)

    assert store.count() == 1
    assert registry.peek(EntityKind.APPOINTMENT) == "CON-002"
    assert service.schedule(patient.id, doctor.id, SLOT + timedelta(hours=1)).id == "CON-002"


def test_schedule_unknown_participants(service, patient, doctor):
    """Test unknown references are rejected before any rule."""
    with pytest.raises(NotFoundException):
        service.schedule("PAC-999", doctor.id, SLOT)
    with pytest.raises(NotFoundException):
        service.schedule(patient.id, "MED-999", SLOT)


@pytest.mark.parametrize("reference", ["", "   ", None])
def test_schedule_blank_reference(service, doctor, reference):
    """Test blank references are invalid input."""
    with pytest.raises(InvalidInputException):
        service.schedule(reference, doctor.id, SLOT)


def test_schedule_requires_timestamp(service, patient, doctor):
    """Test a missing timestamp is invalid input."""
    with pytest.raises(InvalidInputException):
        service.schedule(patient.id, doctor.id, None)


def test_references_are_case_insensitive(service, patient, doctor):
    """Test lowercase identifiers resolve to the same participants."""
    appointment = service.schedule(patient.id.lower(), doctor.id.lower(), SLOT)

    assert appointment.patient_id == patient.id
    assert appointment.doctor_id == doctor.id


# ============================================================================
# Transitions
# ============================================================================


def test_complete_sets_fields(service, patient, doctor, clock):
    """Test completing an appointment."""
    appointment = service.schedule(patient.id, doctor.id, SLOT)
    clock.advance(hours=2)

    completed = service.complete(appointment.id, "All good")

    assert completed.status == AppointmentStatus.COMPLETED
    assert completed.completion_notes == "All good"
    assert completed.completed_at == clock.now
    assert completed.cancelled_at is None


@pytest.mark.parametrize("first", ["complete", "cancel"])
@pytest.mark.parametrize("second", ["complete", "cancel"])
def test_terminal_states_reject_transitions(service, patient, doctor, first, second):
    """Test no transition leaves a terminal state."""
    appointment = service.schedule(patient.id, doctor.id, SLOT)
    getattr(service, first)(appointment.id, "reason")

    with pytest.raises(InvalidTransitionException):
        getattr(service, second)(appointment.id, "reason")


def test_cancel_terminal_with_blank_reason_is_invalid_transition(service, patient, doctor):
    """Test status is checked before the reason."""
    appointment = service.schedule(patient.id, doctor.id, SLOT)
    service.complete(appointment.id)

    with pytest.raises(InvalidTransitionException):
        service.cancel(appointment.id, "")


def test_cancel_requires_reason(service, patient, doctor):
    """Test cancellations must state a reason."""
    appointment = service.schedule(patient.id, doctor.id, SLOT)

    for reason in ["", "   ", None]:
        with pytest.raises(ReasonRequiredException):
            service.cancel(appointment.id, reason)

    assert service.get_appointment(appointment.id).status == AppointmentStatus.SCHEDULED


def test_cancel_strips_reason(service, patient, doctor, clock):
    """Test the stored reason and timestamp."""
    appointment = service.schedule(patient.id, doctor.id, SLOT)

    cancelled = service.cancel(appointment.id, "  Doctor unavailable  ")

    assert cancelled.cancel_reason == "Doctor unavailable"
    assert cancelled.cancelled_at == clock.now


def test_yesterday_appointment_locked_but_completable(service, patient, doctor, clock):
    """Test past appointments cannot be cancelled but can be completed."""
    appointment = service.schedule(patient.id, doctor.id, SLOT)
    clock.advance(days=1)

    with pytest.raises(PastAppointmentLockException):
        service.cancel(appointment.id, "too late")
    with pytest.raises(PastAppointmentLockException):
        service.cancel(appointment.id, "")

    completed = service.complete(appointment.id)
    assert completed.status == AppointmentStatus.COMPLETED


def test_cancel_later_on_same_day_is_allowed(service, patient, doctor, clock):
    """Test the cancellation lock is date based."""
    appointment = service.schedule(patient.id, doctor.id, SLOT)
    clock.advance(hours=10)

    assert service.cancel(appointment.id, "no show").status == AppointmentStatus.CANCELLED


def test_transitions_on_unknown_id(service):
    """Test unknown appointments."""
    with pytest.raises(NotFoundException):
        service.complete("CON-404")
    with pytest.raises(NotFoundException):
        service.cancel("CON-404", "reason")
    with pytest.raises(NotFoundException):
        service.update_notes("CON-404", "x")


def test_transition_by_lowercase_id(service, patient, doctor):
    """Test identifiers are matched case-insensitively."""
    appointment = service.schedule(patient.id, doctor.id, SLOT)

    assert service.cancel(appointment.id.lower(), "reason").id == appointment.id


def test_notes_editable_in_any_state(service, patient, doctor):
    """Test notes can change after completion."""
    appointment = service.schedule(patient.id, doctor.id, SLOT, "before")
    service.complete(appointment.id)

    updated = service.update_notes(appointment.id, "after")

    assert updated.notes == "after"
    assert updated.status == AppointmentStatus.COMPLETED


def test_returned_appointments_are_snapshots(service, patient, doctor):
    """Test mutating a returned object does not touch the store."""
    appointment = service.schedule(patient.id, doctor.id, SLOT)
    appointment.notes = "changed locally"

    assert service.get_appointment(appointment.id).notes == ""


def test_identity_fields_are_frozen(service, patient, doctor):
    """Test immutable fields reject assignment."""
    appointment = service.schedule(patient.id, doctor.id, SLOT)

    with pytest.raises(ValueError):
        appointment.scheduled_at = SLOT + timedelta(hours=1)


# ============================================================================
# Derived predicates
# ============================================================================


def test_upcoming_window(service, patient, doctor, clock):
    """Test appointments within two hours are upcoming."""
    soon = service.schedule(patient.id, doctor.id, clock.now + timedelta(hours=2))
    later = service.schedule(patient.id, doctor.id, clock.now + timedelta(hours=2, minutes=1))
    right_now = service.schedule(patient.id, doctor.id, clock.now)

    upcoming = [a.id for a in service.list_upcoming()]

    assert upcoming == [soon.id]
    assert later.id not in upcoming
    assert right_now.id not in upcoming


def test_overdue(service, patient, doctor, clock):
    """Test scheduled appointments in the past are overdue."""
    first = service.schedule(patient.id, doctor.id, SLOT)
    second = service.schedule(patient.id, doctor.id, SLOT + timedelta(hours=1))
    done = service.schedule(patient.id, doctor.id, SLOT + timedelta(minutes=30))
    service.complete(done.id)
    clock.advance(hours=3)

    assert [a.id for a in service.list_overdue()] == [first.id, second.id]


def test_to_response_includes_names_and_flags(service, patient, doctor, clock):
    """Test the API representation."""
    appointment = service.schedule(patient.id, doctor.id, clock.now + timedelta(hours=1))

    response = service.to_response(appointment)

    assert response.patient_name == "Maria Silva"
    assert response.doctor_name == "Dr. Carlos Mendes"
    assert response.status_label == "Scheduled"
    assert response.can_cancel is True
    assert response.is_upcoming is True
    assert response.is_overdue is False
