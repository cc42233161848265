"""Double-booking check for doctors."""

from datetime import datetime

from app.core.clock import to_minute
from app.models.appointments import AppointmentStatus
from app.services.schedule_store import ScheduleStore


class SlotValidator:
    """
    Decides whether a doctor is free at a given minute.

    Only scheduled appointments occupy a slot. Slots are single minutes: two
    appointments conflict when their timestamps are equal, durations are not
    modelled. Results are never cached; callers that act on the answer must
    hold the store transaction.
    """

    def __init__(self, store: ScheduleStore):
        """Initialize validator over ``store``."""
        self.store = store

    def is_slot_free(self, doctor_id: str, scheduled_at: datetime) -> bool:
        """Return False if the doctor already has a scheduled appointment at that minute."""
        target = to_minute(scheduled_at)
        return not any(
            appointment.status == AppointmentStatus.SCHEDULED
            and appointment.scheduled_at == target
            for appointment in self.store.list_for_doctor(doctor_id)
        )
