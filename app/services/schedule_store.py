"""In-memory appointment store and its query surface."""

from collections import defaultdict
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from datetime import date, datetime, timedelta
from threading import RLock

from app.core.exceptions import ConflictException, NotFoundException
from app.core.identity import IdentityRegistry
from app.models.appointments import DEFAULT_UPCOMING_WINDOW, Appointment, AppointmentStatus


def _by_time(appointments: Iterable[Appointment], descending: bool = False) -> list[Appointment]:
    # sorted() is stable, also with reverse=True, so equal timestamps keep insertion order
    return sorted(appointments, key=lambda a: a.scheduled_at, reverse=descending)


class ScheduleStore:
    """
    Insert-only collection of appointments.

    Appointments are kept in insertion order and indexed by patient and doctor,
    which doubles as each participant's appointment history. Every read
    returns fresh copies, so callers can sort or mutate results freely without
    touching stored state. Writers replace a stored appointment in one step
    under the store lock, so readers never observe a half-applied transition.
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._order: list[str] = []
        self._by_id: dict[str, Appointment] = {}
        self._by_patient: dict[str, list[str]] = defaultdict(list)
        self._by_doctor: dict[str, list[str]] = defaultdict(list)
        self._lock = RLock()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Hold the store lock across a check-then-write sequence."""
        with self._lock:
            yield

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add(self, appointment: Appointment) -> Appointment:
        """
        Insert a new appointment.

        Raises:
            ConflictException: If the identifier is already present
        """
        key = IdentityRegistry.normalize(appointment.id)
        with self._lock:
            if key in self._by_id:
                raise ConflictException(f"Appointment {appointment.id} already exists")
            stored = appointment.model_copy()
            self._by_id[key] = stored
            self._order.append(key)
            self._by_patient[IdentityRegistry.normalize(stored.patient_id)].append(key)
            self._by_doctor[IdentityRegistry.normalize(stored.doctor_id)].append(key)
        return stored.model_copy()

    def apply(self, appointment_id: str, change: Callable[[Appointment], None]) -> Appointment:
        """
        Run ``change`` against a draft of the stored appointment and commit it.

        If ``change`` raises, the stored appointment is left untouched.

        Raises:
            NotFoundException: If no appointment has that identifier
        """
        key = IdentityRegistry.normalize(appointment_id)
        with self._lock:
            current = self._by_id.get(key)
            if current is None:
                raise NotFoundException(f"Appointment {appointment_id} not found")
            draft = current.model_copy()
            change(draft)
            self._by_id[key] = draft
        return draft.model_copy()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, appointment_id: str) -> Appointment | None:
        """Look up an appointment by identifier, ignoring case."""
        if not appointment_id or not appointment_id.strip():
            return None
        with self._lock:
            found = self._by_id.get(IdentityRegistry.normalize(appointment_id))
            return found.model_copy() if found else None

    def count(self) -> int:
        """Total number of appointments ever stored."""
        with self._lock:
            return len(self._order)

    def _snapshot(self, keys: Iterable[str] | None = None) -> list[Appointment]:
        with self._lock:
            keys = self._order if keys is None else keys
            return [self._by_id[key].model_copy() for key in keys]

    def list_all(self) -> list[Appointment]:
        """All appointments ordered by time."""
        return _by_time(self._snapshot())

    def list_for_date(self, day: date) -> list[Appointment]:
        """Appointments scheduled on ``day``, earliest first."""
        return _by_time(a for a in self._snapshot() if a.is_on(day))

    def list_for_patient(self, patient_id: str) -> list[Appointment]:
        """A patient's appointment history, most recent first."""
        with self._lock:
            keys = list(self._by_patient.get(IdentityRegistry.normalize(patient_id), []))
        return _by_time(self._snapshot(keys), descending=True)

    def list_for_doctor(self, doctor_id: str, on: date | None = None) -> list[Appointment]:
        """A doctor's agenda, optionally restricted to one day, earliest first."""
        with self._lock:
            keys = list(self._by_doctor.get(IdentityRegistry.normalize(doctor_id), []))
        items = self._snapshot(keys)
        if on is not None:
            items = [a for a in items if a.is_on(on)]
        return _by_time(items)

    def list_by_status(self, status: AppointmentStatus) -> list[Appointment]:
        """Appointments in ``status``, earliest first."""
        return _by_time(a for a in self._snapshot() if a.status == status)

    def list_upcoming(
        self,
        now: datetime,
        window: timedelta = DEFAULT_UPCOMING_WINDOW,
    ) -> list[Appointment]:
        """Scheduled appointments starting within ``window`` of ``now``."""
        return _by_time(a for a in self._snapshot() if a.is_upcoming(now, window))

    def list_overdue(self, now: datetime) -> list[Appointment]:
        """Scheduled appointments whose time has passed."""
        return _by_time(a for a in self._snapshot() if a.is_overdue(now))

    def list_cancelled(self) -> list[Appointment]:
        """Cancelled appointments in insertion order."""
        return [a for a in self._snapshot() if a.status == AppointmentStatus.CANCELLED]

    def list_pending_for_date(self, day: date) -> list[Appointment]:
        """Still-scheduled appointments on ``day``."""
        return [a for a in self.list_for_date(day) if a.status == AppointmentStatus.SCHEDULED]
