from collections.abc import AsyncGenerator
from datetime import datetime, timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core.identity import IdentityRegistry
from app.dependencies import (
    get_clock,
    get_identity_registry,
    get_participant_directory,
    get_schedule_store,
)
from app.main import app
from app.models.participants import Specialty
from app.schemas.participants import DoctorCreate, PatientCreate
from app.services.appointment_service import AppointmentService
from app.services.participant_service import ParticipantDirectory
from app.services.report_service import ReportService
from app.services.schedule_store import ScheduleStore

# Monday morning; every test starts here unless it moves the clock
NOW = datetime(2025, 3, 10, 8, 0)


class FrozenClock:
    """Clock that only moves when a test moves it."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(NOW)


@pytest.fixture
def registry() -> IdentityRegistry:
    return IdentityRegistry()


@pytest.fixture
def store() -> ScheduleStore:
    return ScheduleStore()


@pytest.fixture
def directory(registry: IdentityRegistry, clock: FrozenClock) -> ParticipantDirectory:
    return ParticipantDirectory(registry, clock=clock)


@pytest.fixture
def service(
    store: ScheduleStore,
    directory: ParticipantDirectory,
    registry: IdentityRegistry,
    clock: FrozenClock,
) -> AppointmentService:
    return AppointmentService(store, directory, registry, clock=clock)


@pytest.fixture
def reports(store: ScheduleStore, directory: ParticipantDirectory, clock: FrozenClock) -> ReportService:
    return ReportService(store, directory, clock=clock)


@pytest.fixture
def patient(directory: ParticipantDirectory):
    """Active patient PAC-001."""
    return directory.register_patient(
        PatientCreate(full_name="Maria Silva", email="maria@example.com", phone="(47) 99999-1111")
    )


@pytest.fixture
def other_patient(directory: ParticipantDirectory):
    """Active patient PAC-002."""
    return directory.register_patient(
        PatientCreate(full_name="Joao Pedro", email="joao@example.com", phone="(47) 99999-2222")
    )


@pytest.fixture
def doctor(directory: ParticipantDirectory):
    """Active cardiologist MED-001."""
    return directory.register_doctor(
        DoctorCreate(
            full_name="Dr. Carlos Mendes",
            license_number="12345-SC",
            specialty=Specialty.CARDIOLOGY,
            phone="(47) 3333-1111",
        )
    )


@pytest.fixture
def other_doctor(directory: ParticipantDirectory):
    """Active pediatrician MED-002."""
    return directory.register_doctor(
        DoctorCreate(
            full_name="Dra. Juliana Ribeiro",
            license_number="23456-SC",
            specialty=Specialty.PEDIATRICS,
            phone="(47) 3333-2222",
        )
    )


@pytest_asyncio.fixture
async def client(
    store: ScheduleStore,
    directory: ParticipantDirectory,
    registry: IdentityRegistry,
    clock: FrozenClock,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client bound to the per-test state."""
    app.dependency_overrides[get_schedule_store] = lambda: store
    app.dependency_overrides[get_participant_directory] = lambda: directory
    app.dependency_overrides[get_identity_registry] = lambda: registry
    app.dependency_overrides[get_clock] = lambda: clock

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
