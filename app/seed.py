"""Sample data for demos and local development."""

from datetime import datetime, time, timedelta

import structlog

from app.models.participants import Specialty
from app.schemas.participants import DoctorCreate, PatientCreate
from app.services.appointment_service import AppointmentService
from app.services.participant_service import ParticipantDirectory

logger = structlog.get_logger(__name__)

SAMPLE_PATIENTS = [
    PatientCreate(full_name="Maria Silva Santos", email="maria.silva@example.com", phone="(47) 99999-1111"),
    PatientCreate(full_name="Joao Pedro Oliveira", email="joao.oliveira@example.com", phone="(47) 99999-2222"),
    PatientCreate(full_name="Ana Costa Ferreira", email="ana.costa@example.com", phone="(47) 99999-3333"),
]

SAMPLE_DOCTORS = [
    DoctorCreate(
        full_name="Dr. Carlos Eduardo Mendes",
        license_number="12345-SC",
        specialty=Specialty.CARDIOLOGY,
        phone="(47) 3333-1111",
    ),
    DoctorCreate(
        full_name="Dra. Juliana Ribeiro",
        license_number="23456-SC",
        specialty=Specialty.PEDIATRICS,
        phone="(47) 3333-2222",
    ),
    DoctorCreate(
        full_name="Dr. Roberto Almeida",
        license_number="34567-SC",
        specialty=Specialty.GENERAL_PRACTICE,
        phone="(47) 3333-3333",
    ),
]


def load_sample_data(directory: ParticipantDirectory, appointments: AppointmentService) -> bool:
    """
    Register sample participants and a day of appointments.

    Does nothing when the directory already holds data.

    Returns:
        True if data was loaded
    """
    if not directory.is_empty():
        return False

    patients = [directory.register_patient(data) for data in SAMPLE_PATIENTS]
    doctors = [directory.register_doctor(data) for data in SAMPLE_DOCTORS]

    today = appointments.clock().date()
    tomorrow = today + timedelta(days=1)

    def at(day, hour: int) -> datetime:
        return datetime.combine(day, time(hour=hour))

    first = appointments.schedule(patients[0].id, doctors[0].id, at(today, 9), "Routine check-up")
    second = appointments.schedule(patients[1].id, doctors[1].id, at(today, 10), "Vaccination")
    appointments.schedule(patients[2].id, doctors[2].id, at(today, 14))
    appointments.schedule(patients[0].id, doctors[2].id, at(tomorrow, 8), "Follow-up")
    appointments.schedule(patients[1].id, doctors[0].id, at(tomorrow, 11))

    appointments.complete(first.id, "Blood pressure within normal range")
    appointments.cancel(second.id, "Patient request")

    logger.info(
        "sample_data_loaded",
        patients=len(patients),
        doctors=len(doctors),
        appointments=appointments.store.count(),
    )
    return True
