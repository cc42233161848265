"""Patient and doctor directory."""

from collections.abc import Iterator
from contextlib import contextmanager
from threading import RLock

import structlog

from app.core.clock import Clock, system_clock
from app.core.exceptions import (
    DuplicateParticipantException,
    InvalidInputException,
    NotFoundException,
)
from app.core.identity import EntityKind, IdentityRegistry
from app.models.participants import Doctor, ParticipantStatus, Patient, Specialty
from app.schemas.participants import DoctorCreate, DoctorUpdate, PatientCreate, PatientUpdate

logger = structlog.get_logger(__name__)


class ParticipantDirectory:
    """
    In-memory registry of patients and doctors.

    The scheduling engine only asks it two things per participant: whether
    they are active and what their display name is. Both are answered from
    the live record on every call.
    """

    def __init__(self, registry: IdentityRegistry, clock: Clock = system_clock):
        """Initialize an empty directory."""
        self.registry = registry
        self.clock = clock
        self._patients: dict[str, Patient] = {}
        self._doctors: dict[str, Doctor] = {}
        self._lock = RLock()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Hold the directory lock so participant status cannot change meanwhile."""
        with self._lock:
            yield

    @staticmethod
    def _key(reference: str | None) -> str:
        if reference is None or not str(reference).strip():
            raise InvalidInputException("Participant reference must not be blank")
        return IdentityRegistry.normalize(reference)

    def is_empty(self) -> bool:
        """Check whether nobody has been registered yet."""
        with self._lock:
            return not self._patients and not self._doctors

    # ========================================================================
    # Patients
    # ========================================================================

    def register_patient(self, data: PatientCreate) -> Patient:
        """
        Register a new patient.

        Raises:
            DuplicateParticipantException: If the e-mail is already registered
        """
        email = data.email.lower()
        with self._lock:
            if any(p.email == email for p in self._patients.values()):
                raise DuplicateParticipantException(f"Patient with e-mail {email} already exists")

            patient = Patient(
                id=self.registry.allocate(EntityKind.PATIENT),
                full_name=data.full_name,
                email=email,
                phone=data.phone,
                created_at=self.clock(),
            )
            self._patients[patient.id] = patient

        logger.info("patient_registered", patient_id=patient.id)
        return patient.model_copy()

    def get_patient(self, patient_id: str) -> Patient:
        """
        Get patient by ID.

        Raises:
            NotFoundException: If the patient does not exist
        """
        with self._lock:
            patient = self._patients.get(self._key(patient_id))
            if patient is None:
                raise NotFoundException(f"Patient {patient_id} not found")
            return patient.model_copy()

    def list_patients(
        self,
        status: ParticipantStatus | None = None,
        name: str | None = None,
    ) -> list[Patient]:
        """List patients in registration order, optionally filtered."""
        with self._lock:
            patients = [p.model_copy() for p in self._patients.values()]
        if status is not None:
            patients = [p for p in patients if p.status == status]
        if name:
            needle = name.strip().lower()
            patients = [p for p in patients if needle in p.full_name.lower()]
        return patients

    def update_patient(self, patient_id: str, data: PatientUpdate) -> Patient:
        """
        Update a patient's e-mail and/or phone.

        Raises:
            NotFoundException: If the patient does not exist
            DuplicateParticipantException: If another patient has the new e-mail
        """
        with self._lock:
            patient = self._patients.get(self._key(patient_id))
            if patient is None:
                raise NotFoundException(f"Patient {patient_id} not found")

            draft = patient.model_copy()
            if data.email is not None:
                email = data.email.lower()
                if any(p.email == email and p.id != patient.id for p in self._patients.values()):
                    raise DuplicateParticipantException(f"Patient with e-mail {email} already exists")
                draft.email = email
            if data.phone is not None:
                draft.phone = data.phone
            self._patients[patient.id] = draft

        logger.info("patient_updated", patient_id=draft.id)
        return draft.model_copy()

    def set_patient_status(self, patient_id: str, status: ParticipantStatus) -> Patient:
        """Activate or deactivate a patient."""
        with self._lock:
            patient = self._patients.get(self._key(patient_id))
            if patient is None:
                raise NotFoundException(f"Patient {patient_id} not found")
            patient.status = status

        logger.info("patient_status_changed", patient_id=patient.id, status=status.value)
        return patient.model_copy()

    def is_patient_active(self, patient_id: str) -> bool:
        return self.get_patient(patient_id).is_active

    def patient_name(self, patient_id: str) -> str:
        return self.get_patient(patient_id).full_name

    # ========================================================================
    # Doctors
    # ========================================================================

    def register_doctor(self, data: DoctorCreate) -> Doctor:
        """
        Register a new doctor.

        Raises:
            DuplicateParticipantException: If the license number is already registered
        """
        license_number = data.license_number.upper()
        with self._lock:
            if any(d.license_number == license_number for d in self._doctors.values()):
                raise DuplicateParticipantException(
                    f"Doctor with license {license_number} already exists"
                )

            doctor = Doctor(
                id=self.registry.allocate(EntityKind.DOCTOR),
                full_name=data.full_name,
                license_number=license_number,
                specialty=data.specialty,
                phone=data.phone,
                created_at=self.clock(),
            )
            self._doctors[doctor.id] = doctor

        logger.info("doctor_registered", doctor_id=doctor.id, specialty=doctor.specialty.value)
        return doctor.model_copy()

    def get_doctor(self, doctor_id: str) -> Doctor:
        """
        Get doctor by ID.

        Raises:
            NotFoundException: If the doctor does not exist
        """
        with self._lock:
            doctor = self._doctors.get(self._key(doctor_id))
            if doctor is None:
                raise NotFoundException(f"Doctor {doctor_id} not found")
            return doctor.model_copy()

    def list_doctors(
        self,
        status: ParticipantStatus | None = None,
        specialty: Specialty | None = None,
    ) -> list[Doctor]:
        """List doctors in registration order, optionally filtered."""
        with self._lock:
            doctors = [d.model_copy() for d in self._doctors.values()]
        if status is not None:
            doctors = [d for d in doctors if d.status == status]
        if specialty is not None:
            doctors = [d for d in doctors if d.specialty == specialty]
        return doctors

    def update_doctor(self, doctor_id: str, data: DoctorUpdate) -> Doctor:
        """
        Update a doctor's specialty and/or phone. The license number is fixed.

        Raises:
            NotFoundException: If the doctor does not exist
        """
        with self._lock:
            doctor = self._doctors.get(self._key(doctor_id))
            if doctor is None:
                raise NotFoundException(f"Doctor {doctor_id} not found")

            if data.specialty is not None:
                doctor.specialty = data.specialty
            if data.phone is not None:
                doctor.phone = data.phone

        logger.info("doctor_updated", doctor_id=doctor.id)
        return doctor.model_copy()

    def set_doctor_status(self, doctor_id: str, status: ParticipantStatus) -> Doctor:
        """Activate or deactivate a doctor."""
        with self._lock:
            doctor = self._doctors.get(self._key(doctor_id))
            if doctor is None:
                raise NotFoundException(f"Doctor {doctor_id} not found")
            doctor.status = status

        logger.info("doctor_status_changed", doctor_id=doctor.id, status=status.value)
        return doctor.model_copy()

    def is_doctor_active(self, doctor_id: str) -> bool:
        return self.get_doctor(doctor_id).is_active

    def doctor_name(self, doctor_id: str) -> str:
        return self.get_doctor(doctor_id).full_name
