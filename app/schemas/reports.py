"""Report schemas."""

from datetime import date, datetime

from pydantic import BaseModel


class DayStatistics(BaseModel):
    """Appointment counts for a single day."""

    day: date
    total: int = 0
    scheduled: int = 0
    completed: int = 0
    cancelled: int = 0


class ReportPercentages(BaseModel):
    """Shares of the day's total, rounded to whole percent."""

    completed: int
    cancelled: int
    pending: int
    occupancy: int


class ReportLine(BaseModel):
    """One appointment in a report listing."""

    id: str
    scheduled_at: datetime
    doctor_name: str
    patient_name: str
    cancel_reason: str | None = None


class DoctorBreakdown(BaseModel):
    """Per-doctor counts for a day."""

    doctor_name: str
    total: int = 0
    completed: int = 0
    cancelled: int = 0
    pending: int = 0


class DayReport(BaseModel):
    """Daily summary of appointments."""

    day: date
    statistics: DayStatistics
    percentages: ReportPercentages | None = None
    completed: list[ReportLine]
    cancelled: list[ReportLine]
    pending: list[ReportLine]
    doctors: list[DoctorBreakdown]
    generated_at: datetime


class CancellationEntry(BaseModel):
    """A cancelled appointment in the cancellation report."""

    id: str
    scheduled_at: datetime
    patient_name: str
    doctor_name: str
    doctor_specialty: str
    reason: str
    cancelled_at: datetime


class CancellationReport(BaseModel):
    """Cancellations recorded within a date range."""

    start: date
    end: date
    total: int
    items: list[CancellationEntry]
    generated_at: datetime
