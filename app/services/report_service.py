"""Daily and cancellation reports."""

from datetime import date, timedelta

from app.core.clock import Clock, system_clock
from app.core.exceptions import InvalidInputException
from app.models.appointments import Appointment, AppointmentStatus
from app.schemas.reports import (
    CancellationEntry,
    CancellationReport,
    DayReport,
    DayStatistics,
    DoctorBreakdown,
    ReportLine,
    ReportPercentages,
)
from app.services.participant_service import ParticipantDirectory
from app.services.schedule_store import ScheduleStore

BANNER_WIDTH = 66
SEPARATOR = "-" * BANNER_WIDTH


def percent(part: int, total: int) -> int:
    """Share of ``total`` as a whole percent, halves rounded up."""
    return (part * 200 + total) // (2 * total)


def _banner(title: str) -> list[str]:
    return ["=" * BANNER_WIDTH, f"  {title}", "=" * BANNER_WIDTH, ""]


class ReportService:
    """Read-only aggregation over the schedule store."""

    def __init__(
        self,
        store: ScheduleStore,
        directory: ParticipantDirectory,
        clock: Clock = system_clock,
        cancellation_report_days: int = 30,
    ):
        """Initialize service with its collaborators."""
        self.store = store
        self.directory = directory
        self.clock = clock
        self.cancellation_report_days = cancellation_report_days

    # ========================================================================
    # Daily report
    # ========================================================================

    @staticmethod
    def _count(appointments: list[Appointment], day: date) -> DayStatistics:
        stats = DayStatistics(day=day, total=len(appointments))
        for appointment in appointments:
            if appointment.status == AppointmentStatus.SCHEDULED:
                stats.scheduled += 1
            elif appointment.status == AppointmentStatus.COMPLETED:
                stats.completed += 1
            elif appointment.status == AppointmentStatus.CANCELLED:
                stats.cancelled += 1
        return stats

    def day_statistics(self, day: date | None = None) -> DayStatistics:
        """Count the appointments of ``day`` (today by default) by status."""
        day = day or self.clock().date()
        return self._count(self.store.list_for_date(day), day)

    def _line(self, appointment: Appointment) -> ReportLine:
        return ReportLine(
            id=appointment.id,
            scheduled_at=appointment.scheduled_at,
            doctor_name=self.directory.doctor_name(appointment.doctor_id),
            patient_name=self.directory.patient_name(appointment.patient_id),
            cancel_reason=appointment.cancel_reason,
        )

    def day_report(self, day: date | None = None) -> DayReport:
        """
        Build the daily report.

        Args:
            day: Report date, today when omitted

        Returns:
            Statistics, percentages (absent for an empty day), listings per
            status ordered by time and a per-doctor breakdown in order of
            first appearance
        """
        now = self.clock()
        day = day or now.date()
        appointments = self.store.list_for_date(day)
        stats = self._count(appointments, day)

        percentages = None
        if stats.total > 0:
            completed = percent(stats.completed, stats.total)
            cancelled = percent(stats.cancelled, stats.total)
            percentages = ReportPercentages(
                completed=completed,
                cancelled=cancelled,
                pending=percent(stats.scheduled, stats.total),
                occupancy=percent(stats.completed + stats.cancelled, stats.total),
            )

        doctors: dict[str, DoctorBreakdown] = {}
        for appointment in appointments:
            name = self.directory.doctor_name(appointment.doctor_id)
            row = doctors.setdefault(name, DoctorBreakdown(doctor_name=name))
            row.total += 1
            if appointment.status == AppointmentStatus.COMPLETED:
                row.completed += 1
            elif appointment.status == AppointmentStatus.CANCELLED:
                row.cancelled += 1
            else:
                row.pending += 1

        def lines(status: AppointmentStatus) -> list[ReportLine]:
            return [self._line(a) for a in appointments if a.status == status]

        return DayReport(
            day=day,
            statistics=stats,
            percentages=percentages,
            completed=lines(AppointmentStatus.COMPLETED),
            cancelled=lines(AppointmentStatus.CANCELLED),
            pending=lines(AppointmentStatus.SCHEDULED),
            doctors=list(doctors.values()),
            generated_at=now,
        )

    @staticmethod
    def render_day_report(report: DayReport) -> str:
        """Format a daily report as plain text."""
        stats = report.statistics
        out = _banner(f"DAILY CONSULTATION REPORT - {report.day:%Y-%m-%d}")
        out.append("SUMMARY:")
        out.append(f"  - Total appointments: {stats.total}")
        if report.percentages is not None:
            pct = report.percentages
            out.append(f"  - Completed: {stats.completed} ({pct.completed}%)")
            out.append(f"  - Cancelled: {stats.cancelled} ({pct.cancelled}%)")
            out.append(f"  - Pending: {stats.scheduled} ({pct.pending}%)")
            out.append(f"  - Occupancy rate: {pct.occupancy}%")
        out.append("")

        sections = [
            ("COMPLETED", report.completed),
            ("CANCELLED", report.cancelled),
            ("PENDING", report.pending),
        ]
        for title, items in sections:
            if not items:
                continue
            out.append(f"{title} ({len(items)}):")
            for line in items:
                out.append(f"  [{line.scheduled_at:%H:%M}] {line.doctor_name} - {line.patient_name}")
                if line.cancel_reason:
                    out.append(f"    Reason: {line.cancel_reason}")
            out.append("")

        if report.doctors:
            out.append("BY DOCTOR:")
            for row in report.doctors:
                out.append(f"  {row.doctor_name}:")
                out.append(
                    f"    Total: {row.total} | Completed: {row.completed} | "
                    f"Cancelled: {row.cancelled} | Pending: {row.pending}"
                )
            out.append("")

        out.append(f"Generated at: {report.generated_at:%Y-%m-%d %H:%M}")
        return "\n".join(out) + "\n"

    # ========================================================================
    # Cancellation report
    # ========================================================================

    def cancellation_report(
        self,
        start: date | None = None,
        end: date | None = None,
    ) -> CancellationReport:
        """
        List cancellations recorded between ``start`` and ``end`` inclusive.

        Defaults to the last ``cancellation_report_days`` days up to today.
        Entries are ordered by cancellation time, most recent first.

        Raises:
            InvalidInputException: If ``start`` is after ``end``
        """
        now = self.clock()
        end = end or now.date()
        start = start or now.date() - timedelta(days=self.cancellation_report_days)
        if start > end:
            raise InvalidInputException("Report start date must not be after its end date")

        cancelled = [
            a
            for a in self.store.list_cancelled()
            if a.cancelled_at is not None and start <= a.cancelled_at.date() <= end
        ]
        # stable, so equal cancellation times keep insertion order
        cancelled.sort(key=lambda a: a.cancelled_at, reverse=True)

        items = []
        for appointment in cancelled:
            doctor = self.directory.get_doctor(appointment.doctor_id)
            items.append(
                CancellationEntry(
                    id=appointment.id,
                    scheduled_at=appointment.scheduled_at,
                    patient_name=self.directory.patient_name(appointment.patient_id),
                    doctor_name=doctor.full_name,
                    doctor_specialty=doctor.specialty_label,
                    reason=appointment.cancel_reason or "",
                    cancelled_at=appointment.cancelled_at,
                )
            )

        return CancellationReport(
            start=start,
            end=end,
            total=len(items),
            items=items,
            generated_at=now,
        )

    @staticmethod
    def render_cancellation_report(report: CancellationReport) -> str:
        """Format a cancellation report as plain text."""
        out = _banner("CANCELLED CONSULTATIONS REPORT")
        out.append(f"Period: {report.start:%Y-%m-%d} to {report.end:%Y-%m-%d}")
        out.append(f"Total cancellations: {report.total}")
        out.append("")

        if report.items:
            out.append("CANCELLATIONS:")
            out.append(SEPARATOR)
            for entry in report.items:
                out.append(f"ID: {entry.id}")
                out.append(f"Originally scheduled: {entry.scheduled_at:%Y-%m-%d %H:%M}")
                out.append(f"Patient: {entry.patient_name}")
                out.append(f"Doctor: {entry.doctor_name} ({entry.doctor_specialty})")
                out.append(f"Reason: {entry.reason}")
                out.append(f"Cancelled at: {entry.cancelled_at:%Y-%m-%d %H:%M}")
                out.append(SEPARATOR)
        else:
            out.append("No cancellations in this period.")

        out.append("")
        out.append(f"Generated at: {report.generated_at:%Y-%m-%d %H:%M}")
        return "\n".join(out) + "\n"
