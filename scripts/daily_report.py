"""Script to print today's reports over the sample data set."""

from app.core.identity import IdentityRegistry
from app.seed import load_sample_data
from app.services.appointment_service import AppointmentService
from app.services.participant_service import ParticipantDirectory
from app.services.report_service import ReportService
from app.services.schedule_store import ScheduleStore


def main() -> None:
    """Load the sample data into a fresh store and print both reports."""
    registry = IdentityRegistry()
    store = ScheduleStore()
    directory = ParticipantDirectory(registry)
    appointments = AppointmentService(store, directory, registry)
    reports = ReportService(store, directory)

    load_sample_data(directory, appointments)

    print(reports.render_day_report(reports.day_report()))
    print(reports.render_cancellation_report(reports.cancellation_report()))


if __name__ == "__main__":
    main()
