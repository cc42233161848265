"""Tests for the sample data loader."""

from app.models.appointments import AppointmentStatus
from app.seed import load_sample_data


def test_load_sample_data(directory, service, reports, clock):
    """Test the sample day is consistent."""
    assert load_sample_data(directory, service) is True

    assert len(directory.list_patients()) == 3
    assert len(directory.list_doctors()) == 3
    assert service.store.count() == 5

    stats = reports.day_statistics()
    assert (stats.total, stats.completed, stats.cancelled, stats.scheduled) == (3, 1, 1, 1)
    cancelled = service.list_by_status(AppointmentStatus.CANCELLED)
    assert [a.cancel_reason for a in cancelled] == ["Patient request"]


def test_load_sample_data_only_once(directory, service, patient):
    """Test an existing directory is left alone."""
    assert load_sample_data(directory, service) is False
    assert service.store.count() == 0
