"""
Tests for domain models.
"""

from decimal import Decimal

import pytest

from bookingcheck.domain.models import (
    Appointment,
    AppointmentStatus,
    AvailabilityResult,
    BusinessHours,
    ConflictSummary,
    Professional,
    ProfessionalSchedule,
    Service,
    TimeRange,
    UnavailableReason,
    day_of_week,
)


class TestTimeRange:
    """Tests for TimeRange model."""

    def test_create_valid_time_range(self):
        tr = TimeRange.from_clock("09:00", "17:00")

        assert tr.start == 540
        assert tr.end == 1020
        assert tr.duration_minutes() == 480  # 8 hours
        assert str(tr) == "09:00 - 17:00"

    def test_invalid_time_range_raises_error(self):
        with pytest.raises(ValueError, match="Start time .* must be before end time"):
            TimeRange.from_clock("17:00", "09:00")

    def test_overlaps(self):
        tr1 = TimeRange.from_clock("09:00", "12:00")
        tr2 = TimeRange.from_clock("11:00", "14:00")
        tr3 = TimeRange.from_clock("14:00", "17:00")

        assert tr1.overlaps(tr2)
        assert tr2.overlaps(tr1)
        assert not tr2.overlaps(tr3)

    def test_contains(self):
        shift = TimeRange.from_clock("09:00", "12:00")

        assert shift.contains(TimeRange.from_clock("09:00", "12:00"))
        assert not shift.contains(TimeRange.from_clock("11:30", "12:30"))


class TestDayOfWeek:
    """Weekdays are numbered from Sunday."""

    def test_weekdays(self):
        assert day_of_week("2025-01-12") == 0  # Sunday
        assert day_of_week("2025-01-13") == 1  # Monday
        assert day_of_week("2025-01-18") == 6  # Saturday

    def test_invalid_date(self):
        with pytest.raises(ValueError, match="Invalid date"):
            day_of_week("13/01/2025")


class TestAppointment:
    """Tests for Appointment model."""

    def test_defaults(self):
        apt = Appointment(id="a1", tenant_id="t1", client_id="c1", date="2025-01-13", time="10:00")

        assert apt.duration is None
        assert apt.status is AppointmentStatus.SCHEDULED
        assert apt.service_ids == ()
        assert apt.professional_id is None
        assert apt.start_minutes == 600

    def test_status_from_string(self):
        apt = Appointment(
            id="a1", tenant_id="t1", client_id="c1", date="2025-01-13", time="10:00", status="cancelled"
        )

        assert apt.status is AppointmentStatus.CANCELLED
        assert apt.is_cancelled

    def test_empty_professional_means_unassigned(self):
        apt = Appointment(
            id="a1", tenant_id="t1", client_id="c1", date="2025-01-13", time="10:00", professional_id=""
        )

        assert apt.professional_id is None

    def test_non_positive_duration_rejected(self):
        with pytest.raises(ValueError, match="duration must be greater than zero"):
            Appointment(id="a1", tenant_id="t1", client_id="c1", date="2025-01-13", time="10:00", duration=0)

    def test_unknown_status_rejected(self):
        with pytest.raises(ValueError):
            Appointment(
                id="a1", tenant_id="t1", client_id="c1", date="2025-01-13", time="10:00", status="done"
            )


class TestService:
    """Tests for Service model."""

    def test_value_is_decimal(self):
        service = Service(id="s1", tenant_id="t1", name="Corte", value="50.00")

        assert service.value == Decimal("50.00")
        assert service.duration == 60
        assert service.promotional_value is None

    def test_complete_promotion(self):
        service = Service(
            id="s1",
            tenant_id="t1",
            name="Corte",
            value=50,
            promotional_value="40",
            promotion_start_date="2025-01-10",
            promotion_end_date="2025-01-10",
        )

        assert service.promotional_value == Decimal("40")

    def test_partial_promotion_rejected(self):
        with pytest.raises(ValueError, match="must be set together"):
            Service(
                id="s1",
                tenant_id="t1",
                name="Corte",
                value=50,
                promotional_value=40,
                promotion_start_date="2025-01-10",
            )

    def test_promotion_end_before_start_rejected(self):
        with pytest.raises(ValueError, match="is before start date"):
            Service(
                id="s1",
                tenant_id="t1",
                name="Corte",
                value=50,
                promotional_value=40,
                promotion_start_date="2025-01-10",
                promotion_end_date="2025-01-09",
            )

    def test_non_positive_value_rejected(self):
        with pytest.raises(ValueError, match="value must be greater than zero"):
            Service(id="s1", tenant_id="t1", name="Corte", value=0)


class TestSchedules:
    """Tests for business hours and professional schedules."""

    def test_business_hours_time_range(self):
        row = BusinessHours(id="b1", tenant_id="t1", day_of_week=1, start_time="09:00", end_time="18:00")

        assert row.time_range() == TimeRange(start=540, end=1080)

    def test_business_hours_rejects_inverted_range(self):
        with pytest.raises(ValueError):
            BusinessHours(id="b1", tenant_id="t1", day_of_week=1, start_time="18:00", end_time="09:00")

    def test_invalid_day_of_week(self):
        with pytest.raises(ValueError, match="day_of_week"):
            ProfessionalSchedule(day_of_week=7, start_time="09:00", end_time="18:00")

    def test_professional_schedules_stored_as_tuple(self):
        professional = Professional(
            id="p1",
            tenant_id="t1",
            name="Ana",
            schedules=[
                ProfessionalSchedule(day_of_week=1, start_time="10:00", end_time="16:00"),
                ProfessionalSchedule(day_of_week=3, start_time="10:00", end_time="16:00"),
            ],
        )

        assert isinstance(professional.schedules, tuple)
        assert [entry.day_of_week for entry in professional.schedules] == [1, 3]


class TestAvailabilityResult:
    """Tests for the availability result variants."""

    def test_ok(self):
        result = AvailabilityResult.ok()

        assert result.available
        assert result.reason is None
        assert result.conflicting_appointment is None

    def test_conflict_carries_summary(self):
        summary = ConflictSummary(id="a1", client_name="Maria", date="2025-01-13", time="14:00", duration=90)
        result = AvailabilityResult.conflict(summary)

        assert not result.available
        assert result.reason is UnavailableReason.CONFLICT
        assert result.conflicting_appointment.end_time == "15:30"

    def test_outside_business_hours(self):
        result = AvailabilityResult.outside_business_hours()

        assert not result.available
        assert result.reason.value == "outside_business_hours"
