"""
Domain models for appointments, services, schedules and availability results.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import List, Optional, Tuple

import pendulum
from pendulum import Date

from .intervals import format_time, is_within, overlaps, parse_time

DEFAULT_DURATION_MINUTES = 60


def parse_date(value: str) -> Date:
    """
    Parse a canonical ``YYYY-MM-DD`` calendar date.

    Raises:
        ValueError: If the value is not a valid date
    """
    try:
        return pendulum.from_format(value, "YYYY-MM-DD").date()
    except ValueError as exc:
        raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD") from exc


def day_of_week(value: str) -> int:
    """Return the weekday of a ``YYYY-MM-DD`` date, 0=Sunday .. 6=Saturday."""
    return parse_date(value).isoweekday() % 7


def _to_decimal(value, field_name: str) -> Decimal:
    try:
        amount = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"{field_name} must be a decimal number, got {value!r}") from exc
    if amount <= 0:
        raise ValueError(f"{field_name} must be greater than zero, got {amount}")
    return amount


def _validate_day(day: int) -> None:
    if day not in range(7):
        raise ValueError(f"day_of_week must be between 0 (Sunday) and 6 (Saturday), got {day}")


def _validate_duration(duration: Optional[int]) -> None:
    if duration is not None and duration <= 0:
        raise ValueError(f"duration must be greater than zero, got {duration}")


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class UnavailableReason(str, Enum):
    OUTSIDE_BUSINESS_HOURS = "outside_business_hours"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable half-open range ``[start, end)`` of clock minutes.

    Invariant: start must be before end.
    """
    start: int
    end: int

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(
                f"Start time {format_time(self.start)} must be before end time {format_time(self.end)}"
            )

    @classmethod
    def from_clock(cls, start_time: str, end_time: str) -> "TimeRange":
        return cls(start=parse_time(start_time), end=parse_time(end_time))

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return self.end - self.start

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another."""
        return overlaps(self.start, self.duration_minutes(), other.start, other.duration_minutes())

    def contains(self, other: "TimeRange") -> bool:
        """Check if another range fits entirely inside this one."""
        return is_within(other.start, other.duration_minutes(), self.start, self.end)

    def __str__(self) -> str:
        return f"{format_time(self.start)} - {format_time(self.end)}"


@dataclass
class Appointment:
    """
    A booked (or candidate) appointment.

    ``duration`` is ``None`` when the caller did not supply one; the
    availability check then derives it from the attached services.
    """
    id: str
    tenant_id: str
    client_id: str
    date: str
    time: str
    duration: Optional[int] = None
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    service_ids: Tuple[str, ...] = ()
    professional_id: Optional[str] = None
    client_name: Optional[str] = None

    def __post_init__(self):
        parse_date(self.date)
        parse_time(self.time)
        _validate_duration(self.duration)
        self.status = AppointmentStatus(self.status)
        self.service_ids = tuple(self.service_ids)
        # An empty professional id means unassigned.
        self.professional_id = self.professional_id or None

    @property
    def start_minutes(self) -> int:
        return parse_time(self.time)

    @property
    def is_cancelled(self) -> bool:
        return self.status is AppointmentStatus.CANCELLED


@dataclass
class Service:
    """
    A bookable service.

    Promotion fields are all-or-nothing: either none is set, or the
    promotional value and both inclusive dates are.
    """
    id: str
    tenant_id: str
    name: str
    value: Decimal
    category: str = ""
    duration: Optional[int] = DEFAULT_DURATION_MINUTES
    promotional_value: Optional[Decimal] = None
    promotion_start_date: Optional[str] = None
    promotion_end_date: Optional[str] = None

    def __post_init__(self):
        self.value = _to_decimal(self.value, "value")
        _validate_duration(self.duration)

        promotion = (self.promotional_value, self.promotion_start_date, self.promotion_end_date)
        if any(item is not None for item in promotion):
            if any(item is None for item in promotion):
                raise ValueError(
                    f"Service {self.id}: promotional value, start date and end date must be set together"
                )
            self.promotional_value = _to_decimal(self.promotional_value, "promotional_value")
            if parse_date(self.promotion_end_date) < parse_date(self.promotion_start_date):
                raise ValueError(
                    f"Service {self.id}: promotion end date {self.promotion_end_date} "
                    f"is before start date {self.promotion_start_date}"
                )


@dataclass
class BusinessHours:
    """One configured opening shift of a tenant. Several rows per day form split shifts."""
    id: str
    tenant_id: str
    day_of_week: int  # 0=Sunday, 6=Saturday
    start_time: str
    end_time: str
    active: bool = True

    def __post_init__(self):
        _validate_day(self.day_of_week)
        self.time_range()

    def time_range(self) -> TimeRange:
        return TimeRange.from_clock(self.start_time, self.end_time)


@dataclass
class ProfessionalSchedule:
    """A working shift of a single professional."""
    day_of_week: int  # 0=Sunday, 6=Saturday
    start_time: str
    end_time: str
    active: bool = True

    def __post_init__(self):
        _validate_day(self.day_of_week)
        self.time_range()

    def time_range(self) -> TimeRange:
        return TimeRange.from_clock(self.start_time, self.end_time)


@dataclass
class Professional:
    id: str
    tenant_id: str
    name: str
    schedules: Tuple[ProfessionalSchedule, ...] = ()

    def __post_init__(self):
        self.schedules = tuple(self.schedules)


@dataclass(frozen=True)
class ConflictSummary:
    """The part of a conflicting appointment reported back to the caller."""
    id: str
    client_name: Optional[str]
    date: str
    time: str
    duration: int

    @property
    def end_time(self) -> str:
        """When the conflicting appointment ends, the earliest start that clears it."""
        return format_time(parse_time(self.time) + self.duration)


@dataclass(frozen=True)
class AvailabilityResult:
    """
    Outcome of an availability check.

    Rejections are values, not exceptions: callers branch on ``available``
    and, when false, on ``reason``.
    """
    available: bool
    reason: Optional[UnavailableReason] = None
    conflicting_appointment: Optional[ConflictSummary] = None

    @classmethod
    def ok(cls) -> "AvailabilityResult":
        return cls(available=True)

    @classmethod
    def outside_business_hours(cls) -> "AvailabilityResult":
        return cls(available=False, reason=UnavailableReason.OUTSIDE_BUSINESS_HOURS)

    @classmethod
    def conflict(cls, summary: ConflictSummary) -> "AvailabilityResult":
        return cls(
            available=False,
            reason=UnavailableReason.CONFLICT,
            conflicting_appointment=summary,
        )


@dataclass
class DayWindows:
    """Open booking windows found for one calendar date."""
    date: str
    windows: List[TimeRange] = field(default_factory=list)

