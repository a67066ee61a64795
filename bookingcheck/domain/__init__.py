"""
Domain layer - Pure booking rules without external dependencies.
"""

from .availability import AvailabilityContext, check_availability
from .business_hours import BusinessHoursGate
from .conflicts import find_conflict, find_conflicts
from .durations import booked_duration, candidate_duration, total_duration
from .intervals import is_within, overlaps
from .models import (
    Appointment,
    AppointmentStatus,
    AvailabilityResult,
    BusinessHours,
    ConflictSummary,
    DayWindows,
    Professional,
    ProfessionalSchedule,
    Service,
    TimeRange,
    UnavailableReason,
)
from .pricing import effective_value, is_in_promotion, total_effective_value
from .slot_calculator import SlotCalculator

__all__ = [
    "Appointment",
    "AppointmentStatus",
    "AvailabilityContext",
    "AvailabilityResult",
    "BusinessHours",
    "BusinessHoursGate",
    "ConflictSummary",
    "DayWindows",
    "Professional",
    "ProfessionalSchedule",
    "Service",
    "SlotCalculator",
    "TimeRange",
    "UnavailableReason",
    "booked_duration",
    "candidate_duration",
    "check_availability",
    "effective_value",
    "find_conflict",
    "find_conflicts",
    "is_in_promotion",
    "is_within",
    "overlaps",
    "total_duration",
    "total_effective_value",
]
