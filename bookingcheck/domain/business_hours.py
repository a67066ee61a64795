"""
Business hours gate: decides whether a requested interval lies inside an
opening shift.
"""

from typing import List, Sequence, Union

from .intervals import is_within
from .models import BusinessHours, ProfessionalSchedule, TimeRange

ScheduleEntry = Union[BusinessHours, ProfessionalSchedule]


class BusinessHoursGate:
    """
    Checks requested intervals against configured shifts.

    Shifts are never unioned: a request must fit inside a single active shift,
    so it cannot straddle a lunch break between two shifts of the same day.

    A weekday without active shifts is closed. A schedule with no rows at all
    (hours never configured) is closed too, unless ``open_when_unconfigured``
    is set.
    """

    def __init__(self, open_when_unconfigured: bool = False):
        self.open_when_unconfigured = open_when_unconfigured

    def is_open_for(
        self,
        day_of_week: int,
        start: int,
        duration: int,
        schedule: Sequence[ScheduleEntry],
    ) -> bool:
        """
        Check whether ``[start, start + duration)`` fits one active shift of the day.

        Args:
            day_of_week: Weekday of the request, 0=Sunday .. 6=Saturday
            start: Start of the request in minutes since midnight
            duration: Length of the request in minutes
            schedule: Business hours or professional schedule rows; rows for
                other weekdays are ignored

        Returns:
            True if the request lies inside a single active shift
        """
        if not schedule:
            return self.open_when_unconfigured

        return any(
            is_within(start, duration, shift.start, shift.end)
            for shift in self.shifts_for_day(day_of_week, schedule)
        )

    @staticmethod
    def shifts_for_day(
        day_of_week: int,
        schedule: Sequence[ScheduleEntry],
    ) -> List[TimeRange]:
        """Return the active shifts of a weekday sorted by start time."""
        return sorted(
            (
                entry.time_range()
                for entry in schedule
                if entry.active and entry.day_of_week == day_of_week
            ),
            key=lambda shift: shift.start,
        )
