"""
Open booking window calculation for a single day.

Pure domain logic without external dependencies (no API calls, no database,
no I/O).
"""

from typing import List, Optional, Sequence

from .business_hours import BusinessHoursGate, ScheduleEntry
from .durations import ServiceCatalogMap, booked_duration
from .models import Appointment, DayWindows, TimeRange, day_of_week


class SlotCalculator:
    """
    Calculates the open windows of a day from its shifts and bookings.

    Algorithm:
    1. Get the active shifts of the weekday
    2. Collect the busy ranges of the relevant timeline (same professional,
       or unassigned appointments when no professional is given)
    3. Subtract busy ranges from each shift
    4. Filter by minimum duration

    Windows never cross shift boundaries, matching the rule that a booking has
    to fit inside a single shift.
    """

    def __init__(self, gate: Optional[BusinessHoursGate] = None):
        self.gate = gate or BusinessHoursGate()

    def find_open_windows(
        self,
        date: str,
        schedule: Sequence[ScheduleEntry],
        appointments: Sequence[Appointment],
        professional_id: Optional[str] = None,
        catalog: Optional[ServiceCatalogMap] = None,
        min_duration_minutes: int = 30,
    ) -> DayWindows:
        """
        Find the open windows of one date.

        Args:
            date: Calendar date (YYYY-MM-DD)
            schedule: Business hours or professional schedule rows
            appointments: Appointments booked on the date, cancelled ones included
            professional_id: Timeline to inspect; None for unassigned appointments
            catalog: Services used to size the booked appointments
            min_duration_minutes: Minimum length for a window to be reported

        Returns:
            DayWindows with the open ranges in chronological order
        """
        shifts = self._get_shifts(date, schedule)

        if not shifts:
            return DayWindows(date=date)

        busy_ranges = self._busy_ranges(date, appointments, professional_id, catalog)

        windows: List[TimeRange] = []
        for shift in shifts:
            overlapping_busy = [busy for busy in busy_ranges if shift.overlaps(busy)]

            if not overlapping_busy:
                # Entire shift is open
                windows.append(shift)
                continue

            windows.extend(self._subtract_busy_from_block(shift, overlapping_busy))

        return DayWindows(
            date=date,
            windows=[
                window for window in windows
                if window.duration_minutes() >= min_duration_minutes
            ],
        )

    def _get_shifts(self, date: str, schedule: Sequence[ScheduleEntry]) -> List[TimeRange]:
        if not schedule:
            # Never configured: only an explicitly open gate leaves the day bookable.
            return [TimeRange(start=0, end=24 * 60)] if self.gate.open_when_unconfigured else []

        return self._drop_nested_shifts(
            self.gate.shifts_for_day(day_of_week(date), schedule)
        )

    def _busy_ranges(
        self,
        date: str,
        appointments: Sequence[Appointment],
        professional_id: Optional[str],
        catalog: Optional[ServiceCatalogMap],
    ) -> List[TimeRange]:
        busy: List[TimeRange] = []

        for appointment in appointments:
            if appointment.date != date or appointment.is_cancelled:
                continue
            if appointment.professional_id != (professional_id or None):
                continue

            start = appointment.start_minutes
            busy.append(
                TimeRange(start=start, end=start + booked_duration(appointment, catalog))
            )

        return self._merge_adjacent_ranges(busy)

    def _subtract_busy_from_block(
        self,
        block: TimeRange,
        busy_ranges: List[TimeRange]
    ) -> List[TimeRange]:
        """
        Subtract busy times from a shift, yielding open ranges.

        Example:
        Shift: 09:00 - 17:00
        Busy: [10:00-11:00, 14:00-15:00]
        Result: [09:00-10:00, 11:00-14:00, 15:00-17:00]
        """
        free_ranges: List[TimeRange] = []
        current_start = block.start

        for busy in sorted(busy_ranges, key=lambda r: r.start):
            # Clip busy range to the shift
            clipped_busy_start = max(busy.start, block.start)
            clipped_busy_end = min(busy.end, block.end)

            if current_start < clipped_busy_start:
                free_ranges.append(TimeRange(start=current_start, end=clipped_busy_start))

            current_start = max(current_start, clipped_busy_end)

        if current_start < block.end:
            free_ranges.append(TimeRange(start=current_start, end=block.end))

        return free_ranges

    def _merge_adjacent_ranges(self, ranges: List[TimeRange]) -> List[TimeRange]:
        """
        Merge overlapping or adjacent time ranges.

        Example: [09:00-10:00, 10:00-11:00] -> [09:00-11:00]
        """
        if not ranges:
            return []

        sorted_ranges = sorted(ranges, key=lambda r: r.start)
        merged: List[TimeRange] = [sorted_ranges[0]]

        for current in sorted_ranges[1:]:
            last = merged[-1]

            if current.start <= last.end:
                merged[-1] = TimeRange(start=last.start, end=max(last.end, current.end))
            else:
                merged.append(current)

        return merged

    def _drop_nested_shifts(self, shifts: List[TimeRange]) -> List[TimeRange]:
        """
        Collapse duplicated or nested shift rows.

        Only ranges where one contains the other are merged; touching shifts
        stay separate because a booking may not span two of them.
        """
        kept: List[TimeRange] = []
        for shift in sorted(shifts, key=lambda r: (r.start, -r.end)):
            if kept and kept[-1].contains(shift):
                continue
            kept.append(shift)
        return kept
