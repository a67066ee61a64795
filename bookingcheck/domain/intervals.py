"""
Half-open time interval helpers.

Clock times are compared as integer minutes since midnight. They are parsed
once from ``HH:MM`` strings and every comparison after that is arithmetic.
"""

MINUTES_PER_DAY = 24 * 60


def parse_time(value: str) -> int:
    """
    Convert an ``HH:MM`` clock time into minutes since midnight.

    Seconds (``HH:MM:SS``, as some databases return them) are ignored.

    Raises:
        ValueError: If the value is not a valid time of day
    """
    parts = value.strip().split(":")
    if len(parts) not in (2, 3) or not all(part.isdigit() for part in parts):
        raise ValueError(f"Invalid time '{value}', expected HH:MM")

    hours, minutes = int(parts[0]), int(parts[1])
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise ValueError(f"Invalid time '{value}', expected HH:MM between 00:00 and 23:59")

    return hours * 60 + minutes


def format_time(minutes: int) -> str:
    """Format minutes since midnight as ``HH:MM``."""
    hours, remainder = divmod(minutes, 60)
    return f"{hours:02d}:{remainder:02d}"


def overlaps(start_a: int, duration_a: int, start_b: int, duration_b: int) -> bool:
    """True iff ``[start_a, start_a + duration_a)`` and ``[start_b, start_b + duration_b)`` intersect."""
    return start_a < start_b + duration_b and start_b < start_a + duration_a


def is_within(start: int, duration: int, window_start: int, window_end: int) -> bool:
    """True iff the interval starting at ``start`` fits entirely inside the window."""
    return start >= window_start and start + duration <= window_end
