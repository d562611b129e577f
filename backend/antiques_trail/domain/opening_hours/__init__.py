from .formatter import HoursGroup, day_label, display_time, format_grouped, format_opening_hours, hours_text
from .hours import (
    APPOINTMENT_TEXT,
    CLOSED_TEXT,
    DAY_NAMES,
    MONDAY_FIRST,
    UNSPECIFIED_TEXT,
    DayHours,
    default_week,
    normalize_time,
    time_to_minutes,
)
from .parser import parse_days, parse_hours, parse_opening_hours, text_entries
from .status import closing_soon, day_of_week_for, is_by_appointment_on, is_open, minutes_until_close

__all__ = [
    "APPOINTMENT_TEXT",
    "CLOSED_TEXT",
    "DAY_NAMES",
    "MONDAY_FIRST",
    "UNSPECIFIED_TEXT",
    "DayHours",
    "HoursGroup",
    "closing_soon",
    "day_label",
    "day_of_week_for",
    "default_week",
    "display_time",
    "format_grouped",
    "format_opening_hours",
    "hours_text",
    "is_by_appointment_on",
    "is_open",
    "minutes_until_close",
    "normalize_time",
    "parse_days",
    "parse_hours",
    "parse_opening_hours",
    "text_entries",
    "time_to_minutes",
]
