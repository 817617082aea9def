"""Normalization of loosely typed guest input.

Every function here has a documented fallback and never raises for bad
input, except ``normalize_attendance`` which returns ``None`` so the caller
decides how to report it.
"""

import math
from typing import Any

from rsvp_engine.core.enums import Attendance

DEFAULT_GUEST_COUNT = 1

# Vocabulary used by the hosted RSVP forms, mapped onto the stored enum
ATTENDANCE_ALIASES = {
    "yes": Attendance.YES,
    "attending": Attendance.YES,
    "no": Attendance.NO,
    "notattending": Attendance.NO,
    "not_attending": Attendance.NO,
    "not-attending": Attendance.NO,
    "maybe": Attendance.MAYBE,
}


def clean_text(value: Any) -> str:
    """Return ``value`` as a stripped string, or ``""`` for ``None``."""
    if value is None:
        return ""
    return str(value).strip()


def normalize_guest_count(value: Any, default: int = DEFAULT_GUEST_COUNT) -> int:
    """Coerce ``value`` to an integer of at least 1.

    Accepts ints, integral floats and numeric strings (``"2"``, ``" 3 "``,
    ``"2.0"``). Anything else, including booleans, non-finite numbers and
    values below 1, yields ``default``.
    """
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        count = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            return default
        count = int(value)
    elif isinstance(value, str):
        text = value.strip()
        try:
            count = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                return default
            if not math.isfinite(number):
                return default
            count = int(number)
    else:
        return default
    return count if count >= 1 else default


def normalize_attendance(value: Any) -> Attendance | None:
    """Map an attendance answer onto ``Attendance``, case-insensitively."""
    if isinstance(value, Attendance):
        return value
    text = clean_text(value).lower()
    return ATTENDANCE_ALIASES.get(text)


def normalize_dietary_options(value: Any) -> list[str]:
    """Return the distinct, non-blank dietary tags in their original order.

    Accepts a list of tags or a single comma-separated string.
    """
    if value is None:
        return []
    if isinstance(value, str):
        candidates = value.split(",")
    elif isinstance(value, (list, tuple, set, frozenset)):
        candidates = list(value)
    else:
        return []

    tags: list[str] = []
    for candidate in candidates:
        tag = clean_text(candidate)
        if tag and tag not in tags:
            tags.append(tag)
    return tags
