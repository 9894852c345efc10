"""Time constants, epoch timestamps and timestamp formatting.

Timestamps count from :data:`INITIAL`, 1970-01-01 shifted by the local
standard UTC offset, so a timestamp converts back to local wall-clock time
with plain addition.

Format patterns are .NET custom date and time patterns (``yyyy-MM-dd``,
``dddd, MMMM d``, ``h:mm tt``, ``ss.FFF``) rendered with invariant English
names; quoted text, ``\\``-escaped characters and any other character are
copied literally:

    format_timestamp(ts)                   # "2024-03-21 14:30:00"
    format_timestamp(ts, "dd MMM yyyy")    # "21 Mar 2024"
"""

from __future__ import annotations

import re
import time
from datetime import datetime, timedelta

SECOND_1 = 1
SECOND_2 = 2
SECOND_3 = 3
SECOND_4 = 4
SECOND_5 = 5
SECOND_6 = 6
SECOND_7 = 7
SECOND_8 = 8
SECOND_9 = 9
SECOND_10 = 10
SECOND_15 = 15
SECOND_20 = 20
SECOND_25 = 25
SECOND_30 = 30
SECOND_35 = 35
SECOND_40 = 40
SECOND_45 = 45
SECOND_50 = 50
SECOND_55 = 55

MINUTE_1 = 60
MINUTE_2 = 120
MINUTE_3 = 180
MINUTE_4 = 240
MINUTE_5 = 300
MINUTE_6 = 360
MINUTE_7 = 420
MINUTE_8 = 480
MINUTE_9 = 540
MINUTE_10 = 600
MINUTE_12 = 720
MINUTE_15 = 900
MINUTE_20 = 1200
MINUTE_25 = 1500
MINUTE_30 = 1800
MINUTE_35 = 2100
MINUTE_40 = 2400
MINUTE_45 = 2700
MINUTE_50 = 3000
MINUTE_55 = 3300

HOUR_1 = 3600
HOUR_2 = 7200
HOUR_3 = 10800
HOUR_4 = 14400
HOUR_5 = 18000
HOUR_6 = 21600
HOUR_7 = 25200
HOUR_8 = 28800
HOUR_9 = 32400
HOUR_10 = 36000
HOUR_11 = 39600
HOUR_12 = 43200
HOUR_13 = 46800
HOUR_14 = 50400
HOUR_15 = 54000
HOUR_16 = 57600
HOUR_17 = 61200
HOUR_18 = 64800
HOUR_19 = 68400
HOUR_20 = 72000
HOUR_21 = 75600
HOUR_22 = 79200
HOUR_23 = 82800

DAY_1 = 86400
DAY_2 = 172800
DAY_3 = 259200
DAY_4 = 345600
DAY_5 = 432000
DAY_6 = 518400
DAY_7 = 604800
DAY_8 = 691200
DAY_9 = 777600
DAY_10 = 864000
DAY_15 = 1296000
DAY_20 = 1728000
DAY_30 = 2592000

INITIAL: datetime = datetime(1970, 1, 1) + timedelta(seconds=-time.timezone)

# Zero-time arithmetic assumes a UTC+8 deployment whatever the local zone is.
_ZERO_OFFSET = HOUR_8

DEFAULT_FORMAT = "yyyy-MM-dd HH:mm:ss"
DEFAULT_MILLIS_FORMAT = "yyyy-MM-dd HH:mm:ss.fff"

# A specifier is a run of one repeated letter; anything else is a single
# literal unit (quoted text, an escape, the % prefix or one character).
_TOKEN = re.compile(r"""'[^']*'?|"[^"]*"?|\\.?|%|([dfFgHhKmMstyz])\1*|.""", re.DOTALL)

_DAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)
_MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

# Fractions are rendered from 100ns ticks, as seven digits at most.
_MAX_FRACTION_DIGITS = 7


def get_timestamp() -> int:
    """Seconds elapsed since INITIAL, rounded to the nearest second."""
    return round((datetime.now() - INITIAL).total_seconds())  # noqa: DTZ005


def get_millisecond() -> int:
    """Milliseconds elapsed since INITIAL."""
    return round((datetime.now() - INITIAL) / timedelta(milliseconds=1))  # noqa: DTZ005


def now_time() -> datetime:
    """Current local wall-clock time."""
    return datetime.now()  # noqa: DTZ005


def to_time(timestamp: int) -> datetime:
    """Convert a second timestamp to local wall-clock time."""
    return INITIAL + timedelta(seconds=timestamp)


def time_to_zero(timestamp: int = -1) -> int:
    """Seconds from timestamp (default: now) until the next midnight."""
    t = get_timestamp() if timestamp == -1 else timestamp
    return DAY_1 - (t + _ZERO_OFFSET) % DAY_1


def zero_time(timestamp: int = -1) -> int:
    """Timestamp of the midnight starting the day of timestamp (default: now)."""
    t = get_timestamp() if timestamp == -1 else timestamp
    return t - (t + _ZERO_OFFSET) % DAY_1


def render(moment: datetime, pattern: str) -> str:
    """Render a datetime with a .NET custom date and time pattern.

    Names are the invariant-culture English ones. An ``F`` run that renders
    nothing also drops the ``.`` written just before it.

    Raises:
        ValueError: On unterminated quoted text, a trailing backslash, or a
            fraction run longer than seven digits

    """
    parts: list[str] = []
    for match in _TOKEN.finditer(pattern):
        token = match.group()
        head = token[0]
        if head in "'\"":
            if len(token) < 2 or token[-1] != head:  # noqa: PLR2004
                msg = f"Unterminated quoted text in pattern {pattern!r}"
                raise ValueError(msg)
            parts.append(token[1:-1])
        elif head == "\\":
            if len(token) < 2:  # noqa: PLR2004
                msg = f"Escape character at the end of pattern {pattern!r}"
                raise ValueError(msg)
            parts.append(token[1])
        elif head == "%":
            continue
        elif match.group(1):
            text = _specifier(moment, head, len(token))
            if not text and head == "F" and parts and parts[-1].endswith("."):
                parts[-1] = parts[-1][:-1]
            parts.append(text)
        else:
            parts.append(token)
    return "".join(parts)


def _specifier(moment: datetime, letter: str, count: int) -> str:  # noqa: C901, PLR0911
    match letter:
        case "d" | "M":
            number = moment.day if letter == "d" else moment.month
            if count <= 2:  # noqa: PLR2004
                return f"{number:0{count}d}"
            if letter == "d":
                name = _DAY_NAMES[moment.weekday()]
            else:
                name = _MONTH_NAMES[moment.month - 1]
            return name[:3] if count == 3 else name  # noqa: PLR2004
        case "y":
            if count <= 2:  # noqa: PLR2004
                return f"{moment.year % 100:0{count}d}"
            return f"{moment.year:0{count}d}"
        case "h":
            return f"{(moment.hour % 12) or 12:0{min(count, 2)}d}"
        case "H":
            return f"{moment.hour:0{min(count, 2)}d}"
        case "m":
            return f"{moment.minute:0{min(count, 2)}d}"
        case "s":
            return f"{moment.second:0{min(count, 2)}d}"
        case "f" | "F":
            if count > _MAX_FRACTION_DIGITS:
                msg = f"At most {_MAX_FRACTION_DIGITS} fraction digits, got {count}"
                raise ValueError(msg)
            digits = f"{moment.microsecond * 10:07d}"[:count]
            return digits if letter == "f" else digits.rstrip("0")
        case "t":
            designator = "AM" if moment.hour < 12 else "PM"  # noqa: PLR2004
            return designator[: min(count, 2)]
        case "g":
            return "A.D."
        case "K":
            return _utc_offset(moment, 3) if moment.tzinfo else ""
        case "z":
            return _utc_offset(moment, count)
    msg = f"Unknown format specifier {letter!r}"
    raise ValueError(msg)


def _utc_offset(moment: datetime, count: int) -> str:
    """Render the offset of moment; naive values use the local zone."""
    offset = (moment if moment.tzinfo else moment.astimezone()).utcoffset()
    minutes = (offset or timedelta()) // timedelta(minutes=1)
    sign = "-" if minutes < 0 else "+"
    hours, minutes = divmod(abs(minutes), 60)
    if count == 1:
        return f"{sign}{hours}"
    if count == 2:  # noqa: PLR2004
        return f"{sign}{hours:02d}"
    return f"{sign}{hours:02d}:{minutes:02d}"


def format_timestamp(timestamp: int, fmt: str = DEFAULT_FORMAT) -> str:
    """Format a second timestamp."""
    return render(INITIAL + timedelta(seconds=timestamp), fmt)


def format_millisecond(timestamp: int, fmt: str = DEFAULT_MILLIS_FORMAT) -> str:
    """Format a millisecond timestamp."""
    return render(INITIAL + timedelta(milliseconds=timestamp), fmt)


def format_time(moment: datetime, fmt: str = DEFAULT_MILLIS_FORMAT) -> str:
    """Format a datetime."""
    return render(moment, fmt)
