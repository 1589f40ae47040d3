"""Display formatters shared by every report extractor.

All helpers accept loosely-typed upstream values and never raise: anything
that cannot be interpreted degrades to a fallback string.
"""

from __future__ import annotations

import html
import math
import re
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Optional

NA = "N/A"

# Display patterns used across the report templates
SHORT_DATE = "%d %b %Y"      # 05 Mar 2024
LONG_DATE = "%d %B %Y"       # 05 March 2024
SLASH_DATE = "%d/%m/%Y"      # 05/03/2024
DASH_DATE = "%d-%m-%Y"       # 05-03-2024
DASH_SHORT_DATE = "%d-%b-%Y"  # 05-Mar-2024
MONTH_YEAR = "%B %Y"         # March 2024

_FALLBACK_FORMATS = (
    "%d/%m/%Y",
    "%d/%m/%Y %H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d",
    "%d-%m-%Y",
    "%d %B %Y",
    "%d %b %Y",
)

_NON_DIGIT_RE = re.compile(r"\D")
_WHITESPACE_RE = re.compile(r"\s")


# ── Identifiers ──────────────────────────────────────────────────────────────


def format_acn(value: Any) -> str:
    """
    Group an ACN (9 digits) or ABN (11 digits) for display.

    Examples:
        "123456789"      → "123 456 789"
        "12 345 678 901" → "12 345 678 901"
        "1234567"        → "1234567" (unchanged)
    """
    if value is None or value == "":
        return ""
    text = str(value)
    digits = _NON_DIGIT_RE.sub("", text)
    if len(digits) == 9:
        return f"{digits[:3]} {digits[3:6]} {digits[6:]}"
    if len(digits) == 11:
        return f"{digits[:2]} {digits[2:5]} {digits[5:8]} {digits[8:]}"
    return text


def format_abn(value: Any) -> str:
    return format_acn(value)


def format_identifier_if_numeric(value: Any, length: Optional[int] = None) -> str:
    """
    Group the identifier only when it is all digits.

    Without *length* both ACN (9) and ABN (11) shapes are grouped.
    """
    if value is None or value == "" or value == NA:
        return NA
    text = str(value)
    cleaned = _WHITESPACE_RE.sub("", text)
    if not cleaned.isdigit():
        return text
    if length is None and len(cleaned) in (9, 11):
        return format_acn(cleaned)
    if len(cleaned) == length:
        return format_acn(cleaned)
    return text


def digits_only(value: Any) -> str:
    if value is None:
        return ""
    return _NON_DIGIT_RE.sub("", str(value))


# ── Dates ────────────────────────────────────────────────────────────────────


def parse_date(value: Any) -> Optional[datetime]:
    """Best-effort conversion of an upstream date value to ``datetime``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            return None
        ts = value / 1000 if abs(value) > 1e11 else value
        try:
            return datetime.fromtimestamp(ts, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    text = str(value).strip()
    if not text or text.startswith("0000-00-00"):
        return None

    iso = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return datetime.fromisoformat(iso)
    except ValueError:
        pass

    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def format_date(value: Any, pattern: str = SHORT_DATE, default: str = NA) -> str:
    dt = parse_date(value)
    if dt is None:
        return default
    return dt.strftime(pattern)


def _hour12(dt: datetime) -> str:
    return str(dt.hour % 12 or 12)


def format_time(value: Any, default: str = NA) -> str:
    """``h:mma``, e.g. ``9:05am``."""
    dt = parse_date(value)
    if dt is None:
        return default
    return f"{_hour12(dt)}:{dt.minute:02d}{'am' if dt.hour < 12 else 'pm'}"


def format_clock(value: Any, seconds: bool = False, default: str = NA) -> str:
    """``h:mm A`` / ``h:mm:ss A``, e.g. ``9:05 AM``."""
    dt = parse_date(value)
    if dt is None:
        return default
    suffix = "AM" if dt.hour < 12 else "PM"
    if seconds:
        return f"{_hour12(dt)}:{dt.minute:02d}:{dt.second:02d} {suffix}"
    return f"{_hour12(dt)}:{dt.minute:02d} {suffix}"


def format_datetime(value: Any, default: str = NA) -> str:
    """Date on the first line, time on the second (table cells)."""
    dt = parse_date(value)
    if dt is None:
        return default
    return f"{dt.strftime(SHORT_DATE)}<br>{format_time(dt)}"


def format_day_month(value: Any, default: str = NA) -> str:
    """``D Month YYYY`` without a leading zero, e.g. ``5 March 2024``."""
    dt = parse_date(value)
    if dt is None:
        return default
    return f"{dt.day} {dt.strftime(MONTH_YEAR)}"


def _align(dt: datetime, now: datetime) -> tuple[datetime, datetime]:
    if (dt.tzinfo is None) == (now.tzinfo is None):
        return dt, now
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc).replace(tzinfo=None)
    return dt, now


def time_ago(value: Any, now: datetime, default: str = "") -> str:
    """Humanised distance between *value* and *now* (``3 years ago``)."""
    dt = parse_date(value)
    if dt is None:
        return default
    dt, now = _align(dt, now)
    seconds = (now - dt).total_seconds()
    future = seconds < 0
    seconds = abs(seconds)
    minutes = seconds / 60
    hours = minutes / 60
    days = hours / 24

    if seconds < 45:
        text = "a few seconds"
    elif seconds < 90:
        text = "a minute"
    elif minutes < 45:
        text = f"{round(minutes)} minutes"
    elif minutes < 90:
        text = "an hour"
    elif hours < 22:
        text = f"{round(hours)} hours"
    elif hours < 36:
        text = "a day"
    elif days < 26:
        text = f"{round(days)} days"
    elif days < 45:
        text = "a month"
    elif days < 320:
        text = f"{round(days / 30.4)} months"
    elif days < 548:
        text = "a year"
    else:
        text = f"{round(days / 365.25)} years"

    return f"in {text}" if future else f"{text} ago"


def utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc)


# ── Numbers and money ────────────────────────────────────────────────────────


def to_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", "").replace("$", "")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _trim_fraction(text: str, min_decimals: int) -> str:
    if "." not in text:
        return text
    whole, frac = text.split(".")
    frac = frac.rstrip("0").ljust(min_decimals, "0")
    return f"{whole}.{frac}" if frac else whole


def format_currency(
    value: Any,
    decimals: int = 2,
    min_decimals: Optional[int] = None,
    default: str = NA,
) -> str:
    """
    ``$1,234.56`` style currency.

    ``min_decimals`` lets trailing zeros drop down to that many digits
    (``$1,200`` with ``decimals=2, min_decimals=0``).
    """
    number = to_number(value)
    if number is None:
        return default
    text = f"{abs(number):,.{decimals}f}"
    if min_decimals is not None and min_decimals < decimals:
        text = _trim_fraction(text, min_decimals)
    sign = "-" if number < 0 and text.strip("0.,") else ""
    return f"{sign}${text}"


def format_number(value: Any, max_decimals: int = 3, default: Optional[str] = None) -> str:
    """Thousands separators; non-numeric input is returned as text."""
    number = to_number(value)
    if number is None:
        if default is not None:
            return default
        return "" if value is None else str(value)
    if number == int(number):
        return f"{int(number):,}"
    return _trim_fraction(f"{number:,.{max_decimals}f}", 0)


def format_land_area(value: Any) -> str:
    if to_number(value) is None:
        return NA
    return f"{format_number(value)} m²"


def format_boolean(value: Any) -> str:
    if value is None or value == "":
        return NA
    if isinstance(value, str):
        return "Yes" if value.strip().lower() in ("true", "yes", "y", "1") else "No"
    return "Yes" if value else "No"


# ── HTML ─────────────────────────────────────────────────────────────────────


def escape_html(value: Any) -> str:
    if value is None:
        return ""
    return html.escape(str(value), quote=True)
