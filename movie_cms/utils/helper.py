import datetime
import math
from typing import Any, List, Optional, Union

from movie_cms.utils.exceptions import ValidationError

Number = Union[int, float]

# Fixed-length units, largest first.
TIME_AGO_INTERVALS = (
    ("year", 31536000),
    ("month", 2592000),
    ("day", 86400),
    ("hour", 3600),
    ("minute", 60),
)

_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off", ""}

# BSON integers are 8 bytes wide.
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def fits_int64(number: Number) -> bool:
    return INT64_MIN <= number <= INT64_MAX


def to_utc(dt: datetime.datetime) -> datetime.datetime:
    # If dt is None, return as-is
    if dt is None:
        return dt
    # If dt is naive, attach UTC offset
    if dt.tzinfo is None:
        return dt.replace(tzinfo=datetime.timezone.utc)
    return dt.astimezone(datetime.timezone.utc)


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def time_ago(created_at: datetime.datetime, now: Optional[datetime.datetime] = None) -> str:
    """Render the distance between `created_at` and `now` as "N units ago".

    Uses the largest unit with a count of at least one; anything under a
    minute (or in the future) is "Just now".
    """
    now = to_utc(now) if now is not None else utc_now()
    seconds = math.floor((now - to_utc(created_at)).total_seconds())

    for label, length in TIME_AGO_INTERVALS:
        count = seconds // length
        if count >= 1:
            return f"{count} {label}{'s' if count > 1 else ''} ago"
    return "Just now"


def normalize_string_set(value: Any) -> List[str]:
    """Coerce a loosely-typed request value into a list of distinct strings.

    list/tuple -> each element stringified and trimmed
    str        -> single-element list
    anything else (None, numbers, objects) -> empty list
    Blank entries are dropped and order of first appearance is kept.
    """
    if isinstance(value, (list, tuple)):
        items = [str(v).strip() for v in value if v is not None]
    elif isinstance(value, str):
        items = [value.strip()]
    else:
        return []

    seen = []
    for item in items:
        if item and item not in seen:
            seen.append(item)
    return seen


def to_number(value: Any, field: str) -> Optional[Number]:
    """Parse a numeric request value; None passes through as None."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            raise ValidationError(f"{field} must be a number")
    else:
        raise ValidationError(f"{field} must be a number")

    if isinstance(number, float) and not math.isfinite(number):
        raise ValidationError(f"{field} must be a number")
    if not fits_int64(number):
        raise ValidationError(f"{field} is out of range")
    if isinstance(number, float) and number.is_integer():
        return int(number)
    return number


def to_bool(value: Any, field: str = "isTrending") -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise ValidationError(f"{field} must be a boolean")
    if isinstance(value, (int, float)):
        return value != 0
    raise ValidationError(f"{field} must be a boolean")


def parse_int(value: Any) -> Optional[int]:
    """Leading-integer parse of a query value; None when it has no digits."""
    if value is None:
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    digits = ""
    for index, char in enumerate(text):
        if char.isdigit() or (index == 0 and char in "+-"):
            digits += char
        else:
            break
    try:
        return int(digits)
    except ValueError:
        return None
