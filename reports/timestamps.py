import re
from datetime import datetime, timedelta, timezone

from reports.models import ABSENT

# Reports are displayed in Japan Standard Time, a flat +9h with no DST
JST_OFFSET = timedelta(hours=9)
DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"

# Plain decimal notation only: no digit separators, hex, nan or inf
NUMERIC_TEXT = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def to_jst_display(timestamp) -> str:
    """
    Converts a UNIX timestamp (seconds) into a JST display string.

    Args:
        timestamp: Epoch seconds as a number or numeric text; may be None.

    Returns:
        "YYYY-MM-DD HH:MM:SS" at UTC+9, or ABSENT when the value is missing,
        empty or not a usable number.
    """
    if timestamp is None:
        return ABSENT
    if isinstance(timestamp, str):
        timestamp = timestamp.strip()
        if not NUMERIC_TEXT.fullmatch(timestamp):
            return ABSENT
    try:
        instant = datetime.fromtimestamp(float(timestamp), tz=timezone.utc) + JST_OFFSET
    except (TypeError, ValueError, OverflowError, OSError):
        return ABSENT
    return instant.strftime(DISPLAY_FORMAT)
