from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional, Union

# Keep these stable once a catalog is live: moving an epoch remaps every day.
QUIZ_EPOCH = date(2025, 12, 23)
HANGMAN_EPOCH = date(2025, 1, 2)

DateLike = Union[date, datetime]


def local_date(d: DateLike) -> date:
    """
    Reduce a date or datetime to its local calendar day.

    Naive datetimes are taken to already be local wall-clock time; aware
    datetimes are converted to the machine's local zone first. The time of
    day never matters.
    """
    if isinstance(d, datetime):
        if d.tzinfo is not None:
            d = d.astimezone()
        return d.date()
    return d


def to_iso_date(d: DateLike) -> str:
    """Return 'YYYY-MM-DD' for the local calendar day of `d`."""
    day = local_date(d)
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def parse_iso_date(value: str) -> date:
    """Parse 'YYYY-MM-DD'. Raises ValueError on anything else."""
    return date.fromisoformat(value)


def day_index(d: DateLike, epoch: date = QUIZ_EPOCH) -> int:
    """
    Number of local calendar days from `epoch` to `d`.

    Negative when `d` precedes the epoch. Calendar arithmetic on `date`
    objects is used, so daylight-saving shifts cannot move the result.
    """
    return (local_date(d) - epoch).days


def add_days(iso: str, n: int) -> str:
    return to_iso_date(parse_iso_date(iso) + timedelta(days=n))


def days_between(earlier_iso: str, later_iso: str) -> int:
    """Signed local-day difference `later - earlier` between two ISO dates."""
    return (parse_iso_date(later_iso) - parse_iso_date(earlier_iso)).days


def seconds_until_next_local_midnight(now: Optional[datetime] = None) -> int:
    """Whole seconds left before the next puzzle unlocks at local midnight."""
    now = now or datetime.now()
    if now.tzinfo is not None:
        now = now.astimezone().replace(tzinfo=None)
    midnight = datetime.combine(now.date() + timedelta(days=1), time())
    return max(0, int((midnight - now).total_seconds()))


def format_countdown(seconds: float) -> str:
    """Format a duration as 'HH:MM:SS'; negative input is clamped to zero."""
    total = max(0, int(seconds))
    h, rest = divmod(total, 3600)
    m, s = divmod(rest, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"
