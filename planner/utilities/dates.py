"""Week arithmetic on ISO date strings (weeks start on Monday)."""
from datetime import date, datetime, timedelta
from typing import Optional

from planner.utilities.constants import DATE_FORMAT, DAYS_PER_WEEK


def parse_iso_date(value: str) -> Optional[date]:
    try:
        return datetime.strptime(value[:10], DATE_FORMAT).date()
    except (TypeError, ValueError):
        return None


def to_iso_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def start_of_week_monday(source: Optional[date] = None) -> date:
    source = source or date.today()
    return source - timedelta(days=source.weekday())


def current_week_start() -> str:
    return to_iso_date(start_of_week_monday())


def shift_week_start(week_start_date: str, delta: int) -> str:
    start = parse_iso_date(week_start_date) or start_of_week_monday()
    return to_iso_date(start + timedelta(days=DAYS_PER_WEEK * int(delta)))


def day_date(week_start_date: str, day: int) -> Optional[date]:
    start = parse_iso_date(week_start_date)
    return start + timedelta(days=day) if start else None


def days_until(value: Optional[date], today: Optional[date] = None) -> Optional[int]:
    if value is None:
        return None
    return (value - (today or date.today())).days
