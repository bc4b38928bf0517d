from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, timezone

LOCAL_DATE_FORMAT = "%d/%m/%Y"
LOCAL_TIME_FORMAT = "%H:%M:%S"


def utc_now() -> datetime:
    """Current UTC time as a naive datetime (the way timestamps are stored).

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def to_local(value: datetime, offset_hours: int) -> datetime:
    """Shift a stored UTC timestamp by the fixed display offset."""
    return as_naive_utc(value) + timedelta(hours=int(offset_hours))


def format_local_date(value: datetime) -> str:
    return value.strftime(LOCAL_DATE_FORMAT)


def format_local_time(value: datetime) -> str:
    return value.strftime(LOCAL_TIME_FORMAT)


def month_days(year: int, month: int) -> list[date]:
    """Every calendar day of the month, first to last inclusive."""
    last = calendar.monthrange(year, month)[1]
    return [date(year, month, d) for d in range(1, last + 1)]


def local_month_utc_range(year: int, month: int, offset_hours: int) -> tuple[datetime, datetime]:
    """Half-open UTC range [start, end) covering one local calendar month."""
    start_local = datetime(year, month, 1)
    if month == 12:
        end_local = datetime(year + 1, 1, 1)
    else:
        end_local = datetime(year, month + 1, 1)
    shift = timedelta(hours=int(offset_hours))
    return start_local - shift, end_local - shift


def subtract_months(value: datetime, months: int) -> datetime:
    """Go back whole calendar months, clamping the day (31 Mar - 1 month = 28/29 Feb)."""
    total = value.year * 12 + (value.month - 1) - int(months)
    year, month = divmod(total, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)
