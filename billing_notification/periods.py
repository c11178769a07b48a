"""
periods.py

Purpose:
  Derive the billing window reported by the daily notification from a reference
  instant and a reporting timezone.

Rules:
  - The window ends yesterday (local calendar day before the reference day).
  - It starts on the first day of the current month, except on the 1st where the
    current month is still empty and the just-finished previous month is reported.

All date arithmetic goes through datetime/timedelta so month lengths, leap years
and year boundaries are handled by the calendar, never by hand.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Dict, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import ConfigurationError


DATE_LAYOUT = "%Y-%m-%d"
TIMESTAMP_LAYOUT = "%Y/%m/%d %H:%M:%S"


def load_timezone(name: Optional[str]) -> ZoneInfo:
    if not name:
        raise ConfigurationError("timezone must not be empty")
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(f"unknown timezone {name!r}") from e


def format_date(day: dt.date) -> str:
    return day.strftime(DATE_LAYOUT)


@dataclass(frozen=True)
class ReferenceClock:
    """The instant treated as "now" for one invocation, pinned to a timezone."""

    instant: dt.datetime
    timezone: ZoneInfo

    def __post_init__(self):
        if not isinstance(self.timezone, ZoneInfo):
            raise ValueError(f"timezone must be a ZoneInfo, got {self.timezone!r}")
        # a naive instant would be read in the host's local time by astimezone()
        if self.instant.tzinfo is None or self.instant.utcoffset() is None:
            raise ValueError("instant must be timezone-aware; use ReferenceClock.at() for wall times")

    @classmethod
    def now(cls, tz: Union[str, ZoneInfo]) -> "ReferenceClock":
        zone = tz if isinstance(tz, ZoneInfo) else load_timezone(tz)
        return cls(dt.datetime.now(zone), zone)

    @classmethod
    def at(cls, instant: dt.datetime, tz: Union[str, ZoneInfo]) -> "ReferenceClock":
        zone = tz if isinstance(tz, ZoneInfo) else load_timezone(tz)
        if instant.tzinfo is None:
            # naive: wall time in the reporting timezone
            return cls(instant.replace(tzinfo=zone), zone)
        return cls(instant.astimezone(zone), zone)

    @property
    def local_date(self) -> dt.date:
        return self.instant.astimezone(self.timezone).date()

    def timestamp(self) -> str:
        return self.instant.astimezone(self.timezone).strftime(TIMESTAMP_LAYOUT)


@dataclass(frozen=True)
class BillingPeriod:
    start: dt.date
    end: dt.date

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"billing period start {self.start} is after end {self.end}")

    def __str__(self) -> str:
        return f"{format_date(self.start)} ~ {format_date(self.end)}"

    def query_range(self) -> Dict[str, str]:
        # Cost Explorer treats End as exclusive
        return {
            "Start": format_date(self.start),
            "End": format_date(self.end + dt.timedelta(days=1)),
        }

    def to_dict(self) -> Dict[str, str]:
        return {"start": format_date(self.start), "end": format_date(self.end)}


def today(ref: ReferenceClock) -> dt.date:
    return ref.local_date


def yesterday(ref: ReferenceClock) -> dt.date:
    return ref.local_date - dt.timedelta(days=1)


def beginning_of_month(ref: ReferenceClock) -> dt.date:
    return ref.local_date.replace(day=1)


def beginning_of_last_month(ref: ReferenceClock) -> dt.date:
    last_day_of_previous = beginning_of_month(ref) - dt.timedelta(days=1)
    return last_day_of_previous.replace(day=1)


def is_first_of_month(ref: ReferenceClock) -> bool:
    return ref.local_date.day == 1


def billing_window(ref: ReferenceClock) -> BillingPeriod:
    if is_first_of_month(ref):
        start = beginning_of_last_month(ref)
    else:
        start = beginning_of_month(ref)
    return BillingPeriod(start=start, end=yesterday(ref))
