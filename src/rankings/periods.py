"""Ranking period boundaries.

Boundaries are computed on the local calendar (``settings.TIME_ZONE``) and
returned as timezone-aware datetimes. ``end`` is inclusive (last microsecond
of the period).
"""
from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from django.utils import timezone

BIWEEKLY_SPAN = timedelta(days=15)
ONE_MICROSECOND = timedelta(microseconds=1)


class PeriodType:
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"

    ALL = (DAILY, WEEKLY, BIWEEKLY, MONTHLY, CUSTOM)


@dataclass(frozen=True)
class RankingPeriod:
    period_type: str
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end

    def as_dict(self) -> dict:
        return {
            "periodType": self.period_type,
            "startDate": self.start.isoformat(),
            "endDate": self.end.isoformat(),
        }


def _to_local(moment) -> datetime:
    if isinstance(moment, datetime):
        if timezone.is_naive(moment):
            return timezone.make_aware(moment)
        return timezone.localtime(moment)
    if isinstance(moment, date):
        return timezone.make_aware(datetime.combine(moment, time.min))
    raise TypeError(f"Fecha invalida: {moment!r}")


def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _end_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=23, minute=59, second=59, microsecond=999999)


def daily_bounds(as_of: datetime) -> tuple[datetime, datetime]:
    return _start_of_day(as_of), _end_of_day(as_of)


def weekly_bounds(as_of: datetime) -> tuple[datetime, datetime]:
    """Sunday 00:00 through the following Saturday 23:59:59.999999."""
    days_since_sunday = (as_of.weekday() + 1) % 7
    start = _start_of_day(as_of - timedelta(days=days_since_sunday))
    end = _end_of_day(start + timedelta(days=6))
    return start, end


def monthly_bounds(as_of: datetime) -> tuple[datetime, datetime]:
    last_day = calendar.monthrange(as_of.year, as_of.month)[1]
    start = _start_of_day(as_of.replace(day=1))
    end = _end_of_day(as_of.replace(day=last_day))
    return start, end


def biweekly_bounds(as_of: datetime, anchor: datetime) -> tuple[datetime, datetime]:
    """15-day bucket relative to ``anchor`` that contains ``as_of``.

    Uses floor division so dates before the anchor land in the bucket that
    ends exactly where the next one starts.
    """
    anchor = _start_of_day(anchor)
    buckets = (as_of - anchor) // BIWEEKLY_SPAN
    start = anchor + buckets * BIWEEKLY_SPAN
    return start, start + BIWEEKLY_SPAN - ONE_MICROSECOND


def custom_bounds(as_of: datetime, days: int) -> tuple[datetime, datetime]:
    if days is None or int(days) < 1:
        raise ValueError("customPeriodDays debe ser al menos 1.")
    return as_of - timedelta(days=int(days)), as_of


def resolve_period(
    as_of=None,
    period_type: str = PeriodType.MONTHLY,
    *,
    custom_period_days: int | None = None,
    anchor_date=None,
) -> RankingPeriod:
    """Return the period of ``period_type`` that contains ``as_of``."""
    moment = _to_local(as_of if as_of is not None else timezone.now())

    if period_type == PeriodType.DAILY:
        start, end = daily_bounds(moment)
    elif period_type == PeriodType.WEEKLY:
        start, end = weekly_bounds(moment)
    elif period_type == PeriodType.BIWEEKLY:
        anchor = _to_local(anchor_date) if anchor_date is not None else _start_of_day(moment.replace(day=1))
        start, end = biweekly_bounds(moment, anchor)
    elif period_type == PeriodType.MONTHLY:
        start, end = monthly_bounds(moment)
    elif period_type == PeriodType.CUSTOM:
        start, end = custom_bounds(moment, custom_period_days)
    else:
        raise ValueError(f"Tipo de periodo desconocido: {period_type}")

    return RankingPeriod(period_type=period_type, start=start, end=end)
