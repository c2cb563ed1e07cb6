"""
Calendar helpers for subscription windows.

All windows end at the last microsecond of a local calendar day so a
customer keeps access for the whole of their final day.
"""
import math
from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta
from django.utils import timezone

ONE_DAY = timedelta(days=1)


def end_of_day(moment: datetime) -> datetime:
    """Return the last instant of the local calendar day containing ``moment``."""
    if timezone.is_aware(moment):
        moment = timezone.localtime(moment)
    return moment.replace(hour=23, minute=59, second=59, microsecond=999999)


def trial_window(start: datetime, trial_days: int) -> datetime:
    """End of a free trial of ``trial_days`` days, inclusive of the start day."""
    return end_of_day(start + timedelta(days=max(trial_days, 1) - 1))


def paid_window(start: datetime) -> datetime:
    """End of a fresh paid period: one year minus a day, end-of-day inclusive."""
    return end_of_day(start + relativedelta(years=1) - ONE_DAY)


def renewal_window(start: datetime) -> datetime:
    """
    End of a renewed period: one year after ``start``, end-of-day inclusive.

    February 29th starts roll to February 28th in non-leap years.
    """
    return end_of_day(start + relativedelta(years=1))


def days_remaining(end: datetime, as_of: datetime) -> int:
    """Whole days left until ``end``, rounded up."""
    return math.ceil((end - as_of) / ONE_DAY)
