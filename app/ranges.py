# Inclusive datetime ranges for day, week and month schedule views

import calendar
import datetime
from enum import Enum
from typing import Tuple

DateRange = Tuple[datetime.datetime, datetime.datetime]


class Granularity(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


def start_of_day(date: datetime.date) -> datetime.datetime:
    return datetime.datetime.combine(date, datetime.time.min)

def end_of_day(date: datetime.date) -> datetime.datetime:
    return datetime.datetime.combine(date, datetime.time.max)

def explicit_range(start_date: datetime.date, end_date: datetime.date) -> DateRange:
    """From the start of `start_date` through the end of `end_date`."""
    return start_of_day(start_date), end_of_day(end_date)

def day_range(date: datetime.date) -> DateRange:
    return explicit_range(date, date)

def week_range(date: datetime.date) -> DateRange:
    """Sunday on or before `date` through the following Saturday."""
    # weekday(): Monday == 0 ... Sunday == 6
    sunday = date - datetime.timedelta(days=(date.weekday() + 1) % 7)
    saturday = sunday + datetime.timedelta(days=6)
    return explicit_range(sunday, saturday)

def month_range(date: datetime.date) -> DateRange:
    last_day = calendar.monthrange(date.year, date.month)[1]
    return explicit_range(date.replace(day=1), date.replace(day=last_day))

_RESOLVERS = {
    Granularity.DAY: day_range,
    Granularity.WEEK: week_range,
    Granularity.MONTH: month_range,
}

def resolve(date: datetime.date, granularity: Granularity) -> DateRange:
    return _RESOLVERS[Granularity(granularity)](date)
